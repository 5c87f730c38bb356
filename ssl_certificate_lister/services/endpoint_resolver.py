"""
端点解析服务
"""
import logging
from urllib.parse import urlsplit

from ..exceptions import ParseError, SchemeError
from ..interfaces import EndpointResolverInterface
from ..models import Endpoint, HTTPS_PORT


class EndpointResolver(EndpointResolverInterface):
    """将HTTPS URL解析为 (host, port) 端点"""

    # 主机名中不允许出现的字符
    INVALID_HOST_CHARS = frozenset(' \t\r\n<>"{}|\\^`')

    def __init__(self, default_port: int = HTTPS_PORT):
        """
        初始化端点解析器

        Args:
            default_port: URL未指定端口时使用的端口，默认443
        """
        self.default_port = default_port
        self.logger = logging.getLogger(__name__)

    def resolve(self, line: str) -> Endpoint:
        """
        解析URL字符串

        Args:
            line: 非空、非注释的URL字符串

        Returns:
            Endpoint: 端点

        Raises:
            ParseError: URL或端口格式无效，或缺少主机名
            SchemeError: 协议不是https
        """
        try:
            parts = urlsplit(line)
            # 端口在解析阶段校验，非数字或超出范围都会抛出ValueError
            port = parts.port
        except ValueError as e:
            raise ParseError(line, str(e)) from e
        if port == 0:
            raise ParseError(line, "Port out of range 1-65535")

        if parts.scheme != 'https':
            raise SchemeError(line, parts.scheme)

        host = parts.hostname
        if not host:
            raise ParseError(line, "missing host")
        if any(char in self.INVALID_HOST_CHARS for char in host):
            raise ParseError(line, f"invalid character in host name {host!r}")

        endpoint = Endpoint(host=host, port=port if port is not None else self.default_port)
        self.logger.debug(f"URL {line} 解析为端点 {endpoint}")
        return endpoint
