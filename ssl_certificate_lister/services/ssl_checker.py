"""
SSL证书获取服务
"""
import ssl
import time
import socket
import logging
from typing import Callable, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from ..exceptions import ConnectTimeoutError, HandshakeError
from ..interfaces import CertificateFetcherInterface
from ..models import Endpoint, LeafCertificate

DEFAULT_CONNECT_TIMEOUT = 5.0


class SSLCertificateFetcher(CertificateFetcherInterface):
    """SSL证书获取器实现"""

    def __init__(self, timeout: float = DEFAULT_CONNECT_TIMEOUT,
                 context_factory: Optional[Callable[[], ssl.SSLContext]] = None):
        """
        初始化SSL证书获取器

        Args:
            timeout: TCP连接超时时间（秒）
            context_factory: 创建SSLContext的函数，默认使用操作系统信任的CA
        """
        self.timeout = timeout
        self.context_factory = context_factory or ssl.create_default_context
        self.logger = logging.getLogger(__name__)

    def fetch(self, endpoint: Endpoint) -> LeafCertificate:
        """
        获取并验证端点的叶子证书

        证书链和主机名的验证完全由TLS握手完成，不做重试。

        Args:
            endpoint: 要连接的端点

        Returns:
            LeafCertificate: 叶子证书信息

        Raises:
            ConnectTimeoutError: 超时时间内未建立TCP连接
            HandshakeError: 连接失败、握手失败或证书验证失败
        """
        der_cert = self._get_peer_certificate(endpoint)

        try:
            certificate = self._parse_leaf_certificate(der_cert)
        except ValueError as e:
            raise HandshakeError(endpoint.host_port, e) from e

        self.logger.debug(
            f"获取到 {endpoint} 的叶子证书，序列号: {certificate.serial_number}"
        )
        return certificate

    def _get_peer_certificate(self, endpoint: Endpoint) -> bytes:
        """
        建立TLS连接并返回对端证书链中的第一个证书（DER格式）

        Args:
            endpoint: 端点

        Returns:
            bytes: 叶子证书的DER编码
        """
        context = self.context_factory()
        sock = self._connect(endpoint)

        try:
            with sock:
                with context.wrap_socket(sock, server_hostname=endpoint.host) as ssock:
                    der_cert = ssock.getpeercert(binary_form=True)
        except OSError as e:
            # ssl.SSLError、证书验证失败、连接重置和握手超时都属于OSError
            raise HandshakeError(endpoint.host_port, e) from e

        if not der_cert:
            raise HandshakeError(endpoint.host_port, ssl.SSLError("no peer certificate"))

        return der_cert

    def _connect(self, endpoint: Endpoint) -> socket.socket:
        """
        建立TCP连接，所有解析出的地址共用一个超时期限

        Args:
            endpoint: 端点

        Returns:
            socket.socket: 已连接的套接字

        Raises:
            ConnectTimeoutError: 期限内没有任何地址完成连接
            HandshakeError: DNS解析失败或所有地址都拒绝连接
        """
        deadline = time.monotonic() + self.timeout

        try:
            addresses = socket.getaddrinfo(endpoint.host, endpoint.port, type=socket.SOCK_STREAM)
        except OSError as e:
            raise HandshakeError(endpoint.host_port, e) from e

        timed_out = False
        last_error: Optional[OSError] = None

        for family, sock_type, proto, _, address in addresses:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                timed_out = True
                break

            sock = socket.socket(family, sock_type, proto)
            try:
                sock.settimeout(remaining)
                sock.connect(address)
            except socket.timeout as e:
                sock.close()
                timed_out = True
                last_error = e
            except OSError as e:
                sock.close()
                self.logger.debug(f"连接 {endpoint} 的地址 {address} 失败: {e}")
                last_error = e
            else:
                # 握手和读取使用同样的单次操作超时
                sock.settimeout(self.timeout)
                return sock

        if timed_out:
            raise ConnectTimeoutError(endpoint.host_port, self.timeout) from last_error
        if last_error is None:
            last_error = OSError("getaddrinfo returns an empty list")
        raise HandshakeError(endpoint.host_port, last_error) from last_error

    def _parse_leaf_certificate(self, der_cert: bytes) -> LeafCertificate:
        """
        解析叶子证书

        Args:
            der_cert: DER编码的证书

        Returns:
            LeafCertificate: 过期时间、序列号和颁发者CN
        """
        cert = x509.load_der_x509_certificate(der_cert)

        return LeafCertificate(
            not_after=cert.not_valid_after_utc,
            serial_number=cert.serial_number,
            issuer_common_name=self._parse_issuer_common_name(cert)
        )

    def _parse_issuer_common_name(self, cert: x509.Certificate) -> str:
        """返回颁发者的通用名称，没有时返回空字符串"""
        attributes = cert.issuer.get_attributes_for_oid(NameOID.COMMON_NAME)
        if not attributes:
            return ""
        value = attributes[0].value
        if isinstance(value, bytes):
            return value.decode('utf-8', errors='replace')
        return value
