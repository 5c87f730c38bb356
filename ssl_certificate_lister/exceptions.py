"""
证书检查异常定义
"""


class CertificateCheckError(Exception):
    """单个URL检查失败的基类，不会中断整体检查"""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f'"{source}": {message}')


class ParseError(CertificateCheckError):
    """URL格式无效"""


class SchemeError(CertificateCheckError):
    """URL协议不是https"""

    def __init__(self, source: str, scheme: str = ""):
        self.scheme = scheme
        super().__init__(source, "url scheme not https")


class ConnectTimeoutError(CertificateCheckError):
    """在超时时间内未能建立TCP连接"""

    def __init__(self, source: str, timeout: float):
        self.timeout = timeout
        super().__init__(source, f"connect timed out after {timeout:g}s")


class HandshakeError(CertificateCheckError):
    """连接或TLS握手/证书链验证失败"""

    def __init__(self, source: str, cause: Exception):
        self.cause = cause
        super().__init__(source, str(cause) or type(cause).__name__)
