"""
端点解析器测试
"""
import pytest

from ssl_certificate_lister.exceptions import ParseError, SchemeError
from ssl_certificate_lister.models import Endpoint
from ssl_certificate_lister.services.endpoint_resolver import EndpointResolver


class TestEndpointResolver:
    """端点解析器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.resolver = EndpointResolver()

    def test_resolve_default_port(self):
        """测试未指定端口时默认443"""
        test_cases = [
            ("https://example.com", Endpoint("example.com", 443)),
            ("https://example.com/", Endpoint("example.com", 443)),
            ("https://sub.example.com/path?q=1#frag", Endpoint("sub.example.com", 443)),
            ("https://user@example.com/", Endpoint("example.com", 443)),
            ("https://example.com:/", Endpoint("example.com", 443)),
        ]

        for line, expected in test_cases:
            assert self.resolver.resolve(line) == expected, f"{line} 应该解析为 {expected}"

    def test_resolve_explicit_port(self):
        """测试指定端口"""
        assert self.resolver.resolve("https://example.com:8443/health") == Endpoint("example.com", 8443)
        assert self.resolver.resolve("https://example.com:443") == Endpoint("example.com", 443)
        assert self.resolver.resolve("https://127.0.0.1:9000") == Endpoint("127.0.0.1", 9000)

    def test_host_port(self):
        """测试 host:port 格式"""
        assert self.resolver.resolve("https://example.com").host_port == "example.com:443"
        assert str(self.resolver.resolve("https://example.com:8443")) == "example.com:8443"
        assert self.resolver.resolve("https://[::1]:8443/").host_port == "[::1]:8443"

    def test_hostname_lowercased(self):
        """测试主机名转换为小写"""
        assert self.resolver.resolve("https://EXAMPLE.com").host == "example.com"

    def test_resolve_wrong_scheme(self):
        """测试非https协议"""
        wrong_schemes = [
            "http://example.com",
            "ftp://example.com",
            "example.com",
            "//example.com/path",
            "example.com:443",
            "httpss://example.com",
        ]

        for line in wrong_schemes:
            with pytest.raises(SchemeError):
                self.resolver.resolve(line)

    def test_scheme_error_message(self):
        """测试协议错误信息"""
        with pytest.raises(SchemeError) as exc_info:
            self.resolver.resolve("http://example.com")

        assert str(exc_info.value) == '"http://example.com": url scheme not https'
        assert exc_info.value.scheme == "http"

    def test_resolve_invalid_port(self):
        """测试无效端口在解析阶段报错"""
        invalid_ports = [
            "https://example.com:abc/",
            "https://example.com:65536/",
            "https://example.com:-1/",
            "http://example.com:abc/",
        ]

        for line in invalid_ports:
            with pytest.raises(ParseError):
                self.resolver.resolve(line)

    def test_resolve_port_zero(self):
        """测试端口0无效"""
        with pytest.raises(ParseError, match="Port out of range"):
            self.resolver.resolve("https://example.com:0/")

    def test_resolve_port_bounds(self):
        """测试端口上下限"""
        assert self.resolver.resolve("https://example.com:1/").port == 1
        assert self.resolver.resolve("https://example.com:65535/").port == 65535

    def test_resolve_malformed_url(self):
        """测试格式错误的URL"""
        malformed = [
            "https://[::1/",
            "https://",
            "https:///path",
            "https://exa mple.com/",
        ]

        for line in malformed:
            with pytest.raises(ParseError):
                self.resolver.resolve(line)

    def test_custom_default_port(self):
        """测试自定义默认端口"""
        resolver = EndpointResolver(default_port=8443)
        assert resolver.resolve("https://example.com").port == 8443
