"""
错误处理服务
"""
import socket
import ssl
from typing import Any, Dict, Iterable
import logging

from ..exceptions import (
    CertificateCheckError,
    ConnectTimeoutError,
    HandshakeError,
    ParseError,
    SchemeError,
)
from ..models import CertificateFailure


class CertificateErrorHandler:
    """证书检查错误处理器"""

    def __init__(self):
        """初始化错误处理器"""
        self.logger = logging.getLogger(__name__)

    def to_failure(self, source_url: str, error: Exception) -> CertificateFailure:
        """
        将异常转换为失败结果，并附上建议的处理方案

        Args:
            source_url: 输入的URL
            error: 异常对象

        Returns:
            CertificateFailure: 失败结果
        """
        if isinstance(error, CertificateCheckError):
            reason = str(error)
        else:
            reason = f'"{source_url}": {type(error).__name__}: {error}'

        failure = CertificateFailure(
            source_url=source_url,
            reason=reason,
            error_type=type(error).__name__,
            suggested_action=self._get_suggested_action(error)
        )

        self.logger.debug(f"URL {source_url} 检查失败: {reason}")

        return failure

    def _get_suggested_action(self, error: Exception) -> str:
        """
        获取错误的建议处理方案

        Args:
            error: 异常对象

        Returns:
            str: 建议的处理方案
        """
        if isinstance(error, ParseError):
            return "检查URL格式和端口号"
        elif isinstance(error, SchemeError):
            return "只支持https协议的URL"
        elif isinstance(error, ConnectTimeoutError):
            return "检查网络连接、防火墙和端口是否正确"
        elif isinstance(error, HandshakeError):
            cause = error.cause
            cause_message = str(cause).lower()
            if isinstance(cause, socket.gaierror):
                return "检查域名是否正确，DNS服务器是否可用"
            elif isinstance(cause, ConnectionRefusedError):
                return "检查目标服务器是否运行，端口是否正确"
            elif isinstance(cause, ssl.SSLCertVerificationError):
                if 'expired' in cause_message:
                    return "证书已过期，立即续期"
                elif 'hostname' in cause_message or "doesn't match" in cause_message:
                    return "证书与主机名不匹配，检查证书的SAN"
                return "证书验证失败，可能是自签名证书或证书链问题"
            elif isinstance(cause, ssl.SSLError):
                return "SSL握手失败，检查SSL/TLS版本兼容性"
            return "检查网络连接和服务器SSL配置"
        return "检查网络连接和服务器状态"

    def get_error_statistics(self, failures: Iterable[CertificateFailure]) -> Dict[str, Any]:
        """
        获取错误统计信息

        Args:
            failures: 失败结果

        Returns:
            Dict[str, Any]: 错误统计
        """
        error_types: Dict[str, int] = {}
        total = 0

        for failure in failures:
            total += 1
            error_types[failure.error_type] = error_types.get(failure.error_type, 0) + 1

        most_common_error = max(error_types.items(), key=lambda x: x[1]) if error_types else None

        return {
            'total_errors': total,
            'error_types': error_types,
            'most_common_error': most_common_error[0] if most_common_error else None,
            'most_common_error_count': most_common_error[1] if most_common_error else 0
        }
