"""
数据模型定义
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Union

HTTPS_PORT = 443

# 报告列：过期日期、剩余时间、URL、序列号、颁发者CN
REPORT_COLUMNS = ("expires", "toExpiry", "URL", "serialNumber", "issuerCN")


@dataclass(frozen=True)
class Endpoint:
    """可连接的TLS端点"""
    host: str
    port: int = HTTPS_PORT

    @property
    def host_port(self) -> str:
        """返回 host:port 形式（IPv6地址加方括号）"""
        if ':' in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.host_port


@dataclass(frozen=True)
class LeafCertificate:
    """叶子证书信息"""
    not_after: datetime
    serial_number: int
    issuer_common_name: str

    @property
    def expires(self) -> str:
        """过期日期（YYYY-MM-DD）"""
        return self.not_after.strftime('%Y-%m-%d')


@dataclass(frozen=True)
class CertificateSuccess:
    """证书检查成功结果"""
    source_url: str
    certificate: LeafCertificate
    time_remaining: str
    kind: str = field(default="success", init=False)

    @property
    def fields(self) -> List[str]:
        """报告行的各列"""
        return [
            self.certificate.expires,
            self.time_remaining,
            self.source_url,
            str(self.certificate.serial_number),
            self.certificate.issuer_common_name,
        ]

    @property
    def composite_key(self) -> str:
        """排序键：日期 → 剩余时间 → URL → 序列号 → 颁发者"""
        return ",".join(self.fields)


@dataclass(frozen=True)
class CertificateFailure:
    """证书检查失败结果"""
    source_url: str
    reason: str
    error_type: str = "CertificateCheckError"
    suggested_action: str = ""
    kind: str = field(default="failure", init=False)


ValidationResult = Union[CertificateSuccess, CertificateFailure]


@dataclass
class Report:
    """检查报告"""
    successes: List[CertificateSuccess] = field(default_factory=list)
    failures: List[CertificateFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.successes)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count
