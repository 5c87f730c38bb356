"""
服务接口定义
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from .models import Endpoint, LeafCertificate, Report, ValidationResult


class EndpointResolverInterface(ABC):
    """端点解析器接口"""

    @abstractmethod
    def resolve(self, line: str) -> Endpoint:
        """将URL解析为端点"""
        pass


class CertificateFetcherInterface(ABC):
    """证书获取器接口"""

    @abstractmethod
    def fetch(self, endpoint: Endpoint) -> LeafCertificate:
        """获取并验证端点的叶子证书"""
        pass


class ExpiryClassifierInterface(ABC):
    """过期时间分类器接口"""

    @abstractmethod
    def classify(self, expiry: datetime, now: Optional[datetime] = None) -> str:
        """将过期时间转换为剩余时间区间"""
        pass


class ReportAggregatorInterface(ABC):
    """报告汇总器接口"""

    @abstractmethod
    def record(self, result: ValidationResult):
        """记录单个检查结果"""
        pass

    @abstractmethod
    def finalize(self) -> Report:
        """生成排序后的报告"""
        pass


class NotificationServiceInterface(ABC):
    """通知服务接口"""

    @abstractmethod
    def publish_report(self, report: Report, execution_summary: dict) -> bool:
        """发布检查报告"""
        pass

    @abstractmethod
    def format_report_content(self, report: Report, execution_summary: dict) -> str:
        """格式化报告内容"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_check_start(self, url_count: Optional[int] = None):
        """记录检查开始"""
        pass

    @abstractmethod
    def log_result(self, result: ValidationResult):
        """记录单个检查结果"""
        pass

    @abstractmethod
    def log_error(self, source_url: str, error: Exception):
        """记录错误信息"""
        pass
