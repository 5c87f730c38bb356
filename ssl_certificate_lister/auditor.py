"""
TLS证书检查流程
"""
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional

from .exceptions import CertificateCheckError
from .interfaces import (
    CertificateFetcherInterface,
    EndpointResolverInterface,
    ExpiryClassifierInterface,
)
from .models import CertificateFailure, CertificateSuccess, Report, ValidationResult
from .services.endpoint_resolver import EndpointResolver
from .services.error_handler import CertificateErrorHandler
from .services.expiry_calculator import ExpiryCalculator
from .services.logger import LoggerService
from .services.report_aggregator import ReportAggregator
from .services.ssl_checker import DEFAULT_CONNECT_TIMEOUT, SSLCertificateFetcher

FailureCallback = Callable[[CertificateFailure], None]


class CertificateAuditor:
    """按URL依次解析、获取、分类并汇总证书"""

    def __init__(self,
                 resolver: Optional[EndpointResolverInterface] = None,
                 fetcher: Optional[CertificateFetcherInterface] = None,
                 calculator: Optional[ExpiryClassifierInterface] = None,
                 error_handler: Optional[CertificateErrorHandler] = None,
                 logger_service: Optional[LoggerService] = None,
                 timeout: Optional[float] = None,
                 max_workers: Optional[int] = None):
        """
        初始化检查器

        Args:
            resolver: 端点解析器
            fetcher: 证书获取器
            calculator: 过期时间分类器
            error_handler: 错误处理器
            logger_service: 日志服务
            timeout: 连接超时（秒），默认读取环境变量 CONNECT_TIMEOUT
            max_workers: 并发数，默认读取环境变量 MAX_WORKERS，1表示顺序执行
        """
        if timeout is None:
            timeout = float(os.getenv('CONNECT_TIMEOUT', DEFAULT_CONNECT_TIMEOUT))
        if max_workers is None:
            max_workers = int(os.getenv('MAX_WORKERS', '1'))
        if timeout <= 0:
            raise ValueError(f"连接超时必须大于0: {timeout}")
        if max_workers < 1:
            raise ValueError(f"并发数必须至少为1: {max_workers}")

        self.timeout = timeout
        self.max_workers = max_workers
        self.logger_service = logger_service or LoggerService()
        self.resolver = resolver or EndpointResolver()
        self.fetcher = fetcher or SSLCertificateFetcher(timeout=timeout)
        self.calculator = calculator or ExpiryCalculator()
        self.error_handler = error_handler or CertificateErrorHandler()

    def check_url(self, url: str) -> ValidationResult:
        """
        检查单个URL，所有错误都转换为失败结果

        Args:
            url: HTTPS URL

        Returns:
            ValidationResult: 成功或失败结果
        """
        try:
            endpoint = self.resolver.resolve(url)
            certificate = self.fetcher.fetch(endpoint)
        except CertificateCheckError as e:
            return self.error_handler.to_failure(url, e)
        except Exception as e:
            self.logger_service.log_error(url, e)
            return self.error_handler.to_failure(url, e)

        return CertificateSuccess(
            source_url=url,
            certificate=certificate,
            time_remaining=self.calculator.classify(certificate.not_after)
        )

    def audit(self, urls: Iterable[str], on_failure: Optional[FailureCallback] = None) -> Report:
        """
        检查所有URL并生成报告

        单个URL失败不会中断检查；失败结果在发生时立即交给 on_failure。

        Args:
            urls: URL序列（已过滤空行和注释）
            on_failure: 失败回调

        Returns:
            Report: 排序后的报告
        """
        aggregator = ReportAggregator()
        self.logger_service.log_check_start(len(urls) if hasattr(urls, '__len__') else None)

        if self.max_workers == 1:
            for url in urls:
                self._record(aggregator, self.check_url(url), on_failure)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self.check_url, url) for url in urls]
                for future in as_completed(futures):
                    self._record(aggregator, future.result(), on_failure)

        report = aggregator.finalize()

        self.logger_service.log_check_end()
        self.logger_service.log_execution_summary()
        if report.failures:
            self.logger_service.log_error_statistics(self.error_handler.get_error_statistics(report.failures))
        return report

    def _record(self, aggregator: ReportAggregator, result: ValidationResult,
                on_failure: Optional[FailureCallback]):
        aggregator.record(result)
        self.logger_service.log_result(result)
        if on_failure is not None and isinstance(result, CertificateFailure):
            on_failure(result)
