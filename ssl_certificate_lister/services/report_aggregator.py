"""
报告汇总服务
"""
import logging
import threading
from typing import List

from ..interfaces import ReportAggregatorInterface
from ..models import CertificateFailure, CertificateSuccess, Report, ValidationResult


class ReportAggregator(ReportAggregatorInterface):
    """按输入顺序收集检查结果，最终生成排序后的报告"""

    def __init__(self):
        self._lock = threading.Lock()
        self._successes: List[CertificateSuccess] = []
        self._failures: List[CertificateFailure] = []
        self.logger = logging.getLogger(__name__)

    def record(self, result: ValidationResult):
        """
        记录单个检查结果（线程安全）

        Args:
            result: 成功或失败结果
        """
        with self._lock:
            if isinstance(result, CertificateSuccess):
                self._successes.append(result)
            elif isinstance(result, CertificateFailure):
                self._failures.append(result)
            else:
                raise TypeError(f"未知的检查结果类型: {type(result).__name__}")

    def finalize(self) -> Report:
        """
        生成报告

        成功结果按组合键排序（最早过期的在前），失败结果保持发生顺序。
        多次调用返回相同结果。

        Returns:
            Report: 检查报告
        """
        with self._lock:
            successes = sorted(self._successes, key=lambda success: success.composite_key)
            failures = list(self._failures)

        self.logger.debug(f"报告生成完成: 成功 {len(successes)} 个, 失败 {len(failures)} 个")
        return Report(successes=successes, failures=failures)
