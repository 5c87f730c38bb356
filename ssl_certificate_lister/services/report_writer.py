"""
报告输出服务
"""
import csv
import sys
from typing import Optional, TextIO

from ..models import REPORT_COLUMNS, CertificateFailure, Report
from .url_source import COMMENT_MARKER

PROGRAM_NAME = "lscerts"


class CSVReportWriter:
    """将报告写为逗号分隔的表格，失败信息实时写到错误流"""

    def __init__(self, stream: Optional[TextIO] = None, error_stream: Optional[TextIO] = None,
                 header: bool = True):
        """
        初始化报告输出

        Args:
            stream: 报告输出流，默认标准输出
            error_stream: 失败信息输出流，默认标准错误
            header: 是否输出表头
        """
        self.stream = stream or sys.stdout
        self.error_stream = error_stream or sys.stderr
        self.header = header

    @staticmethod
    def format_header() -> str:
        return f"{COMMENT_MARKER} {','.join(REPORT_COLUMNS)}"

    @staticmethod
    def format_failure(failure: CertificateFailure) -> str:
        return f"{PROGRAM_NAME}: {failure.reason}"

    def write_failure(self, failure: CertificateFailure):
        """立即输出一条失败信息"""
        self.error_stream.write(self.format_failure(failure) + "\n")
        self.error_stream.flush()

    def write_report(self, report: Report):
        """
        输出排序后的证书信息

        Args:
            report: 检查报告
        """
        if self.header and report.successes:
            self.stream.write(self.format_header() + "\n")

        writer = csv.writer(self.stream, lineterminator="\n")
        for success in report.successes:
            writer.writerow(success.fields)
        self.stream.flush()
