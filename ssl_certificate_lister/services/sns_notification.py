"""
SNS报告发布服务
"""
import os
import time
import logging
from datetime import datetime, timezone
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..interfaces import NotificationServiceInterface
from ..models import REPORT_COLUMNS, Report

# SNS邮件主题最长100个字符
MAX_SUBJECT_LENGTH = 100


class SNSReportPublisher(NotificationServiceInterface):
    """SNS报告发布实现"""

    def __init__(self, topic_arn: Optional[str] = None, region_name: Optional[str] = None):
        """
        初始化SNS报告发布服务

        Args:
            topic_arn: SNS主题ARN，如果为None则从环境变量读取
            region_name: AWS区域名称，如果为None则自动检测
        """
        self.topic_arn = topic_arn or os.getenv('SNS_TOPIC_ARN')

        if region_name:
            self.region_name = region_name
        elif self.topic_arn and self.topic_arn.startswith('arn:aws:sns:'):
            # 从SNS ARN中提取区域
            self.region_name = self.topic_arn.split(':')[3]
        else:
            self.region_name = os.getenv('AWS_REGION', 'us-east-1')

        self.logger = logging.getLogger(__name__)
        self.sns_client = boto3.client('sns', region_name=self.region_name)

    @property
    def is_configured(self) -> bool:
        return bool(self.topic_arn)

    def publish_report(self, report: Report, execution_summary: dict) -> bool:
        """
        发布检查报告

        Args:
            report: 排序后的报告
            execution_summary: 执行摘要

        Returns:
            bool: 发送是否成功
        """
        if not self.is_configured:
            self.logger.error("SNS主题ARN未配置")
            return False

        subject = self._format_subject(report)
        message = self.format_report_content(report, execution_summary)
        return self._publish_with_retry(subject, message)

    def _publish_with_retry(self, subject: str, message: str, max_retries: int = 3) -> bool:
        """
        带重试机制的SNS消息发布

        Args:
            subject: 消息主题
            message: 消息内容
            max_retries: 最大重试次数

        Returns:
            bool: 发送是否成功
        """
        for attempt in range(max_retries + 1):
            try:
                response = self.sns_client.publish(
                    TopicArn=self.topic_arn,
                    Subject=subject[:MAX_SUBJECT_LENGTH],
                    Message=message
                )
                self.logger.info(f"SNS报告发送成功，MessageId: {response.get('MessageId')}")
                return True

            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error']['Message']

                if self._is_retryable_error(error_code) and attempt < max_retries:
                    wait_time = 2 ** attempt  # 指数退避
                    self.logger.warning(
                        f"SNS发送失败 (尝试 {attempt + 1}/{max_retries + 1}) - {error_code}: {error_message}，"
                        f"{wait_time}秒后重试"
                    )
                    time.sleep(wait_time)
                    continue

                self.logger.error(f"SNS发送失败 - {error_code}: {error_message}")
                return False

            except BotoCoreError as e:
                self.logger.error(f"发送SNS报告时发生错误: {str(e)}")
                return False

        return False

    def _is_retryable_error(self, error_code: str) -> bool:
        """
        判断错误是否可重试

        Args:
            error_code: AWS错误代码

        Returns:
            bool: 是否可重试
        """
        retryable_errors = {
            'Throttling',
            'ServiceUnavailable',
            'InternalError',
            'RequestTimeout'
        }
        return error_code in retryable_errors

    def _format_subject(self, report: Report) -> str:
        """
        格式化邮件主题

        Args:
            report: 检查报告

        Returns:
            str: 邮件主题
        """
        if report.failure_count:
            return f"TLS证书报告: {report.success_count}个有效, {report.failure_count}个失败"
        if report.successes:
            first = report.successes[0]
            return f"TLS证书报告: {report.success_count}个有效, 最早过期 {first.certificate.expires}"
        return "TLS证书报告: 没有检查结果"

    def format_report_content(self, report: Report, execution_summary: dict) -> str:
        """
        格式化报告内容

        Args:
            report: 检查报告
            execution_summary: 执行摘要

        Returns:
            str: 格式化的报告内容
        """
        lines = [
            "TLS证书过期报告",
            "=" * 40,
            f"检查时间: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC",
            f"执行时长: {execution_summary.get('duration_seconds', 0):.2f} 秒",
            f"总URL数: {report.total}",
            f"成功检查: {report.success_count}",
            f"失败检查: {report.failure_count}",
            ""
        ]

        if report.successes:
            lines.extend([
                "证书（按过期时间排序）:",
                "-" * 30,
                ",".join(REPORT_COLUMNS)
            ])
            for success in report.successes:
                lines.append(success.composite_key)
            lines.append("")

        if report.failures:
            lines.extend([
                "检查失败:",
                "-" * 30
            ])
            for failure in report.failures:
                lines.append(f"• {failure.source_url}")
                lines.append(f"  错误: {failure.reason}")
                if failure.suggested_action:
                    lines.append(f"  建议: {failure.suggested_action}")
            lines.append("")

        lines.extend([
            "---",
            "此报告由TLS证书检查工具自动生成"
        ])

        return "\n".join(lines)
