"""
AWS Lambda函数入口点
"""
import os
import logging
from typing import Dict, Any, List, Optional
from datetime import datetime, timezone

from .auditor import CertificateAuditor
from .models import Report
from .services.config_validator import ConfigValidator
from .services.logger import LoggerService
from .services.sns_notification import SNSReportPublisher
from .services.url_source import URLSource


class CertificateReportJob:
    """定时检查URL列表并发布证书报告"""

    def __init__(self):
        """初始化检查任务"""
        self.logger_service = LoggerService()
        self.url_source = URLSource()
        self.config_validator = ConfigValidator()
        self.auditor = CertificateAuditor(logger_service=self.logger_service)
        self.publisher = SNSReportPublisher()

        self._log_configuration()

    def _log_configuration(self):
        """记录系统配置信息"""
        config = {
            'urls_env_var': os.getenv('URLS', ''),
            'sns_topic_arn': os.getenv('SNS_TOPIC_ARN', ''),
            'log_level': os.getenv('LOG_LEVEL', 'INFO'),
            'connect_timeout': self.auditor.timeout,
            'max_workers': self.auditor.max_workers,
            'lambda_function_name': os.getenv('AWS_LAMBDA_FUNCTION_NAME', 'unknown')
        }

        self.logger_service.log_configuration_info(config)

        for validation in (self.config_validator.validate_runtime_configuration(),
                           self.config_validator.validate_sns_configuration()):
            for error in validation['errors']:
                self.logger_service.logger.warning(error)

    def execute(self, urls: Optional[List[str]] = None) -> Report:
        """
        执行证书检查

        Args:
            urls: 要检查的URL，为None时从环境变量 URLS 读取

        Returns:
            Report: 检查报告
        """
        if urls is None:
            urls = self.url_source.get_urls_from_env()
        else:
            urls = list(self.url_source.read_lines(urls))

        if not urls:
            self.logger_service.logger.warning("没有找到要检查的URL")
            return Report()

        report = self.auditor.audit(urls)
        self._publish_report(report)
        return report

    def _publish_report(self, report: Report) -> bool:
        """
        发布报告到SNS（已配置时）

        Args:
            report: 检查报告

        Returns:
            bool: 是否发送成功
        """
        if not self.publisher.is_configured:
            self.logger_service.logger.info("未配置SNS_TOPIC_ARN，跳过报告发送")
            return False

        summary = self.logger_service.get_execution_summary()
        success = self.publisher.publish_report(report, summary)
        self.logger_service.log_notification_sent("SNS", success)
        return success


def build_response_body(report: Report) -> Dict[str, Any]:
    """
    构建Lambda响应内容

    Args:
        report: 检查报告

    Returns:
        dict: 响应内容
    """
    return {
        'message': 'TLS certificate report generated',
        'summary': {
            'total_urls': report.total,
            'successful_checks': report.success_count,
            'failed_checks': report.failure_count,
        },
        'certificates': [
            dict(zip(('expires', 'to_expiry', 'url', 'serial_number', 'issuer_cn'), success.fields))
            for success in report.successes
        ],
        'errors': [failure.reason for failure in report.failures[:5]],  # 只返回前5个错误
        'timestamp': datetime.now(timezone.utc).isoformat()
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda函数入口点

    Args:
        event: EventBridge触发事件，可以包含 "urls" 列表
        context: Lambda运行时上下文

    Returns:
        dict: 执行结果和统计信息
    """
    try:
        job = CertificateReportJob()
        urls = event.get('urls') if isinstance(event, dict) else None
        report = job.execute(urls)

        response = {
            'statusCode': 200,
            'body': build_response_body(report)
        }

        if report.total == 0:
            response['statusCode'] = 400
            response['body']['message'] = 'No URLs to check'

        return response

    except Exception as e:
        logging.getLogger(__name__).exception("Lambda函数执行时发生严重错误")
        return {
            'statusCode': 500,
            'body': {
                'message': 'TLS certificate report encountered a critical error',
                'error': str(e),
                'timestamp': datetime.now(timezone.utc).isoformat()
            }
        }
