"""
日志服务
"""
import os
import logging
import traceback
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from ..interfaces import LoggerServiceInterface
from ..models import CertificateSuccess, ValidationResult


class LoggerService(LoggerServiceInterface):
    """日志服务实现"""

    def __init__(self, logger_name: str = "ssl_certificate_lister", log_level: Optional[str] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')

        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

        self.execution_stats = self._empty_stats()

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # 避免重复添加处理器
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(level)

            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)

            self.logger.addHandler(handler)
        else:
            for handler in self.logger.handlers:
                handler.setLevel(level)

        self.logger.propagate = False

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            'start_time': None,
            'end_time': None,
            'total_urls': 0,
            'successful_checks': 0,
            'failed_checks': 0,
            'errors': []
        }

    def log_check_start(self, url_count: Optional[int] = None):
        """
        记录检查开始

        Args:
            url_count: 要检查的URL数量，从流中逐行读取时未知
        """
        self.reset_stats()
        self.execution_stats['start_time'] = datetime.now(timezone.utc)

        if url_count is None:
            self.logger.info("开始TLS证书检查")
        else:
            self.execution_stats['total_urls'] = url_count
            self.logger.info(f"开始TLS证书检查，共 {url_count} 个URL")
        self.logger.info(f"检查开始时间: {self.execution_stats['start_time'].isoformat()}")

    def log_result(self, result: ValidationResult):
        """
        记录单个检查结果

        Args:
            result: 成功或失败结果
        """
        checked = self.execution_stats['successful_checks'] + self.execution_stats['failed_checks'] + 1
        self.execution_stats['total_urls'] = max(self.execution_stats['total_urls'], checked)

        if isinstance(result, CertificateSuccess):
            self.execution_stats['successful_checks'] += 1
            certificate = result.certificate
            self.logger.info(
                f"证书有效 - URL: {result.source_url}, "
                f"过期时间: {certificate.not_after.isoformat()}, "
                f"剩余: {result.time_remaining}, "
                f"序列号: {certificate.serial_number}, "
                f"颁发者: {certificate.issuer_common_name}"
            )
        else:
            self.execution_stats['failed_checks'] += 1
            self.execution_stats['errors'].append({
                'source_url': result.source_url,
                'error_type': result.error_type,
                'error_message': result.reason,
                'suggested_action': result.suggested_action,
                'timestamp': datetime.now(timezone.utc).isoformat()
            })
            message = f"证书检查失败 - URL: {result.source_url}, 错误: {result.error_type}: {result.reason}"
            if result.suggested_action:
                message += f", 建议: {result.suggested_action}"
            self.logger.warning(message)

    def log_error(self, source_url: str, error: Exception):
        """
        记录意外错误

        Args:
            source_url: URL
            error: 异常对象
        """
        self.logger.error(
            f"URL {source_url} 检查时发生意外错误: {type(error).__name__}: {str(error)}"
        )

        # 详细的堆栈跟踪只在调试级别输出
        self.logger.debug(f"URL {source_url} 错误堆栈跟踪:\n{traceback.format_exc()}")

    def log_check_end(self):
        """记录检查结束"""
        self.execution_stats['end_time'] = datetime.now(timezone.utc)

        if self.execution_stats['start_time']:
            duration = (self.execution_stats['end_time'] - self.execution_stats['start_time']).total_seconds()
        else:
            duration = 0

        self.logger.info("TLS证书检查完成")
        self.logger.info(f"总执行时间: {duration:.2f} 秒")
        self.logger.info(
            f"检查统计: 总计 {self.execution_stats['total_urls']} 个URL, "
            f"成功 {self.execution_stats['successful_checks']} 个, "
            f"失败 {self.execution_stats['failed_checks']} 个"
        )

    def log_notification_sent(self, notification_type: str, success: bool):
        """
        记录通知发送状态

        Args:
            notification_type: 通知类型（如 "SNS"）
            success: 是否发送成功
        """
        if success:
            self.logger.info(f"{notification_type} 报告发送成功")
        else:
            self.logger.error(f"{notification_type} 报告发送失败")

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        safe_config = self._sanitize_config(config)

        self.logger.info("系统配置信息:")
        for key, value in safe_config.items():
            self.logger.info(f"  {key}: {value}")

    def _sanitize_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        清理配置信息中的敏感数据

        Args:
            config: 原始配置

        Returns:
            Dict[str, Any]: 清理后的配置
        """
        sensitive_suffixes = ('password', 'secret', 'token', 'key', 'credential', 'arn')

        safe_config = {}
        for key, value in config.items():
            key_lower = key.lower()
            is_sensitive = any(key_lower.endswith(suffix) for suffix in sensitive_suffixes)

            if is_sensitive and isinstance(value, str) and value:
                if value.startswith('arn:'):
                    # ARN只显示前缀和后缀
                    parts = value.split(':')
                    if len(parts) >= 6:
                        safe_value = f"{':'.join(parts[:3])}:***:{parts[-2]}:{parts[-1]}"
                    else:
                        safe_value = "***"
                else:
                    safe_value = value[:3] + "***" if len(value) > 3 else "***"
                safe_config[key] = safe_value
            else:
                safe_config[key] = value

        return safe_config

    def get_execution_summary(self) -> Dict[str, Any]:
        """
        获取执行摘要

        Returns:
            Dict[str, Any]: 执行摘要信息
        """
        stats = self.execution_stats
        duration = 0
        if stats['start_time'] and stats['end_time']:
            duration = (stats['end_time'] - stats['start_time']).total_seconds()

        return {
            'start_time': stats['start_time'].isoformat() if stats['start_time'] else None,
            'end_time': stats['end_time'].isoformat() if stats['end_time'] else None,
            'duration_seconds': duration,
            'total_urls': stats['total_urls'],
            'successful_checks': stats['successful_checks'],
            'failed_checks': stats['failed_checks'],
            'success_rate': (
                stats['successful_checks'] / stats['total_urls']
                if stats['total_urls'] > 0 else 0
            ),
            'error_count': len(stats['errors']),
            'errors': stats['errors']
        }

    def log_execution_summary(self):
        """记录执行摘要"""
        summary = self.get_execution_summary()

        self.logger.info("=" * 50)
        self.logger.info("执行摘要")
        self.logger.info("=" * 50)
        self.logger.info(f"执行时长: {summary['duration_seconds']:.2f} 秒")
        self.logger.info(f"总URL数: {summary['total_urls']}")
        self.logger.info(f"成功检查: {summary['successful_checks']}")
        self.logger.info(f"失败检查: {summary['failed_checks']}")
        self.logger.info(f"成功率: {summary['success_rate']:.1%}")

        if summary['errors']:
            self.logger.info(f"错误数量: {summary['error_count']}")
            for i, error in enumerate(summary['errors'][:5], 1):  # 只显示前5个错误
                self.logger.info(f"  错误 {i}: {error['source_url']} - {error['error_type']}: {error['error_message']}")

            if len(summary['errors']) > 5:
                self.logger.info(f"  ... 还有 {len(summary['errors']) - 5} 个错误")

        self.logger.info("=" * 50)

    def log_error_statistics(self, statistics: Dict[str, Any]):
        """
        记录按错误类型汇总的统计

        Args:
            statistics: 错误统计
        """
        self.logger.info(f"错误类型分布: {statistics['error_types']}")
        self.logger.info(
            f"最常见的错误类型: {statistics['most_common_error']} "
            f"({statistics['most_common_error_count']}/{statistics['total_errors']})"
        )

    def reset_stats(self):
        """重置执行统计"""
        self.execution_stats = self._empty_stats()
