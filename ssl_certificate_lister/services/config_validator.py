"""
配置验证服务
"""
import os
import re
from typing import Dict, Any
import logging

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
SNS_ARN_PATTERN = re.compile(r'^arn:aws[a-z-]*:sns:[a-z0-9-]+:\d{12}:[a-zA-Z0-9_.-]+$')


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        """初始化配置验证器"""
        self.logger = logging.getLogger(__name__)

    def validate_runtime_configuration(self) -> Dict[str, Any]:
        """
        验证超时、并发数和日志级别

        Returns:
            Dict[str, Any]: 运行配置验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'connect_timeout': None,
            'max_workers': None,
            'log_level': None
        }

        timeout = os.getenv('CONNECT_TIMEOUT')
        if timeout:
            try:
                result['connect_timeout'] = float(timeout)
                if result['connect_timeout'] <= 0:
                    result['errors'].append(f"连接超时必须大于0: {timeout}")
            except ValueError:
                result['errors'].append(f"连接超时格式无效: {timeout}")

        workers = os.getenv('MAX_WORKERS')
        if workers:
            try:
                result['max_workers'] = int(workers)
                if result['max_workers'] < 1:
                    result['errors'].append(f"并发数必须至少为1: {workers}")
            except ValueError:
                result['errors'].append(f"并发数格式无效: {workers}")

        log_level = os.getenv('LOG_LEVEL')
        if log_level:
            result['log_level'] = log_level.upper()
            if result['log_level'] not in VALID_LOG_LEVELS:
                result['errors'].append(f"日志级别无效: {log_level}")

        result['is_valid'] = not result['errors']
        return result

    def validate_sns_configuration(self) -> Dict[str, Any]:
        """
        验证SNS配置，未设置SNS_TOPIC_ARN时不发送报告，不视为错误

        Returns:
            Dict[str, Any]: SNS配置验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'topic_arn': None
        }

        topic_arn = os.getenv('SNS_TOPIC_ARN')
        if not topic_arn:
            return result

        result['topic_arn'] = topic_arn
        if not SNS_ARN_PATTERN.match(topic_arn):
            result['is_valid'] = False
            result['errors'].append(f"SNS主题ARN格式无效: {topic_arn}")

        return result
