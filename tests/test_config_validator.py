"""
配置验证器测试
"""
import os
from unittest.mock import patch

from ssl_certificate_lister.services.config_validator import ConfigValidator


class TestConfigValidator:
    """配置验证器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.validator = ConfigValidator()

    @patch.dict(os.environ, {'CONNECT_TIMEOUT': '2.5', 'MAX_WORKERS': '8', 'LOG_LEVEL': 'debug'})
    def test_validate_runtime_configuration_success(self):
        """测试运行配置验证成功"""
        result = self.validator.validate_runtime_configuration()

        assert result['is_valid'] is True
        assert result['connect_timeout'] == 2.5
        assert result['max_workers'] == 8
        assert result['log_level'] == 'DEBUG'

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_runtime_configuration_defaults(self):
        """测试未设置运行配置时通过验证"""
        result = self.validator.validate_runtime_configuration()

        assert result['is_valid'] is True
        assert result['errors'] == []

    @patch.dict(os.environ, {'CONNECT_TIMEOUT': 'soon', 'MAX_WORKERS': '0', 'LOG_LEVEL': 'LOUD'})
    def test_validate_runtime_configuration_invalid(self):
        """测试运行配置无效"""
        result = self.validator.validate_runtime_configuration()

        assert result['is_valid'] is False
        assert len(result['errors']) == 3

    @patch.dict(os.environ, {'CONNECT_TIMEOUT': '-1'})
    def test_validate_runtime_configuration_negative_timeout(self):
        """测试连接超时必须大于0"""
        result = self.validator.validate_runtime_configuration()

        assert result['errors'] == ["连接超时必须大于0: -1"]

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_sns_configuration_unset(self):
        """测试未配置SNS不是错误"""
        result = self.validator.validate_sns_configuration()

        assert result['is_valid'] is True
        assert result['errors'] == []
        assert result['topic_arn'] is None

    @patch.dict(os.environ, {'SNS_TOPIC_ARN': 'arn:aws:sns:eu-west-1:123456789012:tls-reports'})
    def test_validate_sns_configuration_success(self):
        """测试SNS配置验证成功"""
        result = self.validator.validate_sns_configuration()

        assert result['is_valid'] is True
        assert result['topic_arn'] == 'arn:aws:sns:eu-west-1:123456789012:tls-reports'

    @patch.dict(os.environ, {'SNS_TOPIC_ARN': 'not-an-arn'})
    def test_validate_sns_configuration_invalid(self):
        """测试SNS主题ARN格式无效"""
        result = self.validator.validate_sns_configuration()

        assert result['is_valid'] is False
        assert result['errors'] == ["SNS主题ARN格式无效: not-an-arn"]
