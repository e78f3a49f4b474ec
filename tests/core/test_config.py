"""AnalyticsConfig + load_analytics_config + setup_logging 单元测试

验证环境变量映射、默认值与非法值回落。
"""

import io
import logging

import pytest
import structlog
from fmtrack.core.config import (
    AnalyticsConfig,
    get_log_format,
    get_log_level,
    load_analytics_config,
)
from fmtrack.core.logging_config import setup_logging
from fmtrack.core.models import DateRange
from pydantic import ValidationError

ENV_VARS = [
    "FMTRACK_DEFAULT_DATE_RANGE",
    "FMTRACK_COMPLETION_TREND_DAYS",
    "FMTRACK_LOG_FORMAT",
    "FMTRACK_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """清除相关环境变量"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAnalyticsConfig:
    """AnalyticsConfig 数据模型测试"""

    def test_default_values(self):
        config = AnalyticsConfig()
        assert config.default_date_range == DateRange.LAST_30_DAYS
        assert config.completion_trend_days == 7

    def test_trend_days_min_value(self):
        with pytest.raises(ValidationError):
            AnalyticsConfig(completion_trend_days=0)


class TestLoadAnalyticsConfig:
    """load_analytics_config() 环境变量映射测试"""

    def test_default_when_no_env(self, clean_env):
        config = load_analytics_config()
        assert config == AnalyticsConfig()

    def test_values_from_env(self, clean_env):
        clean_env.setenv("FMTRACK_DEFAULT_DATE_RANGE", "7days")
        clean_env.setenv("FMTRACK_COMPLETION_TREND_DAYS", "14")
        config = load_analytics_config()
        assert config.default_date_range == DateRange.LAST_7_DAYS
        assert config.completion_trend_days == 14

    @pytest.mark.parametrize(
        "name,value",
        [
            ("FMTRACK_DEFAULT_DATE_RANGE", "yesterday"),
            ("FMTRACK_COMPLETION_TREND_DAYS", "seven"),
            ("FMTRACK_COMPLETION_TREND_DAYS", "0"),
            ("FMTRACK_COMPLETION_TREND_DAYS", "-3"),
        ],
    )
    def test_invalid_value_falls_back(self, clean_env, name, value):
        """非法值回落到默认值且不抛异常"""
        clean_env.setenv(name, value)
        with structlog.testing.capture_logs() as logs:
            config = load_analytics_config()
        assert config == AnalyticsConfig()
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["env_var"] == name


class TestLogging:
    """日志配置"""

    def test_log_env_defaults(self, clean_env):
        assert get_log_format() == "dev"
        assert get_log_level() == "INFO"

    def test_json_output(self, clean_env):
        clean_env.setenv("FMTRACK_LOG_FORMAT", "json")
        clean_env.setenv("FMTRACK_LOG_LEVEL", "debug")
        stream = io.StringIO()
        try:
            setup_logging(stream=stream)
            assert logging.getLogger().level == logging.DEBUG
            structlog.get_logger("fmtrack.test").info("config_test_event", answer=42)
            output = stream.getvalue()
            assert '"event": "config_test_event"' in output
            assert '"answer": 42' in output
        finally:
            logging.getLogger().handlers.clear()
            structlog.reset_defaults()
