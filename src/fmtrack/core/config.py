"""配置模块 -- 可通过环境变量覆盖

SLA 阈值表是代码常量（见 fmtrack.analytics.policy），不在此处配置。
这里只包含日志与仪表盘默认参数。
"""

import os

import structlog
from pydantic import BaseModel, Field

from .models.enums import DateRange

log = structlog.get_logger()


def get_log_format() -> str:
    """日志渲染模式：dev / json"""
    return os.environ.get("FMTRACK_LOG_FORMAT", "dev")


def get_log_level() -> str:
    """日志级别"""
    return os.environ.get("FMTRACK_LOG_LEVEL", "INFO")


# 执行人完成趋势的默认天数
COMPLETION_TREND_DAYS: int = 7


class AnalyticsConfig(BaseModel):
    """仪表盘分析配置

    环境变量:
        FMTRACK_DEFAULT_DATE_RANGE: 默认时间范围（7days/30days/90days/all，默认 30days）
        FMTRACK_COMPLETION_TREND_DAYS: 执行人完成趋势天数（默认 7）
    """

    default_date_range: DateRange = Field(
        default=DateRange.LAST_30_DAYS,
        description="未指定筛选条件时使用的时间范围",
    )
    completion_trend_days: int = Field(
        default=COMPLETION_TREND_DAYS,
        ge=1,
        description="执行人每日完成数趋势的天数",
    )


def load_analytics_config() -> AnalyticsConfig:
    """从环境变量加载分析配置

    非法值记录 warning 并回落到默认值，不阻塞启动。

    Returns:
        AnalyticsConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("FMTRACK_DEFAULT_DATE_RANGE"):
        try:
            kwargs["default_date_range"] = DateRange(val)
        except ValueError:
            log.warning(
                "invalid_date_range_config",
                env_var="FMTRACK_DEFAULT_DATE_RANGE",
                value=val,
                fallback=DateRange.LAST_30_DAYS.value,
            )

    if val := os.environ.get("FMTRACK_COMPLETION_TREND_DAYS"):
        try:
            days = int(val)
            if days < 1:
                raise ValueError(val)
            kwargs["completion_trend_days"] = days
        except ValueError:
            log.warning(
                "invalid_trend_days_config",
                env_var="FMTRACK_COMPLETION_TREND_DAYS",
                value=val,
                fallback=COMPLETION_TREND_DAYS,
            )

    return AnalyticsConfig(**kwargs)
