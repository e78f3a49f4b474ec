"""fmtrack Analytics -- SLA 指标与违约检测引擎

所有函数均为纯函数：输入不可变的任务快照，返回新计算的值对象，不保留状态。
"""

from .aggregator import (
    aggregate,
    aggregate_by_category,
    aggregate_by_executor,
    aggregate_by_priority,
    aggregate_grouped,
)
from .breaches import detect_breaches
from .filters import filter_tasks
from .models import (
    DailyCount,
    DailyPoint,
    DashboardSnapshot,
    EnhancedExecutorMetrics,
    ExecutorMetrics,
    FilterOptions,
    GroupBy,
    SLABreach,
    TaskMetrics,
)
from .policy import (
    BREACH_POLICY,
    COMPLIANCE_POLICY,
    SLAPolicy,
    breach_completion_threshold,
    breach_response_threshold,
    compliance_completion_threshold,
    compliance_response_threshold,
)
from .scoring import performance_score, score_executor, score_executors
from .trend import build_trend, build_trend_for_range

__all__ = [
    # 值对象
    "FilterOptions",
    "GroupBy",
    "TaskMetrics",
    "ExecutorMetrics",
    "DailyPoint",
    "DailyCount",
    "SLABreach",
    "EnhancedExecutorMetrics",
    "DashboardSnapshot",
    # 阈值策略
    "SLAPolicy",
    "BREACH_POLICY",
    "COMPLIANCE_POLICY",
    "breach_response_threshold",
    "breach_completion_threshold",
    "compliance_response_threshold",
    "compliance_completion_threshold",
    # 计算
    "filter_tasks",
    "aggregate",
    "aggregate_by_category",
    "aggregate_by_priority",
    "aggregate_by_executor",
    "aggregate_grouped",
    "build_trend",
    "build_trend_for_range",
    "detect_breaches",
    "score_executor",
    "score_executors",
    "performance_score",
]
