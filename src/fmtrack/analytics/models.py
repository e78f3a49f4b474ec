"""分析层值对象

所有派生对象均为不可变、按需重算、从不持久化。
时间字段单位为分钟；比率字段为 0-100 的浮点数。
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from fmtrack.core.models.enums import (
    BreachSeverity,
    BreachType,
    DateRange,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)

from .timeutils import format_duration


class GroupBy(StrEnum):
    """聚合分组维度"""

    NONE = "none"
    EXECUTOR = "executor"
    CATEGORY = "category"
    PRIORITY = "priority"


class FilterOptions(BaseModel):
    """声明式筛选条件 -- 空集合表示"不限制"，而不是"全部排除" """

    model_config = ConfigDict(frozen=True)

    date_range: DateRange = Field(default=DateRange.ALL, description="时间范围")
    executors: frozenset[str] = Field(default_factory=frozenset, description="指派执行人 ID")
    categories: frozenset[TaskCategory] = Field(default_factory=frozenset, description="类别")
    statuses: frozenset[TaskStatus] = Field(default_factory=frozenset, description="状态")


class TaskMetrics(BaseModel):
    """任务集合的标量统计"""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    completion_rate: float = Field(default=0.0, description="完成率 %，空集合为 0")
    avg_response_time: float = Field(default=0.0, description="平均响应时间（分钟）")
    avg_completion_time: float = Field(default=0.0, description="平均完成时间（分钟）")
    on_time_rate: float = Field(default=100.0, description="按时完成率 %，无完成任务时为 100")

    @computed_field
    @property
    def formatted_response_time(self) -> str:
        """平均响应时间的展示文本，如 '2 hrs 5 min'"""
        return format_duration(self.avg_response_time)

    @computed_field
    @property
    def formatted_completion_time(self) -> str:
        """平均完成时间的展示文本"""
        return format_duration(self.avg_completion_time)


class ExecutorMetrics(BaseModel):
    """按执行人分组的统计"""

    model_config = ConfigDict(frozen=True)

    executor_id: str
    executor_name: str
    metrics: TaskMetrics


class DailyPoint(BaseModel):
    """趋势序列中的一天（按 created_at 所在 UTC 日分桶）"""

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="YYYY-MM-DD（UTC）")
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    sla_compliance: float = 100.0
    avg_response_time: float = 0.0
    avg_completion_time: float = 0.0


class DailyCount(BaseModel):
    """单日完成数"""

    model_config = ConfigDict(frozen=True)

    date: str
    count: int = 0


class SLABreach(BaseModel):
    """SLA 违约记录"""

    model_config = ConfigDict(frozen=True)

    task_id: str
    task_title: str = ""
    executor_name: str = "Unknown"
    category: TaskCategory | str = Field(union_mode="left_to_right")
    priority: TaskPriority | str = Field(union_mode="left_to_right")
    created_at: datetime
    completed_at: datetime | None = None
    breach_type: BreachType
    expected_minutes: float = Field(description="阈值（分钟）")
    actual_minutes: float = Field(description="实际耗时（分钟）")
    severity: BreachSeverity


class EnhancedExecutorMetrics(BaseModel):
    """执行人绩效明细（使用 COMPLIANCE_POLICY 阈值表）"""

    model_config = ConfigDict(frozen=True)

    executor_id: str
    executor_name: str = ""

    # 任务计数
    tasks_completed: int = 0
    tasks_in_progress: int = 0
    tasks_pending: int = 0
    total_tasks: int = 0

    # 时间指标（分钟）
    avg_response_time: float = 0.0
    avg_completion_time: float = 0.0
    min_response_time: float = 0.0
    max_response_time: float = 0.0
    min_completion_time: float = 0.0
    max_completion_time: float = 0.0

    # SLA 指标（%）
    on_time_completion: float = 100.0
    response_time_sla: float = 100.0
    completion_rate: float = 0.0

    # 分类/优先级分布
    category_counts: dict[TaskCategory, int] = Field(default_factory=dict)
    category_completion_rates: dict[TaskCategory, float] = Field(default_factory=dict)
    priority_counts: dict[TaskPriority, int] = Field(default_factory=dict)
    priority_completion_rates: dict[TaskPriority, float] = Field(default_factory=dict)

    # 最近 N 天每日完成数（按 completed_at 所在 UTC 日）
    daily_completion_trend: list[DailyCount] = Field(default_factory=list)

    performance_score: int = Field(default=0, ge=0, le=100, description="综合评分 0-100")

    @computed_field
    @property
    def formatted_response_time(self) -> str:
        return format_duration(self.avg_response_time)

    @computed_field
    @property
    def formatted_completion_time(self) -> str:
        return format_duration(self.avg_completion_time)


class DashboardSnapshot(BaseModel):
    """仪表盘一次完整计算的结果"""

    model_config = ConfigDict(frozen=True)

    filters: FilterOptions
    generated_at: datetime
    task_count: int = Field(description="筛选后的任务数")
    kpis: TaskMetrics
    trend: list[DailyPoint] = Field(default_factory=list, description="ALL 范围为空")
    by_category: dict[TaskCategory, TaskMetrics] = Field(default_factory=dict)
    by_priority: dict[TaskPriority, TaskMetrics] = Field(default_factory=dict)
    by_executor: list[ExecutorMetrics] = Field(default_factory=list)
    breaches: list[SLABreach] = Field(default_factory=list)
    executor_scores: list[EnhancedExecutorMetrics] = Field(default_factory=list)
