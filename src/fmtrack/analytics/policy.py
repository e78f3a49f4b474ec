"""SLA 阈值策略表

存在两张独立的阈值表，数值不同，不可合并：

- BREACH_POLICY：违约检测与 on-time rate 使用（按小时定义）
  response   high=1h  medium=4h  其他=8h
  completion high=4h  medium=12h 其他=24h
- COMPLIANCE_POLICY：执行人绩效评分使用（按分钟定义）
  response   high=60  medium=120 其他=240
  completion high=240 medium=720 其他=1440

未识别的优先级（含原始字符串）回落到"其他"列。
"""

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fmtrack.core.models.enums import TaskPriority


class SLAPolicy(BaseModel):
    """按优先级查表的 SLA 阈值（单位：分钟）

    阈值表在校验后包装为只读映射，策略实例整体不可变。
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="策略名")
    response_minutes: Mapping[TaskPriority, float] = Field(description="响应时间阈值")
    completion_minutes: Mapping[TaskPriority, float] = Field(description="完成时间阈值")
    default_response_minutes: float = Field(description="未识别优先级的响应阈值")
    default_completion_minutes: float = Field(description="未识别优先级的完成阈值")

    @field_validator("response_minutes", "completion_minutes", mode="after")
    @classmethod
    def freeze_thresholds(
        cls, value: Mapping[TaskPriority, float]
    ) -> Mapping[TaskPriority, float]:
        return MappingProxyType(dict(value))

    def response_threshold(self, priority: TaskPriority | str) -> float:
        """响应时间阈值（分钟）"""
        return self.response_minutes.get(_coerce(priority), self.default_response_minutes)

    def completion_threshold(self, priority: TaskPriority | str) -> float:
        """完成时间阈值（分钟）"""
        return self.completion_minutes.get(
            _coerce(priority), self.default_completion_minutes
        )

    def response_threshold_hours(self, priority: TaskPriority | str) -> float:
        return self.response_threshold(priority) / 60

    def completion_threshold_hours(self, priority: TaskPriority | str) -> float:
        return self.completion_threshold(priority) / 60


def _coerce(priority: TaskPriority | str) -> TaskPriority | None:
    if isinstance(priority, TaskPriority):
        return priority
    try:
        return TaskPriority(priority)
    except ValueError:
        return None


def _hours_to_minutes(value: float) -> float:
    return value * 60


BREACH_POLICY = SLAPolicy(
    name="breach-detection",
    response_minutes={
        TaskPriority.HIGH: _hours_to_minutes(1),
        TaskPriority.MEDIUM: _hours_to_minutes(4),
    },
    completion_minutes={
        TaskPriority.HIGH: _hours_to_minutes(4),
        TaskPriority.MEDIUM: _hours_to_minutes(12),
    },
    default_response_minutes=_hours_to_minutes(8),
    default_completion_minutes=_hours_to_minutes(24),
)

COMPLIANCE_POLICY = SLAPolicy(
    name="compliance-scoring",
    response_minutes={
        TaskPriority.HIGH: 60,
        TaskPriority.MEDIUM: 120,
    },
    completion_minutes={
        TaskPriority.HIGH: 240,
        TaskPriority.MEDIUM: 720,
    },
    default_response_minutes=240,
    default_completion_minutes=1440,
)


def breach_response_threshold(priority: TaskPriority | str) -> float:
    """违约检测表：响应阈值（分钟）"""
    return BREACH_POLICY.response_threshold(priority)


def breach_completion_threshold(priority: TaskPriority | str) -> float:
    """违约检测表：完成阈值（分钟）"""
    return BREACH_POLICY.completion_threshold(priority)


def compliance_response_threshold(priority: TaskPriority | str) -> float:
    """评分表：响应阈值（分钟）"""
    return COMPLIANCE_POLICY.response_threshold(priority)


def compliance_completion_threshold(priority: TaskPriority | str) -> float:
    """评分表：完成阈值（分钟）"""
    return COMPLIANCE_POLICY.completion_threshold(priority)
