"""fmtrack Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    RESPONDED_STATES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ActorType,
    BreachSeverity,
    BreachType,
    DateRange,
    EventType,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    validate_transition,
)
from .event import Event
from .payloads import StateTransitionPayload, TaskClaimedPayload, TaskCreatedPayload
from .task import Executor, Task

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskCategory",
    "TaskPriority",
    "EventType",
    "ActorType",
    "DateRange",
    "BreachType",
    "BreachSeverity",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "RESPONDED_STATES",
    "validate_transition",
    # Task / Executor
    "Task",
    "Executor",
    # Event
    "Event",
    # Payloads
    "TaskCreatedPayload",
    "TaskClaimedPayload",
    "StateTransitionPayload",
]
