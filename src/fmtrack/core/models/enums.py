"""枚举定义 -- 任务分类、优先级、状态机与 SLA 相关枚举

包含 TaskStatus 单向状态机、TaskCategory、TaskPriority、EventType、ActorType，
以及分析层使用的 DateRange、BreachType、BreachSeverity。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态机（只能向前流转）"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskCategory(StrEnum):
    """任务类别（封闭集合）"""

    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    SECURITY = "security"
    SAFETY = "safety"
    UTILITY = "utility"


class TaskPriority(StrEnum):
    """任务优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# 合法状态流转：pending -> in_progress -> completed
VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED},
    # 终态不可再流转
    TaskStatus.COMPLETED: set(),
}

TERMINAL_STATES: set[TaskStatus] = {TaskStatus.COMPLETED}

# 已被响应（认领/开始）的状态，参与响应时间统计
RESPONDED_STATES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED}
)


class EventType(StrEnum):
    """事件类型"""

    TASK_CREATED = "TASK_CREATED"
    TASK_CLAIMED = "TASK_CLAIMED"
    STATE_TRANSITION = "STATE_TRANSITION"


class ActorType(StrEnum):
    """操作者类型"""

    ADMIN = "admin"
    EXECUTOR = "executor"
    SYSTEM = "system"


class DateRange(StrEnum):
    """仪表盘时间范围"""

    LAST_7_DAYS = "7days"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"
    ALL = "all"

    @property
    def days(self) -> int | None:
        """窗口天数，ALL 返回 None"""
        return _DATE_RANGE_DAYS.get(self)


_DATE_RANGE_DAYS: dict[DateRange, int] = {
    DateRange.LAST_7_DAYS: 7,
    DateRange.LAST_30_DAYS: 30,
    DateRange.LAST_90_DAYS: 90,
}


class BreachType(StrEnum):
    """SLA 违约类型"""

    RESPONSE = "response"
    COMPLETION = "completion"


class BreachSeverity(StrEnum):
    """SLA 违约严重程度"""

    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        """排序权重：severe=0, moderate=1, minor=2"""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[BreachSeverity, int] = {
    BreachSeverity.SEVERE: 0,
    BreachSeverity.MODERATE: 1,
    BreachSeverity.MINOR: 2,
}


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed
