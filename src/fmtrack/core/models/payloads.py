"""Event Payload 子类型

所有事件的结构化 payload 定义。
"""

from pydantic import BaseModel, Field

from .enums import TaskCategory, TaskPriority, TaskStatus


class TaskCreatedPayload(BaseModel):
    """TASK_CREATED 事件 payload"""

    title: str
    description: str = Field(default="")
    location: str = Field(default="")
    category: TaskCategory
    priority: TaskPriority
    assigned_to: str | None = Field(default=None, description="指派执行人")


class TaskClaimedPayload(BaseModel):
    """TASK_CLAIMED 事件 payload"""

    executor_id: str


class StateTransitionPayload(BaseModel):
    """STATE_TRANSITION 事件 payload"""

    from_status: TaskStatus
    to_status: TaskStatus
    resolution: str | None = Field(default=None, description="完成说明，仅 completed 时有效")
