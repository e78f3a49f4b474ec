"""Task / Executor 数据模型

tasks 是事件日志的物化视图（projection），
所有状态更新必须通过追加事件触发。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import TaskCategory, TaskPriority, TaskStatus


class Executor(BaseModel):
    """执行人 -- 仅作为指标分组键，无行为"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="执行人 ID")
    name: str = Field(description="显示名")
    email: str = Field(default="", description="邮箱")


class Task(BaseModel):
    """Task 数据模型

    不变量：
    - completed_at 非空 当且仅当 status == completed
    - updated_at 在每次状态变化或认领时刷新，作为响应时间戳
    """

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(default="", description="任务标题")
    description: str = Field(default="", description="任务描述")
    location: str = Field(default="", description="位置")
    # 快照输入可能带有封闭集合之外的取值：保留原始字符串，阈值查表时回落到默认列
    category: TaskCategory | str = Field(union_mode="left_to_right", description="任务类别")
    priority: TaskPriority | str = Field(
        default=TaskPriority.MEDIUM, union_mode="left_to_right", description="优先级"
    )
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="最近一次状态变化/认领时间")
    completed_at: datetime | None = Field(default=None, description="完成时间")
    assigned_to: str | None = Field(default=None, description="指派执行人，None 表示待领池")
    claimed_by: str | None = Field(default=None, description="实际认领执行人")
    resolution: str | None = Field(default=None, description="完成说明")

    def is_attributed_to(self, executor_id: str) -> bool:
        """任务是否归属于该执行人（指派或认领任一命中）"""
        return self.assigned_to == executor_id or self.claimed_by == executor_id
