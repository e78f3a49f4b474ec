"""Store Protocol 接口定义

定义 TaskRepository、EventLog 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
分析引擎只依赖这些接口，不依赖具体存储实现。
"""

from datetime import datetime
from typing import Protocol

from fmtrack.analytics.models import FilterOptions

from ..models.event import Event
from ..models.task import Executor, Task


class EventLog(Protocol):
    """事件日志接口 -- append-only：只允许追加，不允许更新或删除"""

    async def append_event(self, event: Event) -> None:
        """追加事件"""
        ...

    async def get_events_for_task(self, task_id: str) -> list[Event]:
        """查询指定任务的所有事件（按 task_seq 升序）"""
        ...

    async def get_all_events(self) -> list[Event]:
        """按写入顺序返回全部事件"""
        ...

    async def get_next_task_seq(self, task_id: str) -> int:
        """获取指定任务的下一个 task_seq（MAX+1）"""
        ...


class TaskRepository(Protocol):
    """任务仓储接口 -- 引擎的唯一数据来源"""

    async def list_tasks(
        self,
        options: FilterOptions | None = None,
        now: datetime | None = None,
    ) -> list[Task]:
        """查询任务列表（一致快照），支持声明式筛选"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        ...

    async def list_executors(self) -> list[Executor]:
        """查询执行人名册"""
        ...

    async def add_executor(self, executor: Executor) -> None:
        """登记执行人"""
        ...

    async def get_next_task_seq(self, task_id: str) -> int:
        """获取指定任务的下一个 task_seq"""
        ...

    async def append_task_event(self, event: Event) -> Task:
        """追加任务事件并返回更新后的 Task projection"""
        ...
