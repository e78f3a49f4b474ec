"""内存版事件日志 + 任务仓储

写入通过 asyncio.Lock 串行化：追加事件与更新 projection 在同一临界区内完成，
读取返回不可变 Task 的列表副本，作为一次一致快照。
"""

import asyncio
from datetime import datetime

import structlog

from fmtrack.analytics.filters import filter_tasks
from fmtrack.analytics.models import FilterOptions

from ..exceptions import (
    DuplicateTaskError,
    InvalidTransitionError,
    TaskNotFoundError,
    TaskSeqConflictError,
    UnknownExecutorError,
)
from ..models.enums import EventType, validate_transition
from ..models.event import Event
from ..models.payloads import StateTransitionPayload, TaskClaimedPayload, TaskCreatedPayload
from ..models.task import Executor, Task
from ..projection import apply_event, rebuild_all

log = structlog.get_logger()


class InMemoryEventLog:
    """EventLog 的内存实现（append-only）"""

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._by_task: dict[str, list[Event]] = {}

    async def append_event(self, event: Event) -> None:
        """追加事件（append-only）"""
        self._events.append(event)
        self._by_task.setdefault(event.task_id, []).append(event)

    async def get_events_for_task(self, task_id: str) -> list[Event]:
        """查询指定任务的所有事件"""
        return list(self._by_task.get(task_id, ()))

    async def get_all_events(self) -> list[Event]:
        """按写入顺序返回全部事件"""
        return list(self._events)

    async def get_next_task_seq(self, task_id: str) -> int:
        """获取指定任务的下一个 task_seq（MAX+1）"""
        events = self._by_task.get(task_id)
        if not events:
            return 1
        return max(event.task_seq for event in events) + 1


class InMemoryTaskRepository:
    """TaskRepository 的内存实现

    事件日志是唯一事实来源，_tasks 是其 projection。
    """

    def __init__(
        self,
        event_log: InMemoryEventLog | None = None,
        executors: list[Executor] | None = None,
    ) -> None:
        self.event_log = event_log or InMemoryEventLog()
        self._executors: dict[str, Executor] = {}
        self._tasks: dict[str, Task] = {}
        self._lock = asyncio.Lock()
        for executor in executors or ():
            self._executors[executor.id] = executor

    @classmethod
    async def from_events(
        cls,
        events: list[Event],
        executors: list[Executor] | None = None,
    ) -> "InMemoryTaskRepository":
        """从已有事件日志恢复仓储（重建 projection）"""
        event_log = InMemoryEventLog()
        for event in events:
            await event_log.append_event(event)
        repo = cls(event_log=event_log, executors=executors)
        repo._tasks = rebuild_all(events)
        return repo

    async def list_tasks(
        self,
        options: FilterOptions | None = None,
        now: datetime | None = None,
    ) -> list[Task]:
        """查询任务列表（按创建顺序），支持声明式筛选"""
        async with self._lock:
            snapshot = list(self._tasks.values())
        return filter_tasks(snapshot, options, now)

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        return self._tasks.get(task_id)

    async def list_executors(self) -> list[Executor]:
        """查询执行人名册（按登记顺序）"""
        return list(self._executors.values())

    async def add_executor(self, executor: Executor) -> None:
        """登记执行人（同 ID 覆盖）"""
        async with self._lock:
            self._executors[executor.id] = executor

    async def get_next_task_seq(self, task_id: str) -> int:
        """获取指定任务的下一个 task_seq"""
        return await self.event_log.get_next_task_seq(task_id)

    async def append_task_event(self, event: Event) -> Task:
        """追加任务事件并返回更新后的 Task

        Raises:
            DuplicateTaskError: TASK_CREATED 的 task_id 已存在
            TaskNotFoundError: 非创建事件指向不存在的任务
            TaskSeqConflictError: task_seq 不是 MAX+1
            InvalidTransitionError: 状态流转不合法
            UnknownExecutorError: 指派/认领的执行人不在名册中
        """
        async with self._lock:
            self._check_event(event)
            expected_seq = await self.event_log.get_next_task_seq(event.task_id)
            if event.task_seq != expected_seq:
                raise TaskSeqConflictError(event.task_id, expected_seq, event.task_seq)

            await self.event_log.append_event(event)
            apply_event(self._tasks, event)
            task = self._tasks[event.task_id]

        log.debug(
            "task_event_appended",
            task_id=event.task_id,
            event_type=event.type.value,
            task_seq=event.task_seq,
            status=task.status.value,
        )
        return task

    def _check_event(self, event: Event) -> None:
        """在写锁内校验事件与当前 projection 是否一致"""
        current = self._tasks.get(event.task_id)

        if event.type == EventType.TASK_CREATED:
            if current is not None:
                raise DuplicateTaskError(event.task_id)
            payload = TaskCreatedPayload.model_validate(event.payload)
            if payload.assigned_to is not None:
                self._require_executor(payload.assigned_to)
            return

        if current is None:
            raise TaskNotFoundError(event.task_id)

        if event.type == EventType.TASK_CLAIMED:
            payload = TaskClaimedPayload.model_validate(event.payload)
            self._require_executor(payload.executor_id)
        elif event.type == EventType.STATE_TRANSITION:
            payload = StateTransitionPayload.model_validate(event.payload)
            if payload.from_status != current.status or not validate_transition(
                current.status, payload.to_status
            ):
                raise InvalidTransitionError(
                    event.task_id, current.status.value, payload.to_status.value
                )

    def _require_executor(self, executor_id: str) -> None:
        if executor_id not in self._executors:
            raise UnknownExecutorError(executor_id)
