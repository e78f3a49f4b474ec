"""TaskService -- 任务创建/认领/开始/完成业务逻辑

所有变更都以事件形式追加到仓储，Task 只是事件的 projection：
1. create_task: TASK_CREATED（status=pending）
2. claim_task: TASK_CLAIMED + STATE_TRANSITION pending -> in_progress
3. start_task: STATE_TRANSITION pending -> in_progress
4. complete_task: STATE_TRANSITION in_progress -> completed
"""

from collections.abc import Callable
from datetime import datetime

import structlog
from ulid import ULID

from fmtrack.analytics.timeutils import utc_now

from ..exceptions import InvalidTransitionError, TaskNotFoundError, TaskSeqConflictError
from ..models import (
    ActorType,
    Event,
    EventType,
    StateTransitionPayload,
    Task,
    TaskCategory,
    TaskClaimedPayload,
    TaskCreatedPayload,
    TaskPriority,
    TaskStatus,
    validate_transition,
)
from ..store.protocols import TaskRepository

log = structlog.get_logger()


class TaskService:
    """任务生命周期服务"""

    _max_task_seq_retries = 3

    def __init__(
        self,
        repository: TaskRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repository
        self._clock = clock

    async def create_task(
        self,
        title: str,
        category: TaskCategory,
        priority: TaskPriority = TaskPriority.MEDIUM,
        description: str = "",
        location: str = "",
        assigned_to: str | None = None,
    ) -> Task:
        """创建任务

        assigned_to 为空时任务进入待领池（不做随机指派）。

        Returns:
            新建的 Task（status=pending）
        """
        task_id = str(ULID())
        now = self._clock()
        event = Event(
            event_id=str(ULID()),
            task_id=task_id,
            task_seq=1,
            ts=now,
            type=EventType.TASK_CREATED,
            actor=ActorType.ADMIN,
            payload=TaskCreatedPayload(
                title=title,
                description=description,
                location=location,
                category=category,
                priority=priority,
                assigned_to=assigned_to,
            ).model_dump(mode="json"),
            trace_id=f"trace-{task_id}",
        )
        task = await self._repo.append_task_event(event)
        log.info(
            "task_created",
            task_id=task_id,
            category=category.value,
            priority=priority.value,
            assigned_to=assigned_to,
        )
        return task

    async def claim_task(self, task_id: str, executor_id: str) -> Task:
        """执行人认领任务

        pending 任务认领后立即进入 in_progress；
        in_progress 任务允许改由他人认领（只记录 claimed_by）；
        completed 任务不可认领。
        """
        task = await self._require_task(task_id)
        if task.status == TaskStatus.COMPLETED:
            raise InvalidTransitionError(task_id, task.status.value, TaskStatus.IN_PROGRESS.value)

        now = self._clock()
        task = await self._append_with_retry(
            task_id,
            lambda seq: Event(
                event_id=str(ULID()),
                task_id=task_id,
                task_seq=seq,
                ts=now,
                type=EventType.TASK_CLAIMED,
                actor=ActorType.EXECUTOR,
                payload=TaskClaimedPayload(executor_id=executor_id).model_dump(mode="json"),
                trace_id=f"trace-{task_id}",
            ),
        )
        log.info("task_claimed", task_id=task_id, executor_id=executor_id)

        if task.status == TaskStatus.PENDING:
            task = await self._transition(task, TaskStatus.IN_PROGRESS, now=now)
        return task

    async def start_task(self, task_id: str) -> Task:
        """开始任务：pending -> in_progress"""
        task = await self._require_task(task_id)
        return await self._transition(task, TaskStatus.IN_PROGRESS)

    async def complete_task(self, task_id: str, resolution: str | None = None) -> Task:
        """完成任务：in_progress -> completed"""
        task = await self._require_task(task_id)
        return await self._transition(task, TaskStatus.COMPLETED, resolution=resolution)

    async def get_task(self, task_id: str) -> Task | None:
        """查询任务详情"""
        return await self._repo.get_task(task_id)

    async def _require_task(self, task_id: str) -> Task:
        task = await self._repo.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def _transition(
        self,
        task: Task,
        to_status: TaskStatus,
        resolution: str | None = None,
        now: datetime | None = None,
    ) -> Task:
        """写入 STATE_TRANSITION 事件并返回更新后的 Task"""
        from_status = task.status
        if not validate_transition(from_status, to_status):
            raise InvalidTransitionError(task.task_id, from_status.value, to_status.value)

        ts = now or self._clock()
        updated = await self._append_with_retry(
            task.task_id,
            lambda seq: Event(
                event_id=str(ULID()),
                task_id=task.task_id,
                task_seq=seq,
                ts=ts,
                type=EventType.STATE_TRANSITION,
                actor=ActorType.EXECUTOR,
                payload=StateTransitionPayload(
                    from_status=from_status,
                    to_status=to_status,
                    resolution=resolution,
                ).model_dump(mode="json"),
                trace_id=f"trace-{task.task_id}",
            ),
        )
        log.info(
            "task_status_changed",
            task_id=task.task_id,
            from_status=from_status.value,
            to_status=to_status.value,
        )
        return updated

    async def _append_with_retry(
        self,
        task_id: str,
        event_builder: Callable[[int], Event],
    ) -> Task:
        """写事件并更新 projection，在 task_seq 冲突时重试。"""
        for attempt in range(1, self._max_task_seq_retries + 1):
            seq = await self._repo.get_next_task_seq(task_id)
            try:
                return await self._repo.append_task_event(event_builder(seq))
            except TaskSeqConflictError:
                if attempt >= self._max_task_seq_retries:
                    raise
                log.warning("task_seq_conflict_retry", task_id=task_id, attempt=attempt)
        raise RuntimeError("failed to append task event after retries")
