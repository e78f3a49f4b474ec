"""Projection 重建模块

从事件日志折叠出 tasks（物化视图），指标始终从 tasks 派生，
不会回写到执行人记录。支持单事件应用和全量重建两种模式。
"""

import time
from collections.abc import Iterable

import structlog

from .models.enums import EventType, TaskStatus
from .models.event import Event
from .models.payloads import StateTransitionPayload, TaskClaimedPayload, TaskCreatedPayload
from .models.task import Task

log = structlog.get_logger()


def apply_event(tasks: dict[str, Task], event: Event) -> None:
    """将单个事件应用到 Task 状态（内存中操作）

    Args:
        tasks: task_id -> Task 的映射表（会被就地修改）
        event: 要应用的事件
    """
    task_id = event.task_id

    if event.type == EventType.TASK_CREATED:
        payload = TaskCreatedPayload.model_validate(event.payload)
        tasks[task_id] = Task(
            task_id=task_id,
            title=payload.title,
            description=payload.description,
            location=payload.location,
            category=payload.category,
            priority=payload.priority,
            status=TaskStatus.PENDING,
            created_at=event.ts,
            updated_at=event.ts,
            assigned_to=payload.assigned_to,
        )
        return

    task = tasks.get(task_id)
    if task is None:
        log.warning(
            "projection_event_for_unknown_task",
            task_id=task_id,
            event_id=event.event_id,
            event_type=event.type.value,
        )
        return

    if event.type == EventType.TASK_CLAIMED:
        payload = TaskClaimedPayload.model_validate(event.payload)
        tasks[task_id] = task.model_copy(
            update={"claimed_by": payload.executor_id, "updated_at": event.ts}
        )
    elif event.type == EventType.STATE_TRANSITION:
        payload = StateTransitionPayload.model_validate(event.payload)
        update: dict = {"status": payload.to_status, "updated_at": event.ts}
        if payload.to_status == TaskStatus.COMPLETED:
            update["completed_at"] = event.ts
            update["resolution"] = payload.resolution
        tasks[task_id] = task.model_copy(update=update)


def rebuild_all(events: Iterable[Event]) -> dict[str, Task]:
    """从事件日志重建全部 Task

    Args:
        events: 按写入顺序排列的事件

    Returns:
        task_id -> Task（保持任务创建顺序）
    """
    start_time = time.monotonic()
    events = list(events)

    log.info("projection_rebuild_started", event_count=len(events))

    tasks: dict[str, Task] = {}
    for event in events:
        apply_event(tasks, event)

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    log.info(
        "projection_rebuild_completed",
        event_count=len(events),
        task_count=len(tasks),
        elapsed_ms=elapsed_ms,
    )
    return tasks
