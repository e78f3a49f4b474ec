"""Metrics Aggregator -- 任务集合的标量统计与分组统计

公式：
- completion_rate = completed / total * 100（total 为 0 时为 0）
- avg_response_time：in_progress / completed 任务 created_at -> updated_at 的平均分钟数
- avg_completion_time：completed 任务 created_at -> completed_at 的平均分钟数
- on_time_rate：完成耗时（小时）<= BREACH_POLICY 完成阈值的比例；
  无已完成任务时为 100（乐观默认值，仪表盘在无数据时显示 100%）

分组统计对每组独立套用同样的公式与零值兜底。
"""

from collections.abc import Iterable, Sequence

from fmtrack.core.models.enums import (
    RESPONDED_STATES,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)
from fmtrack.core.models.task import Executor, Task

from .models import ExecutorMetrics, GroupBy, TaskMetrics
from .policy import BREACH_POLICY
from .stats import mean, percentage
from .timeutils import elapsed_hours, elapsed_minutes


def response_minutes(task: Task) -> float | None:
    """响应耗时（分钟）；未被响应的任务返回 None"""
    if task.status not in RESPONDED_STATES:
        return None
    return elapsed_minutes(task.created_at, task.updated_at)


def completion_minutes(task: Task) -> float | None:
    """完成耗时（分钟）；未完成或缺少 completed_at 返回 None"""
    if task.status != TaskStatus.COMPLETED or task.completed_at is None:
        return None
    return elapsed_minutes(task.created_at, task.completed_at)


def is_on_time(task: Task) -> bool:
    """已完成任务是否在 BREACH_POLICY 完成阈值内"""
    if task.completed_at is None:
        return False
    hours = elapsed_hours(task.created_at, task.completed_at)
    return hours <= BREACH_POLICY.completion_threshold_hours(task.priority)


def aggregate(tasks: Iterable[Task]) -> TaskMetrics:
    """计算任务集合的标量统计"""
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)
    in_progress = sum(1 for task in tasks if task.status == TaskStatus.IN_PROGRESS)
    pending = sum(1 for task in tasks if task.status == TaskStatus.PENDING)

    responses = [m for m in map(response_minutes, tasks) if m is not None]

    completion_samples: list[float] = []
    on_time = 0
    for task in tasks:
        minutes = completion_minutes(task)
        if minutes is None:
            continue
        completion_samples.append(minutes)
        if is_on_time(task):
            on_time += 1

    return TaskMetrics(
        total=total,
        completed=completed,
        in_progress=in_progress,
        pending=pending,
        completion_rate=percentage(completed, total),
        avg_response_time=mean(responses),
        avg_completion_time=mean(completion_samples),
        on_time_rate=percentage(on_time, len(completion_samples), empty=100.0),
    )


def aggregate_by_category(tasks: Iterable[Task]) -> dict[TaskCategory, TaskMetrics]:
    """按类别分组统计，所有类别都会出现（空类别为零值统计）"""
    tasks = list(tasks)
    return {
        category: aggregate(task for task in tasks if task.category == category)
        for category in TaskCategory
    }


def aggregate_by_priority(tasks: Iterable[Task]) -> dict[TaskPriority, TaskMetrics]:
    """按优先级分组统计，所有优先级都会出现"""
    tasks = list(tasks)
    return {
        priority: aggregate(task for task in tasks if task.priority == priority)
        for priority in TaskPriority
    }


def aggregate_by_executor(
    tasks: Iterable[Task],
    executors: Sequence[Executor],
) -> list[ExecutorMetrics]:
    """按执行人归属（assigned_to 或 claimed_by）分组统计

    同一任务的指派人与认领人不同时，会同时计入两人。
    结果按 completed 数降序，相同时保持名册顺序。
    """
    tasks = list(tasks)
    rows = [
        ExecutorMetrics(
            executor_id=executor.id,
            executor_name=executor.name,
            metrics=aggregate(task for task in tasks if task.is_attributed_to(executor.id)),
        )
        for executor in executors
    ]
    return sorted(rows, key=lambda row: row.metrics.completed, reverse=True)


def aggregate_grouped(
    tasks: Iterable[Task],
    group_by: GroupBy,
    executors: Sequence[Executor] = (),
) -> dict[str, TaskMetrics]:
    """按指定维度聚合，返回 分组键 -> TaskMetrics

    GroupBy.NONE 返回单个键 "all"。
    """
    if group_by == GroupBy.NONE:
        return {"all": aggregate(tasks)}
    if group_by == GroupBy.CATEGORY:
        return {str(key): value for key, value in aggregate_by_category(tasks).items()}
    if group_by == GroupBy.PRIORITY:
        return {str(key): value for key, value in aggregate_by_priority(tasks).items()}
    return {row.executor_id: row.metrics for row in aggregate_by_executor(tasks, executors)}
