"""Performance Scorer -- 单个执行人的绩效明细与综合评分

使用 COMPLIANCE_POLICY（分钟）阈值表，与违约检测使用的 BREACH_POLICY 不同。

综合评分：
    performance_score = round_half_up(
        on_time_completion * 0.4 + response_time_sla * 0.3 + completion_rate * 0.3
    )
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime

import structlog

from fmtrack.core.config import COMPLETION_TREND_DAYS
from fmtrack.core.models.enums import TaskCategory, TaskPriority, TaskStatus
from fmtrack.core.models.task import Executor, Task

from .aggregator import completion_minutes, response_minutes
from .models import DailyCount, EnhancedExecutorMetrics
from .policy import COMPLIANCE_POLICY
from .stats import mean, percentage, round_half_up
from .timeutils import day_bucket_key, trailing_days

log = structlog.get_logger()

ON_TIME_WEIGHT = 0.4
RESPONSE_SLA_WEIGHT = 0.3
COMPLETION_RATE_WEIGHT = 0.3


def performance_score(
    on_time_completion: float,
    response_time_sla: float,
    completion_rate: float,
) -> int:
    """加权综合评分（0-100 整数，四舍五入 .5 进位）"""
    raw = (
        on_time_completion * ON_TIME_WEIGHT
        + response_time_sla * RESPONSE_SLA_WEIGHT
        + completion_rate * COMPLETION_RATE_WEIGHT
    )
    return min(100, max(0, round_half_up(raw)))


def daily_completion_trend(
    tasks: Iterable[Task],
    days: int = COMPLETION_TREND_DAYS,
    today: date | datetime | None = None,
) -> list[DailyCount]:
    """最近 days 天每日完成数（按 completed_at 所在 UTC 日）"""
    counts: dict[str, int] = {}
    for task in tasks:
        if task.status == TaskStatus.COMPLETED and task.completed_at is not None:
            key = day_bucket_key(task.completed_at)
            counts[key] = counts.get(key, 0) + 1
    return [DailyCount(date=day, count=counts.get(day, 0)) for day in trailing_days(days, today)]


def _completion_rate(tasks: list[Task]) -> float:
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)
    return percentage(completed, len(tasks))


def score_executor(
    executor_id: str,
    tasks: Iterable[Task],
    executor_name: str = "",
    today: date | datetime | None = None,
    trend_days: int = COMPLETION_TREND_DAYS,
) -> EnhancedExecutorMetrics:
    """计算单个执行人的绩效明细

    归属规则：assigned_to 或 claimed_by 命中即计入；
    tasks_pending 只统计 assigned_to 命中的 pending 任务。

    Args:
        executor_id: 执行人 ID
        tasks: 任务集合（通常已经过 filter_tasks）
        executor_name: 显示名
        today: 完成趋势的最后一天，默认当前 UTC 日期
        trend_days: 完成趋势天数

    Returns:
        EnhancedExecutorMetrics
    """
    owned = [task for task in tasks if task.is_attributed_to(executor_id)]

    completed = [task for task in owned if task.status == TaskStatus.COMPLETED]
    in_progress = [task for task in owned if task.status == TaskStatus.IN_PROGRESS]
    pending = [
        task
        for task in owned
        if task.status == TaskStatus.PENDING and task.assigned_to == executor_id
    ]

    response_samples: list[float] = []
    response_within_sla = 0
    completion_samples: list[float] = []
    completion_within_sla = 0

    for task in owned:
        minutes = response_minutes(task)
        if minutes is not None:
            response_samples.append(minutes)
            if minutes <= COMPLIANCE_POLICY.response_threshold(task.priority):
                response_within_sla += 1

        minutes = completion_minutes(task)
        if minutes is not None:
            completion_samples.append(minutes)
            if minutes <= COMPLIANCE_POLICY.completion_threshold(task.priority):
                completion_within_sla += 1

    on_time_completion = percentage(completion_within_sla, len(completion_samples), empty=100.0)
    response_time_sla = percentage(response_within_sla, len(response_samples), empty=100.0)
    completion_rate = percentage(len(completed), len(owned))

    category_counts: dict[TaskCategory, int] = {}
    category_rates: dict[TaskCategory, float] = {}
    for category in TaskCategory:
        group = [task for task in owned if task.category == category]
        category_counts[category] = len(group)
        category_rates[category] = _completion_rate(group)

    priority_counts: dict[TaskPriority, int] = {}
    priority_rates: dict[TaskPriority, float] = {}
    for priority in TaskPriority:
        group = [task for task in owned if task.priority == priority]
        priority_counts[priority] = len(group)
        priority_rates[priority] = _completion_rate(group)

    score = performance_score(on_time_completion, response_time_sla, completion_rate)

    log.debug(
        "executor_scored",
        executor_id=executor_id,
        total_tasks=len(owned),
        performance_score=score,
    )

    return EnhancedExecutorMetrics(
        executor_id=executor_id,
        executor_name=executor_name,
        tasks_completed=len(completed),
        tasks_in_progress=len(in_progress),
        tasks_pending=len(pending),
        total_tasks=len(owned),
        avg_response_time=mean(response_samples),
        avg_completion_time=mean(completion_samples),
        min_response_time=min(response_samples, default=0.0),
        max_response_time=max(response_samples, default=0.0),
        min_completion_time=min(completion_samples, default=0.0),
        max_completion_time=max(completion_samples, default=0.0),
        on_time_completion=on_time_completion,
        response_time_sla=response_time_sla,
        completion_rate=completion_rate,
        category_counts=category_counts,
        category_completion_rates=category_rates,
        priority_counts=priority_counts,
        priority_completion_rates=priority_rates,
        daily_completion_trend=daily_completion_trend(completed, trend_days, today),
        performance_score=score,
    )


def score_executors(
    executors: Sequence[Executor],
    tasks: Iterable[Task],
    today: date | datetime | None = None,
    trend_days: int = COMPLETION_TREND_DAYS,
) -> list[EnhancedExecutorMetrics]:
    """按名册顺序为每个执行人计算绩效明细"""
    tasks = list(tasks)
    return [
        score_executor(executor.id, tasks, executor.name, today, trend_days)
        for executor in executors
    ]
