"""Trend Builder -- 按 UTC 日历日分桶的趋势序列

任务按 created_at 所在日归桶（不是完成日），
每个桶套用 aggregate() 计算当天指标。
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime

from fmtrack.core.models.enums import DateRange
from fmtrack.core.models.task import Task

from .aggregator import aggregate
from .models import DailyPoint
from .timeutils import day_bucket_key, trailing_days


def build_trend(
    tasks: Iterable[Task],
    window_days: int,
    today: date | datetime | None = None,
) -> list[DailyPoint]:
    """生成以 today 结尾、共 window_days 个点的趋势序列

    无任务的日期也会输出（计数为 0，sla_compliance 为 100）。

    Args:
        tasks: 任务集合（通常已经过 filter_tasks）
        window_days: 窗口天数，<= 0 时返回空列表
        today: 窗口最后一天，默认当前 UTC 日期

    Returns:
        按日期升序的 DailyPoint 列表
    """
    days = trailing_days(window_days, today)
    if not days:
        return []

    window = set(days)
    buckets: dict[str, list[Task]] = defaultdict(list)
    for task in tasks:
        key = day_bucket_key(task.created_at)
        if key in window:
            buckets[key].append(task)

    points = []
    for day in days:
        metrics = aggregate(buckets.get(day, ()))
        points.append(
            DailyPoint(
                date=day,
                total=metrics.total,
                completed=metrics.completed,
                in_progress=metrics.in_progress,
                pending=metrics.pending,
                sla_compliance=metrics.on_time_rate,
                avg_response_time=metrics.avg_response_time,
                avg_completion_time=metrics.avg_completion_time,
            )
        )
    return points


def build_trend_for_range(
    tasks: Iterable[Task],
    date_range: DateRange,
    today: date | datetime | None = None,
) -> list[DailyPoint]:
    """按仪表盘时间范围生成趋势；ALL 没有有界窗口，返回空列表"""
    days = date_range.days
    if days is None:
        return []
    return build_trend(tasks, days, today)
