"""Task Filter -- 对任务集合应用声明式筛选

规则：
- date_range 非 ALL 时保留 created_at >= now - N 天的任务（截止点包含在内）
- executors 只匹配 assigned_to，不匹配 claimed_by
- 任一筛选集合为空表示该维度不限制
- 纯函数，返回新列表，保持原顺序
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from fmtrack.core.models.task import Task

from .models import FilterOptions
from .timeutils import as_utc, utc_now


def _matches(task: Task, options: FilterOptions, cutoff: datetime | None) -> bool:
    if cutoff is not None and as_utc(task.created_at) < cutoff:
        return False

    if options.executors and task.assigned_to not in options.executors:
        return False

    if options.categories and task.category not in options.categories:
        return False

    if options.statuses and task.status not in options.statuses:
        return False

    return True


def date_cutoff(options: FilterOptions, now: datetime | None = None) -> datetime | None:
    """时间范围截止点；ALL 返回 None"""
    days = options.date_range.days
    if days is None:
        return None
    return as_utc(now or utc_now()) - timedelta(days=days)


def filter_tasks(
    tasks: Iterable[Task],
    options: FilterOptions | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """按筛选条件过滤任务

    Args:
        tasks: 任务集合
        options: 筛选条件，None 等价于不筛选
        now: 计算时间范围的基准时刻，默认当前 UTC 时间

    Returns:
        过滤后的新列表（保持输入顺序）
    """
    if options is None:
        return list(tasks)
    cutoff = date_cutoff(options, now)
    return [task for task in tasks if _matches(task, options, cutoff)]
