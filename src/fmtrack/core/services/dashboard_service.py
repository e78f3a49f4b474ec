"""DashboardService -- 组合一次完整的仪表盘快照

流程：
1. 从仓储读取一致快照（任务 + 执行人名册）
2. 在进程内依次运行 filter -> aggregate / trend / breaches -> scoring
3. 返回不可变的 DashboardSnapshot

每次调用都全量重算，不做增量更新，也不把派生指标回写到执行人记录。
"""

from collections.abc import Sequence
from datetime import datetime

import structlog

from fmtrack.analytics.aggregator import (
    aggregate,
    aggregate_by_category,
    aggregate_by_executor,
    aggregate_by_priority,
)
from fmtrack.analytics.breaches import detect_breaches
from fmtrack.analytics.filters import filter_tasks
from fmtrack.analytics.models import DashboardSnapshot, FilterOptions, SLABreach
from fmtrack.analytics.scoring import score_executors
from fmtrack.analytics.timeutils import as_utc, utc_now
from fmtrack.analytics.trend import build_trend_for_range

from ..config import COMPLETION_TREND_DAYS, AnalyticsConfig, load_analytics_config
from ..models.task import Executor, Task
from ..store.protocols import TaskRepository

log = structlog.get_logger()


def compose_snapshot(
    tasks: Sequence[Task],
    executors: Sequence[Executor],
    options: FilterOptions,
    now: datetime,
    trend_days: int = COMPLETION_TREND_DAYS,
) -> DashboardSnapshot:
    """对已筛选的任务快照运行全部计算（纯函数）

    Args:
        tasks: 已按 options 筛选的任务
        executors: 执行人名册
        options: 生效的筛选条件（决定趋势窗口）
        now: 计算基准时刻
        trend_days: 执行人完成趋势天数

    Returns:
        DashboardSnapshot
    """
    return DashboardSnapshot(
        filters=options,
        generated_at=now,
        task_count=len(tasks),
        kpis=aggregate(tasks),
        trend=build_trend_for_range(tasks, options.date_range, today=now),
        by_category=aggregate_by_category(tasks),
        by_priority=aggregate_by_priority(tasks),
        by_executor=aggregate_by_executor(tasks, executors),
        breaches=detect_breaches(tasks, executors),
        executor_scores=score_executors(executors, tasks, today=now, trend_days=trend_days),
    )


def snapshot_from_tasks(
    tasks: Sequence[Task],
    executors: Sequence[Executor],
    options: FilterOptions,
    now: datetime | None = None,
    trend_days: int = COMPLETION_TREND_DAYS,
) -> DashboardSnapshot:
    """对未筛选的任务集合先 filter 再组合快照"""
    now = as_utc(now or utc_now())
    filtered = filter_tasks(tasks, options, now)
    return compose_snapshot(filtered, executors, options, now, trend_days)


class DashboardService:
    """仪表盘分析服务"""

    def __init__(
        self,
        repository: TaskRepository,
        config: AnalyticsConfig | None = None,
    ) -> None:
        self._repo = repository
        self._config = config or load_analytics_config()

    def default_filters(self) -> FilterOptions:
        """未指定筛选条件时的默认值"""
        return FilterOptions(date_range=self._config.default_date_range)

    async def build_snapshot(
        self,
        options: FilterOptions | None = None,
        now: datetime | None = None,
    ) -> DashboardSnapshot:
        """计算完整仪表盘快照

        Args:
            options: 筛选条件，None 时使用配置的默认时间范围
            now: 计算基准时刻，默认当前 UTC 时间

        Returns:
            DashboardSnapshot
        """
        options = options or self.default_filters()
        now = as_utc(now or utc_now())

        tasks = await self._repo.list_tasks(options, now)
        executors = await self._repo.list_executors()

        snapshot = compose_snapshot(
            tasks,
            executors,
            options,
            now,
            trend_days=self._config.completion_trend_days,
        )

        log.info(
            "dashboard_snapshot_built",
            date_range=options.date_range.value,
            task_count=snapshot.task_count,
            breach_count=len(snapshot.breaches),
        )
        return snapshot

    async def list_breaches(
        self,
        options: FilterOptions | None = None,
        now: datetime | None = None,
    ) -> list[SLABreach]:
        """只计算违约列表"""
        options = options or self.default_filters()
        tasks = await self._repo.list_tasks(options, now)
        executors = await self._repo.list_executors()
        return detect_breaches(tasks, executors)
