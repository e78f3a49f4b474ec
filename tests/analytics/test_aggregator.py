"""Metrics Aggregator 单元测试

测试内容：
1. 空集合零值兜底（on_time_rate 为 100）
2. 平均响应/完成时间与按时完成率
3. 阈值边界（<= 为按时）
4. 按类别/优先级/执行人分组
"""

import pytest
from fmtrack.analytics.aggregator import (
    aggregate,
    aggregate_by_category,
    aggregate_by_executor,
    aggregate_by_priority,
    aggregate_grouped,
)
from fmtrack.analytics.models import GroupBy
from fmtrack.core.models import TaskCategory, TaskPriority, TaskStatus


class TestEmptyTaskSet:
    """空集合"""

    def test_zero_guards(self):
        metrics = aggregate([])
        assert metrics.total == 0
        assert metrics.completion_rate == 0
        assert metrics.on_time_rate == 100
        assert metrics.avg_response_time == 0
        assert metrics.avg_completion_time == 0

    def test_only_pending_tasks(self, make_task):
        """pending 任务不提供响应样本，也不影响按时率"""
        metrics = aggregate([make_task(), make_task()])
        assert metrics.total == 2
        assert metrics.pending == 2
        assert metrics.completion_rate == 0
        assert metrics.avg_response_time == 0
        assert metrics.on_time_rate == 100


class TestScalarMetrics:
    """标量统计"""

    def test_single_on_time_task(self, make_task):
        """高优先级：30 分钟响应，3 小时完成"""
        metrics = aggregate([make_task(responded_after=30, completed_after=180)])
        assert metrics.completed == 1
        assert metrics.completion_rate == 100
        assert metrics.avg_response_time == 30
        assert metrics.avg_completion_time == 180
        assert metrics.on_time_rate == 100

    def test_mixed_statuses(self, make_task):
        tasks = [
            make_task(responded_after=30, completed_after=300),  # 5h > 4h，超时
            make_task(responded_after=90, priority=TaskPriority.MEDIUM),
            make_task(),
        ]
        metrics = aggregate(tasks)
        assert (metrics.total, metrics.completed, metrics.in_progress, metrics.pending) == (
            3,
            1,
            1,
            1,
        )
        assert metrics.completion_rate == pytest.approx(100 / 3)
        assert metrics.avg_response_time == 60
        assert metrics.avg_completion_time == 300
        assert metrics.on_time_rate == 0

    def test_fractional_minutes(self, make_task):
        metrics = aggregate([make_task(responded_after=0.5)])
        assert metrics.avg_response_time == 0.5

    def test_negative_response_preserved(self, make_task):
        """updated_at 早于 created_at 时负耗时原样进入平均值"""
        metrics = aggregate(
            [
                make_task(responded_after=-10, status=TaskStatus.IN_PROGRESS),
                make_task(responded_after=30),
            ]
        )
        assert metrics.avg_response_time == 10

    @pytest.mark.parametrize(
        "priority,completed_after,on_time",
        [
            (TaskPriority.HIGH, 240, 100),
            (TaskPriority.HIGH, 241, 0),
            (TaskPriority.MEDIUM, 720, 100),
            (TaskPriority.MEDIUM, 721, 0),
            (TaskPriority.LOW, 1440, 100),
            (TaskPriority.LOW, 1441, 0),
        ],
    )
    def test_on_time_boundary(self, make_task, priority, completed_after, on_time):
        """完成耗时恰好等于阈值算按时"""
        task = make_task(responded_after=1, completed_after=completed_after, priority=priority)
        assert aggregate([task]).on_time_rate == on_time

    def test_idempotent(self, make_task):
        tasks = [make_task(responded_after=30, completed_after=500), make_task()]
        assert aggregate(tasks) == aggregate(tasks)


class TestGroupedMetrics:
    """分组统计"""

    def test_by_category_includes_all_categories(self, make_task):
        tasks = [
            make_task(category=TaskCategory.CLEANING, responded_after=10, completed_after=60),
            make_task(category=TaskCategory.CLEANING),
        ]
        grouped = aggregate_by_category(tasks)
        assert list(grouped) == list(TaskCategory)
        assert grouped[TaskCategory.CLEANING].total == 2
        assert grouped[TaskCategory.CLEANING].completion_rate == 50
        # 空分组独立兜底
        assert grouped[TaskCategory.UTILITY].total == 0
        assert grouped[TaskCategory.UTILITY].on_time_rate == 100

    def test_by_priority(self, make_task):
        tasks = [
            make_task(priority=TaskPriority.HIGH, responded_after=10, completed_after=600),
            make_task(priority=TaskPriority.LOW, responded_after=10, completed_after=600),
        ]
        grouped = aggregate_by_priority(tasks)
        assert list(grouped) == list(TaskPriority)
        assert grouped[TaskPriority.HIGH].on_time_rate == 0
        assert grouped[TaskPriority.LOW].on_time_rate == 100
        assert grouped[TaskPriority.MEDIUM].total == 0

    def test_by_executor_attribution(self, make_task, executors):
        """指派人与认领人不同时两人都计入"""
        shared = make_task(assigned_to="exec-1", claimed_by="exec-2", responded_after=15)
        rows = aggregate_by_executor([shared], executors)
        by_id = {row.executor_id: row.metrics for row in rows}
        assert by_id["exec-1"].total == 1
        assert by_id["exec-2"].total == 1
        assert by_id["exec-3"].total == 0

    def test_by_executor_sorted_by_completed(self, make_task, executors):
        tasks = [
            make_task(assigned_to="exec-2", responded_after=5, completed_after=50),
            make_task(assigned_to="exec-2", responded_after=5, completed_after=50),
            make_task(assigned_to="exec-3", responded_after=5, completed_after=50),
            make_task(assigned_to="exec-1"),
        ]
        rows = aggregate_by_executor(tasks, executors)
        assert [row.executor_id for row in rows] == ["exec-2", "exec-3", "exec-1"]
        assert rows[0].executor_name == "Emma Johnson"

    def test_by_executor_ties_keep_roster_order(self, executors):
        rows = aggregate_by_executor([], executors)
        assert [row.executor_id for row in rows] == ["exec-1", "exec-2", "exec-3"]

    def test_grouped_dispatch(self, make_task, executors):
        tasks = [make_task(category=TaskCategory.SAFETY)]
        assert aggregate_grouped(tasks, GroupBy.NONE)["all"].total == 1
        assert aggregate_grouped(tasks, GroupBy.CATEGORY)["safety"].total == 1
        assert aggregate_grouped(tasks, GroupBy.PRIORITY)["high"].total == 1
        by_executor = aggregate_grouped(tasks, GroupBy.EXECUTOR, executors)
        assert by_executor["exec-1"].total == 1
        assert set(by_executor) == {"exec-1", "exec-2", "exec-3"}
