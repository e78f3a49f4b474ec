"""Domain Model 单元测试

测试内容：
1. 枚举取值
2. Task / Executor 不可变
3. Event 字段约束
4. 归属判断
"""

from datetime import UTC, datetime

import pytest
from fmtrack.core.models import (
    BreachSeverity,
    DateRange,
    Event,
    EventType,
    Executor,
    StateTransitionPayload,
    Task,
    TaskCategory,
    TaskCreatedPayload,
    TaskPriority,
    TaskStatus,
)
from pydantic import ValidationError


class TestEnums:
    """枚举取值"""

    def test_category_values(self):
        assert {c.value for c in TaskCategory} == {
            "maintenance",
            "cleaning",
            "security",
            "safety",
            "utility",
        }

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            TaskCategory("gardening")

    @pytest.mark.parametrize(
        "date_range,days",
        [
            (DateRange.LAST_7_DAYS, 7),
            (DateRange.LAST_30_DAYS, 30),
            (DateRange.LAST_90_DAYS, 90),
            (DateRange.ALL, None),
        ],
    )
    def test_date_range_days(self, date_range: DateRange, days: int | None):
        assert date_range.days == days

    def test_date_range_wire_values(self):
        assert DateRange("7days") is DateRange.LAST_7_DAYS
        assert DateRange("all") is DateRange.ALL

    def test_severity_rank(self):
        ordered = sorted(BreachSeverity, key=lambda s: s.rank)
        assert ordered == [BreachSeverity.SEVERE, BreachSeverity.MODERATE, BreachSeverity.MINOR]


class TestTaskModel:
    """Task / Executor 模型"""

    def test_defaults(self):
        ts = datetime(2026, 1, 1, tzinfo=UTC)
        task = Task(
            task_id="TSK001",
            category=TaskCategory.CLEANING,
            created_at=ts,
            updated_at=ts,
        )
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.completed_at is None
        assert task.assigned_to is None

    def test_frozen(self, make_task):
        task = make_task()
        with pytest.raises(ValidationError):
            task.status = TaskStatus.COMPLETED  # type: ignore[misc]

    def test_executor_frozen(self):
        executor = Executor(id="exec-1", name="John Smith")
        assert executor.email == ""
        with pytest.raises(ValidationError):
            executor.name = "Other"  # type: ignore[misc]

    def test_attribution(self, make_task):
        task = make_task(assigned_to="exec-1", claimed_by="exec-2")
        assert task.is_attributed_to("exec-1")
        assert task.is_attributed_to("exec-2")
        assert not task.is_attributed_to("exec-3")

    def test_unassigned_attribution(self, make_task):
        assert not make_task(assigned_to=None).is_attributed_to("exec-1")

    def test_known_values_coerced_to_enum(self):
        ts = datetime(2026, 1, 1, tzinfo=UTC)
        task = Task(
            task_id="TSK001", category="safety", priority="high", created_at=ts, updated_at=ts
        )
        assert task.category is TaskCategory.SAFETY
        assert task.priority is TaskPriority.HIGH

    def test_unrecognized_values_kept_raw(self):
        """导入快照中的未知类别/优先级按原始字符串保留"""
        ts = datetime(2026, 1, 1, tzinfo=UTC)
        task = Task.model_validate(
            {
                "task_id": "TSK001",
                "category": "landscaping",
                "priority": "urgent",
                "created_at": ts.isoformat(),
                "updated_at": ts.isoformat(),
            }
        )
        assert task.category == "landscaping"
        assert task.priority == "urgent"
        assert not isinstance(task.priority, TaskPriority)
        assert task.model_dump(mode="json")["priority"] == "urgent"

    def test_updated_at_required(self):
        with pytest.raises(ValidationError):
            Task(
                task_id="TSK001",
                category=TaskCategory.CLEANING,
                created_at=datetime(2026, 1, 1, tzinfo=UTC),
            )


class TestEventModel:
    """Event 模型"""

    def test_task_seq_must_be_positive(self):
        with pytest.raises(ValidationError):
            Event(
                event_id="EVT001",
                task_id="TSK001",
                task_seq=0,
                ts=datetime(2026, 1, 1, tzinfo=UTC),
                type=EventType.TASK_CREATED,
            )

    def test_payload_round_trip(self):
        payload = StateTransitionPayload(
            from_status=TaskStatus.IN_PROGRESS,
            to_status=TaskStatus.COMPLETED,
            resolution="Replaced valve",
        )
        dumped = payload.model_dump(mode="json")
        assert dumped["to_status"] == "completed"
        assert StateTransitionPayload.model_validate(dumped) == payload

    def test_created_payload_requires_category(self):
        with pytest.raises(ValidationError):
            TaskCreatedPayload.model_validate({"title": "x", "priority": "high"})
