"""全局 pytest 配置 -- 固定时钟、任务工厂、内存仓储 fixture"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from fmtrack.core.models import Executor, Task, TaskCategory, TaskPriority, TaskStatus
from fmtrack.core.services import DashboardService, TaskService
from fmtrack.core.store import InMemoryTaskRepository

# 固定基准时刻：所有与"现在"相关的测试都以此为准
FIXED_NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """固定的当前时刻"""
    return FIXED_NOW


@pytest.fixture
def executors() -> list[Executor]:
    """默认执行人名册"""
    return [
        Executor(id="exec-1", name="John Smith", email="john.smith@example.com"),
        Executor(id="exec-2", name="Emma Johnson", email="emma.johnson@example.com"),
        Executor(id="exec-3", name="Michael Brown", email="michael.brown@example.com"),
    ]


@pytest.fixture
def make_task(now: datetime) -> Callable[..., Task]:
    """Task 工厂

    以 created_at 为起点，用相对分钟数描述响应/完成时间：
    - responded_after: created_at -> updated_at 的分钟数（None 表示未响应）
    - completed_after: created_at -> completed_at 的分钟数（None 表示未完成）
    status 未指定时按时间戳推断。
    """
    counter = {"n": 0}

    def _make(
        *,
        created_at: datetime | None = None,
        responded_after: float | None = None,
        completed_after: float | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority = TaskPriority.HIGH,
        category: TaskCategory = TaskCategory.MAINTENANCE,
        assigned_to: str | None = "exec-1",
        claimed_by: str | None = None,
        task_id: str | None = None,
        title: str = "Fix leaking pipe",
    ) -> Task:
        counter["n"] += 1
        created = created_at or now - timedelta(days=1)
        updated = created
        completed = None
        if responded_after is not None:
            updated = created + timedelta(minutes=responded_after)
        if completed_after is not None:
            completed = created + timedelta(minutes=completed_after)
            if responded_after is None:
                updated = completed

        if status is None:
            if completed is not None:
                status = TaskStatus.COMPLETED
            elif responded_after is not None:
                status = TaskStatus.IN_PROGRESS
            else:
                status = TaskStatus.PENDING

        return Task(
            task_id=task_id or f"TSK{counter['n']:03d}",
            title=title,
            category=category,
            priority=priority,
            status=status,
            created_at=created,
            updated_at=updated,
            completed_at=completed,
            assigned_to=assigned_to,
            claimed_by=claimed_by,
        )

    return _make


@pytest_asyncio.fixture
async def repo(executors: list[Executor]) -> InMemoryTaskRepository:
    """带默认名册的内存仓储"""
    return InMemoryTaskRepository(executors=executors)


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    """可手动推进的时钟"""
    state = {"now": now}

    def _clock() -> datetime:
        return state["now"]

    def _advance(**kwargs) -> None:
        state["now"] = state["now"] + timedelta(**kwargs)

    _clock.advance = _advance  # type: ignore[attr-defined]
    return _clock


@pytest_asyncio.fixture
async def task_service(repo: InMemoryTaskRepository, clock) -> TaskService:
    """使用可推进时钟的 TaskService"""
    return TaskService(repo, clock=clock)


@pytest_asyncio.fixture
async def dashboard_service(repo: InMemoryTaskRepository) -> DashboardService:
    """DashboardService（默认配置）"""
    return DashboardService(repo)
