"""Breach Detector -- 扫描 SLA 违约并分级

使用 BREACH_POLICY（小时）阈值：

- 响应违约：in_progress / completed 任务，created_at -> updated_at 超过响应阈值
  严重程度：<= 2x 为 minor，<= 3x 为 moderate，其余 severe
- 完成违约：completed 任务，created_at -> completed_at 超过完成阈值
  严重程度：<= 1.5x 为 minor，<= 2x 为 moderate，其余 severe

同一任务可同时产生两种违约。结果按 severe -> moderate -> minor 稳定排序。
"""

from collections.abc import Iterable, Sequence

import structlog

from fmtrack.core.models.enums import (
    RESPONDED_STATES,
    BreachSeverity,
    BreachType,
    TaskStatus,
)
from fmtrack.core.models.task import Executor, Task

from .models import SLABreach
from .policy import BREACH_POLICY, SLAPolicy
from .timeutils import elapsed_hours

log = structlog.get_logger()

UNKNOWN_EXECUTOR = "Unknown"

# (minor 上限倍数, moderate 上限倍数)，边界值包含在较轻一级
RESPONSE_SEVERITY_MULTIPLIERS: tuple[float, float] = (2.0, 3.0)
COMPLETION_SEVERITY_MULTIPLIERS: tuple[float, float] = (1.5, 2.0)


def classify_severity(
    elapsed: float,
    threshold: float,
    multipliers: tuple[float, float],
) -> BreachSeverity:
    """按阈值倍数分级（调用方保证 elapsed > threshold）"""
    minor_limit, moderate_limit = multipliers
    if elapsed <= threshold * minor_limit:
        return BreachSeverity.MINOR
    if elapsed <= threshold * moderate_limit:
        return BreachSeverity.MODERATE
    return BreachSeverity.SEVERE


def resolve_executor_name(task: Task, names: dict[str, str]) -> str:
    """claimed_by 优先，其次 assigned_to，都无法解析时为 Unknown"""
    executor_id = task.claimed_by or task.assigned_to
    if executor_id is None:
        return UNKNOWN_EXECUTOR
    return names.get(executor_id, UNKNOWN_EXECUTOR)


def _breach(
    task: Task,
    executor_name: str,
    breach_type: BreachType,
    threshold_hours: float,
    actual_hours: float,
    severity: BreachSeverity,
) -> SLABreach:
    return SLABreach(
        task_id=task.task_id,
        task_title=task.title,
        executor_name=executor_name,
        category=task.category,
        priority=task.priority,
        created_at=task.created_at,
        completed_at=task.completed_at,
        breach_type=breach_type,
        expected_minutes=threshold_hours * 60,
        actual_minutes=actual_hours * 60,
        severity=severity,
    )


def check_task(
    task: Task,
    names: dict[str, str],
    policy: SLAPolicy = BREACH_POLICY,
) -> list[SLABreach]:
    """检查单个任务，返回 0-2 条违约记录（响应在前、完成在后）"""
    found: list[SLABreach] = []

    if task.status in RESPONDED_STATES:
        hours = elapsed_hours(task.created_at, task.updated_at)
        threshold = policy.response_threshold_hours(task.priority)
        if hours > threshold:
            found.append(
                _breach(
                    task,
                    resolve_executor_name(task, names),
                    BreachType.RESPONSE,
                    threshold,
                    hours,
                    classify_severity(hours, threshold, RESPONSE_SEVERITY_MULTIPLIERS),
                )
            )

    if task.status == TaskStatus.COMPLETED and task.completed_at is not None:
        hours = elapsed_hours(task.created_at, task.completed_at)
        threshold = policy.completion_threshold_hours(task.priority)
        if hours > threshold:
            found.append(
                _breach(
                    task,
                    resolve_executor_name(task, names),
                    BreachType.COMPLETION,
                    threshold,
                    hours,
                    classify_severity(hours, threshold, COMPLETION_SEVERITY_MULTIPLIERS),
                )
            )

    return found


def detect_breaches(
    tasks: Iterable[Task],
    executors: Sequence[Executor] = (),
) -> list[SLABreach]:
    """扫描任务集合，返回按严重程度排序的违约列表

    Args:
        tasks: 任务集合（通常已经过 filter_tasks）
        executors: 执行人名册，用于解析执行人显示名

    Returns:
        severe -> moderate -> minor 排序的 SLABreach 列表，同级保持检测顺序
    """
    names = {executor.id: executor.name for executor in executors}
    breaches: list[SLABreach] = []
    for task in tasks:
        breaches.extend(check_task(task, names))

    breaches.sort(key=lambda breach: breach.severity.rank)

    log.debug(
        "sla_breaches_detected",
        breach_count=len(breaches),
        severe=sum(1 for b in breaches if b.severity == BreachSeverity.SEVERE),
    )
    return breaches
