"""fmtrack Core Services -- 任务生命周期与仪表盘分析"""

from .dashboard_service import DashboardService, compose_snapshot, snapshot_from_tasks
from .task_service import TaskService

__all__ = [
    "TaskService",
    "DashboardService",
    "compose_snapshot",
    "snapshot_from_tasks",
]
