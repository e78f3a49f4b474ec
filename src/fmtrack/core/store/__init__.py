"""fmtrack Core Store -- 事件日志与任务仓储

持久化不在本项目范围内，这里只提供内存实现与 Protocol 接口。
"""

from .memory import InMemoryEventLog, InMemoryTaskRepository
from .protocols import EventLog, TaskRepository

__all__ = [
    "EventLog",
    "TaskRepository",
    "InMemoryEventLog",
    "InMemoryTaskRepository",
]
