"""fmtrack 异常体系

分析引擎本身不抛异常（通过数值兜底降级），
以下异常仅用于任务生命周期、仓储与 CLI 边界。
"""


class FmtrackError(Exception):
    """fmtrack 基础异常"""


class TaskNotFoundError(FmtrackError):
    """任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"任务不存在: {task_id}")
        self.task_id = task_id


class DuplicateTaskError(FmtrackError):
    """重复创建同一 task_id"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"任务已存在: {task_id}")
        self.task_id = task_id


class TaskSeqConflictError(FmtrackError):
    """task_seq 冲突（并发写入同一任务）"""

    def __init__(self, task_id: str, expected: int, actual: int) -> None:
        super().__init__(f"任务 {task_id} task_seq 冲突: 期望 {expected}，实际 {actual}")
        self.task_id = task_id
        self.expected = expected
        self.actual = actual


class InvalidTransitionError(FmtrackError):
    """非法状态流转（状态机只能向前）"""

    def __init__(self, task_id: str, from_status: str, to_status: str) -> None:
        """
        Args:
            task_id: 任务 ID
            from_status: 当前状态
            to_status: 请求的目标状态
        """
        super().__init__(f"任务 {task_id} 不能从 {from_status} 流转到 {to_status}")
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status


class UnknownExecutorError(FmtrackError):
    """执行人不在名册中"""

    def __init__(self, executor_id: str) -> None:
        super().__init__(f"未知执行人: {executor_id}")
        self.executor_id = executor_id


class SnapshotLoadError(FmtrackError):
    """CLI 快照文件无法解析"""
