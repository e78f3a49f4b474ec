"""CLI 入口模块 -- python -m fmtrack.core <command>

支持的命令：
  report <snapshot.json> [--range 7days|30days|90days|all]  输出完整仪表盘 JSON
  breaches <snapshot.json>                                   输出 SLA 违约列表 JSON

快照文件格式：{"tasks": [...], "executors": [...]}
"""

import json
import sys
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from fmtrack.analytics.breaches import detect_breaches
from fmtrack.analytics.models import FilterOptions, SLABreach

from .config import load_analytics_config
from .exceptions import SnapshotLoadError
from .logging_config import setup_logging
from .models.enums import DateRange
from .models.task import Executor, Task
from .services.dashboard_service import snapshot_from_tasks

log = structlog.get_logger()

USAGE = """用法: python -m fmtrack.core <command> <snapshot.json> [options]
命令:
  report    输出完整仪表盘 JSON（--range 7days|30days|90days|all）
  breaches  输出 SLA 违约列表 JSON"""


class SnapshotFile(BaseModel):
    """CLI 输入快照"""

    tasks: list[Task] = Field(default_factory=list)
    executors: list[Executor] = Field(default_factory=list)


def load_snapshot(path: str | Path) -> SnapshotFile:
    """读取并校验快照文件

    Raises:
        SnapshotLoadError: 文件不存在、不是合法 JSON 或字段校验失败
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
        return SnapshotFile.model_validate_json(raw)
    except OSError as e:
        raise SnapshotLoadError(f"无法读取快照文件: {path} -- {e}") from e
    except ValidationError as e:
        raise SnapshotLoadError(f"快照文件格式错误: {path} -- {e.error_count()} 处错误") from e


def _parse_range(args: list[str]) -> DateRange | None:
    if "--range" not in args:
        return None
    idx = args.index("--range")
    if idx + 1 >= len(args):
        raise SnapshotLoadError("--range 缺少参数")
    try:
        return DateRange(args[idx + 1])
    except ValueError as e:
        raise SnapshotLoadError(f"未知时间范围: {args[idx + 1]}") from e


def run_report(path: str, date_range: DateRange | None) -> str:
    """report 命令，返回 JSON 文本"""
    config = load_analytics_config()
    snapshot_file = load_snapshot(path)
    options = FilterOptions(date_range=date_range or config.default_date_range)
    snapshot = snapshot_from_tasks(
        snapshot_file.tasks,
        snapshot_file.executors,
        options,
        trend_days=config.completion_trend_days,
    )
    return snapshot.model_dump_json(indent=2)


def run_breaches(path: str) -> str:
    """breaches 命令，返回 JSON 文本"""
    snapshot_file = load_snapshot(path)
    breaches = detect_breaches(snapshot_file.tasks, snapshot_file.executors)
    adapter = TypeAdapter(list[SLABreach])
    return json.dumps(adapter.dump_python(breaches, mode="json"), ensure_ascii=False, indent=2)


def main(argv: list[str] | None = None) -> int:
    """CLI 主入口，返回进程退出码"""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print(USAGE)
        return 1

    setup_logging()
    command, path, rest = args[0], args[1], args[2:]

    try:
        if command == "report":
            output = run_report(path, _parse_range(rest))
        elif command == "breaches":
            output = run_breaches(path)
        else:
            print(f"未知命令: {command}")
            print("可用命令: report, breaches")
            return 1
    except SnapshotLoadError as e:
        log.error("cli_failed", command=command, error=str(e))
        print(str(e), file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
