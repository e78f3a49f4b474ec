"""时间工具 -- 耗时计算、UTC 日期分桶、尾随 N 天窗口、时长格式化

约定：
- 所有日期分桶使用 UTC 日历日，键格式为 "YYYY-MM-DD"
- naive datetime 一律视为 UTC
- 耗时保留小数（不截断），可以为负数（时钟偏差时由调用方负责）
"""

from datetime import UTC, date, datetime, timedelta

from .stats import round_half_up


def utc_now() -> datetime:
    """当前 UTC 时间（全模块唯一时钟入口）"""
    return datetime.now(UTC)


def as_utc(ts: datetime) -> datetime:
    """统一为 aware UTC datetime"""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def elapsed_minutes(start: datetime, end: datetime) -> float:
    """start -> end 的分钟数（保留小数，可能为负）"""
    return (as_utc(end) - as_utc(start)).total_seconds() / 60


def elapsed_hours(start: datetime, end: datetime) -> float:
    """start -> end 的小时数（保留小数，可能为负）"""
    return (as_utc(end) - as_utc(start)).total_seconds() / 3600


def day_bucket_key(ts: datetime) -> str:
    """UTC 日历日键，忽略时分秒"""
    return as_utc(ts).date().isoformat()


def _as_date(today: date | datetime | None) -> date:
    if today is None:
        return utc_now().date()
    if isinstance(today, datetime):
        return as_utc(today).date()
    return today


def trailing_days(n: int, today: date | datetime | None = None) -> list[str]:
    """以 today 结尾的连续 n 个 UTC 日历日键，从旧到新

    每次调用返回新列表，无迭代器状态；n <= 0 返回空列表。
    """
    end = _as_date(today)
    return [(end - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]


def format_duration(minutes: float) -> str:
    """长格式时长：'45 min' / '1 hr' / '2 hrs 5 min'"""
    if minutes < 60:
        return f"{round_half_up(minutes)} min"
    hours, mins = divmod(round_half_up(minutes), 60)
    text = f"{hours} hr{'' if hours == 1 else 's'}"
    if mins > 0:
        text += f" {mins} min"
    return text


def format_duration_short(minutes: float) -> str:
    """短格式时长：'45m' / '2h' / '2h 5m'"""
    if minutes < 60:
        return f"{round_half_up(minutes)}m"
    hours, mins = divmod(round_half_up(minutes), 60)
    if mins > 0:
        return f"{hours}h {mins}m"
    return f"{hours}h"
