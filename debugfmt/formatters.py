"""
Built-in value formatters for well-known types.

Each formatter is a plain function obj -> str with a register_*() companion
that installs it (and any member overrides) into a Settings layer.
register_defaults() installs all of them.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
import enum
import os
import stat
import types
import uuid
import warnings

from decimal import Decimal
from fractions import Fraction
from pathlib import Path, PurePath
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .members import MemberInfo
from .settings import Settings
from .utils import callable_name, type_name

_TIMEDELTA_TICK = dt.timedelta(microseconds=1)
_US_PER_MS = 1_000
_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE
_US_PER_DAY = 24 * _US_PER_HOUR


# Identifiers ----------------------------------------------------------------------------------------------------------

def fmt_guid(value: uuid.UUID) -> str:
    """
    Format a UUID in canonical upper-case form.

    Examples:
        >>> fmt_guid(uuid.UUID(int=0))
        '<Guid.Empty>'
        >>> fmt_guid(uuid.UUID("12345678-1234-5678-1234-567812345678"))
        '12345678-1234-5678-1234-567812345678'
    """
    if value.int == 0:
        return "<Guid.Empty>"
    return str(value).upper()


def register_guid(settings: Settings) -> Settings:
    return settings.register_formatter(uuid.UUID, fmt_guid)


# Dates and times ------------------------------------------------------------------------------------------------------

def fmt_datetime(value: dt.datetime) -> str:
    """
    Format a datetime with the coarsest precision that loses nothing.

    Rules:
        - datetime.min/max → '<DateTime.MinValue>' / '<DateTime.MaxValue>'
        - midnight → 'yyyy-MM-dd'
        - whole minutes → 'yyyy-MM-dd HH:mm'
        - whole seconds → 'yyyy-MM-dd HH:mm:ss'
        - otherwise → 'yyyy-MM-dd HH:mm:ss.fff'
        - naive values carry no zone suffix, UTC values append ' (UTC)'
        - values aware of any other zone render both their local and UTC forms:
          '<DateTimeOffset> { 2024-05-01 14:30 (+02:00), 2024-05-01 12:30 (UTC) }'

    Examples:
        >>> fmt_datetime(dt.datetime(2024, 5, 1))
        '2024-05-01'
        >>> fmt_datetime(dt.datetime(2024, 5, 1, 12, 30, tzinfo=dt.timezone.utc))
        '2024-05-01 12:30 (UTC)'

    Notes:
        - Seconds and fractions are checked at millisecond precision, so
          sub-millisecond remainders are dropped: 00:00:00.000001 renders as '00:00'
        - Aware values whose UTC form lies outside the datetime range show the
          UTC side as '<DateTime.MinValue>' or '<DateTime.MaxValue>'
    """
    naive = value.replace(tzinfo=None)
    if naive == dt.datetime.min:
        return "<DateTime.MinValue>"
    if naive == dt.datetime.max:
        return "<DateTime.MaxValue>"

    offset = value.utcoffset()
    if offset is None:
        return _fmt_datetime_text(value)
    if offset == dt.timedelta(0) and _is_utc(value.tzinfo):
        return _fmt_datetime_text(value) + " (UTC)"

    local = _fmt_datetime_text(value) + f" ({_fmt_offset(offset)})"
    try:
        utc = fmt_datetime(value.astimezone(dt.timezone.utc))
    except OverflowError:
        # UTC form lies outside the datetime range
        utc = "<DateTime.MinValue>" if offset > dt.timedelta(0) else "<DateTime.MaxValue>"
    return "<DateTimeOffset> { " + local + ", " + utc + " }"


def fmt_date(value: dt.date) -> str:
    """Format a date as 'yyyy-MM-dd', with date.min/max rendered as tags."""
    if value == dt.date.min:
        return "<DateTime.MinValue>"
    if value == dt.date.max:
        return "<DateTime.MaxValue>"
    return _fmt_date_text(value)


def fmt_time(value: dt.time) -> str:
    """Format a time of day as 'HH:mm', 'HH:mm:ss' or 'HH:mm:ss.fff', checked at millisecond precision."""
    return _fmt_time_text(value)


def register_datetime(settings: Settings) -> Settings:
    # datetime subclasses date, the nearest registration wins
    return (settings
            .register_formatter(dt.datetime, fmt_datetime)
            .register_formatter(dt.date, fmt_date)
            .register_formatter(dt.time, fmt_time))


def _fmt_datetime_text(value: dt.datetime) -> str:
    if value.time() == dt.time(0):
        return _fmt_date_text(value)
    return _fmt_date_text(value) + " " + _fmt_time_text(value.time())


def _fmt_date_text(value: dt.date) -> str:
    # strftime does not pad years below 1000 on every platform
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _fmt_time_text(value: dt.time) -> str:
    """'HH:mm', 'HH:mm:ss' or 'HH:mm:ss.fff'; sub-millisecond remainders are truncated."""
    ms = value.microsecond // _US_PER_MS
    text = f"{value.hour:02d}:{value.minute:02d}"
    if value.second == 0 and ms == 0:
        return text
    text += f":{value.second:02d}"
    if ms == 0:
        return text
    return text + f".{ms:03d}"


def _fmt_offset(offset: dt.timedelta) -> str:
    sign = "-" if offset < dt.timedelta(0) else "+"
    minutes = abs(offset) // dt.timedelta(minutes=1)
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _is_utc(tz: dt.tzinfo | None) -> bool:
    if tz is dt.timezone.utc:
        return True
    # zoneinfo.ZoneInfo("UTC") and friends
    return str(tz) in ("UTC", "Etc/UTC", "Z")


# Durations ------------------------------------------------------------------------------------------------------------

def fmt_timedelta(value: dt.timedelta) -> str:
    """
    Format a duration in its coarsest non-zero unit, adding finer parts only while they are non-zero.

    Examples:
        >>> fmt_timedelta(dt.timedelta(0))
        '<TimeSpan.Zero>'
        >>> fmt_timedelta(dt.timedelta(milliseconds=250))
        '250 ms'
        >>> fmt_timedelta(dt.timedelta(seconds=90))
        '1:30 min'
        >>> fmt_timedelta(dt.timedelta(hours=1, minutes=30, seconds=15))
        '1:30:15 h'
        >>> fmt_timedelta(dt.timedelta(days=2))
        '2 d'
        >>> fmt_timedelta(dt.timedelta(days=1, hours=12, minutes=30))
        '1.12:30 d'

    Notes:
        - Negative durations are below one second and render in milliseconds
        - Sub-millisecond remainders are truncated except in the millisecond unit
    """
    if value == dt.timedelta(0):
        return "<TimeSpan.Zero>"
    if value == dt.timedelta.min:
        return "<TimeSpan.MinValue>"
    if value == dt.timedelta.max:
        return "<TimeSpan.MaxValue>"

    total_us = value // _TIMEDELTA_TICK
    if total_us < _US_PER_SECOND:
        return _fmt_milliseconds(total_us)
    if total_us < _US_PER_MINUTE:
        return _fmt_seconds(total_us)
    if total_us < _US_PER_HOUR:
        return _fmt_minutes(total_us)
    if total_us < _US_PER_DAY:
        return _fmt_hours(total_us)
    return _fmt_days(total_us)


def register_timedelta(settings: Settings) -> Settings:
    return settings.register_formatter(dt.timedelta, fmt_timedelta)


def _split(total_us: int) -> tuple[int, int, int, int, int]:
    """Days, hours, minutes, seconds and milliseconds components of a positive duration."""
    days, rest = divmod(total_us, _US_PER_DAY)
    hours, rest = divmod(rest, _US_PER_HOUR)
    minutes, rest = divmod(rest, _US_PER_MINUTE)
    seconds, rest = divmod(rest, _US_PER_SECOND)
    return days, hours, minutes, seconds, rest // _US_PER_MS


def _fmt_milliseconds(total_us: int) -> str:
    """Exact total milliseconds, fraction digits only as far as needed: '-4999.999 ms'."""
    sign = "-" if total_us < 0 else ""
    ms, us = divmod(abs(total_us), _US_PER_MS)
    if us == 0:
        return f"{sign}{ms} ms"
    return f"{sign}{ms}." + f"{us:03d}".rstrip("0") + " ms"


def _fmt_seconds(total_us: int) -> str:
    if total_us % _US_PER_SECOND == 0:
        return f"{total_us // _US_PER_SECOND} s"
    _, _, _, seconds, ms = _split(total_us)
    return f"{seconds}.{ms:03d} s"


def _fmt_minutes(total_us: int) -> str:
    if total_us % _US_PER_MINUTE == 0:
        return f"{total_us // _US_PER_MINUTE} min"
    _, _, minutes, seconds, ms = _split(total_us)
    text = f"{minutes}:{seconds:02d}"
    if ms:
        text += f".{ms:03d}"
    return text + " min"


def _fmt_hours(total_us: int) -> str:
    if total_us % _US_PER_HOUR == 0:
        return f"{total_us // _US_PER_HOUR} h"
    _, hours, minutes, seconds, ms = _split(total_us)
    return f"{hours}:{minutes:02d}" + _fmt_tail(total_us, seconds, ms, _US_PER_MINUTE) + " h"


def _fmt_days(total_us: int) -> str:
    if total_us % _US_PER_DAY == 0:
        return f"{total_us // _US_PER_DAY} d"
    days, hours, minutes, seconds, ms = _split(total_us)
    text = f"{days}.{hours:02d}"
    if total_us % _US_PER_HOUR:
        text += f":{minutes:02d}" + _fmt_tail(total_us, seconds, ms, _US_PER_MINUTE)
    return text + " d"


def _fmt_tail(total_us: int, seconds: int, ms: int, unit_us: int) -> str:
    """':ss' and '.fff' parts, each present only while the remainder is non-zero."""
    if total_us % unit_us == 0:
        return ""
    text = f":{seconds:02d}"
    if total_us % _US_PER_SECOND:
        text += f".{ms:03d}"
    return text


# Types and callables --------------------------------------------------------------------------------------------------

def fmt_type_name(value: type) -> str:
    return type_name(value)


def fmt_callable(value: Any) -> str:
    return callable_name(value)


def register_descriptors(settings: Settings) -> Settings:
    return (settings
            .register_formatter(type, fmt_type_name)
            .register_formatter(types.FunctionType, fmt_callable)
            .register_formatter(types.BuiltinFunctionType, fmt_callable)
            .register_formatter(types.MethodType, fmt_callable))


# Scalars --------------------------------------------------------------------------------------------------------------

def fmt_enum(value: enum.Enum) -> str:
    """Format an enum member as 'Color.RED'."""
    return f"{type(value).__name__}.{value.name}"


def fmt_bytes(value: bytes | bytearray | memoryview) -> str:
    """Format binary data as a bytes literal instead of a list of numbers."""
    return repr(bytes(value))


def fmt_exception(value: BaseException) -> str:
    """
    Format an exception as '<ValueError: message>', or '<ValueError>' without a message.

    Notes:
        - Broken __str__ methods render a placeholder message
    """
    exc_type = type(value).__name__
    try:
        exc_msg = str(value)
    except Exception:
        exc_msg = "<str failed>"
    if exc_msg:
        return f"<{exc_type}: {exc_msg}>"
    return f"<{exc_type}>"


def register_scalars(settings: Settings) -> Settings:
    return (settings
            .register_formatter(enum.Enum, fmt_enum)
            .register_str_formatter(Decimal)
            .register_str_formatter(Fraction)
            .register_formatter(bytes, fmt_bytes)
            .register_formatter(bytearray, fmt_bytes)
            .register_formatter(memoryview, fmt_bytes)
            .register_formatter(BaseException, fmt_exception))


# Filesystem paths -----------------------------------------------------------------------------------------------------

def path_members(path: Path) -> list[MemberInfo]:
    """
    Members of a filesystem path, shaped by what the path points to.

    Directories expose their absolute path as 'name' (the label), plus 'parent' and 'root'.
    Files expose 'name', 'size', 'directory', 'directory_name' and 'is_read_only'.
    Both expose 'exists', 'suffix' and, when the path exists, the 'created',
    'accessed', 'modified' timestamps and the 'mode' string.
    """
    exists = path.exists()
    if path.is_dir():
        members = [
            MemberInfo("name", str, lambda p: str(p.absolute())),
            MemberInfo("parent", Path, lambda p: p.absolute().parent),
            MemberInfo("root", str, lambda p: p.absolute().anchor),
        ]
    else:
        members = [MemberInfo("name", str, lambda p: p.name)]
        if exists:
            members.append(MemberInfo("size", int | None, lambda p: _stat_field(p, "st_size")))
        members += [
            MemberInfo("directory", Path, lambda p: p.parent),
            MemberInfo("directory_name", str, lambda p: str(p.absolute().parent)),
            MemberInfo("is_read_only", bool, lambda p: p.exists() and not os.access(p, os.W_OK)),
        ]

    members += [
        MemberInfo("exists", bool, lambda p: p.exists()),
        MemberInfo("suffix", str, lambda p: p.suffix),
    ]
    if exists:
        members += [
            MemberInfo("created", dt.datetime | None, lambda p: _stat_time(p, "st_ctime")),
            MemberInfo("accessed", dt.datetime | None, lambda p: _stat_time(p, "st_atime")),
            MemberInfo("modified", dt.datetime | None, lambda p: _stat_time(p, "st_mtime")),
            MemberInfo("mode", str | None, _stat_mode),
        ]
    return members


def pure_path_members(path: PurePath) -> list[MemberInfo]:
    """Pure paths have no filesystem, only their text: 'a/b.txt <PurePosixPath>'."""
    return [MemberInfo("name", str, str)]


def register_paths(settings: Settings) -> Settings:
    """
    Install path introspection and hide members that are redundant or volatile.

    Directories render as '/abs/dir <PosixPath> { exists = True }',
    files as 'report.txt <PosixPath> { size = 10, directory = /abs/dir, exists = True }'.
    """
    settings.register_members(PurePath, pure_path_members)
    settings.register_members(Path, path_members)

    # Directories: the label already holds the full path
    settings.ignore_member(Path, "parent")
    settings.ignore_member(Path, "root")

    # Files: show the owning directory instead of the path-derived members
    settings.register_member_formatter(Path, "directory", lambda d: str(d.absolute()))
    settings.ignore_member(Path, "directory_name")
    settings.ignore_member(Path, "is_read_only")

    # Volatile or platform-redundant
    for name in ("suffix", "created", "accessed", "modified", "mode"):
        settings.ignore_member(Path, name)
    return settings


def _stat(path: Path) -> os.stat_result | None:
    try:
        return path.stat()
    except OSError as e:
        warnings.warn(
            f"Failed to stat {path}: {type(e).__name__}: {e}",
            RuntimeWarning,
            stacklevel=2
        )
        return None


def _stat_field(path: Path, field: str) -> Any:
    st = _stat(path)
    return getattr(st, field) if st is not None else None


def _stat_time(path: Path, field: str) -> dt.datetime | None:
    timestamp = _stat_field(path, field)
    if timestamp is None:
        return None
    return dt.datetime.fromtimestamp(timestamp, tz=dt.timezone.utc)


def _stat_mode(path: Path) -> str | None:
    mode = _stat_field(path, "st_mode")
    return stat.filemode(mode) if mode is not None else None


# Defaults -------------------------------------------------------------------------------------------------------------

def register_defaults(settings: Settings) -> Settings:
    """Install every built-in formatter into settings."""
    register_descriptors(settings)
    register_guid(settings)
    register_datetime(settings)
    register_timedelta(settings)
    register_scalars(settings)
    register_paths(settings)
    return settings
