"""Access line layouts.

Each layout is a pure function from a LogEntry to a single line (no trailing
newline). Fields are space-joined:

    combined  :remote-addr - :remote-user [:date[clf]] ":method :url HTTP/:http-version" :status :size ":referrer" ":user-agent"
    common    :remote-addr - :remote-user [:date[clf]] ":method :url HTTP/:http-version" :status :size
    dev       :method :url :status :response-time ms - :size
    short     :remote-addr :remote-user :method :url HTTP/:http-version :status :size - :response-time ms
    tiny      :method :url :status :size - :response-time ms
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict

from pydantic import BaseModel

from accesslog.exceptions import UnknownLogFormatError


CLF_TIME_FORMAT = "%d/%b/%Y:%H:%M:%S %z"


class LogFormat(Enum):
    COMBINED = "combined"
    COMMON = "common"
    DEV = "dev"
    SHORT = "short"
    TINY = "tiny"


class LogEntry(BaseModel):
    remote_ip: str = ""
    username: str = "-"
    start: datetime
    method: str
    request_uri: str
    proto: str
    status: int
    size: int
    referer: str = ""
    user_agent: str = ""
    elapsed: float = 0.0  # seconds


def format_response_time(elapsed: float) -> str:
    return f"{elapsed * 1000.0:.3f} ms"


def _host(entry: LogEntry) -> str:
    return entry.remote_ip or "-"


def _clf_prefix(entry: LogEntry) -> list:
    return [
        _host(entry),
        "-",
        entry.username,
        "[" + entry.start.strftime(CLF_TIME_FORMAT) + "]",
        '"' + entry.method,
        entry.request_uri,
        entry.proto + '"',
        str(entry.status),
        str(entry.size),
    ]


def format_combined(entry: LogEntry) -> str:
    return " ".join(
        _clf_prefix(entry)
        + ['"' + entry.referer + '"', '"' + entry.user_agent + '"']
    )


def format_common(entry: LogEntry) -> str:
    return " ".join(_clf_prefix(entry))


def format_dev(entry: LogEntry) -> str:
    return " ".join([
        entry.method,
        entry.request_uri,
        str(entry.status),
        format_response_time(entry.elapsed),
        "-",
        str(entry.size),
    ])


def format_short(entry: LogEntry) -> str:
    return " ".join([
        _host(entry),
        entry.username,
        entry.method,
        entry.request_uri,
        entry.proto,
        str(entry.status),
        str(entry.size),
        "-",
        format_response_time(entry.elapsed),
    ])


def format_tiny(entry: LogEntry) -> str:
    return " ".join([
        entry.method,
        entry.request_uri,
        str(entry.status),
        str(entry.size),
        "-",
        format_response_time(entry.elapsed),
    ])


Formatter = Callable[[LogEntry], str]

_FORMATTERS: Dict[LogFormat, Formatter] = {
    LogFormat.COMBINED: format_combined,
    LogFormat.COMMON: format_common,
    LogFormat.DEV: format_dev,
    LogFormat.SHORT: format_short,
    LogFormat.TINY: format_tiny,
}


def resolve_format(log_format: Any) -> LogFormat:
    """Accept a LogFormat, its value ("tiny") or its name ("TINY")."""
    if isinstance(log_format, LogFormat):
        return log_format
    if isinstance(log_format, str):
        key = log_format.strip()
        for member in LogFormat:
            if key.lower() == member.value:
                return member
    raise UnknownLogFormatError(f"unknown log format: {log_format!r}")


def formatter_for(log_format: Any) -> Formatter:
    return _FORMATTERS[resolve_format(log_format)]
