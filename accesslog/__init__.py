"""Access-log middleware for ASGI applications.

Wraps an app, observes every response through a send wrapper, and writes one
Apache-style access line per request, plus optional counters, gauges and
timings to a metrics client.
"""

from accesslog.formats import LogFormat, LogEntry, formatter_for
from accesslog.middleware import (
    AccessLogMiddleware,
    default_handler,
    from_settings,
    handler,
)
from accesslog.observer import ResponseObserver

__version__ = "0.3.0"

__all__ = [
    "AccessLogMiddleware",
    "LogEntry",
    "LogFormat",
    "ResponseObserver",
    "default_handler",
    "formatter_for",
    "from_settings",
    "handler",
]
