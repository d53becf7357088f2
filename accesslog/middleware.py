"""ASGI middleware writing one access line per request."""

from typing import Any, Callable, Optional
import io
import sys
import uuid

from accesslog.context import request_id_var, remote_addr_var
from accesslog.formats import LogEntry, LogFormat, formatter_for, resolve_format
from accesslog.logger import log_event
from accesslog.metrics import InProcessMetrics, MetricsClient
from accesslog.observer import ResponseObserver
from accesslog.request import RequestInfo


class AccessLogMiddleware:
    def __init__(
        self,
        app: Callable,
        sink: Optional[Any] = None,
        log_format: Any = LogFormat.COMBINED,
        stats: Optional[MetricsClient] = None,
    ):
        self.app = app
        self.log_format = resolve_format(log_format)
        self.log_fn = formatter_for(self.log_format)
        self.sink = sink if sink is not None else sys.stdout
        self.stats = stats
        self._binary_sink = isinstance(self.sink, (io.RawIOBase, io.BufferedIOBase))

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        info = RequestInfo.from_scope(scope)
        req_token = request_id_var.set(str(uuid.uuid4()))
        addr_token = remote_addr_var.set(info.remote_addr)
        rl = ResponseObserver(send)
        failed = False

        try:
            await self.app(scope, receive, rl)
        except BaseException:
            failed = True
            raise
        finally:
            status = rl.status
            if failed and status == 0:
                status = 500
            elapsed = rl.elapsed()
            self._write_line(rl, info, status, elapsed)
            if self.stats is not None:
                self._emit_metrics(info.method, status, rl.size, elapsed)
            remote_addr_var.reset(addr_token)
            request_id_var.reset(req_token)

    def _write_line(self, rl: ResponseObserver, info: RequestInfo, status: int, elapsed: float) -> None:
        entry = LogEntry(
            remote_ip=info.remote_ip,
            username=info.username,
            start=rl.start,
            method=info.method,
            request_uri=info.request_uri,
            proto=info.proto,
            status=status,
            size=rl.size,
            referer=info.referer,
            user_agent=info.user_agent,
            elapsed=elapsed,
        )
        line = self.log_fn(entry) + "\n"
        try:
            if self._binary_sink:
                self.sink.write(line.encode("utf-8"))
            else:
                self.sink.write(line)
        except Exception as e:
            # Logging must never break the response that was already served
            log_event("access_log_write_failed", level="WARNING", error=repr(e))

    def _emit_metrics(self, method: str, status: int, size: int, elapsed: float) -> None:
        tags = [f"status:{status}", f"method:{method}"]
        calls = (
            ("increment", lambda: self.stats.increment("http.response", 1, tags=tags)),
            ("gauge", lambda: self.stats.gauge("http.size", float(size), tags=tags)),
            ("timing", lambda: self.stats.timing("http.response", elapsed * 1000.0, tags=tags)),
        )
        for kind, call in calls:
            try:
                call()
            except Exception as e:
                log_event("access_log_metrics_failed", level="WARNING", kind=kind, error=repr(e))


def handler(
    app: Callable,
    sink: Any,
    log_format: Any,
    stats: Optional[MetricsClient] = None,
) -> AccessLogMiddleware:
    """Wrap ``app`` so every request is logged to ``sink`` in ``log_format``."""
    return AccessLogMiddleware(app, sink=sink, log_format=log_format, stats=stats)


def default_handler(app: Callable) -> AccessLogMiddleware:
    """Wrap ``app`` with the Apache combined format printed to stdout."""
    return handler(app, sys.stdout, LogFormat.COMBINED, None)


def from_settings(app: Callable, config: Any = None) -> AccessLogMiddleware:
    if config is None:
        from accesslog.config import settings as config
    sink = sys.stderr if config.SINK == "stderr" else sys.stdout
    stats = InProcessMetrics() if config.METRICS_ENABLED else None
    return handler(app, sink, config.FORMAT, stats)
