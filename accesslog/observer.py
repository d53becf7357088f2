"""Send wrapper that records status and body size of an ASGI response."""

from datetime import datetime
from typing import Any, Callable, Awaitable, List, Tuple
import time

from starlette.datastructures import MutableHeaders


Send = Callable[[dict], Awaitable[None]]


class ResponseObserver:
    """Transparent stand-in for ``send``.

    Every message is forwarded unchanged; ``status`` and ``size`` reflect
    exactly what reached the underlying sender. Created per request and used
    by one request flow only.
    """

    def __init__(self, send: Send):
        self.send = send
        self.start = datetime.now().astimezone()
        self._started = time.monotonic()
        self.status = 0
        self.size = 0
        self._raw_headers: List[Tuple[bytes, bytes]] = []
        self._header_sent = False

    async def __call__(self, message: dict) -> None:
        msg_type = message.get("type")
        if msg_type == "http.response.start":
            self.status = int(message.get("status", 200))
            headers = message.get("headers")
            if isinstance(headers, list):
                self._raw_headers = headers
            await self.send(message)
            self._header_sent = True
        elif msg_type == "http.response.body":
            if self.status == 0:
                self.status = 200
            await self.send(message)
            self.size += len(message.get("body", b""))
        else:
            await self.send(message)

    @property
    def headers(self) -> MutableHeaders:
        return MutableHeaders(raw=self._raw_headers)

    async def write_header(self, status: int) -> None:
        # Only the first start reaches the transport; later calls just re-record
        self.status = status
        if self._header_sent:
            return
        await self.send({
            "type": "http.response.start",
            "status": status,
            "headers": self._raw_headers,
        })
        self._header_sent = True

    async def write(self, data: bytes, more_body: bool = True) -> int:
        if not self._header_sent:
            await self.write_header(self.status or 200)
        await self.send({
            "type": "http.response.body",
            "body": data,
            "more_body": more_body,
        })
        self.size += len(data)
        return len(data)

    async def flush(self) -> None:
        flush: Any = getattr(self.send, "flush", None)
        if callable(flush):
            await flush()

    def elapsed(self) -> float:
        return time.monotonic() - self._started
