"""Request fields the access line needs, pulled from an ASGI scope."""

from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel
from starlette.datastructures import Headers

from accesslog.exceptions import AddressError


def split_host_port(addr: str) -> Tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into host and port.

    Hosts containing colons must be bracketed. Raises AddressError when the
    port is missing or the brackets are unbalanced.
    """
    i = addr.rfind(":")
    if i < 0:
        raise AddressError(f"missing port in address {addr!r}")

    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise AddressError(f"missing ']' in address {addr!r}")
        if end + 1 == len(addr):
            raise AddressError(f"missing port in address {addr!r}")
        if end + 1 != i:
            if addr[end + 1] == ":":
                raise AddressError(f"too many colons in address {addr!r}")
            raise AddressError(f"missing port in address {addr!r}")
        host = addr[1:end]
        j, k = 1, end + 1
    else:
        host = addr[:i]
        if ":" in host:
            raise AddressError(f"too many colons in address {addr!r}")
        j, k = 0, 0

    if "[" in addr[j:]:
        raise AddressError(f"unexpected '[' in address {addr!r}")
    if "]" in addr[k:]:
        raise AddressError(f"unexpected ']' in address {addr!r}")

    return host, addr[i + 1:]


def extract_remote_ip(remote_addr: str) -> str:
    """Host part of the peer address, or "" when it cannot be parsed."""
    try:
        host, _ = split_host_port(remote_addr or "")
    except AddressError:
        return ""
    return host


def extract_username(request_uri: str) -> str:
    """User-info name of an absolute-form request URI, "-" otherwise."""
    try:
        name = urlsplit(request_uri).username
    except ValueError:
        return "-"
    return name or "-"


def _join_client(client: Optional[Any]) -> str:
    if not client:
        return ""
    host = client[0]
    port = client[1] if len(client) > 1 else None
    if port is None:
        return str(host)
    if ":" in str(host):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class RequestInfo(BaseModel):
    method: str
    request_uri: str
    proto: str
    remote_addr: str = ""
    referer: str = ""
    user_agent: str = ""

    @classmethod
    def from_scope(cls, scope: Dict[str, Any]) -> "RequestInfo":
        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.decode("latin-1")
        else:
            path = scope.get("path", "")
        query = scope.get("query_string", b"")
        if query:
            path = f"{path}?{query.decode('latin-1')}"

        headers = Headers(scope=scope)
        return cls(
            method=scope.get("method", ""),
            request_uri=path,
            proto=f"HTTP/{scope.get('http_version', '1.1')}",
            remote_addr=_join_client(scope.get("client")),
            referer=headers.get("referer", ""),
            user_agent=headers.get("user-agent", ""),
        )

    @property
    def remote_ip(self) -> str:
        return extract_remote_ip(self.remote_addr)

    @property
    def username(self) -> str:
        return extract_username(self.request_uri)
