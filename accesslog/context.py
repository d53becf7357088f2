"""Request context helpers using ContextVars.

Holds request-scoped identifiers so diagnostic events emitted while a
request is being logged can be correlated with it.
"""

from contextvars import ContextVar
from typing import Optional


# Public ContextVars (names are stable API)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
remote_addr_var: ContextVar[Optional[str]] = ContextVar("remote_addr", default=None)


def clear_context() -> None:
    """Reset context variables to defaults."""
    request_id_var.set(None)
    remote_addr_var.set(None)
