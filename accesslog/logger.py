"""Structured JSON diagnostic events to stderr.

Access lines go to the middleware's sink; this channel only carries failures
the middleware swallows so they stay visible without touching the response.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json
import sys

from accesslog.config import settings
from accesslog.context import request_id_var, remote_addr_var


_LEVELS: Dict[str, int] = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _enabled(level: str) -> bool:
    threshold = _LEVELS.get(settings.DIAGNOSTIC_LEVEL, 20)
    return _LEVELS.get(level, 20) >= threshold


def log_event(event: str, **fields: Any) -> None:
    level = str(fields.pop("level", "INFO")).upper()
    if not _enabled(level):
        return
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": level,
        "event": event,
        "request_id": request_id_var.get(),
    }
    # Attach context vars if not provided explicitly
    payload.setdefault("remote_addr", remote_addr_var.get())

    # Merge remaining fields
    for k, v in fields.items():
        payload[k] = v

    try:
        print(json.dumps(payload, separators=(",", ":"), default=str), file=sys.stderr)
    except Exception:
        # As a last resort, avoid crashing the app due to logging
        pass
