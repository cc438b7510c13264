"""Logging configuration with structured JSON support and correlation IDs."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, TextIO

# Set per reconcile to the autoscaler's namespace/name
_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="")


class JsonFormatter(logging.Formatter):
    """Format logs as structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "lineno": record.lineno,
            "correlation_id": _CORRELATION_ID.get(),
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_context"):
            payload.update(record.extra_context)  # type: ignore

        return json.dumps(payload, default=str)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


@contextmanager
def correlation_scope(cid: str) -> Iterator[None]:
    """Bind ``cid`` as the correlation ID for the duration of the block."""
    token = _CORRELATION_ID.set(cid)
    try:
        yield
    finally:
        _CORRELATION_ID.reset(token)


def configure_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    json_logs: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure global logging; records go to ``stream`` (stdout by default)."""
    handlers: list[Any] = [logging.StreamHandler(stream or sys.stdout)]

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "replica-autoscaler.log"))

    if json_logs:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level.upper(),
        handlers=handlers,
        force=True,
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Emit ``message`` with ``fields`` attached for the JSON formatter."""
    logger.log(level, message, extra={"extra_context": fields})
