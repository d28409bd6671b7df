"""Structured request logging.

The HTTP middleware builds one :class:`RequestRecord` per request and hands
it to the :class:`RequestLogger` injected into the app.  The default logger
writes each record as a JSON line to the ``fleet_metrics.requests`` logger
and, when a file is configured, appends it there as well.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from fleet_metrics.config.settings import ApiSettings

REQUEST_LOGGER_NAME = "fleet_metrics.requests"


class RequestRecord(BaseModel):
    """What gets logged about a single request."""

    timestamp: str
    method: str
    path: str
    action: str | None = None
    month: str | None = None
    origin: str | None = None
    user_agent: str = "unknown"
    status: int
    result: str
    """``success`` or the error code returned to the client."""
    duration_ms: float
    error: str | None = None


class RequestLogger:
    """Default request-log sink: one JSON object per line."""

    def __init__(self, logger: logging.Logger | None = None, log_file: Path | None = None):
        self.logger = logger or logging.getLogger(REQUEST_LOGGER_NAME)
        if log_file is not None:
            self._attach_file(Path(log_file))

    def _attach_file(self, log_file: Path) -> None:
        target = str(log_file.resolve())
        for handler in self.logger.handlers:
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
                return
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.addHandler(handler)

    def emit(self, record: RequestRecord) -> None:
        level = logging.INFO if record.status < 500 else logging.ERROR
        self.logger.log(level, record.model_dump_json())


def configure_logging(settings: ApiSettings) -> None:
    """Process-wide logging setup for the service."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
