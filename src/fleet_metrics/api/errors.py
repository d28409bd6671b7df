"""Client-facing errors and the JSON envelope they are rendered into."""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """An error answered as ``{"ok": false, "error": ..., "hint": ...}``."""

    def __init__(self, status_code: int, error: str, hint: str | None = None):
        super().__init__(error if hint is None else f"{error}: {hint}")
        self.status_code = status_code
        self.error = error
        self.hint = hint

    def to_envelope(self) -> dict[str, Any]:
        body: dict[str, Any] = {"ok": False, "error": self.error}
        if self.hint:
            body["hint"] = self.hint
        return body


def bad_month() -> ApiError:
    return ApiError(400, "bad_month", "Use YYYY-MM format (e.g., 2024-12)")


def month_required() -> ApiError:
    return ApiError(400, "month_required", "Pass month=YYYY-MM")
