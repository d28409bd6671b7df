"""FastAPI server — JSON gateway and CSV/ZIP export for the fleet metrics generator.

Run with:
    uvicorn fleet_metrics.api.server:app --reload --port 8000

Or:
    python -m fleet_metrics.api.server

Endpoints:
    GET /                 — service banner
    GET /health           — liveness
    GET /api?action=...   — routed actions (health, readiness, dashboard,
                            vehicles, charts, analytics, drivers)
    GET /api/{action}     — same, path form
    GET /export?type=...  — kpi / vehicles CSV, or a ZIP with both
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from fleet_metrics.api.errors import ApiError, bad_month
from fleet_metrics.api.export import EXPORT_TYPES, csv_filename, render_csv, render_zip, zip_filename
from fleet_metrics.api.handlers import ActionQuery, envelope, resolve_action
from fleet_metrics.api.request_log import RequestLogger, RequestRecord, configure_logging
from fleet_metrics.config.settings import ApiSettings
from fleet_metrics.engine.months import is_valid_month

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, must-revalidate",
    "Expires": "Sat, 26 Jul 1997 05:00:00 GMT",
}


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _check_api_key(request: Request, settings: ApiSettings) -> None:
    """Soft key check: a missing key passes, a wrong key does not."""
    if not settings.api_key:
        return
    provided = request.headers.get(API_KEY_HEADER) or request.query_params.get("api_key")
    if provided and provided != settings.api_key:
        raise ApiError(401, "invalid_api_key", f"Check {API_KEY_HEADER} header")


def _error_response(request: Request, exc: ApiError) -> JSONResponse:
    request.state.error_code = exc.error
    if getattr(request.state, "error_detail", None) is None:
        request.state.error_detail = exc.hint
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


def _run_action(request: Request, action_name: str | None, query: ActionQuery) -> dict:
    settings: ApiSettings = request.app.state.settings
    action = resolve_action(action_name)
    try:
        payload = action.handler(query, settings)
    except ApiError:
        raise
    except Exception as exc:
        logger.error("Action '%s' failed: %s", action.name, exc, exc_info=True)
        request.state.error_detail = str(exc)
        raise ApiError(502, "internal_error", "Service temporarily unavailable") from exc
    return envelope(payload)


# ═══════════════════════════════════════════════════════════════════════════
# App factory
# ═══════════════════════════════════════════════════════════════════════════

def create_app(settings: ApiSettings | None = None, request_logger: RequestLogger | None = None) -> FastAPI:
    """Build the application with its settings and request-log sink."""
    settings = settings or ApiSettings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description=(
            "Deterministic transport-fleet metrics (revenue, costs, vehicle "
            "profitability, driver performance) for a calendar month. Every "
            "figure is derived from the month key alone, so repeated requests "
            "always return the same values."
        ),
    )
    app.state.settings = settings
    app.state.request_logger = request_logger or RequestLogger(log_file=settings.request_log_file)

    # ── Middleware ─────────────────────────────────────────────────────────
    @app.middleware("http")
    async def log_request(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{duration:.6f}"

        action = request.query_params.get("action")
        if action is None and request.url.path.startswith("/api/"):
            action = request.url.path[len("/api/"):]
        error_code = getattr(request.state, "error_code", None)
        request.app.state.request_logger.emit(RequestRecord(
            timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            method=request.method,
            path=request.url.path,
            action=action,
            month=request.query_params.get("month"),
            origin=request.headers.get("origin"),
            user_agent=request.headers.get("user-agent", "unknown"),
            status=response.status_code,
            result=error_code or ("success" if response.status_code < 400 else "error"),
            duration_ms=round(duration * 1000, 2),
            error=getattr(request.state, "error_detail", None),
        ))
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", API_KEY_HEADER, "Authorization"],
    )

    # ── Exception handlers ────────────────────────────────────────────────
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
        return _error_response(request, ApiError(400, "bad_request", f"Invalid parameter(s): {fields}"))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error = "not_found" if exc.status_code == 404 else "http_error"
        return _error_response(request, ApiError(exc.status_code, error, str(exc.detail)))

    # ── Endpoints ─────────────────────────────────────────────────────────
    @app.get("/")
    def root():
        """Service banner with a pointer to the routed API."""
        return {
            "ok": True,
            "name": settings.app_name,
            "version": settings.version,
            "start_here": "GET /api?action=dashboard&month=YYYY-MM",
            "docs": "GET /docs (interactive Swagger UI)",
        }

    @app.get("/health")
    def health_check():
        """Health check for deployment platforms."""
        return {"ok": True, "status": "healthy", "version": settings.version}

    @app.get("/api")
    def api_gateway(
        request: Request,
        action: str | None = Query(default=None, description="health, readiness, dashboard, vehicles, charts, analytics, drivers"),
        month: str | None = Query(default=None, description="Reporting period, YYYY-MM"),
        sort: str | None = Query(default=None, description="Vehicles: profit or marginPct"),
        order: str | None = Query(default=None, description="Vehicles: asc or desc (default)"),
        limit: int | None = Query(default=None, description="Vehicles: page size, clamped to 1..500"),
        offset: int | None = Query(default=None, description="Vehicles: page start, >= 0"),
    ):
        """Single routed entry point — ``action`` selects the view."""
        _check_api_key(request, settings)
        query = ActionQuery.from_params(settings, month, sort, order, limit, offset)
        return _run_action(request, action, query)

    @app.get("/api/{action}")
    def api_action(
        request: Request,
        action: str,
        month: str | None = None,
        sort: str | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ):
        """Path form of ``/api?action=...``."""
        _check_api_key(request, settings)
        query = ActionQuery.from_params(settings, month, sort, order, limit, offset)
        return _run_action(request, action, query)

    @app.get("/export")
    def export(
        request: Request,
        export_type: str = Query(default="", alias="type", description="kpi, vehicles or all"),
        month: str = Query(default="", description="Reporting period, YYYY-MM"),
    ):
        """CSV download of one dataset, or a ZIP archive of both."""
        _check_api_key(request, settings)
        if export_type not in EXPORT_TYPES:
            raise ApiError(400, "invalid_type", "Use type=kpi|vehicles|all")
        if not is_valid_month(month):
            raise bad_month()

        if export_type == "all":
            filename = zip_filename(month)
            return Response(
                content=render_zip(month),
                media_type="application/zip",
                headers={"Content-Disposition": f'attachment; filename="{filename}"', **NO_CACHE_HEADERS},
            )

        filename = csv_filename(export_type, month)
        return Response(
            content=render_csv(export_type, month),
            media_type="text/csv; charset=UTF-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"', **NO_CACHE_HEADERS},
        )

    return app


app = create_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    uvicorn.run(
        "fleet_metrics.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
