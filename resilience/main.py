from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response

from resilience.assessments.rag import load_config
from resilience.core.config import settings
from resilience.core.formatting import format_decimal
from resilience.core.logging import configure_logging, correlation_context, get_logger
from resilience.core.metrics import get_counters, get_metrics
from resilience.routers.analysis import router as analysis_router
from resilience.routers.exceptions import register_exception_handlers

configure_logging(environment=settings.environment)
logger = get_logger("resilience.main", component="app")

CORRELATION_HEADER = "X-Correlation-ID"

# Store application startup time for health endpoint
_app_start_time = datetime.now(timezone.utc)

app = FastAPI(title=settings.app_name, debug=settings.debug)
register_exception_handlers(app)
app.include_router(analysis_router)
logger.info(
    "app_configured",
    extra={"structured_data": {"environment": settings.environment, "instrumentation": settings.instrumentation_enabled}},
)


@app.middleware("http")
async def bind_correlation_id(request: Request, call_next):
    """Tag every request with a correlation id, reusing the caller's when sent."""
    with correlation_context(request.headers.get(CORRELATION_HEADER)) as correlation_id:
        response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


@app.get("/health")
def health():
    """Application status, uptime and a short metrics summary.

    The instrument parameters are loaded here so a broken ``config.yaml``
    surfaces on the health check rather than on the first analysis.
    """
    now = datetime.now(timezone.utc)
    uptime = (now - _app_start_time).total_seconds()
    params = load_config()
    counters = get_counters()
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.environment,
        "instrument": {"id": params.instrument_id, "version": params.version},
        "started_at": _app_start_time.isoformat(),
        "uptime_seconds": format_decimal(uptime, decimals=2),
        "total_runs": int(counters.get("analysis.runs", 0)),
        "metrics_summary": {
            "tracked_operations": len(get_metrics()),
            "tracked_counters": len(counters),
        },
    }


@app.get("/", include_in_schema=False)
def root():
    """Lightweight index to avoid 404s and point to docs."""
    return {
        "name": settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)
