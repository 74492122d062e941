"""FastAPI ops server with health endpoints."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.responses import JSONResponse
from fastapi.responses import Response as FastAPIResponse
from loguru import logger
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from rhm.exceptions import AuthorizationError
from rhm.health.auth import ADMIN_API_KEY_HEADER, AdminAuthGate, AdminRequestContext
from rhm.health.history import HistoryTracker
from rhm.health.models import HealthStatus
from rhm.health.provider import DuckDBSnapshotProvider, MetricsSnapshotProvider
from rhm.health.service import HealthService
from rhm.ops.metrics import MetricsCollector
from rhm.ops.thresholds import load_thresholds
from rhm.utils.config import Config, get_config

HEALTH_FETCH_ERROR = "Failed to fetch health status"


def check_system_ready(provider: MetricsSnapshotProvider) -> tuple[bool, dict]:
    """
    Check if the metrics source can be read.

    Returns:
        Tuple of (is_ready, details_dict)
    """
    details = {}
    is_ready = True

    try:
        provider.collect()
        details["snapshot_provider"] = "ok"
    except Exception as e:
        details["snapshot_provider"] = "error"
        details["error"] = type(e).__name__
        is_ready = False

    return is_ready, details


def build_service(config: Config) -> HealthService:
    """Wire the health service from configuration."""
    return HealthService(
        provider=DuckDBSnapshotProvider(config.data.db_path),
        thresholds=load_thresholds(config.thresholds_path),
        history=HistoryTracker(capacity=config.health.history_size),
    )


def create_app(
    service: HealthService | None = None,
    gate: AdminAuthGate | None = None,
    config: Config | None = None,
) -> FastAPI:
    """Create FastAPI application for ops endpoints."""
    config = config or get_config()
    service = service or build_service(config)
    gate = gate or AdminAuthGate(config.health.admin_api_key)
    collector = MetricsCollector()

    app = FastAPI(
        title="RHM Ops",
        description="Admin health and metrics endpoints for the renewal pipeline",
        version="1.0.0",
    )
    app.state.health_service = service

    @app.middleware("http")
    async def record_metrics(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        collector.record_request(request.method, request.url.path, response.status_code)
        collector.record_latency(request.method, request.url.path, time.perf_counter() - start)
        return response

    @app.exception_handler(AuthorizationError)
    async def unauthorized(request: Request, exc: AuthorizationError):
        host = request.client.host if request.client else "unknown"
        logger.warning(f"Unauthorized admin access attempt from IP: {host}")
        return JSONResponse(status_code=401, content={"error": str(exc)})

    def admin_context(
        request: Request,
        x_admin_api_key: str | None = Header(None, alias=ADMIN_API_KEY_HEADER),
        history: str | None = Query(None),
    ) -> AdminRequestContext:
        return gate.authorize(
            x_admin_api_key,
            history=history,
            client_host=request.client.host if request.client else None,
        )

    @app.get("/health")
    def health():
        """Liveness probe - returns 200 if API is responsive."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/ready")
    def ready(response: Response):
        """Readiness probe - returns 200 if metrics can be collected, 503 otherwise."""
        is_ready, details = check_system_ready(service.provider)

        result = {
            "status": "ready" if is_ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": details,
        }

        if not is_ready:
            response.status_code = 503

        return result

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint."""
        return FastAPIResponse(
            content=generate_latest(REGISTRY),
            media_type=CONTENT_TYPE_LATEST,
        )

    @app.get("/api/admin/health")
    def admin_health(context: AdminRequestContext = Depends(admin_context)):
        """Full admin health: 200 when healthy, 503 when unhealthy, 500 on failure."""
        try:
            report = service.get_admin_health(include_history=context.include_history)
        except Exception as e:
            logger.error(f"Error fetching admin health: {e}")
            return JSONResponse(status_code=500, content={"error": HEALTH_FETCH_ERROR})

        status_code = 503 if report.status == HealthStatus.UNHEALTHY else 200
        return JSONResponse(status_code=status_code, content=report.to_dict())

    return app


def run_server(host: str = "0.0.0.0", port: int = 8080, app: FastAPI | None = None) -> None:
    """Run the ops server with uvicorn."""
    import uvicorn

    uvicorn.run(app or create_app(), host=host, port=port)
