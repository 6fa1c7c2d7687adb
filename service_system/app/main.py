"""System properties service main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
import structlog

from .api.routes import router as properties_router
from .properties import PropertyTable
from libs.common.config import SystemConfig
from libs.common.logging import configure_logging, log_performance
from libs.common.metrics import MetricsCollector, get_metrics_collector

logger = structlog.get_logger("system_service")

SERVICE_NAME = "system-service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: SystemConfig = app.state.config
    configure_logging(SERVICE_NAME, config.sp_log_level, config.sp_log_format)
    app.state.startup_time = time.time()
    logger.info(
        "System service started",
        properties=len(app.state.properties),
        root_path=config.sp_system_root_path or "/",
    )

    yield

    logger.info("System service shutdown complete")


def create_app(
    config: Optional[SystemConfig] = None,
    properties: Optional[PropertyTable] = None,
    metrics_collector: Optional[MetricsCollector] = None,
) -> FastAPI:
    """Build the System service.

    Parameters
    - config: Service settings; read from the environment when omitted
    - properties: Table to serve; built from ``config`` when omitted
    - metrics_collector: Collector to record into; process-wide by default
    """
    config = config or SystemConfig()

    app = FastAPI(
        title="System Service",
        description="Read-only access to the system property table",
        version=SERVICE_VERSION,
        lifespan=lifespan
    )
    app.state.config = config
    app.state.properties = properties if properties is not None else PropertyTable.from_config(config)
    app.state.metrics_collector = metrics_collector or get_metrics_collector(SERVICE_NAME)
    app.state.startup_time = time.time()

    app.include_router(properties_router, prefix=config.sp_system_root_path)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.exception("Unhandled error", method=request.method, path=request.url.path)
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "detail": str(e)}
            )

        duration = time.time() - start_time
        # Route templates keep property keys out of the label set.
        route = request.scope.get("route")
        endpoint = getattr(route, "path", "unmatched")

        if config.sp_metrics_enabled:
            app.state.metrics_collector.record_http_request(
                method=request.method,
                endpoint=endpoint,
                status=status_code,
                duration=duration
            )
        log_performance("http_request", duration * 1000, method=request.method, endpoint=endpoint, status=status_code)
        return response

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": SERVICE_NAME}

    @app.get("/live")
    async def liveness():
        """Liveness probe. Returns quickly if process is responsive."""
        return {
            "status": "alive",
            "service": SERVICE_NAME,
            "uptime_seconds": time.time() - app.state.startup_time
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        if not config.sp_metrics_enabled:
            return Response(content="# Metrics disabled\n", media_type="text/plain")
        return Response(content=app.state.metrics_collector.get_metrics(), media_type="text/plain")

    @app.get("/")
    async def root():
        """Root endpoint."""
        prefix = config.sp_system_root_path
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "endpoints": {
                "properties": f"{prefix}/properties",
                "property": f"{prefix}/properties/key/{{key}}",
                "version": f"{prefix}/properties/version",
                "metrics": "/metrics"
            },
            "probes": {
                "health": "/health",
                "live": "/live"
            }
        }

    return app


def main() -> None:
    """Run the service with uvicorn using environment configuration."""
    config = SystemConfig()
    uvicorn.run(
        create_app(config),
        host=config.sp_system_host,
        port=config.sp_system_port,
        log_level=config.sp_log_level.lower()
    )


if __name__ == "__main__":
    main()
