"""
fernetkit token service - Fernet token issuing, checking and rotation over HTTP.

Features:
- Structured logging
- Prometheus metrics
- Liveness check
- Token encrypt / decrypt / verify / rotate and key generation
"""
from datetime import datetime, timezone

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from . import __version__
from .config import get_settings
from .logging import setup_logging, get_logger
from .metrics import Metrics
from .api.token_router import router, set_token_service
from .services import TokenService

SERVICE_NAME = "fernetkit"

# Initialize configuration
settings = get_settings()

# Setup logging
setup_logging(json_output=settings.LOG_JSON, service_name=SERVICE_NAME)
logger = get_logger()

# Initialize metrics
metrics = Metrics(service_name=SERVICE_NAME, version=__version__)

# Token service shared by all requests
set_token_service(TokenService(settings=settings, metrics=metrics))

app = FastAPI(
    title="fernetkit",
    version=__version__,
    description="Fernet token service with key rotation",
)

app.include_router(router)

# Mount Prometheus metrics endpoint
metrics_app = make_asgi_app(registry=metrics.registry)
app.mount("/metrics", metrics_app)


@app.get("/health")
async def health():
    """
    Liveness probe - basic health check.

    Returns 200 if service is running.
    """
    logger.debug("health_check_liveness")
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.on_event("startup")
async def startup_event():
    logger.info(
        "service_starting",
        version=__version__,
        env=settings.ENV,
        keys_configured=len(settings.key_texts),
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("service_stopping")
    metrics.app_up.labels(service=SERVICE_NAME, version=__version__).set(0)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fernetkit.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
    )
