"""
Main entrypoint: FastAPI server for lobby risk scoring.

Services (cache store, task pool) are created in the app lifespan; this module only
loads settings and runs uvicorn.

Env: PORT, HOST, REDIS_URL or CACHE_DB_URL, CACHE_TTL_SEC, POOL_CAPACITY,
RENDER_TIMEOUT_SEC, BATCH_DEADLINE_SEC, PROFILE_BASE_URL, SUSPICIOUS_TERMS,
VAC_BAN_MARKERS, CORS_ORIGINS, LOG_LEVEL, LOG_FORMAT.
A .env file at the project root is loaded automatically.

Equivalent: uvicorn backend_lobbyrisk.api_server.app:app --host 0.0.0.0 --port 3000
"""

import sys

from backend_lobbyrisk.lobbyrisk_logging import configure_structlog, get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings and run the FastAPI server in the main thread."""
    from backend_lobbyrisk.config import get_settings

    try:
        settings = get_settings()
    except ValueError as e:
        logger.error("main_config_error", error=str(e))
        sys.exit(1)
    configure_structlog(settings.log_level, settings.log_format)

    from backend_lobbyrisk.api_server.app import create_app
    import uvicorn

    app = create_app(settings)
    logger.info(
        "main_server_starting",
        host=settings.host,
        port=settings.port,
        cache_backend=settings.cache_backend,
        pool_capacity=settings.pool_capacity,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
