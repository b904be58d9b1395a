"""
Main entrypoint: ReplyBox sync API server.

Loads configuration once, builds the service container, and serves the
FastAPI app with uvicorn. Activation (tables plus secure token) runs in the
app's startup hook.

Env: REPLYBOX_DB_URL / DATABASE_URL / REPLYBOX_DB_PATH, API_HOST, API_PORT,
LOG_LEVEL, LOG_FORMAT, REPLYBOX_TIMEZONE, REPLYBOX_EMBED_URL.

API-only via uvicorn: uvicorn replybox.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Configure structured JSON logging before other imports that may log
from replybox.replybox_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Build services from env config and run the API server in the main thread."""
    from replybox.api_server.server import create_app
    from replybox.api_server.services import build_services
    from replybox.config import get_settings
    import uvicorn

    config = get_settings()
    app = create_app(build_services(config))

    logger.info("main_server_starting", host=config.api_host, port=config.api_port)
    uvicorn.run(app, host=config.api_host, port=config.api_port, log_level=config.log_level)


if __name__ == "__main__":
    main()
