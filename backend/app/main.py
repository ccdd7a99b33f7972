import logging
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

import uvicorn
from fastapi import FastAPI, Request

# Import settings first for logging configuration
from backend.app.core.config import settings as app_settings, APP_VERSION

# Configure logging based on settings
# DEBUG=true -> DEBUG level, else use LOG_LEVEL setting
log_level_str = "DEBUG" if app_settings.debug else app_settings.log_level.upper()
log_level = getattr(logging, log_level_str, logging.INFO)
log_format = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

# Create root logger
root_logger = logging.getLogger()
root_logger.setLevel(log_level)

# Console handler - always enabled
console_handler = logging.StreamHandler()
console_handler.setLevel(log_level)
console_handler.setFormatter(logging.Formatter(log_format))
root_logger.addHandler(console_handler)

# File handler - only in production or if explicitly enabled
if app_settings.log_to_file:
    log_file = app_settings.log_dir / "spooltally.log"
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5*1024*1024,  # 5MB
        backupCount=3,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(file_handler)
    logging.info(f"Logging to file: {log_file}")

# Reduce noise from third-party libraries in production
if not app_settings.debug:
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

logging.info(f"SpoolTally starting - debug={app_settings.debug}, log_level={log_level_str}")

from backend.app.api.routes import report
from backend.app.services.moonraker import close_history_client, init_history_client

request_logger = logging.getLogger("backend.app.requests")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await init_history_client(app_settings.history_base_url, timeout=app_settings.history_timeout)
    logging.info(f"Listening on http://{app_settings.printer_host}:{app_settings.port}")

    yield

    # Shutdown
    await close_history_client()


app = FastAPI(
    title=app_settings.app_name,
    description="Remaining filament per spool from printer job history",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000.0
    request_logger.info(
        "%s %s %d %.1fms", request.method, request.url.path, response.status_code, duration_ms
    )
    return response


app.include_router(report.router)


def run():
    """Serve the report on all interfaces."""
    uvicorn.run(app, host="0.0.0.0", port=app_settings.port, log_level=log_level_str.lower())


if __name__ == "__main__":
    run()
