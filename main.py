# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import Settings, load_settings
from errors import APIError
from logging_setup import setup_logging
from routers import tasks
from storage import JsonFileStore, TaskStore

logger = logging.getLogger(__name__)


# --- Error Handlers ---
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s error: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})


# --- App Factory ---
def create_app(settings: Optional[Settings] = None, store: Optional[TaskStore] = None) -> FastAPI:
    """
    Builds the application. `store` defaults to a JSON file under the configured data directory.
    """
    settings = settings or load_settings()
    if store is None:
        store = JsonFileStore(settings.tasks_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A StorageInitError propagates and aborts startup.
        await app.state.store.initialize()
        logger.info("Serving tasks from %s", settings.tasks_file)
        yield
        logger.info("Application shutting down...")

    app = FastAPI(
        title="Quadrant Tasks",
        description="A small REST API for tasks sorted into quadrants, stored in a single JSON file.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # --- Include API Routers ---
    app.include_router(tasks.router)

    # --- Mount Static Files ---
    # Mounted last so the API routes take precedence over "/".
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()

# --- Main Entry Point ---
if __name__ == "__main__":
    setup_logging(app.state.settings.log_level)
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
