"""FastAPI web application serving the schema viewer."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from db_viewer import __version__
from db_viewer.web.context import ViewerContext
from db_viewer.web.routes import api

logger = logging.getLogger(__name__)

# Get base directory
BASE_DIR = Path(__file__).parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def create_app(context: ViewerContext, watcher: object | None = None) -> FastAPI:
    """Build the app around an already-loaded context.

    Args:
        context: Parsed artifacts to serve
        watcher: Optional object with start()/stop(), run for the app's lifetime
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("db-viewer starting up...")
        if watcher is not None:
            watcher.start()
        yield
        if watcher is not None:
            watcher.stop()
        logger.info("db-viewer shutting down...")

    app = FastAPI(
        title="db-viewer",
        description="Schema and query function viewer for source-embedded SQL",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    app.include_router(api.router, prefix="/api", tags=["schema"])

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request):
        """Viewer page."""
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "schema_path": context.schema_path or "(not found)",
                "functions_path": context.functions_path or "(not found)",
                "version": __version__,
            },
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "path": str(request.url),
            },
        )

    return app


def run_server(app: FastAPI, host: str = "127.0.0.1", port: int = 3456, log_level: str = "info"):
    """Run the web server using uvicorn."""
    import uvicorn
    uvicorn.run(app, host=host, port=port, log_level=log_level)
