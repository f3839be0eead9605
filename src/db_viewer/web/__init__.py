"""Web UI and JSON API."""
from .app import create_app, run_server
from .context import ViewerContext

__all__ = ["ViewerContext", "create_app", "run_server"]
