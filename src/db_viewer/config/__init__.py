"""Configuration management for db-viewer."""
from .viewer import (
    DetectionConfig,
    LoggingConfig,
    ServerConfig,
    ViewerConfig,
    load_viewer_config,
)

__all__ = [
    "DetectionConfig",
    "LoggingConfig",
    "ServerConfig",
    "ViewerConfig",
    "load_viewer_config",
]
