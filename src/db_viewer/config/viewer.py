"""Viewer configuration loading and validation.

Settings come from, in increasing priority: defaults, a YAML file,
DB_VIEWER_* environment variables (a local .env file is honored), and
finally command-line flags applied by the CLI.
"""
from __future__ import annotations
import os
import yaml
from pathlib import Path
from typing import Literal
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "DB_VIEWER_CONFIG"


class DetectionConfig(BaseModel):
    """Where to look for the schema and functions files."""
    search_dirs: list[str] = Field(
        default_factory=lambda: [
            ".",
            "src/db",
            "src/database",
            "db",
            "database",
            "lib/db",
            "lib/database",
        ],
        description="Directories searched, relative to the base directory",
    )
    schema_filenames: list[str] = Field(
        default_factory=lambda: ["schema.ts", "schema.js"],
        description="Candidate schema file names",
    )
    functions_filenames: list[str] = Field(
        default_factory=lambda: ["index.ts", "index.js", "queries.ts", "queries.js", "db.ts", "db.js"],
        description="Candidate functions file names",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")
    format: str = Field(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="logging format string",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    host: str = Field("127.0.0.1", description="Bind address")
    port: int = Field(3456, ge=1, le=65535, description="Server port")
    open_browser: bool = Field(False, description="Open a browser once the server is up")
    watch: bool = Field(False, description="Re-parse files when they change")
    watch_debounce_seconds: float = Field(0.5, ge=0, le=30, description="Debounce delay")


class ViewerConfig(BaseModel):
    """Complete viewer configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ViewerConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated ViewerConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration in {config_path} must be a mapping")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    def apply_env(self) -> ViewerConfig:
        """Return a copy with DB_VIEWER_HOST / _PORT / _LOG_LEVEL applied.

        Raises:
            ValueError: If an override does not validate
        """
        data = self.model_dump()

        host = os.getenv("DB_VIEWER_HOST")
        if host:
            data["server"]["host"] = host

        port = os.getenv("DB_VIEWER_PORT")
        if port:
            try:
                data["server"]["port"] = int(port)
            except ValueError as e:
                raise ValueError(f"DB_VIEWER_PORT must be an integer, got {port!r}") from e

        level = os.getenv("DB_VIEWER_LOG_LEVEL")
        if level:
            data["logging"]["level"] = level

        return ViewerConfig.model_validate(data)


def load_viewer_config(config_path: str | Path | None = None) -> ViewerConfig:
    """Load viewer configuration from file and environment.

    Args:
        config_path: Optional explicit path to a YAML config file. Falls back
            to $DB_VIEWER_CONFIG, then to built-in defaults.

    Returns:
        Validated ViewerConfig instance

    Raises:
        FileNotFoundError: If an explicitly named config file is missing
        ValueError: If configuration is invalid
    """
    load_dotenv()

    path = config_path or os.getenv(CONFIG_ENV_VAR)
    config = ViewerConfig.from_yaml(path) if path else ViewerConfig()
    return config.apply_env()
