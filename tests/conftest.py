"""Shared pytest fixtures for all tests."""
import shutil
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_DB_DIR = FIXTURES_DIR / "sample_db"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DB_VIEWER_* settings from the developer's shell out of tests."""
    for name in ("DB_VIEWER_CONFIG", "DB_VIEWER_HOST", "DB_VIEWER_PORT", "DB_VIEWER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_schema_path() -> Path:
    """Schema file with users/posts tables and two indexes."""
    return SAMPLE_DB_DIR / "schema.ts"


@pytest.fixture
def sample_functions_path() -> Path:
    """Functions file with seven exported query helpers."""
    return SAMPLE_DB_DIR / "index.ts"


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """A project tree with the sample files under src/db."""
    db_dir = tmp_path / "src" / "db"
    db_dir.mkdir(parents=True)
    shutil.copy(SAMPLE_DB_DIR / "schema.ts", db_dir / "schema.ts")
    shutil.copy(SAMPLE_DB_DIR / "index.ts", db_dir / "index.ts")
    return tmp_path


@pytest.fixture
def write_source(tmp_path):
    """Write text to a file under tmp_path and return its path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write
