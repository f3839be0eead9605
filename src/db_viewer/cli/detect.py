"""Find the schema and functions files of a project.

Checks a fixed list of conventional locations; the first existing file wins.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from db_viewer.config import DetectionConfig


@dataclass
class DetectedFiles:
    """Detection result. A missing file is None."""
    schema_path: Path | None
    functions_path: Path | None


def find_file(
    base_dir: Path | str,
    filenames: list[str],
    search_dirs: list[str]
) -> Path | None:
    """Return the first existing `base_dir/search_dir/filename`.

    Directories are the outer loop, so a shallow match beats a deep one.
    """
    base = Path(base_dir)
    for search_dir in search_dirs:
        for filename in filenames:
            candidate = base / search_dir / filename
            if candidate.is_file():
                return candidate
    return None


def detect_db_files(
    base_dir: Path | str,
    config: DetectionConfig | None = None
) -> DetectedFiles:
    """Detect schema and functions files under a base directory.

    Args:
        base_dir: Directory to search from
        config: Detection settings (defaults to the built-in lists)

    Returns:
        DetectedFiles; both paths are None for a non-existent directory
    """
    config = config or DetectionConfig()
    return DetectedFiles(
        schema_path=find_file(base_dir, config.schema_filenames, config.search_dirs),
        functions_path=find_file(base_dir, config.functions_filenames, config.search_dirs),
    )
