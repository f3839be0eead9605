"""File reading shared by the schema and function parsers."""
from __future__ import annotations

from pathlib import Path


class SourceReadError(Exception):
    """A source file could not be read or parsed.

    The original error, if any, is chained as `__cause__`.
    """

    def __init__(self, file_path: Path | str, reason: str):
        self.file_path = str(file_path)
        self.reason = reason
        super().__init__(f"Failed to read {self.file_path}: {reason}")


def read_source(file_path: Path | str) -> str:
    """Read a whole file as UTF-8 text.

    Raises:
        SourceReadError: If the file is missing, unreadable or not UTF-8
    """
    path = Path(file_path)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SourceReadError(path, "not valid UTF-8") from e
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e)) from e
