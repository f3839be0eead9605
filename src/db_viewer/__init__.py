"""db-viewer: browse a project's database schema and query functions."""

__version__ = "1.0.0"
