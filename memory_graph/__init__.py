"""Embedded memory store: SQLite-backed memories, vector search and graph queries."""

__version__ = "0.1.0"
__all__ = ["models", "index", "storage", "query", "cli"]