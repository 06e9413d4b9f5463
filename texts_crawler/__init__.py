"""Sequential crawler for TypeRacer text metadata, persisted to SQLite."""

__version__ = "0.1.0"
