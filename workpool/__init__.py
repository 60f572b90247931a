"""Worker thread pools, futures, a message worker pool, a byte buffer and HTTP request helpers."""

__version__ = "0.1.0"