"""pageserver: a small static-file HTTP server built on FastAPI."""

__version__ = "1.0.0"
