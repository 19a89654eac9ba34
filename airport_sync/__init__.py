"""Fetch a paginated dataset concurrently and publish it only when it changes."""

__version__ = "0.1.0"

__all__ = ["__version__"]
