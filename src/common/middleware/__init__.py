"""Common middleware for Aivent."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
