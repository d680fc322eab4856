"""HTTP security helpers."""

from .middleware import SecurityHeadersMiddleware

__all__ = ["SecurityHeadersMiddleware"]
