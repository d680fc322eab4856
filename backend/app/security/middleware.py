"""Security headers middleware."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from backend.app.config import get_settings


def build_security_headers(ui_origin: str) -> dict[str, str]:
    """Static headers attached to every response for the given UI origin."""
    csp_directives = [
        "default-src 'self'",
        f"connect-src 'self' {ui_origin}",
        # Cover and activity images travel as data: URLs
        "img-src 'self' data:",
        "frame-ancestors 'none'",
    ]
    headers = {
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "same-origin",
        "X-Frame-Options": "DENY",
        "Content-Security-Policy": "; ".join(csp_directives),
    }
    if not ui_origin.startswith("http://localhost"):
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app):
        super().__init__(app)
        self.headers = build_security_headers(get_settings().ui_origin)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        return response
