"""Metrics façade for upstream service calls."""

import logging

logger = logging.getLogger(__name__)


def record_upstream_call(
    service: str,
    latency_ms: int,
    ok: bool,
    from_cache: bool,
    fallback: bool = False,
    error_kind: str | None = None,
) -> None:
    """Record metrics for a call to an external service.

    This is a simple implementation that logs metrics.

    Args:
        service: Name of the upstream service ("fx", "places").
        latency_ms: Latency in milliseconds.
        ok: Whether the call succeeded.
        from_cache: Whether the result came from a cache layer.
        fallback: Whether a built-in fallback answer was served.
        error_kind: Short error classification if the call failed.
    """
    logger.info(
        "upstream_call_metric",
        extra={
            "service": service,
            "latency_ms": latency_ms,
            "ok": ok,
            "from_cache": from_cache,
            "fallback": fallback,
            "error_kind": error_kind,
        },
    )
