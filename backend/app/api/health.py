"""Health check endpoint for infrastructure status."""

import logging
from typing import Literal

import redis
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.app.adapters.fx import get_redis_client
from backend.app.db.session import get_session_factory

logger = logging.getLogger(__name__)


class HealthStatus(BaseModel):
    """Health check response."""

    status: Literal["ok", "down"]
    checks: dict[str, Literal["ok", "down"]]


def get_health() -> HealthStatus:
    """
    Check health of core infrastructure components.

    Checks:
    - Database: Attempts to execute SELECT 1
    - Redis: Attempts to PING (backs the persisted exchange-rate cache)

    Returns:
        HealthStatus with overall status and individual check results
    """
    checks: dict[str, Literal["ok", "down"]] = {}

    try:
        session_factory = get_session_factory()
        with session_factory() as session:
            session.execute(text("SELECT 1"))
        checks["db"] = "ok"
    except SQLAlchemyError as e:
        logger.warning("database health check failed", extra={"error": str(e)})
        checks["db"] = "down"

    try:
        get_redis_client().ping()
        checks["redis"] = "ok"
    except redis.RedisError as e:
        logger.warning("redis health check failed", extra={"error": str(e)})
        checks["redis"] = "down"

    overall_status: Literal["ok", "down"] = (
        "ok" if all(status == "ok" for status in checks.values()) else "down"
    )

    return HealthStatus(status=overall_status, checks=checks)
