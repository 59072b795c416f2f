"""Liveness and readiness payloads."""

import datetime as dt
from typing import Literal

from pydantic import BaseModel

Status = Literal["healthy", "unhealthy"]


class DatabaseCheck(BaseModel):
    status: Status
    latency_ms: float
    error: str | None = None


class HealthResponse(BaseModel):
    """Served without a session or a tenant, so load balancers can poll it."""

    status: Status
    version: str
    timestamp: dt.datetime
    database: DatabaseCheck | None = None
