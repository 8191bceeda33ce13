"""Health check response: liveness plus relational store reachability."""

from typing import Literal

from pydantic import BaseModel


class DatabaseStatus(BaseModel):
    connected: bool
    # Same kind the error handler uses when a request hits an unreachable store.
    kind: Literal["ok", "store_unavailable"]


class HealthResponse(BaseModel):
    """'degraded' when the process is up but the database does not answer."""

    status: Literal["ok", "degraded"]
    environment: Literal["dev", "prod"]
    database: DatabaseStatus
