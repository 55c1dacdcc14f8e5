"""Health check endpoints for sitebuildr-py.

``/health`` reports whether the service and its document store respond;
``/ready`` is the cheaper probe used by load balancers.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any, ClassVar

from litestar import Controller, get
from litestar.params import Dependency

from sitebuildr_py.exceptions import PersistenceError
from sitebuildr_py.storage.base import DocumentStoreProtocol

# Website id that is never written, used to probe the store with a read.
_PROBE_WEBSITE_ID = "__health__"


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of an individual component."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = "0.1.0"
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp,
            "components": [
                {"name": c.name, "status": c.status.value, "message": c.message, "latency_ms": c.latency_ms}
                for c in self.components
            ],
        }


async def check_store(store: DocumentStoreProtocol) -> ComponentHealth:
    """Probe the document store with a read."""
    started = time.perf_counter()
    try:
        await store.load_document(_PROBE_WEBSITE_ID)
    except PersistenceError as e:
        return ComponentHealth(name="document_store", status=HealthStatus.UNHEALTHY, message=str(e))
    return ComponentHealth(
        name="document_store",
        status=HealthStatus.HEALTHY,
        message=type(store).__name__,
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )


class HealthController(Controller):
    """Liveness and readiness probes."""

    path = ""
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, store: Annotated[DocumentStoreProtocol, Dependency(skip_validation=True)]) -> dict[str, Any]:
        """Report the status of the service and its document store."""
        components = [
            ComponentHealth(name="application", status=HealthStatus.HEALTHY, message="Application is running"),
            await check_store(store),
        ]
        healthy = all(c.status is HealthStatus.HEALTHY for c in components)
        response = HealthResponse(
            status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            components=components,
        )
        return response.to_dict()

    @get("/ready")
    async def ready(self) -> dict[str, Any]:
        """Readiness probe endpoint."""
        return {"ready": True, "timestamp": datetime.now(UTC).isoformat()}
