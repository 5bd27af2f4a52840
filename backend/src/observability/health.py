"""Health checks for the components the validators depend on.

The only external dependency is the transaction store; a slow but reachable
store reports as degraded.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from domain.transactions.ports import TransactionStorePort

from .logging_config import get_logger

logger = get_logger(__name__)

SLOW_STORE_THRESHOLD_MS = 250.0


class HealthStatus(str, Enum):
    """Health check status enum."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


async def check_store_health(
    store: TransactionStorePort,
    slow_threshold_ms: float = SLOW_STORE_THRESHOLD_MS,
) -> ComponentHealth:
    """Ping the transaction store and time the round trip.

    Args:
        store: Transaction store in use by the application
        slow_threshold_ms: Latency above which the store is reported degraded

    Returns:
        ComponentHealth: Store health status
    """
    started = time.perf_counter()
    try:
        reachable = await store.ping()
    except Exception as e:
        logger.error(f"Transaction store health check failed: {e}", exc_info=True)
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message=f"Transaction store error: {e}")

    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    if not reachable:
        return ComponentHealth(HealthStatus.UNHEALTHY, "Store ping returned false", latency_ms)
    if latency_ms > slow_threshold_ms:
        return ComponentHealth(HealthStatus.DEGRADED, "Transaction store responding slowly", latency_ms)
    return ComponentHealth(HealthStatus.HEALTHY, "Transaction store connection OK", latency_ms)


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Worst status among the components."""
    statuses = {c.status for c in components.values()}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY
