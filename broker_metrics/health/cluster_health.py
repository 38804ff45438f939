"""Resumen de salud del cluster para la vista de dashboard.

Clasifica el cluster como healthy / degraded / critical a partir de los
flags de los nodos, la presión de memoria y el backlog de las colas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..utils.numeric import round_half_up
from .snapshots import coerce_nodes, coerce_queues

logger = logging.getLogger(__name__)

MAX_REPORTED_ISSUES = 5


class ClusterHealth(str, Enum):
    """Estado agregado del cluster."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ThresholdLevel:
    warning: float
    critical: float


@dataclass(frozen=True)
class AlertThresholds:
    """Umbrales por defecto del dashboard (sin overrides por workspace)."""

    memory: ThresholdLevel = ThresholdLevel(warning=80, critical=95)
    queue_messages: ThresholdLevel = ThresholdLevel(warning=10000, critical=50000)


DEFAULT_ALERT_THRESHOLDS = AlertThresholds()


@dataclass(frozen=True)
class ClusterHealthSummary:
    """Resultado del resumen de salud."""

    cluster_health: ClusterHealth
    critical: int
    warning: int
    issues: Tuple[str, ...] = ()
    timestamp: str = ""

    @property
    def total(self) -> int:
        return self.critical + self.warning

    def to_dict(self) -> dict:
        return {
            "clusterHealth": self.cluster_health.value,
            "summary": {
                "critical": self.critical,
                "warning": self.warning,
                "total": self.total,
                "info": 0,
            },
            "issues": list(self.issues),
            "timestamp": self.timestamp,
        }


class _Tally:
    """Acumula incidencias y escala el estado (nunca lo baja)."""

    def __init__(self):
        self.health = ClusterHealth.HEALTHY
        self.critical = 0
        self.warning = 0
        self.issues: List[str] = []

    def add_critical(self, message: str) -> None:
        self.critical += 1
        self.issues.append(message)
        self.health = ClusterHealth.CRITICAL

    def add_warning(self, message: str) -> None:
        self.warning += 1
        self.issues.append(message)
        if self.health == ClusterHealth.HEALTHY:
            self.health = ClusterHealth.DEGRADED


def summarize_cluster_health(
    nodes: Any,
    queues: Any = None,
    thresholds: Optional[AlertThresholds] = None,
) -> ClusterHealthSummary:
    """Resume la salud del cluster.

    Args:
        nodes: Lista de nodos (dicts del API o NodeSnapshot)
        queues: Lista de colas (dicts del API o QueueSnapshot)
        thresholds: Umbrales; DEFAULT_ALERT_THRESHOLDS si es None

    Returns:
        ClusterHealthSummary con como máximo MAX_REPORTED_ISSUES incidencias
    """
    thresholds = thresholds or DEFAULT_ALERT_THRESHOLDS
    tally = _Tally()

    for node in coerce_nodes(nodes) or []:
        label = node.name or "unknown"
        if not node.running:
            tally.add_critical(f"Node {label} is down")
        if node.mem_alarm:
            tally.add_critical(f"Memory alarm on {label}")
        if node.disk_free_alarm:
            tally.add_critical(f"Disk alarm on {label}")
        if node.partitions:
            tally.add_critical(f"Network partition detected on {label}")

        usage = node.memory_usage_percent
        if usage is None:
            continue
        if usage >= thresholds.memory.critical:
            tally.add_critical(f"Critical memory usage on {label} ({round_half_up(usage)}%)")
        elif usage >= thresholds.memory.warning:
            tally.add_warning(f"High memory usage on {label} ({round_half_up(usage)}%)")

    for queue in coerce_queues(queues):
        label = queue.name or "unknown"
        count = int(queue.messages)
        if count >= thresholds.queue_messages.critical:
            tally.add_critical(f"Critical queue backlog: {label} ({count} messages)")
        elif count >= thresholds.queue_messages.warning:
            tally.add_warning(f"High queue backlog: {label} ({count} messages)")

    if tally.health != ClusterHealth.HEALTHY:
        logger.warning(
            "CLUSTER_%s critical=%s warning=%s",
            tally.health.value.upper(), tally.critical, tally.warning
        )

    return ClusterHealthSummary(
        cluster_health=tally.health,
        critical=tally.critical,
        warning=tally.warning,
        issues=tuple(tally.issues[:MAX_REPORTED_ISSUES]),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
