"""Ensamblado de métricas enriquecidas para dashboards y alertas.

`EnhancedMetrics` es el punto de entrega hacia los consumidores externos
(gráficos, evaluador de reglas de alerta, vista resumen).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config.heuristics import DEFAULT_HEURISTICS, HealthHeuristics
from .config.settings import EngineSettings, get_settings
from .health.cluster_health import ClusterHealthSummary, summarize_cluster_health
from .health.estimator import (
    calculate_average_cpu_usage,
    calculate_average_latency,
    calculate_disk_usage,
    calculate_total_memory_bytes,
)
from .metrics.aggregator import SnapshotKind, extract_message_rates
from .metrics.models import MessageRates, QueueTotalsPoint
from .metrics.queue_totals import extract_queue_totals

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024 * 1024 * 1024


class EnhancedMetrics(BaseModel):
    """Snapshot crudo + estimaciones de salud de un tick de polling."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    overview: Optional[Dict[str, Any]] = None
    nodes: List[Any] = Field(default_factory=list)
    connections: List[Any] = Field(default_factory=list)
    channels: List[Any] = Field(default_factory=list)

    avg_latency: float = Field(..., alias="avgLatency")
    disk_usage: float = Field(..., alias="diskUsage")
    total_memory_bytes: float = Field(..., alias="totalMemoryBytes")
    total_memory_gb: float = Field(..., alias="totalMemoryGB")
    avg_cpu_usage: float = Field(..., alias="avgCpuUsage")
    calculated_at: str = Field(..., alias="calculatedAt")

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def _as_list(items: Any) -> List[Any]:
    if isinstance(items, (list, tuple)):
        return list(items)
    return []


def calculate_enhanced_metrics(
    overview: Optional[Mapping],
    nodes: Any,
    connections: Any,
    channels: Any,
    heuristics: HealthHeuristics = DEFAULT_HEURISTICS,
) -> EnhancedMetrics:
    """Calcula latencia, disco, memoria y CPU y los empaqueta con los datos crudos."""
    avg_latency = calculate_average_latency(overview, connections, channels, heuristics)
    disk_usage = calculate_disk_usage(nodes, heuristics)
    total_memory_bytes = calculate_total_memory_bytes(nodes, heuristics)
    avg_cpu_usage = calculate_average_cpu_usage(nodes, heuristics)

    return EnhancedMetrics(
        overview=dict(overview) if isinstance(overview, Mapping) else None,
        nodes=_as_list(nodes),
        connections=_as_list(connections),
        channels=_as_list(channels),
        avg_latency=avg_latency,
        disk_usage=disk_usage,
        total_memory_bytes=total_memory_bytes,
        total_memory_gb=total_memory_bytes / BYTES_PER_GB,
        avg_cpu_usage=avg_cpu_usage,
        calculated_at=datetime.now(timezone.utc).isoformat(),
    )


async def calculate_enhanced_metrics_async(
    overview: Optional[Mapping],
    nodes: Any,
    connections: Any,
    channels: Any,
    heuristics: HealthHeuristics = DEFAULT_HEURISTICS,
) -> EnhancedMetrics:
    """Versión awaitable para pipelines async de polling (no suspende)."""
    return calculate_enhanced_metrics(overview, nodes, connections, channels, heuristics)


@dataclass(frozen=True)
class MetricsBundle:
    """Todo lo derivado de un tick: series para gráficos y escalares de salud."""

    message_rates: List[MessageRates]
    queue_totals: List[QueueTotalsPoint]
    enhanced: EnhancedMetrics
    cluster_health: ClusterHealthSummary

    def to_dict(self) -> dict:
        return {
            "messageRates": [point.to_dict() for point in self.message_rates],
            "queueTotals": [point.to_dict() for point in self.queue_totals],
            "metrics": self.enhanced.to_dict(),
            "clusterHealth": self.cluster_health.to_dict(),
        }


def build_metrics_bundle(
    overview: Optional[Mapping],
    nodes: Any,
    connections: Any,
    channels: Any,
    queues: Any = None,
    settings: Optional[EngineSettings] = None,
) -> MetricsBundle:
    """Deriva series y estimaciones de un overview del cluster.

    Args:
        overview: Respuesta de `/api/overview`
        nodes: Respuesta de `/api/nodes`
        connections: Respuesta de `/api/connections`
        channels: Respuesta de `/api/channels`
        queues: Respuesta de `/api/queues` (opcional, para el resumen de salud)
        settings: EngineSettings; si es None se cargan del entorno
    """
    settings = settings or get_settings()

    message_rates = extract_message_rates(
        overview,
        kind=SnapshotKind.OVERVIEW,
        include_disk_metrics=settings.include_disk_metrics,
        alignment=settings.alignment,
    )
    queue_totals = extract_queue_totals(overview, kind=SnapshotKind.OVERVIEW)
    enhanced = calculate_enhanced_metrics(
        overview, nodes, connections, channels, settings.heuristics
    )
    cluster_health = summarize_cluster_health(nodes, queues)

    logger.debug(
        "METRICS_BUNDLE rate_points=%s queue_points=%s health=%s",
        len(message_rates), len(queue_totals), cluster_health.cluster_health.value
    )

    return MetricsBundle(
        message_rates=message_rates,
        queue_totals=queue_totals,
        enhanced=enhanced,
        cluster_health=cluster_health,
    )
