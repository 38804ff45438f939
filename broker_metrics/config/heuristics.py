"""Constantes heurísticas de estimación de salud del cluster.

Estos valores son empíricos, no modelados. Se mantienen exactos para que los
dashboards y las alertas existentes sigan comparando contra las mismas cifras.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthHeuristics:
    """Factores y límites usados por el estimador de salud."""

    # Latencia con flujo de mensajes (ms)
    flow_latency_base: float = 1.0
    flow_latency_backlog_weight: float = 10.0
    flow_latency_min: float = 0.1
    flow_latency_max: float = 100.0

    # Latencia aproximada por conexiones/canales (ms)
    connection_latency_base: float = 1.0
    connection_latency_divisor: float = 10.0
    connection_latency_min: float = 0.5
    connection_latency_max: float = 50.0

    # Cluster sin flujo ni conexiones
    idle_latency_ms: float = 1.2
    latency_error_fallback: float = 2.5

    # Disco: total estimado = disk_free + disk_free_limit * multiplier
    disk_limit_multiplier: float = 2.0
    # Disco estimado desde memoria: avg_mem * weight + offset, en [floor, ceiling]
    disk_memory_weight: float = 0.8
    disk_memory_offset: float = 20.0
    disk_memory_floor: float = 25.0
    disk_memory_ceiling: float = 85.0
    disk_error_fallback: float = 45.0

    # mem_limit suele ser ~40% de la RAM del host
    mem_limit_factor: float = 2.5
    # mem_used se asume ~30% de la RAM del host
    mem_used_factor: float = 3.33
    default_total_memory_bytes: int = 8589934592  # 8 GiB

    # CPU: el broker no la expone, se estima por presión de memoria y sockets
    cpu_memory_weight: float = 0.6
    cpu_socket_weight: float = 0.4
    cpu_running_baseline: float = 5.0
    cpu_node_ceiling: float = 95.0
    cpu_error_fallback: float = 15.0


# Config global por defecto utilizable por estimadores y bundles
DEFAULT_HEURISTICS = HealthHeuristics()
