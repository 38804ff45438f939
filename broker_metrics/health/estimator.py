"""Heuristic health estimates for a broker cluster.

The management API does not report latency, host CPU, host RAM or disk
capacity directly. These functions approximate them from what it does
report (message rates, node memory/disk/socket counters, connection and
channel states). Every function is total: missing fields take their
fallback path and unexpected failures return a fixed value from
`HealthHeuristics` instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from ..config.heuristics import DEFAULT_HEURISTICS, HealthHeuristics
from ..utils.numeric import clamp, safe_float
from .snapshots import coerce_channels, coerce_connections, coerce_nodes

logger = logging.getLogger(__name__)


def _current_rate(stats: Any, counter: str) -> float:
    if not isinstance(stats, Mapping):
        return 0.0
    details = stats.get(f"{counter}_details")
    if not isinstance(details, Mapping):
        return 0.0
    return safe_float(details.get("rate"))


def calculate_average_latency(
    snapshot: Optional[Mapping],
    connections: Any,
    channels: Any,
    heuristics: HealthHeuristics = DEFAULT_HEURISTICS,
) -> float:
    """Estimate average message latency in milliseconds.

    With message flow, latency grows with the publish/deliver gap (a
    growing backlog). Without flow, the ratio of running channels to
    running connections is used as a load proxy. An idle cluster gets
    `idle_latency_ms`.
    """
    try:
        stats = snapshot.get("message_stats") if isinstance(snapshot, Mapping) else None
        publish_rate = _current_rate(stats, "publish")
        deliver_rate = _current_rate(stats, "deliver")

        if publish_rate > 0 and deliver_rate > 0:
            backlog_ratio = 0.0
            if publish_rate > deliver_rate:
                backlog_ratio = (publish_rate - deliver_rate) / publish_rate
            latency = heuristics.flow_latency_base + backlog_ratio * heuristics.flow_latency_backlog_weight
            return clamp(latency, heuristics.flow_latency_min, heuristics.flow_latency_max)

        active_connections = sum(1 for conn in coerce_connections(connections) if conn.is_running)
        active_channels = sum(1 for ch in coerce_channels(channels) if ch.is_running)

        if active_connections + active_channels > 0:
            load_factor = (
                active_channels / max(active_connections, 1) / heuristics.connection_latency_divisor
            )
            latency = heuristics.connection_latency_base + load_factor
            return clamp(
                latency,
                heuristics.connection_latency_min,
                heuristics.connection_latency_max,
            )

        logger.info("IDLE_CLUSTER latency_ms=%.2f", heuristics.idle_latency_ms)
        return heuristics.idle_latency_ms
    except Exception:
        logger.exception("LATENCY_ESTIMATE_FAILED fallback=%.2f", heuristics.latency_error_fallback)
        return heuristics.latency_error_fallback


def calculate_disk_usage(
    nodes: Any,
    heuristics: HealthHeuristics = DEFAULT_HEURISTICS,
) -> float:
    """Estimate cluster disk usage as a percentage (0-100).

    Nodes only report free space and the free-space alarm limit, so the
    disk size is approximated as `disk_free + disk_free_limit * 2`. When no
    node reports disk stats, usage is inferred from memory pressure.
    """
    try:
        snapshots = coerce_nodes(nodes)
        if not snapshots:
            logger.warning("NO_NODES metric=disk_usage")
            return 0.0

        total_used = 0.0
        total_size = 0.0
        for node in snapshots:
            disk_free = node.disk_free or 0.0
            disk_free_limit = node.disk_free_limit or 0.0
            if disk_free > 0 and disk_free_limit > 0:
                estimated_size = disk_free + disk_free_limit * heuristics.disk_limit_multiplier
                total_used += estimated_size - disk_free
                total_size += estimated_size

        if total_size > 0:
            return clamp(total_used / total_size * 100, 0.0, 100.0)

        memory_usage = 0.0
        for node in snapshots:
            mem_used = node.mem_used or 0.0
            mem_limit = node.mem_limit or mem_used * 2
            if mem_limit > 0:
                memory_usage += mem_used / mem_limit * 100
        avg_memory_usage = memory_usage / len(snapshots)

        logger.warning(
            "DISK_STATS_MISSING nodes=%s avg_memory_usage=%.2f using_memory_estimate=true",
            len(snapshots), avg_memory_usage
        )
        return clamp(
            avg_memory_usage * heuristics.disk_memory_weight + heuristics.disk_memory_offset,
            heuristics.disk_memory_floor,
            heuristics.disk_memory_ceiling,
        )
    except Exception:
        logger.exception("DISK_ESTIMATE_FAILED fallback=%.2f", heuristics.disk_error_fallback)
        return heuristics.disk_error_fallback


def calculate_total_memory_bytes(
    nodes: Any,
    heuristics: HealthHeuristics = DEFAULT_HEURISTICS,
) -> float:
    """Estimate the total host memory across all nodes, in bytes.

    `mem_limit` is the broker's high watermark (by default ~40% of host RAM),
    hence the 2.5x factor. Without it, `mem_used` is assumed to be ~30% of
    host RAM. A non-list argument yields `default_total_memory_bytes`.
    """
    try:
        snapshots = coerce_nodes(nodes)
        if snapshots is None:
            logger.warning(
                "MALFORMED_NODES metric=total_memory type=%s fallback=%s",
                type(nodes).__name__, heuristics.default_total_memory_bytes
            )
            return heuristics.default_total_memory_bytes
        if not snapshots:
            logger.warning("NO_NODES metric=total_memory")
            return 0.0

        total_memory = 0.0
        for node in snapshots:
            mem_limit = node.mem_limit or 0.0
            mem_used = node.mem_used or 0.0
            if mem_limit > 0:
                total_memory += mem_limit * heuristics.mem_limit_factor
            elif mem_used > 0:
                total_memory += mem_used * heuristics.mem_used_factor
        return total_memory
    except Exception:
        logger.exception(
            "MEMORY_ESTIMATE_FAILED fallback=%s", heuristics.default_total_memory_bytes
        )
        return heuristics.default_total_memory_bytes


def calculate_average_cpu_usage(
    nodes: Any,
    heuristics: HealthHeuristics = DEFAULT_HEURISTICS,
) -> float:
    """Estimate average CPU usage as a percentage (0-100).

    Per node: `0.6 * memory pressure + 0.4 * socket utilization`, plus a
    baseline for running nodes, capped at 95%.
    """
    try:
        snapshots = coerce_nodes(nodes)
        if not snapshots:
            logger.warning("NO_NODES metric=cpu_usage")
            return 0.0

        total_cpu = 0.0
        for node in snapshots:
            mem_used = node.mem_used or 0.0
            mem_limit = node.mem_limit or 0.0
            sockets_used = node.sockets_used or 0.0
            sockets_total = node.sockets_total or sockets_used

            memory_pressure = mem_used / mem_limit * 100 if mem_limit > 0 else 0.0
            socket_load = sockets_used / sockets_total * 100 if sockets_total > 0 else 0.0

            estimated = (
                memory_pressure * heuristics.cpu_memory_weight
                + socket_load * heuristics.cpu_socket_weight
            )
            baseline = heuristics.cpu_running_baseline if node.running else 0.0
            total_cpu += max(baseline, min(heuristics.cpu_node_ceiling, estimated + baseline))

        return clamp(total_cpu / len(snapshots), 0.0, 100.0)
    except Exception:
        logger.exception("CPU_ESTIMATE_FAILED fallback=%.2f", heuristics.cpu_error_fallback)
        return heuristics.cpu_error_fallback
