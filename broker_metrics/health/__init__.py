"""Health layer - Estimaciones heurísticas y resumen de salud del cluster."""

from .snapshots import ChannelSnapshot, ConnectionSnapshot, NodeSnapshot, QueueSnapshot
from .estimator import (
    calculate_average_cpu_usage,
    calculate_average_latency,
    calculate_disk_usage,
    calculate_total_memory_bytes,
)
from .cluster_health import (
    DEFAULT_ALERT_THRESHOLDS,
    AlertThresholds,
    ClusterHealth,
    ClusterHealthSummary,
    ThresholdLevel,
    summarize_cluster_health,
)

__all__ = [
    "ChannelSnapshot",
    "ConnectionSnapshot",
    "NodeSnapshot",
    "QueueSnapshot",
    "calculate_average_cpu_usage",
    "calculate_average_latency",
    "calculate_disk_usage",
    "calculate_total_memory_bytes",
    "DEFAULT_ALERT_THRESHOLDS",
    "AlertThresholds",
    "ClusterHealth",
    "ClusterHealthSummary",
    "ThresholdLevel",
    "summarize_cluster_health",
]
