"""Motor de derivación de métricas y estimación de salud para clusters de broker.

Convierte snapshots de contadores acumulados del API de management en series
de tasas por segundo, profundidad de colas y estimaciones heurísticas de
latencia, disco, memoria y CPU.
"""

from .config import (
    DEFAULT_HEURISTICS,
    AlignmentMode,
    EngineSettings,
    HealthHeuristics,
    get_settings,
)
from .metrics import (
    MessageRates,
    QueueTotalsPoint,
    RatePoint,
    RateSample,
    SnapshotKind,
    calculate_rates_from_samples,
    detect_counter_resets,
    detect_snapshot_kind,
    extract_message_rates,
    extract_message_rates_from_stats,
    extract_queue_totals,
    process_metric_samples,
    process_queue_total_samples,
)
from .health import (
    ChannelSnapshot,
    ClusterHealth,
    ClusterHealthSummary,
    ConnectionSnapshot,
    NodeSnapshot,
    QueueSnapshot,
    calculate_average_cpu_usage,
    calculate_average_latency,
    calculate_disk_usage,
    calculate_total_memory_bytes,
    summarize_cluster_health,
)
from .enhanced import (
    EnhancedMetrics,
    MetricsBundle,
    build_metrics_bundle,
    calculate_enhanced_metrics,
    calculate_enhanced_metrics_async,
)

__all__ = [
    "DEFAULT_HEURISTICS",
    "AlignmentMode",
    "EngineSettings",
    "HealthHeuristics",
    "get_settings",
    "MessageRates",
    "QueueTotalsPoint",
    "RatePoint",
    "RateSample",
    "SnapshotKind",
    "calculate_rates_from_samples",
    "detect_counter_resets",
    "detect_snapshot_kind",
    "extract_message_rates",
    "extract_message_rates_from_stats",
    "extract_queue_totals",
    "process_metric_samples",
    "process_queue_total_samples",
    "ChannelSnapshot",
    "ClusterHealth",
    "ClusterHealthSummary",
    "ConnectionSnapshot",
    "NodeSnapshot",
    "QueueSnapshot",
    "calculate_average_cpu_usage",
    "calculate_average_latency",
    "calculate_disk_usage",
    "calculate_total_memory_bytes",
    "summarize_cluster_health",
    "EnhancedMetrics",
    "MetricsBundle",
    "build_metrics_bundle",
    "calculate_enhanced_metrics",
    "calculate_enhanced_metrics_async",
]
