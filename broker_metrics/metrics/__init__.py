"""Derivación de tasas y series de colas a partir de snapshots del broker."""

from .models import MessageRates, QueueTotalsPoint, RatePoint, RateSample
from .rate_calculator import calculate_rates_from_samples, detect_counter_resets
from .aggregator import (
    BASE_COUNTERS,
    DISK_COUNTERS,
    SnapshotKind,
    detect_snapshot_kind,
    extract_message_rates,
    extract_message_rates_from_stats,
    process_metric_samples,
)
from .queue_totals import extract_queue_totals, process_queue_total_samples

__all__ = [
    "MessageRates",
    "QueueTotalsPoint",
    "RatePoint",
    "RateSample",
    "calculate_rates_from_samples",
    "detect_counter_resets",
    "BASE_COUNTERS",
    "DISK_COUNTERS",
    "SnapshotKind",
    "detect_snapshot_kind",
    "extract_message_rates",
    "extract_message_rates_from_stats",
    "process_metric_samples",
    "extract_queue_totals",
    "process_queue_total_samples",
]
