"""Agregador de tasas de mensajes.

Ejecuta el cálculo de tasas sobre cada contador de un snapshot (publish,
deliver, ack, disk I/O, ...) y combina los resultados en una sola serie
alineada en el tiempo.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config.settings import AlignmentMode
from ..utils.numeric import Number
from .models import MessageRates, RatePoint
from .rate_calculator import calculate_rates_by_position, calculate_rates_from_samples

logger = logging.getLogger(__name__)


# Contadores que el API expone en message_stats como `<name>_details.samples`
BASE_COUNTERS: Tuple[str, ...] = (
    "publish",
    "deliver",
    "ack",
    "deliver_get",
    "confirm",
    "get",
    "get_no_ack",
    "redeliver",
    "reject",
    "return_unroutable",
)
DISK_COUNTERS: Tuple[str, ...] = ("disk_reads", "disk_writes")

# Campos que sólo aparecen en el overview del cluster
_OVERVIEW_MARKERS: Tuple[str, ...] = ("queue_totals", "object_totals", "cluster_name")


class SnapshotKind(str, Enum):
    """Forma del snapshot recibido del API de management."""
    OVERVIEW = "overview"
    QUEUE = "queue"


def detect_snapshot_kind(subject: Any) -> SnapshotKind:
    """Infiere si el snapshot es el overview del cluster o una cola.

    Sólo para llamadores que no saben qué pidieron; si se conoce, pasar
    `kind` explícitamente a los extractores.
    """
    if isinstance(subject, Mapping) and any(key in subject for key in _OVERVIEW_MARKERS):
        return SnapshotKind.OVERVIEW
    return SnapshotKind.QUEUE


def _details_samples(stats: Mapping, counter: str) -> List[Any]:
    details = stats.get(f"{counter}_details")
    if not isinstance(details, Mapping):
        return []
    return details.get("samples") or []


def _merge_by_index(series: Dict[str, List[Optional[RatePoint]]]) -> List[MessageRates]:
    # Position i takes the timestamp of the first counter with a point there.
    # None marks a malformed sample; it holds the slot without a value.
    slots: Dict[int, Tuple[Number, Dict[str, float]]] = {}

    for counter, points in series.items():
        for index, point in enumerate(points):
            if point is None:
                continue
            if index not in slots:
                slots[index] = (point.timestamp, {})
            slots[index][1][counter] = point.rate

    return [
        MessageRates(timestamp=slots[index][0], rates=slots[index][1])
        for index in sorted(slots)
    ]


def _merge_by_timestamp(series: Dict[str, List[RatePoint]]) -> List[MessageRates]:
    merged: Dict[Number, Dict[str, float]] = {}

    for counter, points in series.items():
        for point in points:
            merged.setdefault(point.timestamp, {})[counter] = point.rate

    return [
        MessageRates(timestamp=timestamp, rates=merged[timestamp])
        for timestamp in sorted(merged)
    ]


def process_metric_samples(
    samples_by_counter: Optional[Mapping],
    alignment: AlignmentMode = AlignmentMode.INDEX,
) -> List[MessageRates]:
    """Deriva las tasas de cada contador y las combina en una serie.

    Devuelve una lista nueva; no muta ninguna entrada.

    Args:
        samples_by_counter: {nombre_contador: [muestras]}
        alignment: INDEX combina por posición (todas las series de un
            snapshot comparten timestamps); TIMESTAMP combina por
            timestamp exacto.
    """
    if not samples_by_counter:
        return []

    if alignment == AlignmentMode.TIMESTAMP:
        by_timestamp: Dict[str, List[RatePoint]] = {}
        for counter, samples in samples_by_counter.items():
            points = calculate_rates_from_samples(samples)
            if points:
                by_timestamp[str(counter)] = points
        return _merge_by_timestamp(by_timestamp)

    by_index: Dict[str, List[Optional[RatePoint]]] = {}
    for counter, samples in samples_by_counter.items():
        points = calculate_rates_by_position(samples)
        if points:
            by_index[str(counter)] = points

    lengths = {len(points) for points in by_index.values()}
    if len(lengths) > 1:
        logger.debug(
            "MISALIGNED_SERIES counters=%s lengths=%s",
            sorted(by_index), sorted(lengths)
        )
    return _merge_by_index(by_index)


def extract_message_rates_from_stats(
    stats: Optional[Mapping],
    include_disk_metrics: bool = False,
    alignment: AlignmentMode = AlignmentMode.INDEX,
) -> List[MessageRates]:
    """Extrae y deriva las tasas de un `message_stats`.

    Sin muestras de `publish` se considera que no hay datos.
    """
    if not isinstance(stats, Mapping):
        return []
    if not _details_samples(stats, "publish"):
        return []

    counters: Iterable[str] = BASE_COUNTERS
    if include_disk_metrics:
        counters = BASE_COUNTERS + DISK_COUNTERS

    samples_by_counter = {
        counter: _details_samples(stats, counter)
        for counter in counters
    }
    return process_metric_samples(samples_by_counter, alignment=alignment)


def extract_message_rates(
    subject: Optional[Mapping],
    kind: Optional[SnapshotKind] = None,
    include_disk_metrics: bool = False,
    alignment: AlignmentMode = AlignmentMode.INDEX,
) -> List[MessageRates]:
    """Tasas de mensajes de un overview del cluster o de una cola.

    Ambas formas exponen `message_stats` en el nivel superior.
    """
    if not isinstance(subject, Mapping):
        return []

    if kind is None:
        kind = detect_snapshot_kind(subject)
    logger.debug("EXTRACT_MESSAGE_RATES kind=%s disk=%s", kind.value, include_disk_metrics)

    return extract_message_rates_from_stats(
        subject.get("message_stats"),
        include_disk_metrics=include_disk_metrics,
        alignment=alignment,
    )
