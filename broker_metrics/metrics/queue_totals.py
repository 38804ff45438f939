"""Series de profundidad de colas (total / ready / unacknowledged).

No es un cálculo de tasas: re-expone los valores absolutos alineados a los
timestamps de la serie `messages`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from ..utils.numeric import Number
from .aggregator import SnapshotKind, detect_snapshot_kind
from .models import QueueTotalsPoint, RateSample
from .rate_calculator import coerce_samples_by_position

logger = logging.getLogger(__name__)


def _value_at(samples: Sequence[Optional[RateSample]], index: int) -> Number:
    if index < len(samples) and samples[index] is not None:
        return samples[index].sample
    return 0


def process_queue_total_samples(
    total_samples: Optional[Sequence[Any]],
    ready_samples: Optional[Sequence[Any]] = None,
    unacked_samples: Optional[Sequence[Any]] = None,
) -> List[QueueTotalsPoint]:
    """Un punto por muestra válida de `total_samples`.

    `messages_ready` y `messages_unacknowledged` se toman de la misma posición
    en sus series; si falta la posición o la muestra es inválida, valen 0.
    """
    totals = coerce_samples_by_position(total_samples)
    ready = coerce_samples_by_position(ready_samples)
    unacked = coerce_samples_by_position(unacked_samples)

    return [
        QueueTotalsPoint(
            timestamp=sample.timestamp,
            messages=sample.sample,
            messages_ready=_value_at(ready, index),
            messages_unacknowledged=_value_at(unacked, index),
        )
        for index, sample in enumerate(totals)
        if sample is not None
    ]


def _samples(container: Any, field_name: str) -> List[Any]:
    if not isinstance(container, Mapping):
        return []
    details = container.get(f"{field_name}_details")
    if not isinstance(details, Mapping):
        return []
    return details.get("samples") or []


def extract_queue_totals(
    subject: Optional[Mapping],
    kind: Optional[SnapshotKind] = None,
) -> List[QueueTotalsPoint]:
    """Profundidad de colas de un overview (`queue_totals`) o de una cola."""
    if not isinstance(subject, Mapping):
        return []

    if kind is None:
        kind = detect_snapshot_kind(subject)

    container = subject.get("queue_totals") if kind == SnapshotKind.OVERVIEW else subject

    total_samples = _samples(container, "messages")
    if not total_samples:
        logger.debug("NO_QUEUE_TOTALS kind=%s", kind.value)
        return []

    return process_queue_total_samples(
        total_samples,
        _samples(container, "messages_ready"),
        _samples(container, "messages_unacknowledged"),
    )
