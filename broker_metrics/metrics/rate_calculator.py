"""Conversión de contadores acumulados a series de tasas por segundo.

El API de management del broker publica contadores acumulados (total de
mensajes publicados desde el arranque del nodo) muestreados cada pocos
segundos. Para los gráficos se necesita la derivada:

    rate[i] = (sample[i] - sample[i-1]) / ((timestamp[i] - timestamp[i-1]) / 1000)

- El primer punto siempre tiene rate=0 (no hay muestra previa).
- dt <= 0 (timestamp duplicado) -> rate=0.
- Un contador que decrece (reinicio del broker) produce una tasa negativa,
  que se devuelve tal cual.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from ..utils.numeric import round_rate
from .models import RatePoint, RateSample

logger = logging.getLogger(__name__)


def coerce_samples_by_position(samples: Optional[Iterable[Any]]) -> List[Optional[RateSample]]:
    """Normaliza una colección de muestras conservando su posición.

    Las entradas inválidas quedan como None para que las series paralelas
    (ready/unacked, otros contadores) sigan alineadas por índice.
    """
    if not samples:
        return []
    if isinstance(samples, (str, bytes)) or not hasattr(samples, "__iter__"):
        logger.debug("MALFORMED_SAMPLES type=%s", type(samples).__name__)
        return []

    result: List[Optional[RateSample]] = []
    for raw in samples:
        sample = RateSample.coerce(raw)
        if sample is None:
            logger.debug("SKIP_SAMPLE raw=%r", raw)
        result.append(sample)
    return result


def coerce_samples(samples: Optional[Iterable[Any]]) -> List[RateSample]:
    """Normaliza una colección de muestras, descartando entradas inválidas."""
    return [sample for sample in coerce_samples_by_position(samples) if sample is not None]


def calculate_rates_from_samples(samples: Optional[Iterable[Any]]) -> List[RatePoint]:
    """Deriva la serie de tasas por segundo de un contador.

    Args:
        samples: Muestras `{sample, timestamp}` (dicts o RateSample), en
            cualquier orden. None o vacío son válidos.

    Returns:
        Lista de RatePoint ordenada por timestamp ascendente.
    """
    ordered = sorted(coerce_samples(samples), key=lambda s: s.timestamp)
    if not ordered:
        return []

    rates: List[RatePoint] = [RatePoint(timestamp=ordered[0].timestamp, rate=0.0)]

    for previous, current in zip(ordered, ordered[1:]):
        dt_seconds = (current.timestamp - previous.timestamp) / 1000

        if dt_seconds <= 0:
            logger.debug(
                "ZERO_DT timestamp=%s previous_timestamp=%s",
                current.timestamp, previous.timestamp
            )
            rates.append(RatePoint(timestamp=current.timestamp, rate=0.0))
            continue

        rate = round_rate((current.sample - previous.sample) / dt_seconds)
        if rate < 0:
            logger.debug(
                "COUNTER_RESET timestamp=%s previous=%s current=%s rate=%.2f",
                current.timestamp, previous.sample, current.sample, rate
            )
        rates.append(RatePoint(timestamp=current.timestamp, rate=rate))

    return rates


def detect_counter_resets(points: Iterable[RatePoint]) -> List[float]:
    """Timestamps where the derived rate went negative."""
    return [point.timestamp for point in points if point.counter_reset]


def calculate_rates_by_position(samples: Optional[Iterable[Any]]) -> List[Optional[RatePoint]]:
    """Como calculate_rates_from_samples, con None en el lugar de cada
    entrada inválida. Lo usa la combinación posicional de contadores."""
    positions = coerce_samples_by_position(samples)
    points = iter(calculate_rates_from_samples([s for s in positions if s is not None]))
    return [None if sample is None else next(points) for sample in positions]
