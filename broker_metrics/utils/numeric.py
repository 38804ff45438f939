"""Funciones canónicas de precisión numérica para métricas del broker.

Política de precisión:
- Entradas: cualquier valor JSON del API de management (int, float, str, None)
- Cálculos internos: Python float (IEEE 754 double)
- Redondeo: SOLO al exponer una tasa (2 decimales, half-up)
"""

from __future__ import annotations

import math
from typing import Any, Union

# Decimales de una tasa derivada (mensajes/segundo)
RATE_PRECISION = 2

Number = Union[int, float]


def safe_float(value: Any, default: float = 0.0) -> float:
    """Convierte un valor a float con validación de NaN/Infinity.

    Args:
        value: Valor a convertir (puede ser None, str, bool, Decimal, etc.)
        default: Valor por defecto si es inválido

    Returns:
        Float válido o default si el valor es None, NaN o Infinity
    """
    if value is None:
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(f):
        return default
    return f


def safe_number(value: Any, default: Number = 0) -> Number:
    """Como safe_float, pero conserva los enteros.

    Timestamps en ms y profundidades de cola llegan como enteros JSON y deben
    volver a serializarse sin `.0`.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    f = safe_float(value, default)
    if isinstance(value, str) and f.is_integer():
        return int(f)
    return f


def round_rate(value: float, decimals: int = RATE_PRECISION) -> float:
    """Redondea una tasa half-up (0.005 -> 0.01, -0.005 -> 0.0).

    `round()` de Python usa redondeo bancario; las tasas publicadas a los
    dashboards redondean siempre hacia +inf en el punto medio.
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** decimals
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def round_half_up(value: float) -> int:
    """Entero más cercano, con el punto medio hacia +inf (82.5 -> 83)."""
    return math.floor(value + 0.5)


def clamp(value: float, lower: float, upper: float) -> float:
    """Limita un valor al rango [lower, upper]."""
    return max(lower, min(upper, value))
