"""Configuración del motor de métricas."""

from .heuristics import DEFAULT_HEURISTICS, HealthHeuristics
from .settings import AlignmentMode, EngineSettings, get_settings

__all__ = [
    "DEFAULT_HEURISTICS",
    "HealthHeuristics",
    "AlignmentMode",
    "EngineSettings",
    "get_settings",
]
