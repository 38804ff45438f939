"""Utilidades numéricas compartidas."""

from .numeric import clamp, round_half_up, round_rate, safe_float, safe_number

__all__ = ["clamp", "round_half_up", "round_rate", "safe_float", "safe_number"]
