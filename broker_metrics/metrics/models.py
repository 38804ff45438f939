"""Value types for derived broker metrics.

All records are immutable; each polling tick builds a fresh set.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..utils.numeric import Number, safe_number


@dataclass(frozen=True)
class RateSample:
    """One cumulative-counter reading (`timestamp` in epoch milliseconds)."""

    sample: Number
    timestamp: Number

    @classmethod
    def coerce(cls, raw: Any) -> Optional["RateSample"]:
        """Build a sample from a management-API dict or a RateSample.

        Returns None for entries that carry neither field.
        """
        if isinstance(raw, RateSample):
            return raw
        if isinstance(raw, Mapping):
            if "sample" not in raw and "timestamp" not in raw:
                return None
            return cls(
                sample=safe_number(raw.get("sample")),
                timestamp=safe_number(raw.get("timestamp")),
            )
        return None


@dataclass(frozen=True)
class RatePoint:
    """Per-second rate derived between two consecutive samples."""

    timestamp: Number
    rate: float

    @property
    def counter_reset(self) -> bool:
        """True when the counter went backwards (broker restart or stats reset)."""
        return self.rate < 0

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "rate": self.rate}


@dataclass(frozen=True)
class MessageRates:
    """Rates of several named counters at one timestamp.

    Only counters that produced a point at this position are present in `rates`.
    """

    timestamp: Number
    rates: Dict[str, float] = field(default_factory=dict)

    def __getitem__(self, counter: str) -> float:
        return self.rates[counter]

    def __contains__(self, counter: object) -> bool:
        return counter in self.rates

    def get(self, counter: str, default: Optional[float] = None) -> Optional[float]:
        return self.rates.get(counter, default)

    def to_dict(self) -> dict:
        result: Dict[str, Number] = {"timestamp": self.timestamp}
        result.update(self.rates)
        return result


@dataclass(frozen=True)
class QueueTotalsPoint:
    """Absolute queue depth (not a rate) at one timestamp."""

    timestamp: Number
    messages: Number
    messages_ready: Number = 0
    messages_unacknowledged: Number = 0

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "messages": self.messages,
            "messages_ready": self.messages_ready,
            "messages_unacknowledged": self.messages_unacknowledged,
        }
