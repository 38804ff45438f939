"""Tests del cálculo de tasas por segundo.

Ejecutar:
    pytest tests/test_rate_calculator.py -v
"""

import pytest

from broker_metrics.metrics.models import RatePoint, RateSample
from broker_metrics.metrics.rate_calculator import (
    calculate_rates_from_samples,
    coerce_samples,
    detect_counter_resets,
)


def _rates(points):
    return [(p.timestamp, p.rate) for p in points]


# =============================================================================
# ENTRADAS VACÍAS
# =============================================================================

class TestEmptyInput:
    """Entradas vacías o ausentes producen una serie vacía."""

    @pytest.mark.parametrize("samples", [[], None, ()])
    def test_empty_or_missing(self, samples):
        assert calculate_rates_from_samples(samples) == []

    def test_malformed_container(self):
        assert calculate_rates_from_samples(42) == []
        assert calculate_rates_from_samples("samples") == []


# =============================================================================
# CÁLCULO DE TASAS
# =============================================================================

class TestRateCalculation:
    """Derivada de contadores acumulados."""

    def test_single_sample_rate_is_zero(self):
        result = calculate_rates_from_samples([{"sample": 100, "timestamp": 1000}])
        assert result == [RatePoint(timestamp=1000, rate=0)]

    def test_two_samples(self):
        samples = [
            {"sample": 100, "timestamp": 1000},
            {"sample": 200, "timestamp": 2000},  # 100 en 1 s
        ]
        assert _rates(calculate_rates_from_samples(samples)) == [(1000, 0), (2000, 100)]

    def test_multiple_samples(self):
        samples = [
            {"sample": 100, "timestamp": 1000},
            {"sample": 200, "timestamp": 2000},
            {"sample": 350, "timestamp": 3000},
            {"sample": 400, "timestamp": 4000},
        ]
        result = calculate_rates_from_samples(samples)
        assert [p.rate for p in result] == [0, 100, 150, 50]

    def test_unsorted_input_is_sorted(self):
        samples = [
            {"sample": 300, "timestamp": 3000},
            {"sample": 100, "timestamp": 1000},
            {"sample": 200, "timestamp": 2000},
        ]
        assert _rates(calculate_rates_from_samples(samples)) == [
            (1000, 0),
            (2000, 100),
            (3000, 100),
        ]

    def test_input_not_mutated(self):
        samples = [
            {"sample": 300, "timestamp": 3000},
            {"sample": 100, "timestamp": 1000},
        ]
        snapshot = [dict(s) for s in samples]
        calculate_rates_from_samples(samples)
        assert samples == snapshot

    def test_duplicate_timestamp_rate_zero(self):
        samples = [
            {"sample": 100, "timestamp": 1000},
            {"sample": 200, "timestamp": 1000},
        ]
        assert _rates(calculate_rates_from_samples(samples)) == [(1000, 0), (1000, 0)]

    def test_rounding_two_decimals(self):
        samples = [
            {"sample": 100, "timestamp": 1000},
            {"sample": 133, "timestamp": 2000},
        ]
        assert calculate_rates_from_samples(samples)[1].rate == 33

    def test_fractional_rate_rounded(self):
        samples = [
            {"sample": 0, "timestamp": 0},
            {"sample": 1, "timestamp": 3000},  # 0.3333.../s
        ]
        assert calculate_rates_from_samples(samples)[1].rate == 0.33

    def test_sub_second_interval(self):
        samples = [
            {"sample": 10, "timestamp": 1000},
            {"sample": 20, "timestamp": 1500},
        ]
        assert calculate_rates_from_samples(samples)[1].rate == 20

    def test_negative_delta_not_clamped(self):
        samples = [
            {"sample": 200, "timestamp": 1000},
            {"sample": 100, "timestamp": 2000},
        ]
        assert _rates(calculate_rates_from_samples(samples)) == [(1000, 0), (2000, -100)]

    def test_idempotent(self):
        samples = [
            {"sample": 100, "timestamp": 1000},
            {"sample": 250, "timestamp": 2000},
            {"sample": 300, "timestamp": 4000},
        ]
        assert calculate_rates_from_samples(samples) == calculate_rates_from_samples(samples)

    def test_accepts_rate_sample_objects(self):
        samples = [RateSample(sample=0, timestamp=0), RateSample(sample=50, timestamp=1000)]
        assert _rates(calculate_rates_from_samples(samples)) == [(0, 0), (1000, 50)]


# =============================================================================
# DATOS DEGRADADOS
# =============================================================================

class TestDegradedSamples:
    """Muestras con campos inválidos no rompen el cálculo."""

    def test_none_entries_skipped(self):
        samples = [None, {"sample": 100, "timestamp": 1000}, "garbage"]
        assert coerce_samples(samples) == [RateSample(sample=100, timestamp=1000)]

    def test_non_numeric_fields_default_to_zero(self):
        samples = [
            {"sample": "abc", "timestamp": 1000},
            {"sample": 50, "timestamp": 2000},
        ]
        assert _rates(calculate_rates_from_samples(samples)) == [(1000, 0), (2000, 50)]


# =============================================================================
# REINICIOS DE CONTADOR
# =============================================================================

class TestCounterResets:
    """Las tasas negativas se marcan como reinicio."""

    def test_counter_reset_flag(self):
        assert RatePoint(timestamp=1, rate=-5).counter_reset is True
        assert RatePoint(timestamp=1, rate=0).counter_reset is False

    def test_detect_counter_resets(self):
        samples = [
            {"sample": 100, "timestamp": 1000},
            {"sample": 300, "timestamp": 2000},
            {"sample": 10, "timestamp": 3000},
            {"sample": 20, "timestamp": 4000},
        ]
        points = calculate_rates_from_samples(samples)
        assert detect_counter_resets(points) == [3000]
