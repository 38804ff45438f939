"""Tests del ensamblado de métricas enriquecidas y del bundle por tick.

Ejecutar:
    pytest tests/test_enhanced_metrics.py -v
"""

from datetime import datetime
from typing import Any, Dict, List

import pytest

from broker_metrics.config.settings import AlignmentMode, EngineSettings
from broker_metrics.enhanced import (
    EnhancedMetrics,
    build_metrics_bundle,
    calculate_enhanced_metrics,
    calculate_enhanced_metrics_async,
)
from broker_metrics.health.cluster_health import ClusterHealth


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def overview() -> Dict[str, Any]:
    """Overview del cluster con flujo de mensajes y queue_totals."""
    return {
        "cluster_name": "rabbit@prod",
        "message_stats": {
            "publish_details": {
                "rate": 100,
                "samples": [{"sample": 100, "timestamp": 1000}, {"sample": 200, "timestamp": 2000}],
            },
            "deliver_details": {
                "rate": 95,
                "samples": [{"sample": 50, "timestamp": 1000}, {"sample": 150, "timestamp": 2000}],
            },
            "disk_reads_details": {
                "samples": [{"sample": 0, "timestamp": 1000}, {"sample": 8, "timestamp": 2000}],
            },
        },
        "queue_totals": {
            "messages_details": {
                "samples": [{"sample": 10, "timestamp": 1000}, {"sample": 12, "timestamp": 2000}],
            },
        },
    }


@pytest.fixture
def nodes() -> List[Dict[str, Any]]:
    return [{
        "name": "rabbit@a",
        "running": True,
        "mem_limit": 1000000000,
        "mem_used": 500000000,
        "disk_free": 1000000,
        "disk_free_limit": 500000,
    }]


# =============================================================================
# ENHANCED METRICS
# =============================================================================

class TestEnhancedMetrics:
    """Composición de las cuatro estimaciones."""

    def test_all_fields_present(self, overview, nodes):
        result = calculate_enhanced_metrics(overview, nodes, [], [])
        data = result.to_dict()

        for key in (
            "overview",
            "nodes",
            "connections",
            "channels",
            "avgLatency",
            "diskUsage",
            "totalMemoryBytes",
            "totalMemoryGB",
            "avgCpuUsage",
            "calculatedAt",
        ):
            assert key in data

        assert isinstance(result.total_memory_gb, float)
        assert result.total_memory_gb > 0

    def test_values(self, overview, nodes):
        result = calculate_enhanced_metrics(overview, nodes, [], [])

        assert result.avg_latency == pytest.approx(1.5)
        assert result.disk_usage == pytest.approx(50.0)
        assert result.total_memory_bytes == 2500000000
        assert result.total_memory_gb == pytest.approx(2500000000 / 1024 ** 3)
        assert result.avg_cpu_usage == pytest.approx(35.0)
        datetime.fromisoformat(result.calculated_at)

    def test_passes_raw_inputs_through(self, overview, nodes):
        connections = [{"state": "running", "name": "conn-1"}]
        result = calculate_enhanced_metrics(overview, nodes, connections, [])

        assert result.overview == overview
        assert result.nodes == nodes
        assert result.connections == connections
        assert result.channels == []

    def test_degenerate_inputs(self):
        result = calculate_enhanced_metrics(None, None, None, None)

        assert result.overview is None
        assert result.nodes == []
        assert result.avg_latency == 1.2
        assert result.disk_usage == 0
        assert result.total_memory_bytes == 8589934592
        assert result.total_memory_gb == 8.0
        assert result.avg_cpu_usage == 0

    def test_immutable(self, overview, nodes):
        result = calculate_enhanced_metrics(overview, nodes, [], [])
        with pytest.raises(Exception):
            result.avg_latency = 0

    def test_accepts_camel_case(self):
        metrics = EnhancedMetrics(
            avgLatency=1.2,
            diskUsage=0,
            totalMemoryBytes=0,
            totalMemoryGB=0,
            avgCpuUsage=0,
            calculatedAt="2026-01-01T00:00:00+00:00",
        )
        assert metrics.avg_latency == 1.2

    @pytest.mark.asyncio
    async def test_async_entry_point(self, overview, nodes):
        result = await calculate_enhanced_metrics_async(overview, nodes, [], [])
        sync_result = calculate_enhanced_metrics(overview, nodes, [], [])

        assert result.avg_latency == sync_result.avg_latency
        assert result.total_memory_bytes == sync_result.total_memory_bytes


# =============================================================================
# BUNDLE
# =============================================================================

class TestMetricsBundle:
    """Series + estimaciones de un tick."""

    def test_bundle_uses_settings(self, overview, nodes):
        settings = EngineSettings(include_disk_metrics=True, alignment=AlignmentMode.TIMESTAMP)
        bundle = build_metrics_bundle(overview, nodes, [], [], settings=settings)

        assert len(bundle.message_rates) == 2
        assert bundle.message_rates[1]["disk_reads"] == 8
        assert [p.messages for p in bundle.queue_totals] == [10, 12]
        assert bundle.enhanced.total_memory_bytes == 2500000000
        assert bundle.cluster_health.cluster_health == ClusterHealth.HEALTHY

    def test_bundle_without_disk(self, overview, nodes):
        bundle = build_metrics_bundle(overview, nodes, [], [], settings=EngineSettings())
        assert "disk_reads" not in bundle.message_rates[1]

    def test_bundle_loads_settings_from_env(self, overview, nodes, monkeypatch, tmp_path):
        monkeypatch.setenv("BROKER_METRICS_ENV_FILE", str(tmp_path / "missing.env"))
        monkeypatch.setenv("BROKER_METRICS_INCLUDE_DISK", "true")

        bundle = build_metrics_bundle(overview, nodes, [], [])

        assert "disk_reads" in bundle.message_rates[1]

    def test_bundle_to_dict(self, overview, nodes):
        queues = [{"name": "orders", "messages": 20000}]
        bundle = build_metrics_bundle(overview, nodes, [], [], queues=queues, settings=EngineSettings())
        data = bundle.to_dict()

        assert data["messageRates"][1]["publish"] == 100
        assert data["queueTotals"][0]["messages"] == 10
        assert data["metrics"]["totalMemoryBytes"] == 2500000000
        assert data["clusterHealth"]["clusterHealth"] == "degraded"
