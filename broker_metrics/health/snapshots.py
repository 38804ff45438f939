"""Snapshots de telemetría de nodos, conexiones, canales y colas.

Los payloads del API de management llegan como dicts y cualquier campo puede
faltar. Estos records normalizan sólo lo que usan las heurísticas.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from ..utils.numeric import safe_float


def _optional_float(raw: Mapping, key: str) -> Optional[float]:
    if raw.get(key) is None:
        return None
    return safe_float(raw.get(key))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass(frozen=True)
class NodeSnapshot:
    """Telemetría de un nodo del broker."""

    name: Optional[str] = None
    running: bool = False

    mem_used: Optional[float] = None
    mem_limit: Optional[float] = None
    mem_alarm: bool = False

    disk_free: Optional[float] = None
    disk_free_limit: Optional[float] = None
    disk_free_alarm: bool = False

    sockets_used: Optional[float] = None
    sockets_total: Optional[float] = None

    partitions: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def coerce(cls, raw: Any) -> Optional["NodeSnapshot"]:
        if isinstance(raw, NodeSnapshot):
            return raw
        if not isinstance(raw, Mapping):
            return None

        partitions = raw.get("partitions") or ()
        if isinstance(partitions, (str, bytes)) or not isinstance(partitions, Sequence):
            partitions = ()

        return cls(
            name=raw.get("name"),
            running=_as_bool(raw.get("running")),
            mem_used=_optional_float(raw, "mem_used"),
            mem_limit=_optional_float(raw, "mem_limit"),
            mem_alarm=_as_bool(raw.get("mem_alarm")),
            disk_free=_optional_float(raw, "disk_free"),
            disk_free_limit=_optional_float(raw, "disk_free_limit"),
            disk_free_alarm=_as_bool(raw.get("disk_free_alarm")),
            sockets_used=_optional_float(raw, "sockets_used"),
            sockets_total=_optional_float(raw, "sockets_total"),
            partitions=tuple(str(p) for p in partitions),
        )

    @property
    def memory_usage_percent(self) -> Optional[float]:
        if not self.mem_limit or self.mem_limit <= 0:
            return None
        return (self.mem_used or 0.0) / self.mem_limit * 100


@dataclass(frozen=True)
class ConnectionSnapshot:
    """Conexión AMQP; sólo interesa su estado."""

    state: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def coerce(cls, raw: Any) -> Optional["ConnectionSnapshot"]:
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Mapping):
            return cls(state=raw.get("state"), name=raw.get("name"))
        if hasattr(raw, "state"):
            return cls(state=getattr(raw, "state"), name=getattr(raw, "name", None))
        return None

    @property
    def is_running(self) -> bool:
        return self.state == "running"


@dataclass(frozen=True)
class ChannelSnapshot(ConnectionSnapshot):
    """Canal AMQP; sólo interesa su estado."""


@dataclass(frozen=True)
class QueueSnapshot:
    """Profundidad actual de una cola."""

    name: Optional[str] = None
    messages: float = 0.0
    messages_unacknowledged: float = 0.0
    consumers: float = 0.0

    @classmethod
    def coerce(cls, raw: Any) -> Optional["QueueSnapshot"]:
        if isinstance(raw, QueueSnapshot):
            return raw
        if not isinstance(raw, Mapping):
            return None
        return cls(
            name=raw.get("name"),
            messages=safe_float(raw.get("messages")),
            messages_unacknowledged=safe_float(raw.get("messages_unacknowledged")),
            consumers=safe_float(raw.get("consumers")),
        )


def _is_collection(items: Any) -> bool:
    return isinstance(items, (list, tuple))


def coerce_nodes(nodes: Any) -> Optional[List[NodeSnapshot]]:
    """Lista de NodeSnapshot, o None si `nodes` no es una lista."""
    if not _is_collection(nodes):
        return None
    return [node for node in (NodeSnapshot.coerce(raw) for raw in nodes) if node is not None]


def coerce_connections(connections: Any) -> List[ConnectionSnapshot]:
    if not _is_collection(connections):
        return []
    return [
        conn for conn in (ConnectionSnapshot.coerce(raw) for raw in connections)
        if conn is not None
    ]


def coerce_channels(channels: Any) -> List[ChannelSnapshot]:
    if not _is_collection(channels):
        return []
    return [
        channel for channel in (ChannelSnapshot.coerce(raw) for raw in channels)
        if channel is not None
    ]


def coerce_queues(queues: Any) -> List[QueueSnapshot]:
    if not _is_collection(queues):
        return []
    return [queue for queue in (QueueSnapshot.coerce(raw) for raw in queues) if queue is not None]
