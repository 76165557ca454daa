"""
Accumulator Events

Optional observability hook for tree mutation. The accumulator calls an
injected sink on every carry (MergeEvent) and after every root rebuild
(RootRebuiltEvent). Events carry hex digests so they can be logged or
serialized as-is.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


EventKind = Literal["merge", "root_rebuilt"]


class MergeEvent(BaseModel):
    """A frontier carry combined two peaks into one."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["merge"] = "merge"
    weight: int = Field(..., ge=2, description="Leaf count of the merged subtree")
    left_digest: str = Field(..., description="Digest of the earlier peak (0x-prefixed)")
    right_digest: str = Field(..., description="Digest of the carried subtree (0x-prefixed)")
    parent_digest: str = Field(..., description="Digest of the new peak (0x-prefixed)")


class RootRebuiltEvent(BaseModel):
    """The current root was recomputed from the frontier."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["root_rebuilt"] = "root_rebuilt"
    leaf_count: int = Field(..., ge=1)
    root_digest: str = Field(..., description="Digest of the new root (0x-prefixed)")
    weights: list[int] = Field(default_factory=list, description="Frontier weights, ascending")

    @property
    def peak_count(self) -> int:
        return len(self.weights)


AccumulatorEvent = Union[MergeEvent, RootRebuiltEvent]


@runtime_checkable
class EventSink(Protocol):
    """Anything that accepts accumulator events."""

    def emit(self, event: AccumulatorEvent) -> None:
        ...


class LoggingEventSink:
    """Writes every event to a logger."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        level: int = logging.DEBUG,
    ) -> None:
        self.logger = logger or logging.getLogger("streamtree.events")
        self.level = level

    def emit(self, event: AccumulatorEvent) -> None:
        if isinstance(event, MergeEvent):
            self.logger.log(
                self.level,
                "merge weight=%d %s + %s -> %s",
                event.weight,
                event.left_digest,
                event.right_digest,
                event.parent_digest,
            )
        else:
            self.logger.log(
                self.level,
                "root rebuilt leaf_count=%d weights=%s root=%s",
                event.leaf_count,
                event.weights,
                event.root_digest,
            )


class RecordingEventSink:
    """
    Keeps events in memory.

    Usage:
        sink = RecordingEventSink()
        acc = StreamingMerkleAccumulator(event_sink=sink)
        acc.append(b"a")
        sink.of_kind("root_rebuilt")
    """

    def __init__(self) -> None:
        self._events: list[AccumulatorEvent] = []

    def emit(self, event: AccumulatorEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[AccumulatorEvent]:
        return list(self._events)

    def of_kind(self, kind: EventKind) -> list[AccumulatorEvent]:
        return [e for e in self._events if e.kind == kind]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


__all__ = [
    "EventKind",
    "MergeEvent",
    "RootRebuiltEvent",
    "AccumulatorEvent",
    "EventSink",
    "LoggingEventSink",
    "RecordingEventSink",
]
