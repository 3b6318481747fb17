"""Workout document models: workouts, patterns, shots and messages.

Configs are sparse mappings keyed by the persisted camelCase names. A key
that is absent means "inherit"; it is never the same as a zero or False
value. Values are already typed (enums, RepeatCount, Limits, ...) by the
loader in ``serialization.document``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ghosting_engine.models.enums import (
    EDITOR_DEFAULT_LEAD_TIME_S,
    EntryKind,
    LimitType,
    PositionKind,
    RepeatMode,
)


@dataclass(frozen=True)
class Position:
    """Closed positional variant carried by every entry and pattern.

    ``index`` is 1-based and only meaningful for LOCKED_AT_INDEX.
    """

    kind: PositionKind = PositionKind.NORMAL
    index: int | None = None

    @classmethod
    def normal(cls) -> Position:
        return cls(PositionKind.NORMAL)

    @classmethod
    def linked(cls) -> Position:
        return cls(PositionKind.LINKED)

    @classmethod
    def locked_at(cls, index: int) -> Position:
        return cls(PositionKind.LOCKED_AT_INDEX, index)

    @classmethod
    def locked_last(cls) -> Position:
        return cls(PositionKind.LOCKED_LAST)

    @property
    def is_pinned(self) -> bool:
        return self.kind in (PositionKind.LOCKED_AT_INDEX, PositionKind.LOCKED_LAST)


@dataclass(frozen=True)
class RepeatCount:
    """Fixed repeat count, or an inclusive random range drawn per visit."""

    mode: RepeatMode = RepeatMode.FIXED
    count: int = 1
    min: int = 0
    max: int = 0

    @classmethod
    def fixed(cls, count: int) -> RepeatCount:
        return cls(RepeatMode.FIXED, count=count)

    @classmethod
    def random(cls, low: int, high: int) -> RepeatCount:
        return cls(RepeatMode.RANDOM, min=low, max=high)


@dataclass(frozen=True)
class IntervalOffset:
    """Offset added to an interval, in seconds. FIXED offsets use ``min``."""

    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class Limits:
    """Cap on a pattern run or the workout.

    ``value`` is a shot count for SHOT_LIMIT and seconds for TIME_LIMIT.
    """

    type: LimitType = LimitType.ALL_SHOTS
    value: float | None = None

    @classmethod
    def all_shots(cls) -> Limits:
        return cls()

    @classmethod
    def shot_limit(cls, shots: int) -> Limits:
        return cls(LimitType.SHOT_LIMIT, shots)

    @classmethod
    def time_limit(cls, seconds: float) -> Limits:
        return cls(LimitType.TIME_LIMIT, float(seconds))


@dataclass(frozen=True)
class ShotEntry:
    id: str | None = None
    name: str = ""
    position: Position = field(default_factory=Position)
    config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def new(cls, name: str, id: str | None = None) -> ShotEntry:
        """Shot as the editor creates it, with the editor's lead time pre-filled."""
        return cls(id=id, name=name, config={"shotAnnouncementLeadTime": EDITOR_DEFAULT_LEAD_TIME_S})

    @property
    def kind(self) -> EntryKind:
        return EntryKind.SHOT


@dataclass(frozen=True)
class MessageEntry:
    id: str | None = None
    name: str = ""
    position: Position = field(default_factory=Position)
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> EntryKind:
        return EntryKind.MESSAGE


Entry = Union[ShotEntry, MessageEntry]


@dataclass(frozen=True)
class Pattern:
    """A named, ordered group of entries that can repeat and be shuffled."""

    id: str | None = None
    name: str = ""
    position: Position = field(default_factory=Position)
    config: dict[str, Any] = field(default_factory=dict)
    entries: tuple[Entry, ...] = field(default_factory=tuple)

    @property
    def shot_count(self) -> int:
        return sum(1 for e in self.entries if e.kind == EntryKind.SHOT)


@dataclass(frozen=True)
class Workout:
    name: str = ""
    config: dict[str, Any] = field(default_factory=dict)
    patterns: tuple[Pattern, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NodePath:
    """Address of a node inside a workout.

    ``NodePath()`` is the workout itself, ``NodePath(2)`` the third
    pattern, ``NodePath(2, 0)`` that pattern's first entry.
    """

    pattern_index: int | None = None
    entry_index: int | None = None

    @property
    def is_workout(self) -> bool:
        return self.pattern_index is None

    @property
    def is_pattern(self) -> bool:
        return self.pattern_index is not None and self.entry_index is None

    @property
    def is_entry(self) -> bool:
        return self.entry_index is not None

    def __str__(self) -> str:
        if self.is_workout:
            return "workout"
        if self.is_pattern:
            return f"patterns[{self.pattern_index}]"
        return f"patterns[{self.pattern_index}].entries[{self.entry_index}]"
