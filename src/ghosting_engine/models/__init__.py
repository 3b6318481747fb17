"""Data models for the ghosting engine."""

from ghosting_engine.models.enums import (
    ActivePhase,
    CueKind,
    EntryKind,
    IntervalOffsetType,
    IntervalType,
    IterationType,
    LimitType,
    PositionKind,
    RepeatMode,
    SplitStepSpeed,
)
from ghosting_engine.models.generator_state import (
    Done,
    GenerationResult,
    GeneratorState,
    Paused,
    PatternRunState,
)
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.models.workout import (
    Entry,
    IntervalOffset,
    Limits,
    MessageEntry,
    NodePath,
    Pattern,
    Position,
    RepeatCount,
    ShotEntry,
    Workout,
)

__all__ = [
    "ActivePhase",
    "CueKind",
    "Done",
    "Entry",
    "EntryKind",
    "GenerationResult",
    "GeneratorState",
    "IntervalOffset",
    "IntervalOffsetType",
    "IntervalType",
    "IterationType",
    "LimitType",
    "Limits",
    "MessageEntry",
    "NodePath",
    "Paused",
    "Pattern",
    "PatternRunState",
    "Position",
    "PositionKind",
    "RepeatCount",
    "RepeatMode",
    "ShotEntry",
    "SplitStepSpeed",
    "TimelineEvent",
    "Workout",
]
