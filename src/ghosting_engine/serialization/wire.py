"""Wire strings for the persisted workout format.

The engine only ever sees IntEnums; these tables translate to and from
the camelCase / kebab-case strings found in saved workout files.
"""

from __future__ import annotations

from ghosting_engine.models.enums import (
    EntryKind,
    IntervalOffsetType,
    IntervalType,
    IterationType,
    LimitType,
    SplitStepSpeed,
)

ENTRY_TYPES = {
    EntryKind.SHOT: "Shot",
    EntryKind.MESSAGE: "Message",
}

ITERATION_TYPES = {
    IterationType.IN_ORDER: "in-order",
    IterationType.SHUFFLE: "shuffle",
}

LIMIT_TYPES = {
    LimitType.ALL_SHOTS: "all-shots",
    LimitType.SHOT_LIMIT: "shot-limit",
    LimitType.TIME_LIMIT: "time-limit",
}

INTERVAL_OFFSET_TYPES = {
    IntervalOffsetType.FIXED: "fixed",
    IntervalOffsetType.RANDOM: "random",
}

INTERVAL_TYPES = {
    IntervalType.FIXED: "fixed",
    IntervalType.ADDITIONAL: "additional",
}

SPLIT_STEP_SPEEDS = {
    SplitStepSpeed.NONE: "none",
    SplitStepSpeed.SLOW: "slow",
    SplitStepSpeed.MEDIUM: "medium",
    SplitStepSpeed.FAST: "fast",
    SplitStepSpeed.RANDOM: "random",
    SplitStepSpeed.AUTO_SCALE: "auto-scale",
}

# Config keys whose values are enums, with their tables
ENUM_KEYS = {
    "iterationType": ITERATION_TYPES,
    "intervalOffsetType": INTERVAL_OFFSET_TYPES,
    "intervalType": INTERVAL_TYPES,
    "splitStepSpeed": SPLIT_STEP_SPEEDS,
}

POSITION_NORMAL = "normal"
POSITION_LINKED = "linked"
POSITION_LAST = "last"
POSITION_LOCKED = "locked"   # locked at its declared slot
POSITION_KEYWORDS = (POSITION_NORMAL, POSITION_LOCKED, POSITION_LINKED, POSITION_LAST)

# Legacy spellings accepted on load
LEGACY_ALL_ENTRIES = "all-entries"
LEGACY_ITERATION_KEY = "iteration"


def inverse(table: dict) -> dict:
    return {v: k for k, v in table.items()}
