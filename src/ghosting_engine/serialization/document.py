"""Workout document loader and dumper.

Saved workouts are nested dicts with camelCase keys (``type``, ``name``,
``positionType``, ``config``, ``patterns``, ``entries``). Key names must
stay exactly as older files wrote them. Loading first normalizes a few
legacy spellings, then builds the typed models; dumping writes the
current spelling with sorted keys and sparse configs.

All functions are pure (no I/O).
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Mapping

from ghosting_engine.exceptions import ValidationError, ValidationIssue
from ghosting_engine.models.enums import EntryKind, LimitType, PositionKind, RepeatMode
from ghosting_engine.models.workout import (
    Entry,
    IntervalOffset,
    Limits,
    MessageEntry,
    Pattern,
    Position,
    RepeatCount,
    ShotEntry,
    Workout,
)
from ghosting_engine.serialization import wire
from ghosting_engine.time_format import parse_time_value

logger = logging.getLogger(__name__)

_ENTRY_TYPES_IN = wire.inverse(wire.ENTRY_TYPES)
_LIMIT_TYPES_IN = wire.inverse(wire.LIMIT_TYPES)
_ENUM_KEYS_IN = {key: wire.inverse(table) for key, table in wire.ENUM_KEYS.items()}


# ---------------------------------------------------------------------------
# Legacy normalization
# ---------------------------------------------------------------------------


def _normalize_config(config: dict, path: str, is_message: bool, notes: list[str]) -> None:
    if wire.LEGACY_ITERATION_KEY in config:
        legacy = config.pop(wire.LEGACY_ITERATION_KEY)
        if "iterationType" not in config:
            config["iterationType"] = legacy
            notes.append(f"{path}: iteration -> iterationType")

    limits = config.get("limits")
    if isinstance(limits, dict):
        if limits.get("type") == wire.LEGACY_ALL_ENTRIES:
            limits["type"] = "all-shots"
            notes.append(f"{path}: limits all-entries -> all-shots")
        if limits.get("type") == "time-limit" and isinstance(limits.get("value"), str):
            seconds = parse_time_value(limits["value"])
            if seconds is not None:
                notes.append(f"{path}: time limit {limits['value']!r} -> {seconds:g}s")
                limits["value"] = seconds

    if is_message and isinstance(config.get("interval"), str):
        seconds = parse_time_value(config["interval"])
        if seconds is not None:
            notes.append(f"{path}: interval {config['interval']!r} -> {seconds:g}s")
            config["interval"] = seconds

    repeat = config.get("repeatCount")
    if isinstance(repeat, (int, float)) and not isinstance(repeat, bool):
        config["repeatCount"] = {"type": "fixed", "count": repeat}
        notes.append(f"{path}: numeric repeatCount -> fixed")
    elif isinstance(repeat, dict) and "type" not in repeat:
        config["repeatCount"] = {"type": "random", **repeat}
        notes.append(f"{path}: untyped repeatCount -> random")


def normalize_document(data: Mapping[str, Any]) -> tuple[dict, list[str]]:
    """Deep copy of *data* with legacy spellings converted.

    Returns the converted document and a note for every conversion made.
    Malformed parts are left alone for the validator to report.
    """
    doc = copy.deepcopy(dict(data))
    notes: list[str] = []
    if isinstance(doc.get("config"), dict):
        _normalize_config(doc["config"], "config", False, notes)
    patterns = doc.get("patterns")
    if not isinstance(patterns, list):
        return doc, notes
    for pi, pattern in enumerate(patterns):
        if not isinstance(pattern, dict):
            continue
        if isinstance(pattern.get("config"), dict):
            _normalize_config(pattern["config"], f"patterns[{pi}].config", False, notes)
        entries = pattern.get("entries")
        if not isinstance(entries, list):
            continue
        for ei, entry in enumerate(entries):
            if isinstance(entry, dict) and isinstance(entry.get("config"), dict):
                _normalize_config(
                    entry["config"],
                    f"patterns[{pi}].entries[{ei}].config",
                    entry.get("type") == "Message",
                    notes,
                )
    return doc, notes


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_position(value: Any, slot: int) -> Position:
    """Position from its wire string. *slot* is the item's 0-based index."""
    if value is None or value == wire.POSITION_NORMAL:
        return Position.normal()
    if value == wire.POSITION_LINKED:
        return Position.linked()
    if value == wire.POSITION_LAST:
        return Position.locked_last()
    if value == wire.POSITION_LOCKED:
        return Position.locked_at(slot + 1)
    text = str(value)
    if text.isdigit() and int(text) > 0:
        return Position.locked_at(int(text))
    raise ValueError(f"Invalid position type: {value!r}")


def _parse_repeat(value: Mapping[str, Any]) -> RepeatCount:
    if value.get("type") == "fixed":
        return RepeatCount.fixed(int(value["count"]))
    return RepeatCount.random(int(value["min"]), int(value["max"]))


def _parse_limits(value: Mapping[str, Any]) -> Limits:
    limit_type = _LIMIT_TYPES_IN[value["type"]]
    raw = value.get("value")
    if limit_type == LimitType.SHOT_LIMIT:
        return Limits.shot_limit(int(raw))
    if limit_type == LimitType.TIME_LIMIT:
        return Limits.time_limit(float(raw))
    return Limits.all_shots()


def _parse_config(raw: Mapping[str, Any]) -> dict[str, Any]:
    config: dict[str, Any] = {}
    for key, value in raw.items():
        if key in _ENUM_KEYS_IN:
            config[key] = _ENUM_KEYS_IN[key][value]
        elif key == "repeatCount":
            config[key] = _parse_repeat(value)
        elif key == "limits":
            config[key] = _parse_limits(value)
        elif key == "intervalOffset":
            low, high = value.get("min"), value.get("max")
            # A one-sided range collapses onto the bound given.
            if low is None:
                low = 0.0 if high is None else high
            if high is None:
                high = low
            config[key] = IntervalOffset(float(low), float(high))
        elif key in ("interval", "speechRate", "shotAnnouncementLeadTime"):
            config[key] = float(value)
        else:
            config[key] = value
    return config


def _parse_entry(raw: Mapping[str, Any], slot: int) -> Entry:
    kind = _ENTRY_TYPES_IN[raw.get("type", "Shot")]
    cls = ShotEntry if kind == EntryKind.SHOT else MessageEntry
    return cls(
        id=raw.get("id"),
        name=raw.get("name") or "",
        position=parse_position(raw.get("positionType"), slot),
        config=_parse_config(raw.get("config") or {}),
    )


def _parse_pattern(raw: Mapping[str, Any], slot: int) -> Pattern:
    return Pattern(
        id=raw.get("id"),
        name=raw.get("name") or "",
        position=parse_position(raw.get("positionType"), slot),
        config=_parse_config(raw.get("config") or {}),
        entries=tuple(
            _parse_entry(e, i) for i, e in enumerate(raw.get("entries") or [])
        ),
    )


def load_workout(data: Mapping[str, Any], bulk_load: bool = False) -> Workout:
    """Build a Workout from a (validated) document.

    Args:
        data: The saved document. Not mutated.
        bulk_load: Loading many documents at once; per-document conversion
            logging is suppressed.

    Raises:
        ValidationError: A value could not be converted to its model type.
    """
    doc, notes = normalize_document(data)
    if notes and not bulk_load:
        logger.info(
            "Converted %d legacy setting(s) in %r", len(notes), doc.get("name")
        )
        for note in notes:
            logger.debug("Legacy conversion %s", note)
    try:
        return Workout(
            name=doc.get("name") or "",
            config=_parse_config(doc.get("config") or {}),
            patterns=tuple(
                _parse_pattern(p, i) for i, p in enumerate(doc.get("patterns") or [])
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError([ValidationIssue("", f"Unreadable workout: {exc}")]) from exc


def loads_workout(text: str, bulk_load: bool = False) -> Workout:
    return load_workout(json.loads(text), bulk_load=bulk_load)


# ---------------------------------------------------------------------------
# Dumping
# ---------------------------------------------------------------------------


def dump_position(position: Position) -> str:
    if position.kind == PositionKind.LINKED:
        return wire.POSITION_LINKED
    if position.kind == PositionKind.LOCKED_LAST:
        return wire.POSITION_LAST
    if position.kind == PositionKind.LOCKED_AT_INDEX and position.index is not None:
        return str(position.index)
    return wire.POSITION_NORMAL


def _dump_value(key: str, value: Any) -> Any:
    if key in wire.ENUM_KEYS:
        return wire.ENUM_KEYS[key][value]
    if isinstance(value, RepeatCount):
        if value.mode == RepeatMode.FIXED:
            return {"count": value.count, "type": "fixed"}
        return {"max": value.max, "min": value.min, "type": "random"}
    if isinstance(value, Limits):
        return {"type": wire.LIMIT_TYPES[value.type], "value": value.value}
    if isinstance(value, IntervalOffset):
        return {"max": value.max, "min": value.min}
    return value


def _dump_config(config: Mapping[str, Any]) -> dict[str, Any]:
    return {key: _dump_value(key, config[key]) for key in sorted(config)}


def _dump_entry(entry: Entry) -> dict[str, Any]:
    return {
        "config": _dump_config(entry.config),
        "id": entry.id,
        "name": entry.name,
        "positionType": dump_position(entry.position),
        "type": wire.ENTRY_TYPES[entry.kind],
    }


def dump_workout(workout: Workout) -> dict[str, Any]:
    """Document dict for *workout*: current spellings, sorted keys."""
    return {
        "config": _dump_config(workout.config),
        "name": workout.name,
        "patterns": [
            {
                "config": _dump_config(p.config),
                "entries": [_dump_entry(e) for e in p.entries],
                "id": p.id,
                "name": p.name,
                "positionType": dump_position(p.position),
                "type": "Pattern",
            }
            for p in workout.patterns
        ],
        "type": "Workout",
    }


def dumps_workout(workout: Workout, indent: int = 2) -> str:
    return json.dumps(dump_workout(workout), indent=indent, sort_keys=True)
