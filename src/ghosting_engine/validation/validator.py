"""Workout document and timeline validation.

``validate`` checks a raw document (after legacy normalization) and
returns every problem it finds as a ``ValidationIssue``; an empty list
means the document is safe to load and generate. Nothing here raises on
bad input except ``validate_or_raise``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ghosting_engine.exceptions import ValidationError, ValidationIssue
from ghosting_engine.models.enums import (
    MAX_INTERVAL_OFFSET_S,
    MAX_SPEECH_RATE,
    MIN_INTERVAL_OFFSET_S,
    MIN_LEAD_TIME_S,
    MIN_SPEECH_RATE,
    TIME_EPSILON_S,
)
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.serialization import wire
from ghosting_engine.serialization.document import normalize_document

logger = logging.getLogger(__name__)

_BOOLEAN_KEYS = ("autoVoiceSplitStep", "countdown", "skipAtEndOfWorkout")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer()


def _join(prefix: str, field: str) -> str:
    return f"{prefix}.{field}" if prefix else field


# ---------------------------------------------------------------------------
# Config checks
# ---------------------------------------------------------------------------


def _check_enum(config: Mapping[str, Any], key: str, prefix: str, issues: list) -> None:
    if key in config and config[key] not in wire.ENUM_KEYS[key].values():
        label = {
            "iterationType": "iteration type",
            "intervalOffsetType": "interval offset type",
            "intervalType": "interval type",
            "splitStepSpeed": "split step speed",
        }[key]
        issues.append(ValidationIssue(
            _join(prefix, key), f"Invalid {label}: {config[key]}", config[key]
        ))


def _check_base(config: Mapping[str, Any], prefix: str, issues: list) -> None:
    if "voice" in config and not isinstance(config["voice"], str):
        issues.append(ValidationIssue(_join(prefix, "voice"), "Voice must be a string", config["voice"]))

    rate = config.get("speechRate")
    if "speechRate" in config and (
        not _is_number(rate) or not MIN_SPEECH_RATE <= rate <= MAX_SPEECH_RATE
    ):
        issues.append(ValidationIssue(
            _join(prefix, "speechRate"),
            f"Speech rate must be between {MIN_SPEECH_RATE} and {MAX_SPEECH_RATE}",
            rate,
        ))

    interval = config.get("interval")
    if "interval" in config and (not _is_number(interval) or interval < 0):
        issues.append(ValidationIssue(
            _join(prefix, "interval"), "Interval must be a non-negative number", interval
        ))

    lead = config.get("shotAnnouncementLeadTime")
    if "shotAnnouncementLeadTime" in config and (not _is_number(lead) or lead < MIN_LEAD_TIME_S):
        issues.append(ValidationIssue(
            _join(prefix, "shotAnnouncementLeadTime"),
            f"Shot announcement lead time must be at least {MIN_LEAD_TIME_S} seconds",
            lead,
        ))

    for key in ("splitStepSpeed", "intervalOffsetType", "intervalType", "iterationType"):
        _check_enum(config, key, prefix, issues)

    if "intervalOffset" in config:
        _check_offset(config["intervalOffset"], _join(prefix, "intervalOffset"), issues)

    for key in _BOOLEAN_KEYS:
        if key in config and not isinstance(config[key], bool):
            issues.append(ValidationIssue(_join(prefix, key), f"{key} must be a boolean", config[key]))

    if "message" in config and not isinstance(config["message"], str):
        issues.append(ValidationIssue(_join(prefix, "message"), "Message must be a string", config["message"]))


def _check_offset(offset: Any, path: str, issues: list) -> None:
    if not isinstance(offset, Mapping):
        issues.append(ValidationIssue(path, "Interval offset must be an object", offset))
        return
    for bound in ("min", "max"):
        if bound not in offset:
            continue
        value = offset[bound]
        if not _is_number(value) or not MIN_INTERVAL_OFFSET_S <= value <= MAX_INTERVAL_OFFSET_S:
            issues.append(ValidationIssue(
                f"{path}.{bound}",
                f"Interval offset {bound} must be between {MIN_INTERVAL_OFFSET_S} "
                f"and {MAX_INTERVAL_OFFSET_S}",
                value,
            ))
    low, high = offset.get("min"), offset.get("max")
    if _is_number(low) and _is_number(high) and low > high:
        issues.append(ValidationIssue(
            path, "Interval offset min must be less than or equal to max", dict(offset)
        ))


def _check_repeat(repeat: Any, path: str, issues: list) -> None:
    if not isinstance(repeat, Mapping):
        issues.append(ValidationIssue(path, "Repeat count must be a number or an object", repeat))
        return
    if repeat.get("type") == "fixed":
        count = repeat.get("count")
        if not _is_int(count) or count < 1:
            issues.append(ValidationIssue(
                f"{path}.count", "Fixed repeat count must be a positive integer", count
            ))
        return
    if repeat.get("type") != "random":
        issues.append(ValidationIssue(
            f"{path}.type", f"Invalid repeat count type: {repeat.get('type')}", repeat.get("type")
        ))
        return
    low, high = repeat.get("min"), repeat.get("max")
    if not _is_int(low) or low < 0:
        issues.append(ValidationIssue(
            f"{path}.min", "Repeat count min must be a non-negative integer", low
        ))
    if not _is_int(high) or high < 1:
        issues.append(ValidationIssue(
            f"{path}.max", "Repeat count max must be a positive integer", high
        ))
    if _is_int(low) and _is_int(high) and high < low:
        issues.append(ValidationIssue(
            path, "Repeat count max must be greater than or equal to min", dict(repeat)
        ))


def _check_limits(limits: Any, path: str, issues: list) -> None:
    if not isinstance(limits, Mapping):
        issues.append(ValidationIssue(path, "Limits must be an object", limits))
        return
    limit_type = limits.get("type")
    value = limits.get("value")
    if limit_type not in wire.LIMIT_TYPES.values():
        issues.append(ValidationIssue(f"{path}.type", f"Invalid limits type: {limit_type}", limit_type))
    elif limit_type == "shot-limit" and (not _is_int(value) or value < 1):
        issues.append(ValidationIssue(
            f"{path}.value", "Shot limit must be a positive integer", value
        ))
    elif limit_type == "time-limit" and (not _is_number(value) or value <= 0):
        issues.append(ValidationIssue(
            f"{path}.value",
            'Time limit must be a positive number or time string (e.g., "01:30")',
            value,
        ))


def _check_config(config: Any, prefix: str, issues: list) -> None:
    if config is None:
        return
    if not isinstance(config, Mapping):
        issues.append(ValidationIssue(prefix, "Config must be an object", config))
        return
    _check_base(config, prefix, issues)
    if "repeatCount" in config:
        _check_repeat(config["repeatCount"], _join(prefix, "repeatCount"), issues)
    if "limits" in config:
        _check_limits(config["limits"], _join(prefix, "limits"), issues)


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


def _check_positions(items: list, prefix: str, issues: list) -> None:
    """Position strings of sibling items, plus link and lock consistency."""
    taken: dict[int, int] = {}
    for i, item in enumerate(items):
        if not isinstance(item, Mapping):
            continue
        value = item.get("positionType")
        path = f"{prefix}[{i}].positionType"
        if value is None or value in (wire.POSITION_NORMAL, wire.POSITION_LAST):
            continue
        if value == wire.POSITION_LINKED:
            if i == 0:
                issues.append(ValidationIssue(path, "The first item cannot be linked", value))
            continue
        if value == wire.POSITION_LOCKED:
            slot = i + 1
        elif isinstance(value, str) and value.isdigit() and int(value) > 0:
            slot = int(value)
        else:
            issues.append(ValidationIssue(path, f"Invalid position type: {value}", value))
            continue
        if slot > len(items):
            issues.append(ValidationIssue(
                path, f"Locked position {slot} is beyond the {len(items)} available", value
            ))
        elif slot in taken:
            issues.append(ValidationIssue(
                path, f"Position {slot} is already locked by item {taken[slot]}", value
            ))
        else:
            taken[slot] = i


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _check_entry(entry: Any, path: str, issues: list) -> None:
    if not isinstance(entry, Mapping):
        issues.append(ValidationIssue(path, "Entry must be an object", entry))
        return
    if entry.get("type") not in wire.ENTRY_TYPES.values():
        issues.append(ValidationIssue(
            f"{path}.type", "Entry type must be 'Shot' or 'Message'", entry.get("type")
        ))
    if entry.get("name") is not None and not isinstance(entry["name"], str):
        issues.append(ValidationIssue(f"{path}.name", "Name must be a string", entry["name"]))
    _check_config(entry.get("config"), f"{path}.config", issues)


def _check_pattern(pattern: Any, path: str, issues: list) -> None:
    if not isinstance(pattern, Mapping):
        issues.append(ValidationIssue(path, "Pattern must be an object", pattern))
        return
    if pattern.get("type") != "Pattern":
        issues.append(ValidationIssue(
            f"{path}.type", "Pattern type must be 'Pattern'", pattern.get("type")
        ))
    _check_config(pattern.get("config"), f"{path}.config", issues)
    entries = pattern.get("entries")
    if not isinstance(entries, list):
        issues.append(ValidationIssue(f"{path}.entries", "Pattern entries must be an array", entries))
        return
    for i, entry in enumerate(entries):
        _check_entry(entry, f"{path}.entries[{i}]", issues)
    _check_positions(entries, f"{path}.entries", issues)


def validate(document: Any) -> list[ValidationIssue]:
    """Every structural and semantic problem in a workout document.

    Legacy spellings are converted first (on a copy), so old saved files
    validate the same way they load.
    """
    if not isinstance(document, Mapping):
        return [ValidationIssue("", "Workout data must be an object", document)]

    doc, _ = normalize_document(document)
    issues: list[ValidationIssue] = []
    if doc.get("type") != "Workout":
        issues.append(ValidationIssue("type", "Workout type must be 'Workout'", doc.get("type")))
    if doc.get("name") is not None and not isinstance(doc["name"], str):
        issues.append(ValidationIssue("name", "Name must be a string", doc["name"]))
    _check_config(doc.get("config"), "config", issues)

    patterns = doc.get("patterns")
    if not isinstance(patterns, list):
        issues.append(ValidationIssue("patterns", "Patterns must be an array", patterns))
    else:
        for i, pattern in enumerate(patterns):
            _check_pattern(pattern, f"patterns[{i}]", issues)
        _check_positions(patterns, "patterns", issues)

    if issues:
        logger.debug("Workout %r has %d validation issue(s)", doc.get("name"), len(issues))
    return issues


def validate_or_raise(document: Any) -> None:
    """Raise ``ValidationError`` carrying every issue, if there are any."""
    issues = validate(document)
    if issues:
        raise ValidationError(issues)


# ---------------------------------------------------------------------------
# Timelines
# ---------------------------------------------------------------------------


def validate_timeline(events: Sequence[TimelineEvent]) -> list[ValidationIssue]:
    """Field checks per event plus monotonic non-overlap across events."""
    issues: list[ValidationIssue] = []
    for i, event in enumerate(events):
        path = f"timeline[{i}]"
        if not isinstance(event.name, str):
            issues.append(ValidationIssue(f"{path}.name", "Event name must be a string", event.name))
        if event.start_time < 0:
            issues.append(ValidationIssue(
                f"{path}.start_time", "Start time must be non-negative", event.start_time
            ))
        if event.end_time < event.start_time:
            issues.append(ValidationIssue(
                path, "End time must not precede start time",
                {"start_time": event.start_time, "end_time": event.end_time},
            ))
        for key, value in event.sub_events.items():
            if value < event.start_time - TIME_EPSILON_S or value > event.end_time + TIME_EPSILON_S:
                issues.append(ValidationIssue(
                    f"{path}.sub_events.{key}", "Sub-event lies outside its event", value
                ))
    for i in range(len(events) - 1):
        if events[i].end_time > events[i + 1].start_time + TIME_EPSILON_S:
            issues.append(ValidationIssue(
                f"timeline[{i}]",
                f"Event {i} ends after event {i + 1} starts",
                {"end_time": events[i].end_time, "next_start": events[i + 1].start_time},
            ))
    return issues
