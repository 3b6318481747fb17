"""Timeline JSON export for previews and external players.

Times are rounded to hundredths of a second; everything else is written
as-is under camelCase keys.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from ghosting_engine.models.enums import SplitStepSpeed
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.serialization import wire

_TIME_DECIMALS = 2
_ENTRY_TYPES_IN = wire.inverse(wire.ENTRY_TYPES)
_SPLIT_STEP_SPEEDS_IN = wire.inverse(wire.SPLIT_STEP_SPEEDS)


def _t(value: float) -> float:
    return round(float(value), _TIME_DECIMALS)


def event_to_json(event: TimelineEvent) -> dict[str, Any]:
    return {
        "id": event.id,
        "name": event.name,
        "type": wire.ENTRY_TYPES[event.kind],
        "startTime": _t(event.start_time),
        "endTime": _t(event.end_time),
        "duration": _t(event.duration),
        "subEvents": {k: _t(v) for k, v in event.sub_events.items()},
        "patternId": event.pattern_id,
        "patternName": event.pattern_name,
        "superset": event.superset,
        "patternRun": event.pattern_run,
        "repeatNumber": event.repeat_number,
        "repeatTotal": event.repeat_total,
        "text": event.text,
        "voice": event.voice,
        "speechRate": event.speech_rate,
        "splitStepSpeed": wire.SPLIT_STEP_SPEEDS[event.split_step_speed],
        "autoVoiceSplitStep": event.auto_voice_split_step,
        "countdown": event.countdown,
    }


def timeline_to_json(events: Sequence[TimelineEvent]) -> list[dict[str, Any]]:
    return [event_to_json(e) for e in events]


def timeline_to_json_string(events: Sequence[TimelineEvent], indent: int = 2) -> str:
    return json.dumps(timeline_to_json(events), indent=indent)


def event_from_json(data: dict[str, Any]) -> TimelineEvent:
    return TimelineEvent(
        id=data.get("id"),
        name=data.get("name") or "",
        kind=_ENTRY_TYPES_IN[data["type"]],
        start_time=float(data["startTime"]),
        end_time=float(data["endTime"]),
        sub_events={k: float(v) for k, v in (data.get("subEvents") or {}).items()},
        pattern_id=data.get("patternId"),
        pattern_name=data.get("patternName") or "",
        superset=int(data.get("superset", 1)),
        pattern_run=int(data.get("patternRun", 1)),
        repeat_number=int(data.get("repeatNumber", 1)),
        repeat_total=int(data.get("repeatTotal", 1)),
        text=data.get("text") or "",
        voice=data.get("voice") or "",
        speech_rate=float(data.get("speechRate", 1.0)),
        split_step_speed=_SPLIT_STEP_SPEEDS_IN.get(
            data.get("splitStepSpeed", "none"), SplitStepSpeed.NONE
        ),
        auto_voice_split_step=bool(data.get("autoVoiceSplitStep", False)),
        countdown=bool(data.get("countdown", False)),
    )


def timeline_from_json(data: Sequence[dict[str, Any]]) -> tuple[TimelineEvent, ...]:
    """Rebuild events written by ``timeline_to_json`` (times stay rounded)."""
    return tuple(event_from_json(d) for d in data)
