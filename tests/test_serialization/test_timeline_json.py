"""Tests for timeline JSON export and import."""

from __future__ import annotations

import json

from ghosting_engine.models.enums import EntryKind, SplitStepSpeed
from ghosting_engine.models.timeline import BEEP_TIME, TimelineEvent
from ghosting_engine.serialization import (
    timeline_from_json,
    timeline_to_json,
    timeline_to_json_string,
)
from ghosting_engine.serialization.document import load_workout
from ghosting_engine.serialization.timeline_json import event_to_json


class TestEventToJson:
    def test_camel_case_keys(self, generator, worked_example) -> None:
        data = event_to_json(generator.generate_all(worked_example, seed=1)[0])
        assert data["type"] == "Shot"
        assert data["startTime"] == 0.0
        assert data["endTime"] == 5.0
        assert data["subEvents"] == {"announced_time": 4.0, "beep_time": 5.0}
        assert data["patternName"] == "Front"
        assert data["splitStepSpeed"] == "none"

    def test_times_rounded_to_hundredths(self) -> None:
        event = TimelineEvent(
            id="x", name="A", kind=EntryKind.SHOT, start_time=1.23456, end_time=6.78901,
            sub_events={BEEP_TIME: 6.78901}, split_step_speed=SplitStepSpeed.FAST,
        )
        data = event_to_json(event)
        assert data["startTime"] == 1.23
        assert data["endTime"] == 6.79
        assert data["duration"] == 5.55
        assert data["subEvents"]["beep_time"] == 6.79
        assert data["splitStepSpeed"] == "fast"


class TestTimelineRoundTrip:
    def test_worked_example(self, generator, worked_example) -> None:
        events = generator.generate_all(worked_example, seed=1)
        assert timeline_from_json(timeline_to_json(events)) == events

    def test_json_string(self, generator, shuffled_doc) -> None:
        events = generator.generate_all(load_workout(shuffled_doc), seed=2)
        data = json.loads(timeline_to_json_string(events))
        assert len(data) == len(events)
        rebuilt = timeline_from_json(data)
        assert [e.name for e in rebuilt] == [e.name for e in events]
        assert [e.kind for e in rebuilt] == [e.kind for e in events]
