"""Tests for workout document models, timeline events and generation results."""

from __future__ import annotations

import dataclasses

import pytest

from ghosting_engine.models.enums import (
    DEFAULT_LEAD_TIME_S,
    EDITOR_DEFAULT_LEAD_TIME_S,
    EntryKind,
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
from ghosting_engine.models.timeline import (
    BEEP_TIME,
    COUNTDOWN_END,
    COUNTDOWN_START,
    TTS_END,
    TimelineEvent,
)
from ghosting_engine.models.workout import (
    Limits,
    MessageEntry,
    NodePath,
    Pattern,
    Position,
    RepeatCount,
    ShotEntry,
)


class TestPosition:
    def test_default_is_normal(self) -> None:
        assert Position() == Position.normal()
        assert Position().kind == PositionKind.NORMAL
        assert not Position().is_pinned

    def test_locked_positions_are_pinned(self) -> None:
        assert Position.locked_at(2).is_pinned
        assert Position.locked_at(2).index == 2
        assert Position.locked_last().is_pinned
        assert not Position.linked().is_pinned


class TestRepeatCountAndLimits:
    def test_fixed_repeat(self) -> None:
        repeat = RepeatCount.fixed(3)
        assert repeat.mode == RepeatMode.FIXED
        assert repeat.count == 3

    def test_random_repeat(self) -> None:
        repeat = RepeatCount.random(1, 4)
        assert repeat.mode == RepeatMode.RANDOM
        assert (repeat.min, repeat.max) == (1, 4)

    def test_limit_constructors(self) -> None:
        assert Limits.all_shots().type == LimitType.ALL_SHOTS
        assert Limits.all_shots().value is None
        assert Limits.shot_limit(5) == Limits(LimitType.SHOT_LIMIT, 5)
        assert Limits.time_limit(90).value == 90.0


class TestEntries:
    def test_kinds(self) -> None:
        assert ShotEntry(name="Smash").kind == EntryKind.SHOT
        assert MessageEntry(name="Rest").kind == EntryKind.MESSAGE

    def test_new_shot_uses_editor_lead_time(self) -> None:
        entry = ShotEntry.new("Smash", id="s1")
        assert entry.id == "s1"
        assert entry.config == {"shotAnnouncementLeadTime": EDITOR_DEFAULT_LEAD_TIME_S}
        assert EDITOR_DEFAULT_LEAD_TIME_S != DEFAULT_LEAD_TIME_S

    def test_entries_are_frozen(self) -> None:
        entry = ShotEntry(name="Smash")
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.name = "Drop"  # type: ignore[misc]

    def test_pattern_shot_count(self) -> None:
        pattern = Pattern(
            name="Mixed",
            entries=(ShotEntry(name="A"), MessageEntry(name="Rest"), ShotEntry(name="B")),
        )
        assert pattern.shot_count == 2


class TestNodePath:
    def test_workout_path(self) -> None:
        path = NodePath()
        assert path.is_workout
        assert not path.is_pattern
        assert str(path) == "workout"

    def test_pattern_and_entry_paths(self) -> None:
        assert NodePath(1).is_pattern
        assert str(NodePath(1)) == "patterns[1]"
        assert NodePath(1, 3).is_entry
        assert str(NodePath(1, 3)) == "patterns[1].entries[3]"


class TestTimelineEvent:
    def test_shot_properties(self) -> None:
        event = TimelineEvent(
            id="a", name="A", kind=EntryKind.SHOT, start_time=2.0, end_time=7.0,
            sub_events={BEEP_TIME: 7.0},
        )
        assert event.is_shot
        assert not event.is_message
        assert event.duration == 5.0
        assert event.beep_time == 7.0
        assert event.tts_end is None
        assert event.split_step_speed == SplitStepSpeed.NONE

    def test_message_countdown_phase(self) -> None:
        event = TimelineEvent(
            id=None, name="Rest", kind=EntryKind.MESSAGE, start_time=0.0, end_time=8.0,
            sub_events={TTS_END: 1.0, COUNTDOWN_START: 1.0, COUNTDOWN_END: 8.0},
            countdown=True,
        )
        assert event.is_message
        assert event.tts_end == 1.0
        assert event.has_countdown_phase


class TestGenerationResult:
    def test_done_has_no_cursor(self) -> None:
        result = GenerationResult((), Done())
        assert result.is_done
        assert result.cursor is None

    def test_paused_carries_cursor(self) -> None:
        state = GeneratorState(workout_seed=3)
        result = GenerationResult((), Paused(state))
        assert not result.is_done
        assert result.cursor is state


class TestPatternRunState:
    def test_reset_run_keeps_run_count(self) -> None:
        run = PatternRunState(pattern_index=0, runs_total=3, pattern_runs_completed=1)
        run.pattern_shots_played = 4
        run.available_entries = [2, 1]
        run.draining = True
        run.entry_index = 2
        run.reset_run()
        assert run.pattern_runs_completed == 1
        assert run.pattern_shots_played == 0
        assert run.available_entries == []
        assert not run.draining
        assert run.entry_index is None
