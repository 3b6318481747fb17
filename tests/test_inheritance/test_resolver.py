"""Tests for ConfigResolver: entry → pattern → workout → default lookup."""

from __future__ import annotations

import pytest

from ghosting_engine.exceptions import ConfigResolutionError
from ghosting_engine.inheritance.resolver import (
    DEFAULT_CONFIG,
    ConfigResolver,
    resolve_chain,
)
from ghosting_engine.models.enums import DEFAULT_LEAD_TIME_S, SplitStepSpeed
from ghosting_engine.models.workout import (
    Limits,
    NodePath,
    Pattern,
    RepeatCount,
    ShotEntry,
    Workout,
)


def _make_workout(
    workout_config: dict | None = None,
    pattern_config: dict | None = None,
    entry_config: dict | None = None,
) -> Workout:
    entry = ShotEntry(name="Smash", config=entry_config or {})
    pattern = Pattern(name="Rear", config=pattern_config or {}, entries=(entry,))
    return Workout(name="Inheritance", config=workout_config or {}, patterns=(pattern,))


class TestResolve:
    def test_nearest_override_wins(self) -> None:
        workout = _make_workout({"interval": 6.0}, {"interval": 4.0}, {"interval": 2.0})
        resolver = ConfigResolver(workout)
        assert resolver.resolve(NodePath(0, 0), "interval") == 2.0
        assert resolver.resolve(NodePath(0), "interval") == 4.0
        assert resolver.resolve(NodePath(), "interval") == 6.0

    def test_entry_inherits_from_pattern(self) -> None:
        workout = _make_workout({"interval": 6.0}, {"interval": 4.0})
        assert ConfigResolver(workout).resolve(NodePath(0, 0), "interval") == 4.0

    def test_entry_inherits_from_workout(self) -> None:
        workout = _make_workout({"interval": 6.0})
        assert ConfigResolver(workout).resolve(NodePath(0, 0), "interval") == 6.0

    def test_falls_back_to_default(self) -> None:
        resolver = ConfigResolver(_make_workout())
        assert resolver.resolve(NodePath(0, 0), "interval") == DEFAULT_CONFIG["interval"]
        assert resolver.resolve(NodePath(0, 0), "splitStepSpeed") == SplitStepSpeed.AUTO_SCALE
        assert resolver.resolve(NodePath(0, 0), "shotAnnouncementLeadTime") == DEFAULT_LEAD_TIME_S

    def test_false_and_zero_are_explicit_values(self) -> None:
        workout = _make_workout({"autoVoiceSplitStep": True, "interval": 6.0},
                                entry_config={"autoVoiceSplitStep": False, "interval": 0.0})
        resolver = ConfigResolver(workout)
        assert resolver.resolve(NodePath(0, 0), "autoVoiceSplitStep") is False
        assert resolver.resolve(NodePath(0, 0), "interval") == 0.0

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ConfigResolutionError, match="tempo"):
            ConfigResolver(_make_workout()).resolve(NodePath(0, 0), "tempo")

    def test_resolve_does_not_mutate(self) -> None:
        workout = _make_workout({"interval": 6.0})
        ConfigResolver(workout).effective_config(NodePath(0, 0))
        assert workout.patterns[0].entries[0].config == {}
        assert workout.config == {"interval": 6.0}


class TestScopeLocalKeys:
    def test_repeat_count_is_not_inherited(self) -> None:
        workout = _make_workout(pattern_config={"repeatCount": RepeatCount.fixed(3)})
        resolver = ConfigResolver(workout)
        assert resolver.resolve(NodePath(0), "repeatCount") == RepeatCount.fixed(3)
        assert resolver.resolve(NodePath(0, 0), "repeatCount") == RepeatCount.fixed(1)

    def test_limits_are_not_inherited(self) -> None:
        workout = _make_workout({"limits": Limits.shot_limit(10)})
        resolver = ConfigResolver(workout)
        assert resolver.resolve(NodePath(), "limits") == Limits.shot_limit(10)
        assert resolver.resolve(NodePath(0), "limits") == Limits.all_shots()

    def test_resolve_chain_only_checks_first_config(self) -> None:
        chain = [{}, {"limits": Limits.time_limit(30)}]
        assert resolve_chain(chain, "limits") == Limits.all_shots()
        assert resolve_chain(chain[1:], "limits") == Limits.time_limit(30)


class TestIntrospection:
    def test_is_overridden(self) -> None:
        workout = _make_workout({"voice": "Karen"}, entry_config={"interval": 3.0})
        resolver = ConfigResolver(workout)
        assert resolver.is_overridden(NodePath(0, 0), "interval")
        assert not resolver.is_overridden(NodePath(0, 0), "voice")
        assert resolver.is_overridden(NodePath(), "voice")

    def test_effective_config_is_total(self) -> None:
        workout = _make_workout({"voice": "Karen"})
        effective = ConfigResolver(workout).effective_config(NodePath(0, 0))
        assert set(effective) == set(DEFAULT_CONFIG)
        assert effective["voice"] == "Karen"

    def test_chain_is_nearest_first(self) -> None:
        workout = _make_workout({"a": 1}, {"b": 2}, {"c": 3})
        chain = ConfigResolver(workout).chain(NodePath(0, 0))
        assert chain == [{"c": 3}, {"b": 2}, {"a": 1}]
