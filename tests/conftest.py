"""Shared test fixtures: workout documents, loaded workouts, generated timelines."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from ghosting_engine.generator.generator import TimelineGenerator
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.models.workout import Workout
from ghosting_engine.serialization.document import load_workout


def _shot(name: str, **config: Any) -> dict:
    return {"type": "Shot", "name": name, "positionType": "normal", "config": config}


def _message(name: str, text: str, **config: Any) -> dict:
    return {
        "type": "Message",
        "name": name,
        "positionType": "normal",
        "config": {"message": text, **config},
    }


def _pattern(name: str, entries: list[dict], **config: Any) -> dict:
    return {
        "type": "Pattern",
        "name": name,
        "positionType": "normal",
        "config": config,
        "entries": entries,
    }


def _workout(patterns: list[dict], name: str = "Test Workout", **config: Any) -> dict:
    return {"type": "Workout", "name": name, "config": config, "patterns": patterns}


@pytest.fixture
def worked_example_doc() -> dict:
    """Two shots A then B, 5 s interval, 1 s lead, no split step, in order."""
    return _workout(
        [_pattern("Front", [_shot("A"), _shot("B")])],
        name="Worked Example",
        interval=5.0,
        shotAnnouncementLeadTime=1.0,
        splitStepSpeed="none",
        iterationType="in-order",
    )


@pytest.fixture
def worked_example(worked_example_doc: dict) -> Workout:
    return load_workout(worked_example_doc)


@pytest.fixture
def shuffled_doc() -> dict:
    """Three patterns with random repeats, random offsets and shuffling everywhere."""
    corners = [_shot(n) for n in ("Front Left", "Front Right", "Back Left", "Back Right")]
    return _workout(
        [
            _pattern(
                "Corners",
                corners,
                iterationType="shuffle",
                repeatCount={"type": "random", "min": 1, "max": 3},
            ),
            _pattern(
                "Drives",
                [
                    _shot("Drive Left", repeatCount={"type": "random", "min": 1, "max": 2}),
                    _shot("Drive Right"),
                    _message("Breathe", "Take a breath", interval=2.0),
                ],
                iterationType="shuffle",
            ),
            _pattern("Net", [_shot("Net Left"), _shot("Net Right")]),
        ],
        name="Shuffled",
        interval=4.0,
        iterationType="shuffle",
        intervalOffsetType="random",
        intervalOffset={"min": -1.0, "max": 1.5},
        splitStepSpeed="random",
    )


@pytest.fixture
def generator() -> TimelineGenerator:
    return TimelineGenerator()


@pytest.fixture
def generate(generator: TimelineGenerator) -> Callable[..., tuple[TimelineEvent, ...]]:
    """Load a document and generate its full timeline."""

    def _generate(doc: dict, seed: int = 7, **kwargs: Any) -> tuple[TimelineEvent, ...]:
        return generator.generate_all(load_workout(doc), seed, **kwargs)

    return _generate
