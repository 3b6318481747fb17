"""Fake audio collaborators recording what they were asked to play."""

from __future__ import annotations

from typing import Callable

import pytest

from cue_player.exceptions import MissingAudioCapability, NarrationFailed
from ghosting_engine.models.enums import CueKind, SplitStepSpeed


class FakeNarrator:
    def __init__(self, failures: int = 0, missing: bool = False) -> None:
        self.failures = failures
        self.missing = missing
        self.spoken: list[tuple[str, str, float]] = []
        self.calls = 0

    def speak(self, text: str, voice: str, rate: float) -> None:
        self.calls += 1
        if self.missing:
            raise MissingAudioCapability("narration", "No speech engine")
        if self.failures > 0:
            self.failures -= 1
            raise NarrationFailed(text)
        self.spoken.append((text, voice, rate))


class FakeTones:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.played: list[tuple[CueKind, SplitStepSpeed]] = []

    def play(self, kind: CueKind, speed: SplitStepSpeed = SplitStepSpeed.NONE) -> None:
        if self.error is not None:
            raise self.error
        self.played.append((kind, speed))


@pytest.fixture
def narrator() -> FakeNarrator:
    return FakeNarrator()


@pytest.fixture
def tones() -> FakeTones:
    return FakeTones()


@pytest.fixture
def make_narrator() -> Callable[..., FakeNarrator]:
    """Factory fixture: ``make_narrator(failures=1)`` or ``make_narrator(missing=True)``."""
    return FakeNarrator


@pytest.fixture
def make_tones() -> Callable[..., FakeTones]:
    return FakeTones
