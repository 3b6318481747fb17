"""Interfaces of the audio collaborators the dispatcher hands cues to.

Speech synthesis and tone generation live outside this package. A
collaborator raises ``MissingAudioCapability`` when its backend is not
available and ``NarrationFailed`` (or any other exception) when a single
attempt goes wrong.
"""

from __future__ import annotations

from typing import Protocol

from ghosting_engine.models.enums import CueKind, SplitStepSpeed

NARRATION = "narration"
TONES = "tones"


class Narrator(Protocol):
    def speak(self, text: str, voice: str, rate: float) -> None:
        """Start speaking *text*; returns without waiting for the speech to end."""


class TonePlayer(Protocol):
    def play(self, kind: CueKind, speed: SplitStepSpeed = SplitStepSpeed.NONE) -> None:
        """Play a beep, a split-step tone at *speed*, or a countdown tick."""
