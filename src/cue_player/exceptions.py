"""Custom exception hierarchy for the cue player."""

from __future__ import annotations


class CuePlayerError(Exception):
    """Base exception for all cue_player errors."""


class MissingAudioCapability(CuePlayerError):
    """An audio collaborator (narration or tones) is not available."""

    def __init__(self, capability: str, message: str | None = None) -> None:
        super().__init__(message or f"Audio capability unavailable: {capability}")
        self.capability = capability


class NarrationFailed(CuePlayerError):
    """A single narration attempt failed."""

    def __init__(self, text: str, message: str | None = None) -> None:
        super().__init__(message or f"Narration failed: {text!r}")
        self.text = text
