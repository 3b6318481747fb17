"""Cue player: hands timeline sound cues to narration and tone backends."""

from cue_player.collaborators import NARRATION, TONES, Narrator, TonePlayer
from cue_player.dispatcher import CueDispatcher
from cue_player.exceptions import (
    CuePlayerError,
    MissingAudioCapability,
    NarrationFailed,
)
from cue_player.session import PlaybackFrame, PlaybackSession

__all__ = [
    "NARRATION",
    "TONES",
    "CueDispatcher",
    "CuePlayerError",
    "MissingAudioCapability",
    "NarrationFailed",
    "Narrator",
    "PlaybackFrame",
    "PlaybackSession",
    "TonePlayer",
]
