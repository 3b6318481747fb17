"""Hands due sound cues to the narration and tone collaborators.

A failed narration is retried ``NARRATION_RETRIES`` times and then
skipped; a missing collaborator is reported once and playback carries on
without that kind of audio.
"""

from __future__ import annotations

import logging
from typing import Iterable

from cue_player.collaborators import NARRATION, TONES, Narrator, TonePlayer
from cue_player.exceptions import MissingAudioCapability
from ghosting_engine import config
from ghosting_engine.playback.index import CueKey, SoundCue

logger = logging.getLogger(__name__)


class CueDispatcher:
    """Routes each cue to the right collaborator.

    Narration is fire-and-forget: a collaborator that fails after
    ``speak`` returned reports it through ``narration_failed``, which
    applies the same retry budget as a failure raised synchronously.
    """

    def __init__(
        self,
        narrator: Narrator | None = None,
        tones: TonePlayer | None = None,
        retries: int = config.NARRATION_RETRIES,
    ) -> None:
        self.narrator = narrator
        self.tones = tones
        self.retries = max(0, retries)
        self.audio_errors: list[MissingAudioCapability] = []
        self.skipped: list[SoundCue] = []
        self._unavailable: set[str] = set()
        self._attempts: dict[CueKey, int] = {}

    def available(self, capability: str) -> bool:
        collaborator = self.narrator if capability == NARRATION else self.tones
        return collaborator is not None and capability not in self._unavailable

    def dispatch(self, cue: SoundCue) -> bool:
        """Play one cue. Returns False when it produced no sound."""
        if cue.is_narration:
            # Only the latest utterance can still report a late failure.
            self._attempts = {cue.key: 0}
            return self._speak(cue)
        return self._play_tone(cue)

    def dispatch_all(self, cues: Iterable[SoundCue]) -> list[SoundCue]:
        """Play *cues* in order; returns the ones that produced sound."""
        return [cue for cue in cues if self.dispatch(cue)]

    def narration_failed(self, cue: SoundCue, exc: BaseException) -> bool:
        """Late failure signal from the narrator. Returns True if retried."""
        if isinstance(exc, MissingAudioCapability):
            self._report_missing(NARRATION, exc)
            return False
        if not self._should_retry(cue, exc):
            return False
        self._speak(cue)
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _speak(self, cue: SoundCue) -> bool:
        while True:
            if not self.available(NARRATION):
                self._report_missing(NARRATION)
                return False
            self._attempts[cue.key] = self._attempts.get(cue.key, 0) + 1
            try:
                self.narrator.speak(cue.text, cue.voice, cue.speech_rate)
                return True
            except MissingAudioCapability as exc:
                self._report_missing(NARRATION, exc)
                return False
            except Exception as exc:
                if not self._should_retry(cue, exc):
                    return False

    def _should_retry(self, cue: SoundCue, exc: BaseException) -> bool:
        attempt = self._attempts.get(cue.key, 1)
        if attempt <= self.retries:
            logger.warning(
                "Narration failed (attempt %d/%d), retrying: %s",
                attempt,
                self.retries + 1,
                exc,
            )
            return True
        logger.warning("Skipping narration %r after %d attempts: %s", cue.text, attempt, exc)
        self.skipped.append(cue)
        self._attempts.pop(cue.key, None)
        return False

    def _play_tone(self, cue: SoundCue) -> bool:
        if not self.available(TONES):
            self._report_missing(TONES)
            return False
        try:
            self.tones.play(cue.kind, cue.split_step_speed)
            return True
        except MissingAudioCapability as exc:
            self._report_missing(TONES, exc)
            return False
        except Exception as exc:
            logger.warning("Tone %s at %.2fs failed: %s", cue.kind.name, cue.timestamp, exc)
            return False

    def _report_missing(
        self, capability: str, exc: MissingAudioCapability | None = None
    ) -> None:
        self._unavailable.add(capability)
        if any(e.capability == capability for e in self.audio_errors):
            return
        error = exc or MissingAudioCapability(capability)
        self.audio_errors.append(error)
        logger.warning("%s; continuing without %s", error, capability)
