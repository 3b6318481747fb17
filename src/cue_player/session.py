"""Reference playback driver: samples a clock and fires cues exactly once."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from cue_player.collaborators import Narrator, TonePlayer
from cue_player.dispatcher import CueDispatcher
from cue_player.exceptions import MissingAudioCapability
from ghosting_engine.models.enums import ActivePhase
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.playback.index import PlaybackIndex, SoundCue
from ghosting_engine.time_format import format_remaining_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackFrame:
    """What a UI renderer needs for one clock sample."""

    t: float
    event: TimelineEvent | None
    phase: ActivePhase | None
    time_remaining: float
    phase_time_remaining: float
    countdown_seconds: int | None
    total_remaining: float
    cues: tuple[SoundCue, ...]
    finished: bool

    @property
    def remaining_label(self) -> str:
        return format_remaining_time(self.total_remaining)


class PlaybackSession:
    """Drives a ``PlaybackIndex`` from an external clock.

    Pausing is simply not calling ``tick``; a clock that jumps, in either
    direction, goes through ``seek`` first.

    Usage:
        session = PlaybackSession(PlaybackIndex(events), narrator, tones)
        frame = session.tick(clock.elapsed())
        render(frame)
    """

    def __init__(
        self,
        index: PlaybackIndex,
        narrator: Narrator | None = None,
        tones: TonePlayer | None = None,
        dispatcher: CueDispatcher | None = None,
    ) -> None:
        self.index = index
        self.dispatcher = dispatcher or CueDispatcher(narrator, tones)
        self._last_t = -math.inf
        self._completed = False

    @property
    def position(self) -> float:
        return max(0.0, self._last_t)

    @property
    def audio_errors(self) -> list[MissingAudioCapability]:
        return self.dispatcher.audio_errors

    def tick(self, t: float) -> PlaybackFrame:
        """Advance the clock to *t*, fire the cues in between, describe *t*."""
        if t < self._last_t:
            self.seek(t)
        due = self.index.due_sound_events(self._last_t, t)
        self.index.mark_played(c.key for c in due)
        self._last_t = t
        for cue in due:
            self.dispatcher.dispatch(cue)

        total = self.index.total_duration
        finished = bool(self.index.events) and t >= total
        if finished and not self._completed:
            logger.info("Playback complete at %.2fs", total)
        self._completed = finished

        active = self.index.find_active_event(t)
        return PlaybackFrame(
            t=t,
            event=active.event if active else None,
            phase=active.phase if active else None,
            time_remaining=active.time_remaining if active else 0.0,
            phase_time_remaining=active.phase_time_remaining if active else 0.0,
            countdown_seconds=active.countdown_seconds if active else None,
            total_remaining=max(0.0, total - t),
            cues=tuple(due),
            finished=finished,
        )

    def seek(self, t: float) -> None:
        """Jump to *t*; cues at exactly *t* fire on the next tick."""
        self.index.seek(self.position, t)
        self._last_t = math.nextafter(t, -math.inf)
        self._completed = False

    def restart(self) -> None:
        self.index.reset()
        self._last_t = -math.inf
        self._completed = False

    def on_narration_error(self, cue: SoundCue, exc: BaseException) -> bool:
        """Callback for a narrator that reports failures after ``speak`` returned."""
        return self.dispatcher.narration_failed(cue, exc)
