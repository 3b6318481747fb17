"""Playback index: maps a playback clock onto a materialized timeline.

Shots and messages are kept in two start-sorted numpy arrays and looked up
with ``searchsorted``. Sound cues are precomputed once, sorted by time, and
tracked by a stable ``(kind, timestamp)`` key so a driver that samples the
clock every tick fires each cue exactly once, across pauses and scrubs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from ghosting_engine.models.enums import (
    COMPLETION_TEXT,
    DEFAULT_SPEECH_RATE,
    DEFAULT_VOICE,
    MAX_COUNTDOWN_TICKS,
    ActivePhase,
    CueKind,
    SplitStepSpeed,
)
from ghosting_engine.models.timeline import (
    ANNOUNCED_TIME,
    BEEP_TIME,
    COUNTDOWN_END,
    MESSAGE_START,
    SPLIT_STEP_TIME,
    TTS_END,
    TimelineEvent,
)

logger = logging.getLogger(__name__)

CueKey = tuple[CueKind, float]

# Cue timestamps are rounded for keying so float noise can't split a cue in two
_KEY_DECIMALS = 6


@dataclass(frozen=True)
class SoundCue:
    """A single narration or tone due at ``timestamp``."""

    kind: CueKind
    timestamp: float
    event_index: int | None = None   # None for the completion cue
    text: str = ""
    voice: str = DEFAULT_VOICE
    speech_rate: float = DEFAULT_SPEECH_RATE
    split_step_speed: SplitStepSpeed = SplitStepSpeed.NONE
    countdown_number: int | None = None

    @property
    def key(self) -> CueKey:
        return (self.kind, round(self.timestamp, _KEY_DECIMALS))

    @property
    def is_narration(self) -> bool:
        return self.kind in (CueKind.ANNOUNCE, CueKind.NARRATION, CueKind.COMPLETION)


@dataclass(frozen=True)
class ActiveEvent:
    """The event under the playback clock and where we are inside it."""

    event: TimelineEvent
    index: int
    phase: ActivePhase
    time_remaining: float             # until the event ends
    phase_time_remaining: float       # until the current phase ends
    countdown_seconds: int | None = None


def countdown_tick_count(event: TimelineEvent) -> int:
    """Number of whole-second countdown ticks for a message.

    Ticks start at the first whole second after the narration and are
    capped at ``MAX_COUNTDOWN_TICKS``.
    """
    if not event.is_message or not event.countdown:
        return 0
    tts_end = event.sub_events.get(TTS_END, event.start_time)
    remaining = event.end_time - math.ceil(tts_end)
    if remaining <= 0:
        return 0
    return min(MAX_COUNTDOWN_TICKS, math.floor(remaining))


def build_cues(events: Sequence[TimelineEvent]) -> list[SoundCue]:
    """Every sound cue for *events*, sorted by time."""
    cues: list[SoundCue] = []
    for i, event in enumerate(events):
        voice = event.voice or DEFAULT_VOICE
        if event.is_shot:
            if event.name and event.name.strip() and ANNOUNCED_TIME in event.sub_events:
                cues.append(SoundCue(
                    CueKind.ANNOUNCE, event.sub_events[ANNOUNCED_TIME], i,
                    text=event.name, voice=voice, speech_rate=event.speech_rate,
                ))
            if SPLIT_STEP_TIME in event.sub_events:
                cues.append(SoundCue(
                    CueKind.SPLIT_STEP, event.sub_events[SPLIT_STEP_TIME], i,
                    split_step_speed=event.split_step_speed,
                ))
            if BEEP_TIME in event.sub_events:
                cues.append(SoundCue(CueKind.BEEP, event.sub_events[BEEP_TIME], i))
        else:
            if event.text and event.text.strip():
                cues.append(SoundCue(
                    CueKind.NARRATION, event.sub_events.get(MESSAGE_START, event.start_time), i,
                    text=event.text, voice=voice, speech_rate=event.speech_rate,
                ))
            end = event.sub_events.get(COUNTDOWN_END, event.end_time)
            for n in range(countdown_tick_count(event), 0, -1):
                cues.append(SoundCue(
                    CueKind.COUNTDOWN_TICK, end - n, i, countdown_number=n,
                ))
    cues.sort(key=lambda c: (c.timestamp, c.kind))
    if events:
        cues.append(SoundCue(CueKind.COMPLETION, events[-1].end_time, None, text=COMPLETION_TEXT))
    return cues


class PlaybackIndex:
    """Queryable view of a finite timeline for a playback driver.

    Usage:
        index = PlaybackIndex(events)
        active = index.find_active_event(t)
        for cue in index.due_sound_events(prev_t, t):
            play(cue)
        index.mark_played(c.key for c in cues)
    """

    def __init__(self, events: Sequence[TimelineEvent]) -> None:
        self.events: tuple[TimelineEvent, ...] = tuple(events)
        self._shot_indices = np.array(
            [i for i, e in enumerate(self.events) if e.is_shot], dtype=np.int64
        )
        self._message_indices = np.array(
            [i for i, e in enumerate(self.events) if e.is_message], dtype=np.int64
        )
        self._shot_starts, self._shot_ends = self._bounds(self._shot_indices)
        self._message_starts, self._message_ends = self._bounds(self._message_indices)

        self.cues: tuple[SoundCue, ...] = tuple(build_cues(self.events))
        self._cue_times = np.array([c.timestamp for c in self.cues], dtype=np.float64)
        self._played: set[CueKey] = set()
        logger.debug(
            "Playback index over %d events (%d cues)", len(self.events), len(self.cues)
        )

    def _bounds(self, indices: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        starts = np.array([self.events[i].start_time for i in indices], dtype=np.float64)
        ends = np.array([self.events[i].end_time for i in indices], dtype=np.float64)
        return starts, ends

    @property
    def total_duration(self) -> float:
        return self.events[-1].end_time if self.events else 0.0

    # ------------------------------------------------------------------
    # Active event
    # ------------------------------------------------------------------

    @staticmethod
    def _containing(
        starts: np.ndarray, ends: np.ndarray, indices: np.ndarray, t: float
    ) -> int | None:
        pos = int(np.searchsorted(starts, t, side="right")) - 1
        if pos < 0 or t >= ends[pos]:
            return None
        return int(indices[pos])

    def find_active_event(self, t: float) -> ActiveEvent | None:
        """Event whose ``[start, end)`` contains *t*; messages win ties."""
        index = self._containing(
            self._message_starts, self._message_ends, self._message_indices, t
        )
        if index is None:
            index = self._containing(
                self._shot_starts, self._shot_ends, self._shot_indices, t
            )
        if index is None:
            return None

        event = self.events[index]
        remaining = event.end_time - t
        if event.is_shot:
            beep = event.sub_events.get(BEEP_TIME, event.end_time)
            if t < beep:
                return ActiveEvent(event, index, ActivePhase.PREPARING, remaining, beep - t)
            return ActiveEvent(event, index, ActivePhase.EXECUTING, remaining, remaining)

        tts_end = event.sub_events.get(TTS_END, event.start_time)
        if t < tts_end:
            return ActiveEvent(event, index, ActivePhase.TTS, remaining, tts_end - t)
        seconds = math.ceil(remaining) if event.has_countdown_phase else None
        return ActiveEvent(event, index, ActivePhase.COUNTDOWN, remaining, remaining, seconds)

    # ------------------------------------------------------------------
    # Cues
    # ------------------------------------------------------------------

    def due_sound_events(self, prev_t: float, t: float) -> list[SoundCue]:
        """Unplayed cues with timestamp in ``(prev_t, t]``."""
        if t <= prev_t:
            return []
        lo = int(np.searchsorted(self._cue_times, prev_t, side="right"))
        hi = int(np.searchsorted(self._cue_times, t, side="right"))
        return [c for c in self.cues[lo:hi] if c.key not in self._played]

    def mark_played(self, keys: Iterable[CueKey]) -> None:
        self._played.update(keys)

    def is_played(self, key: CueKey) -> bool:
        return key in self._played

    def seek(self, from_t: float, to_t: float) -> None:
        """Adjust played marks for a discrete jump of the playback clock.

        Backward: every cue at or after *to_t* may fire again. Forward:
        every cue strictly before *to_t* counts as played, so skipped cues
        don't fire in a burst when playback resumes.
        """
        if to_t < from_t:
            self._played = {k for k in self._played if k[1] < to_t}
        elif to_t > from_t:
            hi = int(np.searchsorted(self._cue_times, to_t, side="left"))
            self._played.update(c.key for c in self.cues[:hi])
        logger.debug("Seek %.2f -> %.2f (%d cues marked)", from_t, to_t, len(self._played))

    def reset(self) -> None:
        """Forget every played mark."""
        self._played.clear()
