"""Sub-event timing for shots and messages.

Pure functions: given a start time and the resolved settings for one
repetition, compute the event's end time and its named sub-event
timestamps. Randomness (offset draws, random split-step speeds) is
resolved by the caller and passed in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ghosting_engine import config
from ghosting_engine.models.enums import (
    MIN_COUNTDOWN_S,
    RANDOM_SPLIT_STEP_FAST_BELOW,
    RANDOM_SPLIT_STEP_MEDIUM_BELOW,
    SPLIT_STEP_DURATION_S,
    TTS_MIN_DURATION_S,
    TTS_WORDS_PER_SECOND,
    IntervalType,
    SplitStepSpeed,
)
from ghosting_engine.models.timeline import (
    ANNOUNCED_TIME,
    BEEP_TIME,
    COUNTDOWN_END,
    COUNTDOWN_START,
    MESSAGE_END,
    MESSAGE_START,
    SPLIT_STEP_TIME,
    TTS_END,
)


@dataclass(frozen=True)
class SplitStepPolicy:
    """Maps a shot's slot duration to a concrete split-step speed.

    Slots up to ``fast_max_s`` get FAST, up to ``medium_max_s`` MEDIUM,
    anything longer SLOW. Bounds are inclusive.
    """

    fast_max_s: float = config.SPLIT_STEP_FAST_MAX_S
    medium_max_s: float = config.SPLIT_STEP_MEDIUM_MAX_S

    def speed_for(self, slot_s: float) -> SplitStepSpeed:
        if slot_s <= self.fast_max_s:
            return SplitStepSpeed.FAST
        if slot_s <= self.medium_max_s:
            return SplitStepSpeed.MEDIUM
        return SplitStepSpeed.SLOW


def random_split_step_speed(draw: float) -> SplitStepSpeed:
    """Concrete speed for a uniform [0, 1) draw."""
    if draw < RANDOM_SPLIT_STEP_FAST_BELOW:
        return SplitStepSpeed.FAST
    if draw < RANDOM_SPLIT_STEP_MEDIUM_BELOW:
        return SplitStepSpeed.MEDIUM
    return SplitStepSpeed.SLOW


def _round_tenth(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def estimate_tts_duration(text: str, speech_rate: float = 1.0) -> float:
    """Estimated narration length in seconds, rounded to 0.1 s.

    Word count at ``TTS_WORDS_PER_SECOND`` with a ``TTS_MIN_DURATION_S``
    floor, divided by the speech rate. Empty text takes no time.
    """
    if not text or not text.strip():
        return 0.0
    words = len(text.split())
    base = max(TTS_MIN_DURATION_S, words / TTS_WORDS_PER_SECOND)
    return _round_tenth(base / speech_rate)


def slot_duration(interval: float, offset: float) -> float:
    """Interval plus offset, never negative."""
    return max(0.0, interval + offset)


def shot_timing(
    start: float,
    slot: float,
    lead_time: float,
    speed: SplitStepSpeed,
) -> tuple[float, dict[str, float]]:
    """End time and sub-events for one shot repetition.

    *speed* must already be concrete (NONE, SLOW, MEDIUM or FAST).
    """
    beep = start + slot
    sub_events = {
        ANNOUNCED_TIME: max(start, beep - lead_time),
        BEEP_TIME: beep,
    }
    if speed != SplitStepSpeed.NONE:
        sub_events[SPLIT_STEP_TIME] = max(start, beep - SPLIT_STEP_DURATION_S[speed])
    return beep, sub_events


def message_timing(
    start: float,
    slot: float,
    text: str,
    speech_rate: float,
    interval_type: IntervalType,
    countdown: bool,
) -> tuple[float, dict[str, float]]:
    """End time and sub-events for one message repetition."""
    tts_end = start + estimate_tts_duration(text, speech_rate)
    if interval_type == IntervalType.ADDITIONAL:
        end = tts_end + slot
    else:
        end = start + max(slot, tts_end - start)
    sub_events = {
        MESSAGE_START: start,
        TTS_END: tts_end,
        MESSAGE_END: end,
    }
    if countdown and end - tts_end > MIN_COUNTDOWN_S:
        sub_events[COUNTDOWN_START] = tts_end
        sub_events[COUNTDOWN_END] = end
    return end, sub_events
