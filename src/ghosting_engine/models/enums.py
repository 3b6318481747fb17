"""Enumerations and timing constants for the ghosting engine.

Wire strings for every enum live in the serialization layer; the engine
only ever sees these IntEnums.
"""

from enum import IntEnum, auto


class EntryKind(IntEnum):
    """Schedulable unit inside a pattern."""

    SHOT = auto()
    MESSAGE = auto()


class PositionKind(IntEnum):
    """Where an entry (or pattern) may sit when its siblings are ordered.

    Only NORMAL items take part in shuffling. LINKED items travel with
    their predecessor; LOCKED_AT_INDEX and LOCKED_LAST pin a slot.
    """

    NORMAL = auto()
    LINKED = auto()
    LOCKED_AT_INDEX = auto()
    LOCKED_LAST = auto()


class IterationType(IntEnum):
    IN_ORDER = auto()
    SHUFFLE = auto()


class LimitType(IntEnum):
    """How a pattern run (or the whole workout) is capped."""

    ALL_SHOTS = auto()
    SHOT_LIMIT = auto()
    TIME_LIMIT = auto()


class IntervalOffsetType(IntEnum):
    FIXED = auto()
    RANDOM = auto()


class IntervalType(IntEnum):
    """How a message's interval relates to its narration.

    FIXED: the slot is the interval, stretched to fit the narration.
    ADDITIONAL: the interval starts after the narration ends.
    """

    FIXED = auto()
    ADDITIONAL = auto()


class RepeatMode(IntEnum):
    FIXED = auto()
    RANDOM = auto()


class SplitStepSpeed(IntEnum):
    """Split-step cue speed. AUTO_SCALE and RANDOM resolve per shot."""

    NONE = auto()
    SLOW = auto()
    MEDIUM = auto()
    FAST = auto()
    RANDOM = auto()
    AUTO_SCALE = auto()


class ActivePhase(IntEnum):
    """Phase of the event under the playback clock."""

    PREPARING = auto()   # shot, before the beep
    EXECUTING = auto()   # shot, at/after the beep
    TTS = auto()         # message, narration running
    COUNTDOWN = auto()   # message, after narration


class CueKind(IntEnum):
    """Sound cue categories handed to the audio collaborators."""

    ANNOUNCE = auto()        # narration of the shot name
    SPLIT_STEP = auto()      # tone
    BEEP = auto()            # tone, shot execution
    NARRATION = auto()       # message text
    COUNTDOWN_TICK = auto()  # tone, one per remaining second
    COMPLETION = auto()      # "Workout complete" narration


# ---------------------------------------------------------------------------
# Shot timing
# ---------------------------------------------------------------------------
# Lead time used by the default table and written to saved files.
DEFAULT_LEAD_TIME_S = 1.0
# Lead time the editor pre-fills on newly created entries.
EDITOR_DEFAULT_LEAD_TIME_S = 2.5
# Lead times below this are rejected by the validator.
MIN_LEAD_TIME_S = 1.0

# Time from split-step cue to the execution beep.
SPLIT_STEP_DURATION_S = {
    SplitStepSpeed.SLOW: 0.64,
    SplitStepSpeed.MEDIUM: 0.48,
    SplitStepSpeed.FAST: 0.32,
}

# Default auto-scale policy: slot length upper bounds (inclusive).
AUTO_SCALE_FAST_MAX_S = 4.0
AUTO_SCALE_MEDIUM_MAX_S = 5.0

# Random split-step speed draw boundaries
RANDOM_SPLIT_STEP_FAST_BELOW = 0.33
RANDOM_SPLIT_STEP_MEDIUM_BELOW = 0.67

# ---------------------------------------------------------------------------
# Interval / offset bounds
# ---------------------------------------------------------------------------
DEFAULT_INTERVAL_S = 5.0
MIN_INTERVAL_OFFSET_S = -2.0
MAX_INTERVAL_OFFSET_S = 2.0

# ---------------------------------------------------------------------------
# Narration
# ---------------------------------------------------------------------------
TTS_WORDS_PER_SECOND = 2.4       # ~144 wpm at rate 1.0
TTS_MIN_DURATION_S = 1.0         # floor for any non-empty text
MIN_SPEECH_RATE = 0.5
MAX_SPEECH_RATE = 1.5
DEFAULT_VOICE = "Default"
DEFAULT_SPEECH_RATE = 1.0

# A countdown phase is only exposed when at least this much time is left
# after the narration.
MIN_COUNTDOWN_S = 1.0
MAX_COUNTDOWN_TICKS = 10

COMPLETION_TEXT = "Workout complete"

# Float tolerance for limit comparisons
TIME_EPSILON_S = 1e-9
