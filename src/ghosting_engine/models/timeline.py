"""Timeline events: one materialized shot or message each."""

from __future__ import annotations

from dataclasses import dataclass, field

from ghosting_engine.models.enums import EntryKind, SplitStepSpeed

# Sub-event names
ANNOUNCED_TIME = "announced_time"
SPLIT_STEP_TIME = "split_step_time"
BEEP_TIME = "beep_time"
MESSAGE_START = "message_start"
TTS_END = "tts_end"
MESSAGE_END = "message_end"
COUNTDOWN_START = "countdown_start"
COUNTDOWN_END = "countdown_end"


@dataclass(frozen=True)
class TimelineEvent:
    """A timed shot or message on the generated timeline.

    Times are absolute seconds from the start of the workout. Sub-event
    names depend on ``kind``: shots carry announced/split-step/beep times,
    messages carry message_start/tts_end/message_end and, when a countdown
    phase exists, countdown_start/countdown_end.
    """

    id: str | None
    name: str
    kind: EntryKind
    start_time: float
    end_time: float
    sub_events: dict[str, float] = field(default_factory=dict)

    # Provenance
    pattern_id: str | None = None
    pattern_name: str = ""
    superset: int = 1
    pattern_run: int = 1
    repeat_number: int = 1
    repeat_total: int = 1

    # Cue data
    text: str = ""                      # narration text (messages)
    voice: str = ""
    speech_rate: float = 1.0
    split_step_speed: SplitStepSpeed = SplitStepSpeed.NONE  # resolved, never AUTO/RANDOM
    auto_voice_split_step: bool = False
    countdown: bool = False

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def is_shot(self) -> bool:
        return self.kind == EntryKind.SHOT

    @property
    def is_message(self) -> bool:
        return self.kind == EntryKind.MESSAGE

    @property
    def beep_time(self) -> float | None:
        return self.sub_events.get(BEEP_TIME)

    @property
    def tts_end(self) -> float | None:
        return self.sub_events.get(TTS_END)

    @property
    def has_countdown_phase(self) -> bool:
        return COUNTDOWN_START in self.sub_events
