"""Timeline statistics and workout summary.

Work time is time spent in shots, rest time is time spent in messages.
Reps per minute counts shots per minute of work time only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import pandas as pd

from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.serialization import wire

# Focus classification thresholds
TECHNICAL_RPM_BELOW = 10.0
CONTINUOUS_HIGH_RPM = 20.0
CONTINUOUS_MODERATE_RPM = 12.0
ANAEROBIC_RATIO = 2.0
ENDURANCE_RATIO = 0.9

_FRAME_COLUMNS = [
    "id", "name", "type", "start_time", "end_time", "duration",
    "pattern_name", "superset", "pattern_run", "repeat_number",
]


@dataclass(frozen=True)
class WorkoutStats:
    total_events: int
    total_duration: float
    total_shots: int
    total_messages: int
    event_types: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkRestRatio:
    work_time: float
    rest_time: float
    ratio: float | None      # None when there is no rest at all

    @property
    def has_rest(self) -> bool:
        return self.rest_time > 0


@dataclass(frozen=True)
class WorkoutSummary:
    primary_focus: str
    intensity_structure: str
    explanation: str
    reps_per_minute: float
    work_rest: WorkRestRatio


def timeline_frame(events: Sequence[TimelineEvent]) -> pd.DataFrame:
    """One row per event with timing and provenance columns."""
    rows = [
        {
            "id": e.id,
            "name": e.name,
            "type": wire.ENTRY_TYPES[e.kind],
            "start_time": e.start_time,
            "end_time": e.end_time,
            "duration": e.duration,
            "pattern_name": e.pattern_name,
            "superset": e.superset,
            "pattern_run": e.pattern_run,
            "repeat_number": e.repeat_number,
        }
        for e in events
    ]
    return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


def calculate_workout_stats(events: Sequence[TimelineEvent]) -> WorkoutStats:
    frame = timeline_frame(events)
    if frame.empty:
        return WorkoutStats(0, 0.0, 0, 0, {})
    counts = frame["type"].value_counts()
    return WorkoutStats(
        total_events=len(frame),
        total_duration=float(frame["end_time"].max()),
        total_shots=int(counts.get("Shot", 0)),
        total_messages=int(counts.get("Message", 0)),
        event_types={str(k): int(v) for k, v in counts.items()},
    )


def work_rest_ratio(events: Sequence[TimelineEvent]) -> WorkRestRatio:
    frame = timeline_frame(events)
    if frame.empty:
        return WorkRestRatio(0.0, 0.0, None)
    by_type = frame.groupby("type")["duration"].sum()
    work = float(by_type.get("Shot", 0.0))
    rest = float(by_type.get("Message", 0.0))
    return WorkRestRatio(work, rest, work / rest if rest > 0 else None)


def reps_per_minute(events: Sequence[TimelineEvent], work_time: float | None = None) -> float:
    if work_time is None:
        work_time = work_rest_ratio(events).work_time
    if work_time <= 0:
        return 0.0
    shots = sum(1 for e in events if e.is_shot)
    return shots / work_time * 60.0


def summarize_workout(events: Sequence[TimelineEvent]) -> WorkoutSummary:
    """Classify the training focus of a timeline.

    A slow pace (under ``TECHNICAL_RPM_BELOW`` reps/min) reads as technical
    work whatever the structure. Otherwise workouts without rest are graded
    by pace, and interval workouts by their work-to-rest ratio.
    """
    work_rest = work_rest_ratio(events)
    rpm = reps_per_minute(events, work_rest.work_time)
    has_shots = any(e.is_shot for e in events)

    def summary(focus: str, structure: str, explanation: str) -> WorkoutSummary:
        return WorkoutSummary(focus, structure, explanation, rpm, work_rest)

    if has_shots and rpm < TECHNICAL_RPM_BELOW:
        return summary(
            "Technical Refinement (Inferred)",
            "Deliberate Practice",
            "The deliberate pace suggests a focus on footwork mechanics and shot "
            "preparation rather than conditioning.",
        )

    ratio = work_rest.ratio
    if ratio is None:
        if rpm >= CONTINUOUS_HIGH_RPM:
            return summary(
                "High-Intensity Continuous",
                "Continuous High-Pace Drill",
                "A continuous high-intensity drill without structured rest, building "
                "cardiovascular endurance and movement speed.",
            )
        if rpm >= CONTINUOUS_MODERATE_RPM:
            return summary(
                "Moderate-Intensity Continuous",
                "Continuous Moderate-Pace Drill",
                "A continuous moderate-intensity drill without structured rest, building "
                "stamina and movement consistency.",
            )
        return summary(
            "Technical Refinement",
            "Continuous Technical Drill",
            "A continuous technical drill without structured rest, focusing on "
            "movement precision and form.",
        )

    if ratio >= ANAEROBIC_RATIO:
        return summary(
            "Anaerobic Fitness & Speed",
            "High-Intensity Interval Training (HIIT)",
            f"A {ratio:.1f}:1 work-to-rest ratio targets explosive power and on-court "
            "quickness.",
        )
    if ratio >= ENDURANCE_RATIO:
        return summary(
            "Match Endurance & Stamina",
            "Sustained Intervals",
            f"A balanced {ratio:.1f}:1 work-to-rest structure builds the stamina to "
            "keep a high level through long rallies.",
        )
    if ratio > 0:
        return summary(
            "Foundational Endurance",
            "Foundational Intervals",
            f"A {ratio:.1f}:1 work-to-rest ratio leaves ample recovery for building a "
            "fitness foundation.",
        )
    return summary(
        "Continuous Effort",
        "Continuous Drill",
        "A continuous drill focused on sustained physical effort.",
    )
