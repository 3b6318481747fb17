"""Resumable generator cursor and generation results.

Unlike the document models these are working state: the generator
mutates a private copy while it runs and hands a fresh copy back inside
``Paused``. Everything here is plain data, so a cursor can be deep-copied,
pickled or kept around indefinitely.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ghosting_engine.models.enums import IterationType
from ghosting_engine.models.timeline import TimelineEvent


@dataclass
class PatternRunState:
    """Progress through the current visit of one pattern."""

    pattern_index: int
    runs_total: int
    pattern_runs_completed: int = 0

    # Counters for the run in progress; reset at every run boundary
    pattern_shots_played: int = 0
    pattern_time_elapsed: float = 0.0
    available_entries: list[int] = field(default_factory=list)  # shuffle-bag remainder
    bag_passes: int = 0               # full passes over the bag ("extended sets")
    cycle_shots: int = 0              # shots in the current pass
    cycle_time: float = 0.0           # seconds in the current pass
    draining: bool = False            # shot limit hit, only trailing messages left

    last_played_entry: int | None = None
    entry_index: int | None = None    # entry whose repetitions are in flight
    repeats_remaining: int = 0
    repeats_total: int = 0

    def reset_run(self) -> None:
        self.pattern_shots_played = 0
        self.pattern_time_elapsed = 0.0
        self.available_entries = []
        self.bag_passes = 0
        self.cycle_shots = 0
        self.cycle_time = 0.0
        self.draining = False
        self.entry_index = None
        self.repeats_remaining = 0
        self.repeats_total = 0


@dataclass
class GeneratorState:
    """Everything needed to resume generation deterministically.

    ``rng_draws`` maps an RNG stream ordinal to the number of values drawn
    from it so far; streams are recreated from ``workout_seed`` and
    fast-forwarded on resume.
    """

    workout_seed: int
    workout_iteration_type: IterationType = IterationType.IN_ORDER
    superset_limit: int | None = 1    # None = run until the workout limit

    current_superset: int = 0
    pattern_order: list[int] = field(default_factory=list)
    pattern_order_index: int = 0
    pattern_index: int | None = None
    pattern_run: PatternRunState | None = None

    current_time: float = 0.0
    workout_total_shots: int = 0
    workout_total_time: float = 0.0
    superset_start_shots: int = 0
    superset_start_time: float = 0.0
    workout_draining: bool = False

    total_events_generated: int = 0
    max_events: int | None = None
    pending_events: list[TimelineEvent] = field(default_factory=list)
    deferred_events: list[TimelineEvent] = field(default_factory=list)
    rng_draws: dict[int, int] = field(default_factory=dict)
    finished: bool = False


@dataclass(frozen=True)
class Done:
    """Generation finished; there is nothing left to resume."""


@dataclass(frozen=True)
class Paused:
    """Budget reached. Pass ``cursor`` back to continue."""

    cursor: GeneratorState


@dataclass(frozen=True)
class GenerationResult:
    events: tuple[TimelineEvent, ...]
    status: Done | Paused

    @property
    def is_done(self) -> bool:
        return isinstance(self.status, Done)

    @property
    def cursor(self) -> GeneratorState | None:
        if isinstance(self.status, Paused):
            return self.status.cursor
        return None
