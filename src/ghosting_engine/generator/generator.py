"""Expands a workout document into timed events.

Generation is an explicit state machine over a ``GeneratorState``. Each
step does one unit of work (start a superset, start a pattern visit,
refill a shuffle bag, pick the next entry, or play one repetition) and
may queue at most one event. ``generate`` keeps stepping until the
caller's budget of events has been handed out or the run is done, so the
sequence of steps, and therefore every RNG draw, is the same no matter
how the output is split across calls.

Messages flagged ``skipAtEndOfWorkout`` are held back in
``deferred_events`` until something else is emitted after them; if the
workout ends first they are dropped.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterator

from ghosting_engine import config
from ghosting_engine.generator.timing import (
    SplitStepPolicy,
    message_timing,
    random_split_step_speed,
    shot_timing,
    slot_duration,
)
from ghosting_engine.inheritance.resolver import ConfigResolver, resolve_chain
from ghosting_engine.models.enums import (
    TIME_EPSILON_S,
    EntryKind,
    IntervalOffsetType,
    IterationType,
    LimitType,
    RepeatMode,
    SplitStepSpeed,
)
from ghosting_engine.models.generator_state import (
    Done,
    GenerationResult,
    GeneratorState,
    Paused,
    PatternRunState,
)
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.models.workout import (
    Entry,
    Limits,
    NodePath,
    Pattern,
    RepeatCount,
    Workout,
)
from ghosting_engine.ordering import arrange, in_order
from ghosting_engine.rng import WORKOUT_STREAM, SeededStreams, pattern_stream

logger = logging.getLogger(__name__)


def _exceeds_limit(elapsed: float, duration: float, limit: float) -> bool:
    """True if an element starting at *elapsed* would start at/after or end past *limit*."""
    return (
        elapsed >= limit - TIME_EPSILON_S
        or elapsed + duration > limit + TIME_EPSILON_S
    )


class TimelineGenerator:
    """Turns a validated Workout into a deterministic, resumable timeline.

    Usage:
        generator = TimelineGenerator()
        events = generator.generate_all(workout, seed=42)

        # bounded, incremental
        result = generator.generate(workout, seed=42, max_events=50)
        while not result.is_done:
            result = generator.generate(workout, max_events=50, state=result.cursor)
    """

    def __init__(self, split_step_policy: SplitStepPolicy | None = None) -> None:
        self.split_step_policy = split_step_policy or SplitStepPolicy()

    def initial_state(
        self,
        workout: Workout,
        seed: int | None = None,
        superset_count: int | None = None,
    ) -> GeneratorState:
        """Fresh cursor for *workout*.

        Without *superset_count*, an all-shots workout plays one superset
        and a shot- or time-limited workout loops supersets until its limit.
        """
        resolver = ConfigResolver(workout)
        limits: Limits = resolver.resolve(NodePath(), "limits")
        if superset_count is None:
            superset_limit = 1 if limits.type == LimitType.ALL_SHOTS else None
        else:
            superset_limit = superset_count
        return GeneratorState(
            workout_seed=config.DEFAULT_SEED if seed is None else int(seed),
            workout_iteration_type=resolver.resolve(NodePath(), "iterationType"),
            superset_limit=superset_limit,
        )

    def generate(
        self,
        workout: Workout,
        seed: int | None = None,
        max_events: int | None = None,
        state: GeneratorState | None = None,
        superset_count: int | None = None,
    ) -> GenerationResult:
        """Generate up to *max_events* events.

        Args:
            workout: A workout that already passed validation.
            seed: Workout seed for a fresh run. Ignored when resuming.
            max_events: Budget for this call; None means run to the end.
            state: Cursor from a previous ``Paused`` result. Never mutated.
            superset_count: Number of supersets for a fresh run.

        Returns:
            The events handed out by this call and ``Done`` or
            ``Paused(cursor)``.
        """
        if max_events is not None and max_events < 0:
            raise ValueError(f"max_events must be >= 0, got {max_events}")
        if state is None:
            state = self.initial_state(workout, seed, superset_count)
            logger.info(
                "Generating timeline for %r (seed=%d, supersets=%s)",
                workout.name, state.workout_seed, state.superset_limit,
            )
        else:
            state = copy.deepcopy(state)
        state.max_events = max_events

        run = _GenerationRun(workout, state, self.split_step_policy)
        emitted: list[TimelineEvent] = []
        while True:
            while state.pending_events and (
                max_events is None or len(emitted) < max_events
            ):
                emitted.append(state.pending_events.pop(0))
                state.total_events_generated += 1
            if state.finished and not state.pending_events:
                return GenerationResult(tuple(emitted), Done())
            if max_events is not None and len(emitted) >= max_events:
                return GenerationResult(tuple(emitted), Paused(state))
            run.step()

    def generate_all(
        self,
        workout: Workout,
        seed: int | None = None,
        superset_count: int | None = None,
    ) -> tuple[TimelineEvent, ...]:
        """Whole timeline in one call."""
        return self.generate(workout, seed, superset_count=superset_count).events

    def iter_batches(
        self,
        workout: Workout,
        batch_size: int,
        seed: int | None = None,
        superset_count: int | None = None,
    ) -> Iterator[tuple[TimelineEvent, ...]]:
        """Yield the timeline in batches of at most *batch_size* events."""
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        result = self.generate(
            workout, seed, max_events=batch_size, superset_count=superset_count
        )
        while True:
            if result.events:
                yield result.events
            if result.is_done:
                return
            result = self.generate(workout, max_events=batch_size, state=result.cursor)


class _GenerationRun:
    """Per-call helper stepping one private GeneratorState."""

    def __init__(
        self, workout: Workout, state: GeneratorState, policy: SplitStepPolicy
    ) -> None:
        self.workout = workout
        self.state = state
        self.policy = policy
        self.resolver = ConfigResolver(workout)
        self.streams = SeededStreams(state.workout_seed, state.rng_draws)
        self.workout_limits: Limits = self.resolver.resolve(NodePath(), "limits")

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def step(self) -> None:
        state = self.state
        if state.pattern_run is not None:
            self._advance_run(state.pattern_run)
        elif state.pattern_order_index < len(state.pattern_order):
            pattern_index = state.pattern_order[state.pattern_order_index]
            state.pattern_order_index += 1
            self._begin_pattern(pattern_index)
        else:
            self._begin_superset()

    def _begin_superset(self) -> None:
        state = self.state
        if state.workout_draining:
            self._finish()
            return
        if state.superset_limit is not None and state.current_superset >= state.superset_limit:
            self._finish()
            return
        if not self.workout.patterns:
            logger.warning("Workout %r has no patterns", self.workout.name)
            self._finish()
            return
        if state.current_superset > 0 and self._superset_stalled():
            logger.warning(
                "Superset %d of %r made no progress towards the workout limit; stopping",
                state.current_superset, self.workout.name,
            )
            self._finish()
            return

        state.current_superset += 1
        state.superset_start_shots = state.workout_total_shots
        state.superset_start_time = state.workout_total_time
        count = len(self.workout.patterns)
        if state.workout_iteration_type == IterationType.SHUFFLE:
            state.pattern_order = arrange(
                [p.position for p in self.workout.patterns],
                self.streams.source(WORKOUT_STREAM),
            )
        else:
            state.pattern_order = in_order(count)
        state.pattern_order_index = 0
        logger.debug(
            "Superset %d pattern order %s", state.current_superset, state.pattern_order
        )

    def _superset_stalled(self) -> bool:
        state = self.state
        if self.workout_limits.type == LimitType.SHOT_LIMIT:
            return state.workout_total_shots == state.superset_start_shots
        if self.workout_limits.type == LimitType.TIME_LIMIT:
            return state.workout_total_time <= state.superset_start_time
        return False

    def _begin_pattern(self, pattern_index: int) -> None:
        pattern = self.workout.patterns[pattern_index]
        self.state.pattern_index = pattern_index
        if not pattern.entries:
            logger.warning(
                "Pattern %r has no entries; skipping", pattern.name or pattern_index
            )
            return
        repeat: RepeatCount = self.resolver.resolve(NodePath(pattern_index), "repeatCount")
        runs = self._draw_repeat(repeat, pattern_stream(pattern_index))
        if runs <= 0:
            logger.debug("Pattern %r drew 0 runs; skipping", pattern.name)
            return
        self.state.pattern_run = PatternRunState(pattern_index=pattern_index, runs_total=runs)

    def _advance_run(self, run: PatternRunState) -> None:
        pattern = self.workout.patterns[run.pattern_index]
        if run.entry_index is not None:
            self._play_repetition(run, pattern)
            return

        if not run.available_entries:
            if run.draining:
                self._end_run(run)
            elif run.bag_passes > 0 and not self._keep_cycling(run, pattern):
                self._end_run(run)
            else:
                self._fill_bag(run, pattern)
            return

        if run.draining:
            upcoming = pattern.entries[run.available_entries[0]]
            if upcoming.kind == EntryKind.SHOT:
                self._end_run(run)
                return

        entry_index = run.available_entries.pop(0)
        path = NodePath(run.pattern_index, entry_index)
        repeat: RepeatCount = self.resolver.resolve(path, "repeatCount")
        repeats = self._draw_repeat(repeat, pattern_stream(run.pattern_index))
        run.last_played_entry = entry_index
        if repeats <= 0:
            return
        run.entry_index = entry_index
        run.repeats_total = repeats
        run.repeats_remaining = repeats

    def _keep_cycling(self, run: PatternRunState, pattern: Pattern) -> bool:
        """Whether a finished pass over the bag should start another one."""
        limits: Limits = self.resolver.resolve(NodePath(run.pattern_index), "limits")
        if limits.type == LimitType.ALL_SHOTS:
            return False
        if limits.type == LimitType.SHOT_LIMIT and run.cycle_shots == 0:
            logger.warning(
                "Pattern %r played no shots in a full pass; ending run before its shot limit",
                pattern.name,
            )
            return False
        if limits.type == LimitType.TIME_LIMIT and run.cycle_time <= 0:
            logger.warning(
                "Pattern %r used no time in a full pass; ending run before its time limit",
                pattern.name,
            )
            return False
        return True

    def _fill_bag(self, run: PatternRunState, pattern: Pattern) -> None:
        iteration = self.resolver.resolve(NodePath(run.pattern_index), "iterationType")
        if iteration == IterationType.SHUFFLE:
            run.available_entries = arrange(
                [e.position for e in pattern.entries],
                self.streams.source(pattern_stream(run.pattern_index)),
            )
        else:
            run.available_entries = in_order(len(pattern.entries))
        run.bag_passes += 1
        run.cycle_shots = 0
        run.cycle_time = 0.0

    def _end_run(self, run: PatternRunState) -> None:
        state = self.state
        run.pattern_runs_completed += 1
        if state.workout_draining:
            self._finish()
        elif run.pattern_runs_completed >= run.runs_total:
            state.pattern_run = None
        else:
            run.reset_run()

    def _finish(self) -> None:
        state = self.state
        if state.deferred_events:
            logger.debug(
                "Dropping %d skip-at-end message(s) at end of workout",
                len(state.deferred_events),
            )
        state.deferred_events = []
        state.pattern_run = None
        state.finished = True
        logger.info(
            "Timeline complete: %d shots over %.1fs in %d superset(s)",
            state.workout_total_shots, state.workout_total_time, state.current_superset,
        )

    # ------------------------------------------------------------------
    # Playing one repetition
    # ------------------------------------------------------------------

    def _play_repetition(self, run: PatternRunState, pattern: Pattern) -> None:
        state = self.state
        entry = pattern.entries[run.entry_index]
        path = NodePath(run.pattern_index, run.entry_index)
        event = self._build_event(entry, pattern, path, run)
        duration = event.end_time - event.start_time

        pattern_limits: Limits = self.resolver.resolve(NodePath(run.pattern_index), "limits")
        if pattern_limits.type == LimitType.TIME_LIMIT and _exceeds_limit(
            run.pattern_time_elapsed, duration, pattern_limits.value
        ):
            self._end_run(run)
            return
        if self.workout_limits.type == LimitType.TIME_LIMIT and _exceeds_limit(
            state.workout_total_time, duration, self.workout_limits.value
        ):
            logger.info("Workout time limit of %.1fs reached", self.workout_limits.value)
            self._finish()
            return

        deferrable = entry.kind == EntryKind.MESSAGE and bool(
            self.resolver.resolve(path, "skipAtEndOfWorkout")
        )
        self._emit(event, deferrable)

        state.current_time = event.end_time
        state.workout_total_time += duration
        run.pattern_time_elapsed += duration
        run.cycle_time += duration
        run.repeats_remaining -= 1
        if run.repeats_remaining <= 0:
            run.entry_index = None

        if event.is_shot:
            run.pattern_shots_played += 1
            run.cycle_shots += 1
            state.workout_total_shots += 1
            if (
                pattern_limits.type == LimitType.SHOT_LIMIT
                and run.pattern_shots_played >= pattern_limits.value
            ):
                run.draining = True
                run.entry_index = None
            if (
                self.workout_limits.type == LimitType.SHOT_LIMIT
                and state.workout_total_shots >= self.workout_limits.value
            ):
                logger.info("Workout shot limit of %d reached", self.workout_limits.value)
                state.workout_draining = True
                run.draining = True
                run.entry_index = None

    def _emit(self, event: TimelineEvent, deferrable: bool) -> None:
        state = self.state
        if deferrable:
            state.deferred_events.append(event)
            return
        if state.deferred_events:
            state.pending_events.extend(state.deferred_events)
            state.deferred_events = []
        state.pending_events.append(event)

    def _build_event(
        self, entry: Entry, pattern: Pattern, path: NodePath, run: PatternRunState
    ) -> TimelineEvent:
        state = self.state
        stream = pattern_stream(path.pattern_index)
        chain = self.resolver.chain(path)

        def cfg(key: str) -> Any:
            return resolve_chain(chain, key)

        interval = float(cfg("interval"))
        slot = slot_duration(interval, self._draw_offset(cfg, stream))
        start = state.current_time
        speech_rate = float(cfg("speechRate"))
        common: dict[str, Any] = dict(
            id=entry.id,
            name=entry.name,
            kind=entry.kind,
            start_time=start,
            pattern_id=pattern.id,
            pattern_name=pattern.name,
            superset=state.current_superset,
            pattern_run=run.pattern_runs_completed + 1,
            repeat_number=run.repeats_total - run.repeats_remaining + 1,
            repeat_total=run.repeats_total,
            voice=str(cfg("voice")),
            speech_rate=speech_rate,
        )

        if entry.kind == EntryKind.SHOT:
            speed = self._concrete_speed(cfg("splitStepSpeed"), slot, stream)
            end, sub_events = shot_timing(
                start, slot, float(cfg("shotAnnouncementLeadTime")), speed
            )
            return TimelineEvent(
                end_time=end,
                sub_events=sub_events,
                text=entry.name,
                split_step_speed=speed,
                auto_voice_split_step=bool(cfg("autoVoiceSplitStep")),
                **common,
            )

        text = str(cfg("message") or "")
        countdown = bool(cfg("countdown"))
        end, sub_events = message_timing(
            start, slot, text, speech_rate, cfg("intervalType"), countdown
        )
        return TimelineEvent(
            end_time=end,
            sub_events=sub_events,
            text=text,
            countdown=countdown,
            **common,
        )

    # ------------------------------------------------------------------
    # Seeded draws
    # ------------------------------------------------------------------

    def _draw_repeat(self, repeat: RepeatCount, stream: int) -> int:
        if repeat.mode == RepeatMode.RANDOM:
            return self.streams.randint(stream, repeat.min, repeat.max)
        return int(repeat.count)

    def _draw_offset(self, cfg, stream: int) -> float:
        offset = cfg("intervalOffset")
        if cfg("intervalOffsetType") == IntervalOffsetType.RANDOM:
            return self.streams.uniform(stream, offset.min, offset.max)
        return float(offset.min)

    def _concrete_speed(
        self, speed: SplitStepSpeed, slot: float, stream: int
    ) -> SplitStepSpeed:
        if speed == SplitStepSpeed.AUTO_SCALE:
            return self.policy.speed_for(slot)
        if speed == SplitStepSpeed.RANDOM:
            return random_split_step_speed(self.streams.random(stream))
        return speed
