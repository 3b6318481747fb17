"""GhostingEngine: the main entry point from raw document to playable timeline."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from ghosting_engine.generator.generator import TimelineGenerator
from ghosting_engine.generator.timing import SplitStepPolicy
from ghosting_engine.models.generator_state import GenerationResult, GeneratorState
from ghosting_engine.models.timeline import TimelineEvent
from ghosting_engine.models.workout import Workout
from ghosting_engine.playback.index import PlaybackIndex
from ghosting_engine.serialization.document import load_workout
from ghosting_engine.stats import WorkoutSummary, summarize_workout
from ghosting_engine.validation.validator import validate_or_raise

logger = logging.getLogger(__name__)


class GhostingEngine:
    """Orchestrates validation, loading, generation and playback indexing.

    Usage:
        engine = GhostingEngine()
        workout = engine.load(document)
        events = engine.timeline(workout, seed=7)
        index = engine.playback_index(events)
    """

    def __init__(
        self,
        generator: TimelineGenerator | None = None,
        split_step_policy: SplitStepPolicy | None = None,
    ) -> None:
        self.generator = generator or TimelineGenerator(split_step_policy)

    def load(self, document: Mapping[str, Any], bulk_load: bool = False) -> Workout:
        """Validate and load one document.

        Raises:
            ValidationError: The document has at least one issue.
        """
        validate_or_raise(document)
        workout = load_workout(document, bulk_load=bulk_load)
        if not bulk_load:
            logger.info(
                "Loaded workout %r (%d patterns)", workout.name, len(workout.patterns)
            )
        return workout

    def load_many(self, documents: Iterable[Mapping[str, Any]]) -> list[Workout]:
        workouts = [self.load(d, bulk_load=True) for d in documents]
        logger.info("Loaded %d workouts", len(workouts))
        return workouts

    def generate(
        self,
        workout: Workout,
        seed: int | None = None,
        max_events: int | None = None,
        state: GeneratorState | None = None,
        superset_count: int | None = None,
    ) -> GenerationResult:
        return self.generator.generate(
            workout, seed, max_events=max_events, state=state, superset_count=superset_count
        )

    def timeline(
        self,
        workout: Workout,
        seed: int | None = None,
        superset_count: int | None = None,
    ) -> tuple[TimelineEvent, ...]:
        return self.generator.generate_all(workout, seed, superset_count=superset_count)

    def playback_index(self, events: Sequence[TimelineEvent]) -> PlaybackIndex:
        return PlaybackIndex(events)

    def prepare(
        self, document: Mapping[str, Any], seed: int | None = None
    ) -> tuple[Workout, tuple[TimelineEvent, ...], PlaybackIndex]:
        """Load, generate and index in one go, for a player about to start."""
        workout = self.load(document)
        events = self.timeline(workout, seed)
        return workout, events, self.playback_index(events)

    def summarize(self, events: Sequence[TimelineEvent]) -> WorkoutSummary:
        return summarize_workout(events)
