"""Config resolver: effective values for workout, pattern and entry nodes."""

from __future__ import annotations

from typing import Any, Mapping

from ghosting_engine.exceptions import ConfigResolutionError
from ghosting_engine.models.enums import (
    DEFAULT_INTERVAL_S,
    DEFAULT_LEAD_TIME_S,
    DEFAULT_SPEECH_RATE,
    DEFAULT_VOICE,
    IntervalOffsetType,
    IntervalType,
    IterationType,
    SplitStepSpeed,
)
from ghosting_engine.models.workout import (
    Entry,
    IntervalOffset,
    Limits,
    NodePath,
    Pattern,
    RepeatCount,
    Workout,
)

# Value used when no node in the chain overrides a key. Must be total:
# every key the engine reads appears here.
DEFAULT_CONFIG: dict[str, Any] = {
    "voice": DEFAULT_VOICE,
    "speechRate": DEFAULT_SPEECH_RATE,
    "interval": DEFAULT_INTERVAL_S,
    "splitStepSpeed": SplitStepSpeed.AUTO_SCALE,
    "shotAnnouncementLeadTime": DEFAULT_LEAD_TIME_S,
    "intervalOffsetType": IntervalOffsetType.FIXED,
    "intervalOffset": IntervalOffset(0.0, 0.0),
    "autoVoiceSplitStep": True,
    "iterationType": IterationType.IN_ORDER,
    "limits": Limits.all_shots(),
    "repeatCount": RepeatCount.fixed(1),
    "message": "",
    "intervalType": IntervalType.FIXED,
    "countdown": False,
    "skipAtEndOfWorkout": False,
}

# Keys describing the node they are set on; ancestors are never consulted.
SCOPE_LOCAL_KEYS = frozenset({"repeatCount", "limits"})


def resolve_chain(configs: list[Mapping[str, Any]], key: str) -> Any:
    """First explicit value of *key* in *configs* (nearest first), else the default.

    Raises:
        ConfigResolutionError: *key* has no override and no default.
    """
    chain = configs[:1] if key in SCOPE_LOCAL_KEYS else configs
    for config in chain:
        if key in config:
            return config[key]
    if key not in DEFAULT_CONFIG:
        raise ConfigResolutionError(key)
    return DEFAULT_CONFIG[key]


class ConfigResolver:
    """Resolves effective config values for nodes of one workout.

    Configs are sparse: a missing key means "inherit". Lookup walks
    entry → pattern → workout → ``DEFAULT_CONFIG`` and never mutates the
    workout.

    Usage:
        resolver = ConfigResolver(workout)
        interval = resolver.resolve(NodePath(0, 2), "interval")
    """

    def __init__(self, workout: Workout) -> None:
        self.workout = workout

    def node(self, path: NodePath) -> Workout | Pattern | Entry:
        if path.is_workout:
            return self.workout
        pattern = self.workout.patterns[path.pattern_index]
        if path.is_pattern:
            return pattern
        return pattern.entries[path.entry_index]

    def chain(self, path: NodePath) -> list[Mapping[str, Any]]:
        """Configs from *path* up to the workout, nearest first."""
        configs: list[Mapping[str, Any]] = []
        if path.is_entry:
            configs.append(self.node(path).config)
        if not path.is_workout:
            configs.append(self.workout.patterns[path.pattern_index].config)
        configs.append(self.workout.config)
        return configs

    def resolve(self, path: NodePath, key: str) -> Any:
        return resolve_chain(self.chain(path), key)

    def is_overridden(self, path: NodePath, key: str) -> bool:
        """True if the node itself carries an explicit value for *key*."""
        return key in self.node(path).config

    def effective_config(self, path: NodePath) -> dict[str, Any]:
        """Every known key resolved for *path*."""
        chain = self.chain(path)
        return {key: resolve_chain(chain, key) for key in DEFAULT_CONFIG}
