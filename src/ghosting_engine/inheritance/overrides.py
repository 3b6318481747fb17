"""Override workflow: detect customized descendants, set and clear overrides.

Changing a setting on a workout or pattern is a two-step flow for the
editor. ``find_conflicting_descendants`` reports which descendants carry
their own, different value; the caller decides per descendant whether to
keep it or let it inherit, then applies ``set_override`` /
``clear_override`` (or ``apply_change`` for both at once). Every function
returns a new Workout; the input is never mutated.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable

from ghosting_engine.inheritance.resolver import SCOPE_LOCAL_KEYS
from ghosting_engine.models.workout import NodePath, Workout


def descendants(workout: Workout, path: NodePath) -> list[NodePath]:
    """All nodes below *path*, patterns before their entries."""
    if path.is_entry:
        return []
    pattern_indices = (
        range(len(workout.patterns)) if path.is_workout else [path.pattern_index]
    )
    found: list[NodePath] = []
    for pi in pattern_indices:
        if path.is_workout:
            found.append(NodePath(pi))
        for ei in range(len(workout.patterns[pi].entries)):
            found.append(NodePath(pi, ei))
    return found


def _config_of(workout: Workout, path: NodePath) -> dict[str, Any]:
    if path.is_workout:
        return workout.config
    pattern = workout.patterns[path.pattern_index]
    if path.is_pattern:
        return pattern.config
    return pattern.entries[path.entry_index].config


def find_conflicting_descendants(
    workout: Workout, path: NodePath, key: str, new_value: Any
) -> list[NodePath]:
    """Descendants of *path* whose explicit value of *key* differs from *new_value*.

    Scope-local keys (repeatCount, limits) are never inherited, so changing
    them can't conflict with anything.
    """
    if key in SCOPE_LOCAL_KEYS:
        return []
    conflicts: list[NodePath] = []
    for d in descendants(workout, path):
        config = _config_of(workout, d)
        if key in config and config[key] != new_value:
            conflicts.append(d)
    return conflicts


def _with_config(workout: Workout, path: NodePath, config: dict[str, Any]) -> Workout:
    if path.is_workout:
        return dataclasses.replace(workout, config=config)
    patterns = list(workout.patterns)
    pattern = patterns[path.pattern_index]
    if path.is_pattern:
        patterns[path.pattern_index] = dataclasses.replace(pattern, config=config)
    else:
        entries = list(pattern.entries)
        entries[path.entry_index] = dataclasses.replace(
            entries[path.entry_index], config=config
        )
        patterns[path.pattern_index] = dataclasses.replace(pattern, entries=tuple(entries))
    return dataclasses.replace(workout, patterns=tuple(patterns))


def set_override(workout: Workout, path: NodePath, key: str, value: Any) -> Workout:
    config = dict(_config_of(workout, path))
    config[key] = value
    return _with_config(workout, path, config)


def clear_override(workout: Workout, path: NodePath, key: str) -> Workout:
    """Remove an explicit value so the node inherits *key* again."""
    current = _config_of(workout, path)
    if key not in current:
        return workout
    config = {k: v for k, v in current.items() if k != key}
    return _with_config(workout, path, config)


def apply_change(
    workout: Workout,
    path: NodePath,
    key: str,
    value: Any,
    reset: Iterable[NodePath] = (),
) -> Workout:
    """Set *key* on *path* and clear it on the descendants listed in *reset*.

    Descendants not in *reset* keep their own overrides.
    """
    updated = set_override(workout, path, key, value)
    for descendant in reset:
        updated = clear_override(updated, descendant, key)
    return updated
