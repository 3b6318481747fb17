"""Lock- and link-aware shuffling of sibling entries or patterns.

Items are grouped so that every LINKED item travels with the item before
it. Groups headed by a LOCKED_AT_INDEX item occupy their 1-based slot,
groups headed by a LOCKED_LAST item fill the tail, and the remaining
groups are shuffled together and dropped into the first free run of
slots wide enough to hold them.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

from ghosting_engine.models.enums import PositionKind
from ghosting_engine.models.workout import Position


def link_groups(positions: Sequence[Position]) -> list[list[int]]:
    """Split item indices into groups of a head plus its linked followers."""
    groups: list[list[int]] = []
    for i, pos in enumerate(positions):
        if pos.kind == PositionKind.LINKED and groups:
            groups[-1].append(i)
        else:
            groups.append([i])
    return groups


def shuffle_in_place(items: list, rand: Callable[[], float]) -> None:
    """Fisher-Yates shuffle driven by a uniform [0, 1) source."""
    for i in range(len(items) - 1, 0, -1):
        j = math.floor(rand() * (i + 1))
        items[i], items[j] = items[j], items[i]


def arrange(
    positions: Sequence[Position], rand: Callable[[], float]
) -> list[int]:
    """Return a shuffled order of item indices honouring locks and links.

    Args:
        positions: Position of each item, in source order.
        rand: Uniform [0, 1) source; one value per swap is consumed.

    Returns:
        A permutation of ``range(len(positions))``.
    """
    size = len(positions)
    slots: list[int | None] = [None] * size
    groups = link_groups(positions)
    leftovers: list[int] = []

    def place(group: list[int], start: int) -> None:
        for offset, item in enumerate(group):
            pos = start + offset
            if 0 <= pos < size and slots[pos] is None:
                slots[pos] = item
            else:
                leftovers.append(item)

    for group in groups:
        head = positions[group[0]]
        if head.kind == PositionKind.LOCKED_AT_INDEX and head.index is not None:
            place(group, head.index - 1)

    for group in groups:
        if positions[group[0]].kind == PositionKind.LOCKED_LAST:
            place(group, max(0, size - len(group)))

    free = [
        g for g in groups
        if positions[g[0]].kind in (PositionKind.NORMAL, PositionKind.LINKED)
        or (positions[g[0]].kind == PositionKind.LOCKED_AT_INDEX and positions[g[0]].index is None)
    ]
    shuffle_in_place(free, rand)

    for group in free:
        width = len(group)
        for start in range(size - width + 1):
            if all(slots[start + k] is None for k in range(width)):
                for k, item in enumerate(group):
                    slots[start + k] = item
                break
        else:
            leftovers.extend(group)

    # Anything that could not keep its slot or stay contiguous fills the gaps
    for item in leftovers:
        slots[slots.index(None)] = item

    return [s for s in slots if s is not None]


def in_order(count: int) -> list[int]:
    return list(range(count))
