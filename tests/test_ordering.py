"""Tests for lock- and link-aware arrangement of sibling items."""

from __future__ import annotations

import random

from ghosting_engine.models.workout import Position
from ghosting_engine.ordering import arrange, in_order, link_groups, shuffle_in_place


def _source(seed: int):
    return random.Random(seed).random


class TestLinkGroups:
    def test_linked_items_join_predecessor(self) -> None:
        positions = [Position.normal(), Position.linked(), Position.linked(), Position.normal()]
        assert link_groups(positions) == [[0, 1, 2], [3]]

    def test_leading_linked_item_starts_a_group(self) -> None:
        assert link_groups([Position.linked(), Position.normal()]) == [[0], [1]]


class TestShuffle:
    def test_top_draw_keeps_order(self) -> None:
        items = [1, 2, 3, 4]
        shuffle_in_place(items, lambda: 0.999)
        assert items == [1, 2, 3, 4]

    def test_zero_draw_rotates(self) -> None:
        items = ["a", "b", "c"]
        shuffle_in_place(items, lambda: 0.0)
        assert items == ["b", "c", "a"]


class TestArrange:
    def test_is_a_permutation(self) -> None:
        positions = [Position.normal()] * 6
        for seed in range(10):
            assert sorted(arrange(positions, _source(seed))) == list(range(6))

    def test_locks_and_links_hold(self) -> None:
        positions = [
            Position.normal(),
            Position.linked(),
            Position.locked_at(1),
            Position.normal(),
            Position.locked_last(),
        ]
        for seed in range(20):
            order = arrange(positions, _source(seed))
            assert sorted(order) == list(range(5))
            assert order[0] == 2
            assert order[-1] == 4
            assert order.index(1) == order.index(0) + 1

    def test_locked_group_keeps_its_followers(self) -> None:
        positions = [Position.normal(), Position.locked_at(2), Position.linked(), Position.normal()]
        for seed in range(10):
            order = arrange(positions, _source(seed))
            assert order[1:3] == [1, 2]

    def test_clashing_locks_drop_nothing(self) -> None:
        positions = [Position.locked_at(1), Position.locked_at(1), Position.normal()]
        order = arrange(positions, _source(0))
        assert order[0] == 0
        assert sorted(order) == [0, 1, 2]

    def test_in_order(self) -> None:
        assert in_order(3) == [0, 1, 2]
        assert in_order(0) == []
