"""Seeded, resumable random streams.

Each stream is a numpy PCG64 generator seeded from ``(workout_seed,
ordinal)``. Ordinal 0 drives the workout-level pattern order; ordinal
``1 + pattern_index`` drives everything inside that pattern, so one
pattern's draws never shift another's.

Only uniform doubles are drawn, one at a time, and every draw is counted
in a caller-owned ``draws`` mapping. Recreating a stream and discarding
that many doubles puts it back exactly where it was.
"""

from __future__ import annotations

import math

import numpy as np

WORKOUT_STREAM = 0


def pattern_stream(pattern_index: int) -> int:
    """Stream ordinal for a pattern's draws."""
    return 1 + pattern_index


class SeededStreams:
    """Lazily created RNG streams bound to a draw-count ledger."""

    def __init__(self, seed: int, draws: dict[int, int] | None = None) -> None:
        self.seed = int(seed)
        self.draws = draws if draws is not None else {}
        self._generators: dict[int, np.random.Generator] = {}

    def _generator(self, stream: int) -> np.random.Generator:
        gen = self._generators.get(stream)
        if gen is None:
            gen = np.random.Generator(
                np.random.PCG64(np.random.SeedSequence([self.seed, stream]))
            )
            consumed = self.draws.get(stream, 0)
            if consumed:
                gen.random(consumed)
            self._generators[stream] = gen
        return gen

    def random(self, stream: int) -> float:
        """Next uniform double in [0, 1) from *stream*."""
        value = float(self._generator(stream).random())
        self.draws[stream] = self.draws.get(stream, 0) + 1
        return value

    def randint(self, stream: int, low: int, high: int) -> int:
        """Inclusive integer draw: ``floor(r * (high - low + 1)) + low``."""
        return math.floor(self.random(stream) * (high - low + 1)) + low

    def uniform(self, stream: int, low: float, high: float) -> float:
        return low + self.random(stream) * (high - low)

    def source(self, stream: int):
        """Zero-argument callable drawing from *stream*, for pure helpers."""
        return lambda: self.random(stream)
