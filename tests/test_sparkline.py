import random

import pytest

from notables.sparkline import SyntheticSeriesGenerator


class TestSyntheticSeriesGenerator:
    @pytest.mark.parametrize("count", [0, 1, 9, 10, 45, 156, 10_000])
    def test_length_and_envelope(self, count):
        gen = SyntheticSeriesGenerator(random.Random(count))
        series = gen.generate(count)
        assert len(series) == 10
        floor = count // 10
        assert all(floor <= v <= floor + 4 for v in series)

    def test_injected_rng_is_reproducible(self):
        a = SyntheticSeriesGenerator(random.Random(42)).generate(100)
        b = SyntheticSeriesGenerator(random.Random(42)).generate(100)
        assert a == b

    def test_default_rng(self):
        series = SyntheticSeriesGenerator().generate(30)
        assert len(series) == 10
        assert all(3 <= v <= 7 for v in series)
