"""Tests for the generator capability: Shrinkable, Gen and Draw."""

from __future__ import annotations

import pytest

from statecheck.gen import Draw, Gen, Shrinkable, booleans, integers, just, sampled_from
from statecheck.gen.generators import _towards


def _shrink_chain(shrinkable: Shrinkable) -> list:
    """Follow the first candidate until nothing shrinks further."""
    chain = [shrinkable.value]
    while True:
        candidates = list(shrinkable.shrinks())
        if not candidates:
            return chain
        shrinkable = candidates[0]
        chain.append(shrinkable.value)


class TestShrinkable:

    def test_just_has_no_shrinks(self):
        assert list(Shrinkable.just(5).shrinks()) == []

    def test_map_applies_to_candidates(self):
        base = Shrinkable(4, lambda: iter([Shrinkable(0), Shrinkable(2)]))
        mapped = base.map(lambda x: x * 10)
        assert mapped.value == 40
        assert [s.value for s in mapped.shrinks()] == [0, 20]

    def test_equality_ignores_shrink_fn(self):
        assert Shrinkable(3, lambda: iter(())) == Shrinkable(3)


class TestIntegers:

    def test_same_seed_same_value(self):
        gen = integers(0, 1000)
        assert gen.generate(99, 10).value == gen.generate(99, 10).value

    def test_values_within_bounds(self):
        gen = integers(-5, 17)
        for seed in range(200):
            assert -5 <= gen.generate(seed, 100).value <= 17

    def test_unbounded_uses_size(self):
        gen = integers()
        for seed in range(50):
            assert -3 <= gen.generate(seed, 3).value <= 3
        assert gen.generate(7, 0).value == 0

    def test_shrinks_toward_zero(self):
        gen = integers(0, 100)
        for seed in range(30):
            s = gen.generate(seed, 100)
            candidates = [c.value for c in s.shrinks()]
            assert all(0 <= c < s.value for c in candidates)
            if s.value != 0:
                assert candidates[0] == 0

    def test_shrink_candidates_halve_the_distance(self):
        s = next(
            s for s in (integers(0, 100).generate(seed, 100) for seed in range(100))
            if s.value >= 2
        )
        candidates = [c.value for c in s.shrinks()]
        # target first, then each candidate closer to the original value
        assert candidates[0] == 0
        assert candidates[1] == s.value - s.value // 2
        assert candidates == sorted(candidates)
        assert candidates[-1] == s.value - 1

    def test_shrinks_toward_nearest_bound(self):
        positive = integers(5, 20)
        negative = integers(-20, -5)
        for seed in range(30):
            p = positive.generate(seed, 100)
            if p.value != 5:
                assert next(p.shrinks()).value == 5
            n = negative.generate(seed, 100)
            if n.value != -5:
                assert next(n.shrinks()).value == -5

    def test_shrinking_terminates_at_target(self):
        gen = integers(-50, 50)
        for seed in range(20):
            assert _shrink_chain(gen.generate(seed, 50))[-1] == 0

    def test_halving_is_exact_for_wide_bounds(self):
        value = 2**60 + 3
        candidates = list(_towards(value, 0))
        assert candidates[:2] == [0, 2**59 + 2]
        assert candidates[-1] == value - 1
        assert len(set(candidates)) == len(candidates)

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValueError, match="greater than"):
            integers(5, 1)


class TestOtherGenerators:

    def test_just(self):
        s = just("x").generate(1, 10)
        assert s.value == "x"
        assert list(s.shrinks()) == []

    def test_booleans_true_shrinks_to_false(self):
        seen = {booleans().generate(seed, 10).value: booleans().generate(seed, 10) for seed in range(50)}
        assert set(seen) == {True, False}
        assert [s.value for s in seen[True].shrinks()] == [False]
        assert list(seen[False].shrinks()) == []

    def test_sampled_from_shrinks_to_earlier_elements(self):
        elements = ["a", "b", "c", "d"]
        gen = sampled_from(elements)
        for seed in range(30):
            s = gen.generate(seed, 10)
            index = elements.index(s.value)
            assert [c.value for c in s.shrinks()] == elements[:index]

    def test_sampled_from_empty_rejected(self):
        with pytest.raises(ValueError):
            sampled_from([])

    def test_map(self):
        gen = integers(0, 50).map(lambda x: x * 2)
        for seed in range(20):
            s = gen.generate(seed, 50)
            assert s.value % 2 == 0
            assert all(c.value % 2 == 0 for c in s.shrinks())

    def test_repr(self):
        assert repr(integers(0, 3)) == "Gen(integers(0, 3))"
        assert isinstance(just(1), Gen)


class TestDraw:

    def test_records_picks(self):
        draw = Draw(seed=3, size=10)
        a = draw(integers(0, 100))
        b = draw(booleans())
        assert [p.value for p in draw.picks] == [a, b]

    def test_deterministic(self):
        first = Draw(seed=11, size=10)
        second = Draw(seed=11, size=10)
        assert [first(integers(0, 1000)) for _ in range(3)] == [second(integers(0, 1000)) for _ in range(3)]

    def test_replay_regenerates_later_draws_from_their_seeds(self):
        original = Draw(seed=5, size=10)
        values = [original(integers(0, 1000)) for _ in range(3)]

        replayed = Draw(seed=5, size=10, replay=[Shrinkable(7)])
        assert [replayed(integers(0, 1000)) for _ in range(3)] == [7, values[1], values[2]]

    def test_later_draw_follows_replayed_bound(self):
        for seed in range(50):
            replayed = Draw(seed=seed, size=10, replay=[Shrinkable(3)])
            bound = replayed(integers(1, 1000))
            assert 0 <= replayed(integers(0, bound - 1)) < bound
