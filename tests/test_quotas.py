"""Tests for the quota math helpers."""

import math

import pytest

from stratselect import quotas


class TestRoundHalfAway:

    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (0.49, 0), (-2.5, -3), (6.4, 6), (1.65, 2), (0.0, 0)],
    )
    def test_rounds_halves_away_from_zero(self, value, expected):
        assert quotas.round_half_away(value) == expected

    def test_differs_from_builtin_round(self):
        assert round(2.5) == 2
        assert quotas.round_half_away(2.5) == 3


class TestNeedMultipliers:

    def test_multiplier_is_fraction_over_share(self):
        result = quotas.need_multipliers({"a": 1, "b": 3}, {"a": 0.5, "b": 0.5})
        assert result["a"] == pytest.approx(2.0)
        assert result["b"] == pytest.approx(2 / 3)

    def test_empty_category_needs_infinitely_more(self):
        result = quotas.need_multipliers({"a": 0, "b": 4}, {"a": 0.5, "b": 0.5})
        assert result["a"] == math.inf
        assert result["b"] == pytest.approx(0.5)

    def test_all_empty(self):
        result = quotas.need_multipliers({"a": 0, "b": 0}, {"a": 0.5, "b": 0.5})
        assert result == {"a": math.inf, "b": math.inf}

    def test_keeps_iteration_order(self):
        result = quotas.need_multipliers({"c": 1, "a": 1}, {"a": 0.5, "c": 0.5})
        assert list(result) == ["c", "a"]


class TestLimiterAndFinalCount:

    def test_limiter_is_smallest_count_over_fraction(self):
        assert quotas.limiter({"a": 10, "b": 2, "c": 40}, {"a": 0.01, "b": 0.19, "c": 0.80}) == "b"

    def test_limiter_ties_go_to_first(self):
        assert quotas.limiter({"a": 2, "b": 2}, {"a": 0.5, "b": 0.5}) == "a"

    def test_limiter_needs_categories(self):
        with pytest.raises(ValueError):
            quotas.limiter({}, {})

    def test_final_count_floors(self):
        assert quotas.final_count({"a": 2, "b": 10}, {"a": 0.25, "b": 0.75}) == 8
        assert quotas.final_count({"a": 3, "b": 3, "c": 3}, {"a": 0.33, "b": 0.33, "c": 0.34}) == 8

    def test_final_count_is_capped(self):
        assert quotas.final_count({"a": 2, "b": 10}, {"a": 0.25, "b": 0.75}, wanted_count=7) == 7
        assert quotas.final_count({"a": 2, "b": 10}, {"a": 0.25, "b": 0.75}, wanted_count=70) == 8


class TestComputeQuotas:

    def test_every_category_gets_at_least_one(self):
        assert quotas.compute_quotas(3, {"a": 0.1, "b": 0.1, "c": 0.8}) == {"a": 1, "b": 1, "c": 2}

    def test_halves_round_up(self):
        assert quotas.compute_quotas(10, {"a": 0.25, "b": 0.75}) == {"a": 3, "b": 8}

    def test_custom_minimum(self):
        assert quotas.compute_quotas(0, {"a": 0.5, "b": 0.5}, min_per_category=0) == {"a": 0, "b": 0}


class TestTrim:

    def test_trims_most_over_represented_first(self):
        selected = {"a": [1, 2, 3], "b": [4]}
        result = quotas.trim(selected, {"a": 0.5, "b": 0.5}, 2)
        assert result == {"a": [1], "b": [4]}
        assert selected == {"a": [1, 2, 3], "b": [4]}

    def test_ties_trim_last_category(self):
        assert quotas.trim({"a": [1], "b": [2]}, {"a": 0.5, "b": 0.5}, 1) == {"a": [1], "b": []}

    def test_already_small_enough(self):
        assert quotas.trim({"a": [1], "b": [2]}, {"a": 0.5, "b": 0.5}, 5) == {"a": [1], "b": [2]}

    def test_stops_when_nothing_is_left(self):
        assert quotas.trim({"a": [1], "b": [2]}, {"a": 0.5, "b": 0.5}, -1) == {"a": [], "b": []}


class TestTopUp:

    def test_adds_next_source_element(self):
        result = quotas.top_up(
            {"a": ["a0"], "b": ["b0"]},
            {"a": ["a0", "a1", "a2"], "b": ["b0"]},
            {"a": 0.5, "b": 0.5},
            3,
        )
        assert result == {"a": ["a0", "a1"], "b": ["b0"]}

    def test_ties_go_to_first_category(self):
        result = quotas.top_up(
            {"a": ["a0"], "b": ["b0"]},
            {"a": ["a0", "a1"], "b": ["b0", "b1"]},
            {"a": 0.5, "b": 0.5},
            3,
        )
        assert result == {"a": ["a0", "a1"], "b": ["b0"]}

    def test_prefers_neediest_category(self):
        result = quotas.top_up(
            {"a": ["a0", "a1"], "b": ["b0"]},
            {"a": ["a0", "a1", "a2"], "b": ["b0", "b1"]},
            {"a": 0.5, "b": 0.5},
            4,
        )
        assert result == {"a": ["a0", "a1"], "b": ["b0", "b1"]}

    def test_stops_when_sources_are_exhausted(self):
        result = quotas.top_up({"a": ["a0"]}, {"a": ["a0", "a1"]}, {"a": 1.0}, 5)
        assert result == {"a": ["a0", "a1"]}
