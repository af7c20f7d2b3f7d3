"""Tests for the pure sampling pipeline stages."""

from __future__ import annotations

import numpy as np
import pytest

from scorepick.exceptions import DegenerateDistributionError
from scorepick.sampling.filters import (
    apply_repetition_penalty,
    apply_temperature,
    descending_order,
    greedy_select,
    inverse_cdf_select,
    shannon_entropy,
    stable_softmax,
    top_k_filter,
    top_p_filter,
)


class TestRepetitionPenalty:
    """Tests for apply_repetition_penalty."""

    def test_neutral_penalty_is_identity(self) -> None:
        scores = np.array([2.0, -1.0, 0.0, 3.5])
        result = apply_repetition_penalty(scores, {0: 3, 1: 1, 3: 7}, 1.0)
        np.testing.assert_array_equal(result, scores)

    def test_positive_divided_nonpositive_multiplied(self) -> None:
        scores = np.array([2.0, -2.0, 0.0, 1.0])
        result = apply_repetition_penalty(scores, {0: 2, 1: 1, 2: 1}, 2.0)
        np.testing.assert_allclose(result, [0.5, -4.0, 0.0, 1.0])

    def test_unseen_indices_untouched(self) -> None:
        scores = np.array([1.0, 1.0, 1.0])
        result = apply_repetition_penalty(scores, {1: 1}, 1.5)
        assert result[0] == 1.0
        assert result[2] == 1.0
        assert result[1] == pytest.approx(1.0 / 1.5)

    def test_out_of_range_index_ignored(self) -> None:
        scores = np.array([1.0, 2.0])
        result = apply_repetition_penalty(scores, {10: 4}, 2.0)
        np.testing.assert_array_equal(result, scores)

    def test_does_not_mutate_input(self) -> None:
        scores = np.array([4.0, 4.0])
        apply_repetition_penalty(scores, {0: 1}, 2.0)
        np.testing.assert_array_equal(scores, [4.0, 4.0])

    def test_more_repeats_push_further(self) -> None:
        scores = np.array([3.0, -3.0])
        once = apply_repetition_penalty(scores, {0: 1, 1: 1}, 1.2)
        twice = apply_repetition_penalty(scores, {0: 2, 1: 2}, 1.2)
        assert twice[0] < once[0] < scores[0]
        assert twice[1] < once[1] < scores[1]

    @pytest.mark.filterwarnings("error")
    def test_zero_penalty_boundary(self) -> None:
        scores = np.array([2.0, -3.0, -np.inf, 0.0])
        result = apply_repetition_penalty(scores, {0: 1, 1: 1, 2: 1, 3: 1}, 0.0)
        np.testing.assert_array_equal(result, [np.inf, 0.0, -np.inf, 0.0])

    @pytest.mark.filterwarnings("error")
    def test_overflowing_factor_saturates(self) -> None:
        scores = np.array([2.0, -2.0])
        result = apply_repetition_penalty(scores, {0: 100_000, 1: 100_000}, 1.1)
        np.testing.assert_array_equal(result, [0.0, -np.inf])


class TestTemperature:
    """Tests for apply_temperature."""

    def test_shifts_max_then_divides(self) -> None:
        np.testing.assert_allclose(apply_temperature(np.array([1.0, 2.0]), 0.5), [-2.0, 0.0])

    def test_shift_leaves_softmax_unchanged(self) -> None:
        scores = np.array([0.3, -1.2, 2.5, 1.0])
        np.testing.assert_allclose(
            stable_softmax(apply_temperature(scores, 0.7)), stable_softmax(scores / 0.7)
        )

    @pytest.mark.filterwarnings("error")
    def test_tiny_temperature_does_not_overflow(self) -> None:
        result = apply_temperature(np.array([-1.0, -2.0]), 1e-310)
        np.testing.assert_array_equal(result, [0.0, -np.inf])

    def test_infinite_max_is_not_shifted(self) -> None:
        result = apply_temperature(np.array([np.inf, 1.0]), 2.0)
        np.testing.assert_array_equal(result, [np.inf, 0.5])

    def test_zero_temperature_skips(self) -> None:
        scores = np.array([1.0, 2.0])
        result = apply_temperature(scores, 0.0)
        np.testing.assert_array_equal(result, scores)
        assert result is not scores


class TestStableSoftmax:
    """Tests for stable_softmax."""

    def test_sums_to_one_and_preserves_argmax(self) -> None:
        rng = np.random.default_rng(0)
        for _ in range(20):
            scores = rng.standard_normal(50) * 10
            probs = stable_softmax(scores)
            assert abs(float(np.sum(probs)) - 1.0) < 1e-6
            assert int(np.argmax(probs)) == int(np.argmax(scores))
            assert np.all(probs >= 0.0)

    def test_ordering(self) -> None:
        probs = stable_softmax(np.array([1.0, 2.0, 3.0]))
        assert probs[2] > probs[1] > probs[0]

    def test_large_values_do_not_overflow(self) -> None:
        probs = stable_softmax(np.array([1000.0, 1001.0]))
        assert np.all(np.isfinite(probs))
        assert probs[1] > probs[0]

    def test_masked_entries_get_zero(self) -> None:
        probs = stable_softmax(np.array([-np.inf, 0.0, -np.inf]))
        np.testing.assert_array_equal(probs, [0.0, 1.0, 0.0])

    def test_positive_infinity_takes_all_mass(self) -> None:
        probs = stable_softmax(np.array([np.inf, 1.0, np.inf]))
        np.testing.assert_array_equal(probs, [0.5, 0.0, 0.5])

    def test_all_masked_raises(self) -> None:
        with pytest.raises(DegenerateDistributionError):
            stable_softmax(np.array([-np.inf, -np.inf]))

    def test_nan_raises(self) -> None:
        with pytest.raises(DegenerateDistributionError, match="NaN"):
            stable_softmax(np.array([0.0, np.nan]))


class TestDescendingOrder:
    """Tests for the shared stable sort."""

    def test_descending(self) -> None:
        np.testing.assert_array_equal(descending_order(np.array([0.1, 0.6, 0.3])), [1, 2, 0])

    def test_ties_keep_lower_index_first(self) -> None:
        np.testing.assert_array_equal(
            descending_order(np.array([0.2, 0.4, 0.2, 0.4])), [1, 3, 0, 2]
        )


class TestTopKFilter:
    """Tests for top_k_filter."""

    def test_keeps_exactly_k(self) -> None:
        probs = np.array([0.1, 0.2, 0.3, 0.4])
        filtered = top_k_filter(probs, 2)
        assert filtered[0] == 0.0
        assert filtered[1] == 0.0
        assert filtered[3] > filtered[2] > 0.0
        assert float(np.sum(filtered)) == pytest.approx(1.0)

    def test_preserves_relative_order(self) -> None:
        rng = np.random.default_rng(5)
        probs = stable_softmax(rng.standard_normal(30))
        for k in (1, 5, 29):
            filtered = top_k_filter(probs, k)
            kept = np.nonzero(filtered)[0]
            assert len(kept) == k
            np.testing.assert_array_equal(descending_order(filtered)[:k], descending_order(probs)[:k])

    def test_renormalizes_proportionally(self) -> None:
        filtered = top_k_filter(np.array([0.5, 0.25, 0.125, 0.125]), 2)
        np.testing.assert_allclose(filtered, [2 / 3, 1 / 3, 0.0, 0.0])

    def test_ties_resolve_to_lower_index(self) -> None:
        filtered = top_k_filter(np.full(4, 0.25), 2)
        np.testing.assert_allclose(filtered, [0.5, 0.5, 0.0, 0.0])

    @pytest.mark.parametrize("k", [0, 4, 10])
    def test_disabled_outside_range(self, k: int) -> None:
        probs = np.array([0.1, 0.2, 0.3, 0.4])
        np.testing.assert_array_equal(top_k_filter(probs, k), probs)

    def test_zero_mass_raises(self) -> None:
        with pytest.raises(DegenerateDistributionError, match="Top-k"):
            top_k_filter(np.zeros(4), 2)


class TestTopPFilter:
    """Tests for top_p_filter."""

    def test_keeps_prefix_including_crossing_element(self) -> None:
        filtered = top_p_filter(np.array([0.125, 0.5, 0.25, 0.125]), 0.75)
        np.testing.assert_allclose(filtered, [0.0, 2 / 3, 1 / 3, 0.0])

    def test_smallest_prefix(self) -> None:
        filtered = top_p_filter(np.array([0.125, 0.5, 0.25, 0.125]), 0.6)
        assert np.count_nonzero(filtered) == 2

    def test_single_dominant_element(self) -> None:
        filtered = top_p_filter(np.array([0.05, 0.9, 0.05]), 0.5)
        np.testing.assert_array_equal(filtered, [0.0, 1.0, 0.0])

    def test_ties_resolve_to_lower_index(self) -> None:
        filtered = top_p_filter(np.array([0.125, 0.5, 0.25, 0.125]), 0.8)
        np.testing.assert_allclose(filtered, [0.125 / 0.875, 0.5 / 0.875, 0.25 / 0.875, 0.0])

    def test_one_is_noop(self) -> None:
        probs = np.array([0.1, 0.2, 0.3, 0.4])
        np.testing.assert_array_equal(top_p_filter(probs, 1.0), probs)

    def test_unreachable_threshold_keeps_everything(self) -> None:
        # Mass short of 1.0, as after rounding.
        probs = np.array([0.3, 0.3, 0.3])
        filtered = top_p_filter(probs, 0.95)
        np.testing.assert_allclose(filtered, [1 / 3, 1 / 3, 1 / 3])

    def test_zero_mass_raises(self) -> None:
        with pytest.raises(DegenerateDistributionError, match="Top-p"):
            top_p_filter(np.zeros(3), 0.5)


class TestSelection:
    """Tests for greedy_select and inverse_cdf_select."""

    def test_greedy_first_occurrence(self) -> None:
        assert greedy_select(np.array([1.0, 5.0, 3.0, 5.0])) == 1

    def test_greedy_nan_raises(self) -> None:
        with pytest.raises(DegenerateDistributionError):
            greedy_select(np.array([1.0, np.nan]))

    @pytest.mark.parametrize(
        ("u", "expected"),
        [(0.0, 0), (0.25, 0), (0.3, 1), (0.5, 1), (0.51, 2), (0.999, 2)],
    )
    def test_inverse_cdf_index_order(self, u: float, expected: int) -> None:
        assert inverse_cdf_select(np.array([0.25, 0.25, 0.5]), u) == expected

    def test_skips_zero_probability_indices(self) -> None:
        probs = np.array([0.0, 0.5, 0.0, 0.5])
        assert inverse_cdf_select(probs, 0.0) == 1
        assert inverse_cdf_select(probs, 0.5) == 1
        assert inverse_cdf_select(probs, 0.6) == 3

    def test_rounding_fallback_to_highest_nonzero(self) -> None:
        probs = np.array([0.5, 0.25, 0.0])
        assert inverse_cdf_select(probs, 0.9) == 1

    def test_all_zero_raises(self) -> None:
        with pytest.raises(DegenerateDistributionError):
            inverse_cdf_select(np.zeros(3), 0.5)

    def test_zero_draw_over_leading_zeros_takes_first_mass(self) -> None:
        assert inverse_cdf_select(np.array([0.0, 0.0, 0.25, 0.75]), 0.0) == 2


class TestShannonEntropy:
    """Tests for the diagnostic entropy helper."""

    def test_uniform(self) -> None:
        assert shannon_entropy(np.full(4, 0.25)) == pytest.approx(np.log(4))

    def test_one_hot_is_zero(self) -> None:
        assert shannon_entropy(np.array([0.0, 1.0, 0.0])) == 0.0
