"""Tests for effort-to-duration estimation."""

import pytest

from critpath.duration import DurationEstimator, estimate


@pytest.fixture
def estimator() -> DurationEstimator:
    return DurationEstimator()


class TestEstimate:
    """Tests for the default half-day-per-point estimate."""

    def test_missing_effort_is_one_day(self, estimator: DurationEstimator) -> None:
        assert estimator.estimate(None) == 1

    @pytest.mark.parametrize(
        ("effort", "expected"),
        [
            ("3 story points", 2),
            ("13 story points", 7),
            ("2 story points", 1),
            ("8 story points", 4),
            ("1", 1),
            ("0", 1),
            ("40h", 20),
        ],
    )
    def test_first_digit_run_is_halved_and_rounded_up(
        self, estimator: DurationEstimator, effort: str, expected: int
    ) -> None:
        assert estimator.estimate(effort) == expected

    @pytest.mark.parametrize("effort", ["", "large", "a few days", "XL", "   "])
    def test_text_without_digits_is_one_day(self, estimator: DurationEstimator, effort: str) -> None:
        assert estimator.estimate(effort) == 1

    def test_only_first_digit_run_counts(self, estimator: DurationEstimator) -> None:
        """Test that later numbers in the text are ignored."""
        assert estimator.estimate("about 10 points, maybe 30") == 5

    def test_digits_embedded_in_words(self, estimator: DurationEstimator) -> None:
        assert estimator.estimate("sprint-6-ish") == 3

    def test_decimal_point_splits_digit_runs(self, estimator: DurationEstimator) -> None:
        """Test that '2.5' reads as 2, the first contiguous run of digits."""
        assert estimator.estimate("2.5 days") == 1

    def test_large_values_are_exact(self, estimator: DurationEstimator) -> None:
        """Test that values beyond float precision are halved exactly."""
        assert estimator.estimate("9007199254740993 points") == 4503599627370497

    def test_huge_digit_run_does_not_raise(self, estimator: DurationEstimator) -> None:
        effort = "9" * 400 + " points"

        assert estimator.estimate(effort) == 5 * 10**399

    def test_digit_run_longer_than_int_string_limit(self, estimator: DurationEstimator) -> None:
        assert estimator.estimate("1" + "0" * 5000) == 5 * 10**4999

    def test_module_shortcut(self) -> None:
        assert estimate("13 story points") == 7
        assert estimate(None) == 1


class TestScale:
    """Tests for a configured effort scale."""

    def test_custom_scale(self) -> None:
        assert DurationEstimator(scale=1.0).estimate("3 points") == 3
        assert DurationEstimator(scale=0.25).estimate("3 points") == 1
        assert DurationEstimator(scale=2).estimate("3 points") == 6

    def test_decimal_scale_is_exact(self) -> None:
        """Test that 0.1 scales as one tenth, not its binary float."""
        assert DurationEstimator(scale=0.1).estimate("30 points") == 3

    def test_minimum_still_applies(self) -> None:
        assert DurationEstimator(scale=0.1).estimate("1 point") == 1

    @pytest.mark.parametrize("scale", [0, -0.5, float("inf"), float("nan")])
    def test_invalid_scale_rejected(self, scale: float) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            DurationEstimator(scale=scale)


class TestParseEffort:
    """Tests for raw effort value extraction."""

    def test_parse_effort(self, estimator: DurationEstimator) -> None:
        assert estimator.parse_effort("13 story points") == 13
        assert estimator.parse_effort("none") == 0
        assert estimator.parse_effort(None) == 0
