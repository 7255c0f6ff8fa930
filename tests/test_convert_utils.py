"""
Tests for duration and size conversion utilities used by the command line.
"""
import pytest
from promoloader.utils.convert_utils import ConvertUtils


class TestDurationToSeconds:
    """Durations follow the familiar '1h30m' notation."""

    def test_zero_forms(self):
        assert ConvertUtils.duration_to_seconds("0") == 0
        assert ConvertUtils.duration_to_seconds("0s") == 0
        assert ConvertUtils.duration_to_seconds("-0") == 0

    def test_single_units(self):
        assert ConvertUtils.duration_to_seconds("45s") == 45
        assert ConvertUtils.duration_to_seconds("30m") == 1800
        assert ConvertUtils.duration_to_seconds("2h") == 7200
        assert ConvertUtils.duration_to_seconds("300ms") == pytest.approx(0.3)
        assert ConvertUtils.duration_to_seconds("1500us") == pytest.approx(0.0015)
        assert ConvertUtils.duration_to_seconds("1500µs") == pytest.approx(0.0015)
        assert ConvertUtils.duration_to_seconds("10ns") == pytest.approx(1e-8)

    def test_compound_and_fractional(self):
        assert ConvertUtils.duration_to_seconds("1h30m") == 5400
        assert ConvertUtils.duration_to_seconds("1m30.5s") == pytest.approx(90.5)
        assert ConvertUtils.duration_to_seconds("1.5h") == 5400
        assert ConvertUtils.duration_to_seconds(".5s") == 0.5

    def test_sign_and_whitespace(self):
        assert ConvertUtils.duration_to_seconds("-2m") == -120
        assert ConvertUtils.duration_to_seconds("+2m") == 120
        assert ConvertUtils.duration_to_seconds("  10s  ") == 10

    @pytest.mark.parametrize("value", ["", "   ", "10", "abc", "5x", "1h30", "m", "-", "1 h", "s10"])
    def test_invalid_formats_raise(self, value):
        with pytest.raises(ValueError):
            ConvertUtils.duration_to_seconds(value)

    def test_is_valid_duration_format(self):
        assert ConvertUtils.is_valid_duration_format("30m")
        assert ConvertUtils.is_valid_duration_format("0")
        assert not ConvertUtils.is_valid_duration_format("30")
        assert not ConvertUtils.is_valid_duration_format("thirty minutes")


class TestSecondsToHuman:

    def test_sub_second(self):
        assert ConvertUtils.seconds_to_human(0.45) == "450ms"

    def test_seconds(self):
        assert ConvertUtils.seconds_to_human(12.3) == "12.30s"

    def test_minutes(self):
        assert ConvertUtils.seconds_to_human(303) == "5m03s"

    def test_hours(self):
        assert ConvertUtils.seconds_to_human(3720) == "1h02m"

    def test_negative_is_clamped(self):
        assert ConvertUtils.seconds_to_human(-1) == "0s"

