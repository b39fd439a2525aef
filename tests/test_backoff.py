"""Tests for poll scheduling policies."""

import pytest

from bankr_markets.jobs.backoff import ExponentialBackoff, FixedInterval


class TestExponentialBackoff:
    def test_schedule_grows_then_caps(self):
        policy = ExponentialBackoff()
        delays = list(policy.delays())

        assert len(delays) == 30
        assert delays[:5] == [0.5, 0.75, 1.125, 1.6875, 2.53125]
        assert delays[5:] == [3.0] * 25

    def test_deterministic(self):
        assert list(ExponentialBackoff().delays()) == list(ExponentialBackoff().delays())

    def test_ceiling_is_bounded(self):
        assert ExponentialBackoff().ceiling == pytest.approx(81.59375)
        assert ExponentialBackoff().ceiling < 120

    def test_custom_parameters(self):
        policy = ExponentialBackoff(initial=1.0, multiplier=2.0, max_delay=5.0, max_attempts=4)
        assert list(policy.delays()) == [1.0, 2.0, 4.0, 5.0]

    @pytest.mark.parametrize("kwargs", [
        {"initial": 0},
        {"max_delay": -1},
        {"multiplier": 0.5},
        {"max_attempts": 0},
    ])
    def test_rejects_bad_parameters(self, kwargs):
        with pytest.raises(ValueError):
            ExponentialBackoff(**kwargs)

    def test_attempts_start_at_one(self):
        with pytest.raises(ValueError):
            ExponentialBackoff().delay(0)


class TestFixedInterval:
    def test_schedule(self):
        policy = FixedInterval()
        assert list(policy.delays()) == [1.0] * 30
        assert policy.ceiling == 30.0

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            FixedInterval(interval=0)
