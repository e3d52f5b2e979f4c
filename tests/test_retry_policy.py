"""Tests for RetryPolicy."""

import pytest

from notification_dispatch.queue.retry import RetryPolicy


def test_exponential_without_jitter():
    policy = RetryPolicy(base_delay=5.0, max_delay=900.0, jitter=False)

    assert [policy.delay_for_attempt(n) for n in range(1, 6)] == [5.0, 10.0, 20.0, 40.0, 80.0]


def test_capped_at_max_delay():
    policy = RetryPolicy(base_delay=5.0, max_delay=60.0, jitter=False)

    assert policy.delay_for_attempt(10) == 60.0


def test_attempt_below_one_is_immediate():
    assert RetryPolicy().delay_for_attempt(0) == 0.0


def test_jitter_stays_within_bounds():
    policy = RetryPolicy(base_delay=8.0, jitter=True)

    for _ in range(50):
        assert 4.0 <= policy.delay_for_attempt(1) <= 8.0


def test_visibility_timeout_is_int():
    policy = RetryPolicy(base_delay=2.5, jitter=False)

    assert policy.visibility_timeout(1) == 2
    assert policy.visibility_timeout(2) == 5


@pytest.mark.parametrize(("base", "maximum"), [(-1.0, 10.0), (10.0, 5.0)])
def test_invalid_configuration(base, maximum):
    with pytest.raises(ValueError):
        RetryPolicy(base_delay=base, max_delay=maximum)
