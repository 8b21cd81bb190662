"""Tests du classement des dates par niveau d'urgence"""

import pytest
from datetime import date, datetime, timedelta

from aayutrace.utils.date_helpers import (
    classify_date,
    days_until,
    describe_days,
    is_expired,
    month_start,
    month_key,
    EXPIRED,
    CRITICAL,
    WARNING,
    GOOD,
)

TODAY = date(2026, 3, 15)


@pytest.mark.parametrize(
    "offset,expected",
    [
        (-10, EXPIRED),
        (-1, EXPIRED),
        (0, CRITICAL),
        (3, CRITICAL),
        (4, WARNING),
        (7, WARNING),
        (8, GOOD),
        (365, GOOD),
    ],
)
def test_threshold_boundaries(offset, expected):
    status = classify_date(TODAY + timedelta(days=offset), TODAY, 3, 7)
    assert status.status == expected
    assert status.days_remaining == offset


def test_no_date_returns_none():
    assert classify_date(None, TODAY) is None
    assert days_until(None, TODAY) is None


def test_expired_carries_days_past():
    status = classify_date(TODAY - timedelta(days=10), TODAY)
    assert status.is_expired
    assert status.days_past == 10


def test_days_past_is_zero_when_not_expired():
    assert classify_date(TODAY + timedelta(days=2), TODAY).days_past == 0


def test_time_of_day_is_ignored():
    """Une date saisie tard le soir reste classée au jour près"""
    late = datetime(2026, 3, 16, 23, 59)
    early_now = datetime(2026, 3, 15, 0, 1)
    status = classify_date(late, early_now)
    assert status.days_remaining == 1


def test_default_thresholds_come_from_settings():
    assert classify_date(TODAY + timedelta(days=3), TODAY).status == CRITICAL
    assert classify_date(TODAY + timedelta(days=7), TODAY).status == WARNING


def test_custom_thresholds():
    target = TODAY + timedelta(days=20)
    assert classify_date(target, TODAY, critical_days=7, warning_days=30).status == WARNING


def test_monotonic_in_remaining_days():
    order = [EXPIRED, CRITICAL, WARNING, GOOD]
    ranks = [
        order.index(classify_date(TODAY + timedelta(days=d), TODAY).status)
        for d in range(-5, 15)
    ]
    assert ranks == sorted(ranks)


def test_is_expired_uses_day_granularity():
    assert not is_expired(TODAY, TODAY)
    assert is_expired(TODAY - timedelta(days=1), TODAY)
    assert not is_expired(None, TODAY)


def test_describe_days():
    assert describe_days(-3) == "3 days ago"
    assert describe_days(0) == "Today"
    assert describe_days(12) == "12 days left"


def test_month_helpers_cross_year_boundary():
    assert month_start(date(2026, 1, 20), -1) == date(2025, 12, 1)
    assert month_start(date(2026, 12, 5), 1) == date(2027, 1, 1)
    assert month_key(datetime(2026, 2, 28, 12, 0)) == "2026-02"
