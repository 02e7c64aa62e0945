"""
Unit tests for calendar-month bucket generation and months_back policy.
"""
from datetime import datetime, timedelta

import pytest

from panelera.exceptions import InvalidParameterError
from panelera.services.time_buckets import (
    clamp_months_back,
    generate_month_buckets,
    month_end,
    resolve_months_back,
)

NOW = datetime(2026, 10, 19, 14, 30, 5)


class TestClampMonthsBack:

    @pytest.mark.parametrize("requested,expected", [
        (-5, 3), (0, 3), (1, 3), (2, 3), (3, 3),
        (6, 6), (12, 12), (13, 12), (100, 12),
    ])
    def test_clamps_into_supported_window(self, requested, expected):
        assert clamp_months_back(requested) == expected

    def test_resolve_defaults_to_six(self):
        assert resolve_months_back(None) == 6

    def test_resolve_clamps_by_default(self):
        assert resolve_months_back(24) == 12
        assert resolve_months_back(1) == 3

    def test_strict_mode_rejects_out_of_range(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve_months_back(24, strict=True)
        assert exc_info.value.status_code == 400
        assert exc_info.value.details["parameter"] == "months_back"

    def test_strict_mode_accepts_in_range(self):
        assert resolve_months_back(9, strict=True) == 9


class TestGenerateMonthBuckets:

    def test_bucket_count_matches_months_back(self):
        for months in range(3, 13):
            assert len(generate_month_buckets(NOW, months)) == months

    def test_last_bucket_is_current_month(self):
        buckets = generate_month_buckets(NOW, 6)
        assert buckets[-1].start == datetime(2026, 10, 1)
        assert buckets[-1].end == datetime(2026, 10, 31, 23, 59, 59, 999999)
        assert buckets[0].start == datetime(2026, 5, 1)

    def test_buckets_are_contiguous_and_increasing(self):
        buckets = generate_month_buckets(NOW, 12)
        for previous, current in zip(buckets, buckets[1:]):
            assert previous.start < current.start
            assert current.start - previous.end == timedelta(microseconds=1)
        assert [b.index for b in buckets] == list(range(12))

    def test_spans_year_boundary(self):
        buckets = generate_month_buckets(datetime(2026, 2, 10), 4)
        assert [b.label for b in buckets] == ["nov 25", "dic 25", "ene 26", "feb 26"]

    def test_february_end_in_leap_year(self):
        buckets = generate_month_buckets(datetime(2028, 2, 29, 23, 0), 3)
        assert buckets[-1].end == datetime(2028, 2, 29, 23, 59, 59, 999999)

    def test_spanish_labels(self):
        buckets = generate_month_buckets(NOW, 3, locale="es")
        assert [b.label for b in buckets] == ["ago 26", "sep 26", "oct 26"]
        assert [b.month_label for b in buckets] == ["ago", "sep", "oct"]

    def test_english_labels(self):
        buckets = generate_month_buckets(NOW, 3, locale="en")
        assert [b.label for b in buckets] == ["Aug 26", "Sep 26", "Oct 26"]

    def test_pure_function_of_now(self):
        assert generate_month_buckets(NOW, 6) == generate_month_buckets(NOW, 6)

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            generate_month_buckets(NOW, 0)

    def test_unknown_locale(self):
        with pytest.raises(ValueError):
            generate_month_buckets(NOW, 3, locale="fr")


def test_month_end_of_december():
    assert month_end(datetime(2026, 12, 5)) == datetime(2026, 12, 31, 23, 59, 59, 999999)
