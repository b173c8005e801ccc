import datetime

import pytest

from errors import ValidationError
from months import MonthKey, parse_month


@pytest.mark.parametrize("label, expected", [
    ("October 2025", MonthKey(2025, 10)),
    ("october 2025", MonthKey(2025, 10)),
    ("Oct 2025", MonthKey(2025, 10)),
    ("Sept 2024", MonthKey(2024, 9)),
    ("  January   2026 ", MonthKey(2026, 1)),
    ("2025-03", MonthKey(2025, 3)),
])
def test_parse_month_accepts_common_labels(label, expected):
    assert parse_month(label) == expected


@pytest.mark.parametrize("label", ["", "October", "Octember 2025", "2025-13", "2025/10", "13 2025", None])
def test_parse_month_rejects_malformed_labels(label):
    with pytest.raises(ValidationError):
        parse_month(label)


def test_label_and_period():
    key = parse_month("oct 2025")
    assert key.label == "October 2025"
    assert key.period == datetime.date(2025, 10, 1)
    assert MonthKey.from_period(datetime.date(2025, 10, 1)) == key
    assert parse_month("2025-10").label == "October 2025"


def test_keys_sort_chronologically_across_years():
    labels = ["January 2026", "April 2025", "December 2025"]
    ordered = [k.label for k in sorted(parse_month(l) for l in labels)]
    assert ordered == ["April 2025", "December 2025", "January 2026"]
