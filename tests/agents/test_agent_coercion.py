import math

import pytest

from src.agents.coercion import as_boosts, as_int, as_text, first_present


def test_first_present_skips_empty_values():
    assert first_present({"eiPoints": 0, "xp": 40}, "eiPoints", "xp") == 40
    assert first_present({"eiPoints": ""}, "eiPoints", "xp") is None


@pytest.mark.parametrize("value, expected", [
    ("42", 42),
    (12.9, 12),
    (math.inf, 35),
    (math.nan, 35),
    ("1e999", 35),
    (None, 35),
    ([3], 35),
])
def test_as_int(value, expected):
    assert as_int(value, 35) == expected


def test_as_text_requires_a_non_blank_string():
    assert as_text("Team Communication", "d") == "Team Communication"
    assert as_text("  ", "d") == "d"
    assert as_text(5, "d") == "d"


def test_as_boosts_keeps_finite_numbers_only():
    raw = {"A": 2, "B": 1.5, "C": math.inf, "D": "3", "E": True, "F": 10 ** 400}
    assert as_boosts(raw, {}) == {"A": 2.0, "B": 1.5}
    assert as_boosts(["A"], {"Self-Awareness": 1}) == {"Self-Awareness": 1}
