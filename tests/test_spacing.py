"""Tests for spacing functions and their textual specification."""

from __future__ import annotations

import pytest

from oldfiles.config import ConfigError
from oldfiles.retention import ConstantSpacing, SpacingEntry, TableSpacing, parse_spacing


def test_table_uses_greatest_threshold_not_above_age() -> None:
    spacing = parse_spacing("list:[5,2][30,1.5age]")

    assert spacing(10) == pytest.approx(2)
    assert spacing(40) == pytest.approx(60)


def test_table_returns_zero_below_every_threshold() -> None:
    spacing = parse_spacing("list:[5,2][30,1.5age]")

    assert spacing(4.99) == 0
    assert spacing(5) == pytest.approx(2)


def test_table_entries_are_sorted_by_threshold() -> None:
    spacing = parse_spacing("LIST:[30,7][0,1]")

    assert isinstance(spacing, TableSpacing)
    assert spacing.entries == (SpacingEntry(0, 1), SpacingEntry(30, 7))
    assert spacing(12) == 1


def test_fixed_spacing_ignores_age() -> None:
    spacing = parse_spacing("Fixed:15")

    assert spacing == ConstantSpacing(15)
    assert spacing(0) == 15
    assert spacing(1000) == 15


def test_missing_spacing_means_zero() -> None:
    assert parse_spacing(None)(123) == 0


@pytest.mark.parametrize(
    "spec",
    [
        "fixed:ten",
        "weekly",
        "list:[5,2]x",
        "list:junk[5,2]",
        "list:[5,2],[10,3]",
        "list:[5,2.1.1]",
    ],
)
def test_invalid_spacing_raises_config_error(spec: str) -> None:
    with pytest.raises(ConfigError):
        parse_spacing(spec)
