import pandas as pd
import pytest

from salary_ranges.benchmark.aliases import FamilyAliasResolver
from salary_ranges.benchmark.internal_stats import InternalStatsIndex, equivalent_keys
from salary_ranges.utils.types import EMPTY_STATS, InternalStats


def employee_frame(rows) -> pd.DataFrame:
    return pd.DataFrame(
        rows,
        columns=["region", "family_code", "mapped_family_name", "internal_level", "base_pay", "is_active"],
    )


@pytest.fixture
def aliases():
    return FamilyAliasResolver([("TE.OLDC", "TE.NEWC")])


def test_equivalent_keys(aliases):
    assert equivalent_keys("TE.OLDC", " Network ", aliases) == ["TE.OLDC", "TE.NEWC", "Network"]
    assert equivalent_keys("SA.ACCM", None, aliases) == ["SA.ACCM"]


def test_stats_per_bucket(aliases):
    employees = employee_frame([
        ("Japan", "EN.SODE", "Software Development", "L5 IC", 70000.0, True),
        ("Japan", "EN.SODE", "Software Development", "L5 IC", 85000.0, True),
        ("Japan", "EN.SODE", "Software Development", "L5 IC", 100000.0, True),
        ("Japan", "EN.SODE", "Software Development", "L5 IC", 500000.0, False),
    ])
    index = InternalStatsIndex.build(employees, aliases)

    expected = InternalStats(min=70000.0, median=85000.0, max=100000.0, count=3)
    assert index.lookup("Japan", "EN.SODE", "L5 IC") == expected
    assert index.lookup("Japan", "Software Development", "L5 IC") == expected


def test_even_count_median(aliases):
    employees = employee_frame([
        ("Japan", "EN.SODE", "", "L6 IC", pay, True) for pay in (70000.0, 80000.0, 90000.0, 100000.0)
    ])
    stats = InternalStatsIndex.build(employees, aliases).lookup("Japan", "EN.SODE", "L6 IC")
    assert stats.median == 85000.0
    assert stats.count == 4


def test_alias_codes_share_one_bucket(aliases):
    employees = employee_frame([
        ("Japan", "TE.OLDC", "", "L5 IC", 90000.0, True),
        ("Japan", "TE.NEWC", "", "L5 IC", 110000.0, True),
    ])
    index = InternalStatsIndex.build(employees, aliases)
    old = index.lookup("Japan", "TE.OLDC", "L5 IC")
    new = index.lookup("Japan", "TE.NEWC", "L5 IC")
    assert old == new
    assert old.count == 2
    assert old.median == 100000.0


def test_ineligible_records_are_skipped(aliases):
    employees = employee_frame([
        ("", "EN.SODE", "", "L5 IC", 1.0, True),
        ("Japan", "", "", "L5 IC", 1.0, True),
        ("Japan", "EN.SODE", "", "Senior", 1.0, True),
        ("Japan", "EN.SODE", "", "L5 IC", float("nan"), True),
        ("Japan", "EN.SODE", "", "L5 IC", 1.0, False),
        ("Japan", "EN.SODE", "", "L5 IC", 42000.0, True),
    ])
    stats = InternalStatsIndex.build(employees, aliases).lookup("Japan", "EN.SODE", "L5 IC")
    assert stats == InternalStats(min=42000.0, median=42000.0, max=42000.0, count=1)


def test_region_names_are_normalized(aliases):
    employees = employee_frame([("United States", "EN.SODE", "", "L5 IC", 160000.0, True)])
    index = InternalStatsIndex.build(employees, aliases, region_aliases={"united states": "US"})
    assert index.lookup("US", "EN.SODE", "L5 IC").count == 1
    assert index.lookup("United States", "EN.SODE", "L5 IC").is_empty


def test_missing_bucket_is_empty(aliases):
    employees = employee_frame([("Japan", "EN.SODE", "", "L5 IC", 70000.0, True)])
    index = InternalStatsIndex.build(employees, aliases)
    assert index.lookup("Japan", "EN.SODE", "L6 IC") is EMPTY_STATS
    assert index.lookup("Japan", "EN.SODE", "Senior") is EMPTY_STATS
    assert index.lookup("US", "EN.SODE", "L5 IC").is_empty


def test_lookup_first_tries_keys_in_order(aliases):
    employees = employee_frame([("Japan", "EN.SODE", "", "L6 IC", 80000.0, True)])
    index = InternalStatsIndex.build(employees, aliases)
    stats = index.lookup_first("Japan", ["Software Development", "EN.SODE"], "L6 IC")
    assert stats.median == 80000.0


def test_no_employees(aliases):
    index = InternalStatsIndex.build(employee_frame([]), aliases)
    assert len(index) == 0
    assert index.lookup("Japan", "EN.SODE", "L5 IC").is_empty


def test_engine_internal_stats(engine):
    stats = engine.internal_stats("Japan", "Software Development", "L5 IC")
    assert (stats.min, stats.median, stats.max, stats.count) == (70000.0, 85000.0, 100000.0, 3)
    assert engine.internal_stats("Japan", "EN.SODE", "L6 IC").median == 85000.0
    assert engine.internal_stats("Japan", "TE.NEWC", "L5 IC").median == 90000.0
    assert engine.internal_stats("US", "EN.SODE", "L5 IC").count == 1
