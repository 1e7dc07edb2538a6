"""Internal pay statistics for active employees.

Each employee contributes their base pay to one bucket per *equivalent*
family key: the family code as recorded, its forward and reverse aliases,
and the friendly mapped family name when present. All of those keys point
at identical statistics, so consumers can look a bucket up by whichever
name they hold.
"""

import logging

import numpy as np
import pandas as pd

from salary_ranges.benchmark.aliases import FamilyAliasResolver, normalize_code
from salary_ranges.benchmark.levels import canonical_level
from salary_ranges.benchmark.transform import normalize_region
from salary_ranges.utils.types import EMPTY_STATS, InternalStats, LevelLabel, Region

logger = logging.getLogger(__name__)

type StatsKey = tuple[Region, str, LevelLabel]

GROUP_COLUMNS = ["region", "family_key", "internal_level"]


def equivalent_keys(family_code: object, display_name: object, aliases: FamilyAliasResolver) -> list[str]:
    """All family keys that share one compensation bucket."""
    keys = aliases.resolve(family_code)
    if isinstance(display_name, str) and display_name.strip():
        keys.append(display_name.strip())
    return list(dict.fromkeys(keys))


def _eligible(employees: pd.DataFrame) -> pd.DataFrame:
    """Active records with a region, a parseable level, a family code and numeric pay."""
    if employees.empty:
        return employees

    pay = pd.to_numeric(employees["base_pay"], errors="coerce")
    levels = employees["internal_level"].map(canonical_level)
    mask = (
        employees["is_active"].fillna(False).astype(bool)
        & employees["region"].fillna("").astype(str).str.strip().ne("")
        & employees["family_code"].map(normalize_code).ne("")
        & levels.notna()
        & np.isfinite(pay)
    )
    eligible = employees.loc[mask].copy()
    eligible["base_pay"] = pay[mask].astype(float)
    eligible["internal_level"] = levels[mask]
    eligible["region"] = eligible["region"].astype(str).str.strip()

    skipped = int((~mask).sum())
    if skipped:
        logger.debug("Skipped %d ineligible employee records", skipped)
    return eligible


class InternalStatsIndex:
    def __init__(self, stats: dict[StatsKey, InternalStats]) -> None:
        self._stats = stats

    @classmethod
    def build(
        cls,
        employees: pd.DataFrame,
        aliases: FamilyAliasResolver,
        region_aliases: dict[str, str] | None = None,
    ) -> "InternalStatsIndex":
        eligible = _eligible(employees)
        if region_aliases and not eligible.empty:
            eligible["region"] = eligible["region"].map(lambda r: normalize_region(r, region_aliases))
        if eligible.empty:
            logger.info("No eligible employees for internal statistics")
            return cls({})

        display = eligible["mapped_family_name"] if "mapped_family_name" in eligible else [""] * len(eligible)
        eligible["family_key"] = [
            equivalent_keys(code, name, aliases)
            for code, name in zip(eligible["family_code"], display)
        ]
        long = eligible.explode("family_key")

        grouped = (
            long
            .groupby(GROUP_COLUMNS)
            .agg(
                pay_min=("base_pay", "min"),
                pay_median=("base_pay", "median"),
                pay_max=("base_pay", "max"),
                headcount=("base_pay", "count"),
            )
            .reset_index()
        )

        stats = {
            (row.region, row.family_key, row.internal_level): InternalStats(
                min=float(row.pay_min),
                median=float(row.pay_median),
                max=float(row.pay_max),
                count=int(row.headcount),
            )
            for row in grouped.itertuples(index=False)
        }
        logger.info(
            "Built internal statistics: %d buckets from %d employees",
            len(stats), len(eligible),
        )
        return cls(stats)

    def lookup(self, region: Region, family_key: str, internal_level: str) -> InternalStats:
        level = canonical_level(internal_level)
        if level is None or not isinstance(family_key, str):
            return EMPTY_STATS

        for key in dict.fromkeys([family_key.strip(), normalize_code(family_key)]):
            found = self._stats.get((region, key, level))
            if found is not None:
                return found
        return EMPTY_STATS

    def lookup_first(self, region: Region, family_keys: list[str], internal_level: str) -> InternalStats:
        """Stats for the first key with data, trying keys in order."""
        for key in family_keys:
            found = self.lookup(region, key, internal_level)
            if not found.is_empty:
                return found
        return EMPTY_STATS

    def __len__(self) -> int:
        return len(self._stats)
