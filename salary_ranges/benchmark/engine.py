"""Benchmark engine: one set of loaded tables and the indices built from them."""

import logging
from dataclasses import dataclass, field

import pandas as pd

from salary_ranges.benchmark.aliases import FamilyAliasResolver
from salary_ranges.benchmark.internal_stats import InternalStatsIndex
from salary_ranges.benchmark.levels import LevelMapping
from salary_ranges.benchmark.percentiles import PercentileTableIndex
from salary_ranges.benchmark.picker import PercentilePicker
from salary_ranges.benchmark.ranges import CategoryAssigner, FxRates
from salary_ranges.benchmark.transform import (
    normalize_categories,
    normalize_employee_records,
    normalize_family_aliases,
    normalize_fx_rates,
    normalize_level_aliases,
    normalize_region,
    normalize_survey,
)
from salary_ranges.config import BenchmarkConfig
from salary_ranges.exceptions import MissingTableError
from salary_ranges.utils.cache import FingerprintCache, fingerprint_frames
from salary_ranges.utils.types import FamilyCode, InternalStats, LevelLabel, Percentiles, RangeCategory, Region

logger = logging.getLogger(__name__)


def _empty() -> pd.DataFrame:
    return pd.DataFrame()


@dataclass(frozen=True)
class BenchmarkInputs:
    """Source tables for one build, as read from disk (or handed over by a caller)."""

    surveys: dict[Region, pd.DataFrame]
    employees: pd.DataFrame
    level_aliases: pd.DataFrame
    family_aliases: pd.DataFrame = field(default_factory=_empty)
    categories: pd.DataFrame = field(default_factory=_empty)
    fx_rates: pd.DataFrame = field(default_factory=_empty)

    def require(self) -> None:
        """Raise ``MissingTableError`` for any required table that is absent or empty."""
        if not self.surveys:
            raise MissingTableError("surveys", "no survey tables supplied")
        for region, frame in self.surveys.items():
            if frame is None or frame.empty:
                raise MissingTableError(f"survey:{region}")
        for name in ("employees", "level_aliases"):
            frame = getattr(self, name)
            if frame is None or frame.empty:
                raise MissingTableError(name)


class BenchmarkEngine:
    def __init__(
        self,
        config: BenchmarkConfig,
        index: PercentileTableIndex,
        level_mapping: LevelMapping,
        aliases: FamilyAliasResolver,
        stats: InternalStatsIndex,
        categories: CategoryAssigner,
        fx: FxRates,
        regions: list[Region],
    ) -> None:
        self.config = config
        self.index = index
        self.level_mapping = level_mapping
        self.aliases = aliases
        self.stats = stats
        self.categories = categories
        self.fx = fx
        self.regions = regions
        self.picker = PercentilePicker(index, level_mapping, aliases)

    @classmethod
    def from_inputs(
        cls,
        inputs: BenchmarkInputs,
        config: BenchmarkConfig,
        cache: FingerprintCache | None = None,
    ) -> "BenchmarkEngine":
        """Normalize the source tables and build every index.

        When a ``cache`` is given, the percentile and internal-statistics
        indices are reused for identical table contents within its TTL.
        """
        inputs.require()

        surveys: dict[Region, pd.DataFrame] = {}
        for name, frame in inputs.surveys.items():
            region = normalize_region(name, config.region_aliases)
            surveys.setdefault(region, normalize_survey(frame, region, config))
        regions = list(surveys)
        employees = normalize_employee_records(inputs.employees, config)
        level_aliases = normalize_level_aliases(inputs.level_aliases)
        family_aliases = normalize_family_aliases(inputs.family_aliases)
        categories = normalize_categories(inputs.categories)
        fx_rates = normalize_fx_rates(inputs.fx_rates, config)

        if level_aliases.empty:
            raise MissingTableError("level_aliases", "no usable rows after normalization")

        aliases = FamilyAliasResolver.from_frame(family_aliases, seed=config.seed_family_aliases)

        def _build_index() -> PercentileTableIndex:
            return PercentileTableIndex.from_frames(
                surveys,
                config.percentile_names,
                executive_threshold=config.executive_threshold,
                composite_bands=config.executive_composite_bands,
                finance_prefixes=config.finance_prefixes,
            )

        def _build_stats() -> InternalStatsIndex:
            return InternalStatsIndex.build(employees, aliases, region_aliases=config.region_aliases)

        if cache is None:
            index, stats = _build_index(), _build_stats()
        else:
            index_salt = repr((
                sorted(surveys), config.percentile_names, config.executive_threshold,
                sorted(config.executive_composite_bands.items()), config.finance_prefixes,
            ))
            stats_salt = repr((aliases.pairs, sorted(config.region_aliases.items())))
            index = cache.get_or_build(
                "percentile_index",
                fingerprint_frames(*(surveys[r] for r in sorted(surveys)), salt=index_salt),
                _build_index,
            )
            stats = cache.get_or_build(
                "internal_stats",
                fingerprint_frames(employees, salt=stats_salt),
                _build_stats,
            )

        engine = cls(
            config=config,
            index=index,
            level_mapping=LevelMapping.from_frame(level_aliases),
            aliases=aliases,
            stats=stats,
            categories=CategoryAssigner.from_frame(categories, config.high_band_prefixes),
            fx=FxRates.from_frame(fx_rates),
            regions=regions,
        )
        logger.info(
            "Benchmark engine ready: %d regions, %d families, %d levels",
            len(engine.regions), len(engine.families), len(engine.levels),
        )
        return engine

    @property
    def families(self) -> dict[FamilyCode, str]:
        """Surveyed and aliased family codes with display names (the code itself when unnamed)."""
        names = dict(self.index.family_names)
        for old, new in self.aliases.pairs:
            names.setdefault(old, "")
            names.setdefault(new, "")
        return {code: names[code] or code for code in sorted(names)}

    @property
    def levels(self) -> list[LevelLabel]:
        return self.level_mapping.levels

    def region(self, name: str) -> Region:
        return normalize_region(name, self.config.region_aliases)

    def pick(self, region: Region, family_code: FamilyCode, internal_level: str) -> Percentiles:
        return self.picker.pick(self.region(region), family_code, internal_level)

    def percentile(self, region: Region, family_code: FamilyCode, internal_level: str, name: str) -> float | None:
        return self.picker.percentile(self.region(region), family_code, internal_level, name)

    def internal_stats(self, region: Region, family_key: str, internal_level: str) -> InternalStats:
        return self.stats.lookup(self.region(region), family_key, internal_level)

    def category_for(self, family_code: FamilyCode) -> RangeCategory:
        return self.categories.category_for(family_code)
