"""Materialize the full benchmark table: regions × families × levels."""

import logging
from dataclasses import asdict, dataclass

import pandas as pd

from salary_ranges.benchmark.engine import BenchmarkEngine, BenchmarkInputs
from salary_ranges.benchmark.ranges import convert_and_round, round_selection, select_range
from salary_ranges.config import BenchmarkConfig
from salary_ranges.utils.cache import FingerprintCache
from salary_ranges.utils.types import Amount, InternalStats, RangeSelection

logger = logging.getLogger(__name__)

BENCHMARK_COLUMNS = [
    "region",
    "family_code",
    "family_display_name",
    "internal_level",
    "category",
    "currency",
    "range_start",
    "range_mid",
    "range_end",
    "internal_min",
    "internal_median",
    "internal_max",
    "internal_count",
    "lookup_key",
]

LOCAL_CURRENCY = "local"


@dataclass(frozen=True)
class BenchmarkRow:
    region: str
    family_code: str
    family_display_name: str
    internal_level: str
    category: str
    currency: str
    range_start: Amount
    range_mid: Amount
    range_end: Amount
    internal_min: Amount
    internal_median: Amount
    internal_max: Amount
    internal_count: int | None
    lookup_key: str


def lookup_key(display_name: str, internal_level: str, region: str) -> str:
    """Join key used by downstream sheets: display name + level + region."""
    return f"{display_name}{internal_level}{region}"


def _convert_stats(stats: InternalStats, rate: float, unit: int) -> InternalStats:
    return InternalStats(
        min=convert_and_round(stats.min, rate, unit),
        median=convert_and_round(stats.median, rate, unit),
        max=convert_and_round(stats.max, rate, unit),
        count=stats.count,
    )


def _convert_selection(selection: RangeSelection, rate: float, unit: int) -> RangeSelection:
    return RangeSelection(
        start=convert_and_round(selection.start, rate, unit),
        mid=convert_and_round(selection.mid, rate, unit),
        end=convert_and_round(selection.end, rate, unit),
    )


def build_benchmark_rows(engine: BenchmarkEngine, currency: str | None = None) -> list[BenchmarkRow]:
    """One row per (region, family, level); duplicate lookup keys keep the first row."""
    unit = engine.config.rounding_unit
    rows: list[BenchmarkRow] = []
    emitted: set[str] = set()
    duplicates = 0

    for region in engine.regions:
        rate = engine.fx.rate_for(region) if currency else 1.0

        for code, display_name in engine.families.items():
            category = engine.category_for(code)
            # Friendly name first, then the alias-resolved codes
            stats_keys = [display_name, *engine.aliases.resolve(code)]

            for level in engine.levels:
                key = lookup_key(display_name, level, region)
                if key in emitted:
                    duplicates += 1
                    continue
                emitted.add(key)

                vector = engine.pick(region, code, level)
                selection = round_selection(select_range(category, vector), unit)
                stats = engine.stats.lookup_first(region, stats_keys, level)

                if currency:
                    selection = _convert_selection(selection, rate, unit)
                    stats = _convert_stats(stats, rate, unit)

                rows.append(BenchmarkRow(
                    region=region,
                    family_code=code,
                    family_display_name=display_name,
                    internal_level=level,
                    category=str(category),
                    currency=currency or LOCAL_CURRENCY,
                    range_start=selection.start,
                    range_mid=selection.mid,
                    range_end=selection.end,
                    internal_min=stats.min,
                    internal_median=stats.median,
                    internal_max=stats.max,
                    internal_count=stats.count,
                    lookup_key=key,
                ))

    if duplicates:
        logger.warning("Dropped %d rows with duplicate lookup keys (first row kept)", duplicates)
    logger.info("Built %d benchmark rows", len(rows))
    return rows


def build_benchmark_frame(engine: BenchmarkEngine, currency: str | None = None) -> pd.DataFrame:
    rows = build_benchmark_rows(engine, currency=currency)
    table = pd.DataFrame([asdict(row) for row in rows], columns=BENCHMARK_COLUMNS)
    for col in ("range_start", "range_mid", "range_end", "internal_min", "internal_median", "internal_max"):
        table[col] = table[col].astype("Float64")
    table["internal_count"] = table["internal_count"].astype("Int64")
    return table


def build_benchmark_table(
    inputs: BenchmarkInputs,
    config: BenchmarkConfig,
    currency: str | None = None,
    cache: FingerprintCache | None = None,
) -> pd.DataFrame:
    """Build the benchmark table from source tables in one call.

    Raises ``MissingTableError`` when a required table is absent or empty;
    every other data gap shows up as empty cells.
    """
    engine = BenchmarkEngine.from_inputs(inputs, config, cache=cache)
    return build_benchmark_frame(engine, currency=currency)


def summarize_benchmark(table: pd.DataFrame) -> pd.DataFrame:
    """Per-region coverage of the built table."""
    if table.empty:
        return pd.DataFrame(columns=["region", "rows", "with_range", "with_internal"])

    flagged = table.assign(
        has_range=table[["range_start", "range_mid", "range_end"]].notna().any(axis=1),
        has_internal=table["internal_count"].fillna(0).gt(0),
    )
    return (
        flagged
        .groupby("region", sort=False)
        .agg(
            rows=("lookup_key", "count"),
            with_range=("has_range", "sum"),
            with_internal=("has_internal", "sum"),
        )
        .reset_index()
    )
