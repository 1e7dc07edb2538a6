"""Compensation benchmark pipeline.

Maps internal levels onto market survey percentiles, aggregates internal pay
by the same keys, and materializes proposed salary ranges per region, job
family and level.
"""

from pathlib import Path

import pandas as pd

from salary_ranges.benchmark.builder import (
    build_benchmark_frame,
    build_benchmark_table,
    summarize_benchmark,
)
from salary_ranges.benchmark.engine import BenchmarkEngine, BenchmarkInputs
from salary_ranges.benchmark.ingest import load_benchmark_inputs
from salary_ranges.benchmark.models import (
    benchmark_schema,
    category_schema,
    employee_schema,
    family_alias_schema,
    fx_schema,
    level_alias_schema,
    survey_schema,
)
from salary_ranges.benchmark.transform import (
    normalize_categories,
    normalize_employee_records,
    normalize_family_aliases,
    normalize_fx_rates,
    normalize_level_aliases,
    normalize_survey,
)
from salary_ranges.config import BenchmarkConfig, load_benchmark_config
from salary_ranges.utils.cache import FingerprintCache
from salary_ranges.utils.io import output_suffix, write_output
from salary_ranges.utils.validators import validate_dataframe

type TableCheck = dict[str, str | bool | list[str]]


def validate(config: BenchmarkConfig | None = None) -> dict[str, str]:
    """Validate that all required benchmark sources are present."""
    config = config or load_benchmark_config()
    try:
        load_benchmark_inputs(config, dry_run=True)
        return {"status": "ok", "regions": ", ".join(config.regions)}
    except FileNotFoundError as exc:
        return {"status": "error", "message": str(exc)}
    except Exception as exc:
        return {"status": "error", "message": f"Unexpected: {exc}"}


def check_tables(inputs: BenchmarkInputs, config: BenchmarkConfig) -> list[TableCheck]:
    """Run the pandera schemas over every normalized input table."""
    checks: list[tuple[str, pd.DataFrame, object]] = [
        (f"survey:{region}", normalize_survey(frame, region, config), survey_schema)
        for region, frame in inputs.surveys.items()
    ]
    checks += [
        ("employees", normalize_employee_records(inputs.employees, config), employee_schema),
        ("level_aliases", normalize_level_aliases(inputs.level_aliases), level_alias_schema),
        ("family_aliases", normalize_family_aliases(inputs.family_aliases), family_alias_schema),
        ("categories", normalize_categories(inputs.categories), category_schema),
        ("fx_rates", normalize_fx_rates(inputs.fx_rates, config), fx_schema),
    ]
    return [
        {"table": name, "rows": str(len(frame)), **validate_dataframe(frame, schema)}
        for name, frame, schema in checks
    ]


def run(
    config: BenchmarkConfig,
    data_dir: Path | None = None,
    output_dir: Path | None = None,
    include_reference_currency: bool = True,
    cache: FingerprintCache | None = None,
) -> dict[str, pd.DataFrame]:
    """Execute the full benchmark build and write its outputs."""
    inputs = load_benchmark_inputs(config, data_dir=data_dir)
    engine = BenchmarkEngine.from_inputs(inputs, config, cache=cache)
    output_dir = Path(output_dir or config.output_dir)
    suffix = output_suffix(config.output_format)

    tables = {"benchmark": build_benchmark_frame(engine)}
    if include_reference_currency:
        currency = config.reference_currency
        tables[f"benchmark_{currency.lower()}"] = build_benchmark_frame(engine, currency=currency)

    for name, table in tables.items():
        write_output(table, output_dir / f"{name}{suffix}", fmt=config.output_format)

    tables["summary"] = summarize_benchmark(tables["benchmark"])
    return tables


__all__ = [
    "BenchmarkEngine",
    "BenchmarkInputs",
    "benchmark_schema",
    "build_benchmark_frame",
    "build_benchmark_table",
    "check_tables",
    "load_benchmark_inputs",
    "run",
    "summarize_benchmark",
    "validate",
]
