"""Load benchmark source tables from a data directory.

Each table is one CSV or Excel file. Survey tables are named after the
vendor tab for their region (``Aon US Premium - 2025.csv``) or
``survey_<region>.csv``; the employee table is the HRIS ``Base Data``
export.
"""

import logging
from pathlib import Path

import pandas as pd

from salary_ranges.benchmark.engine import BenchmarkInputs
from salary_ranges.config import BenchmarkConfig
from salary_ranges.exceptions import MissingTableError
from salary_ranges.utils.io import find_table, read_table

logger = logging.getLogger(__name__)

TABLE_STEMS = {
    "employees": ["base_data", "Base Data", "employees"],
    "level_aliases": ["level_aliases", "level_mapping", "Level Mapping"],
    "family_aliases": ["family_aliases", "job_family_aliases", "Job Family Aliases"],
    "categories": ["categories", "range_categories", "Range Categories"],
    "fx_rates": ["fx_rates", "fx", "FX Rates"],
}
REQUIRED_TABLES = ("employees", "level_aliases")


def survey_stems(region: str, config: BenchmarkConfig) -> list[str]:
    stems = [f"survey_{region.lower()}", f"survey_{region}"]
    tab = config.surveys.tabs.get(region)
    return [tab, *stems] if tab else stems


def _read_required(path: Path | None, table: str) -> pd.DataFrame:
    if path is None:
        raise MissingTableError(table, "no matching file in data directory")
    df = read_table(path)
    if df.empty:
        raise MissingTableError(table, f"{path.name} has no rows")
    return df


def _read_optional(path: Path | None, table: str) -> pd.DataFrame:
    if path is None:
        logger.info("Optional table %s not found; using defaults", table)
        return pd.DataFrame()
    return read_table(path)


def load_benchmark_inputs(
    config: BenchmarkConfig,
    data_dir: Path | None = None,
    dry_run: bool = False,
) -> BenchmarkInputs | None:
    """Read every source table for a build.

    With ``dry_run`` only the presence of the required files is checked.
    Raises ``MissingTableError`` naming the first missing or empty required table.
    """
    data_dir = Path(data_dir or config.data_dir)
    if not data_dir.exists():
        raise FileNotFoundError(f"Benchmark data directory missing: {data_dir}")

    survey_paths = {region: find_table(data_dir, survey_stems(region, config)) for region in config.regions}
    table_paths = {name: find_table(data_dir, stems) for name, stems in TABLE_STEMS.items()}

    if dry_run:
        for region, path in survey_paths.items():
            if path is None:
                raise MissingTableError(f"survey:{region}", "no matching file in data directory")
        for name in REQUIRED_TABLES:
            if table_paths[name] is None:
                raise MissingTableError(name, "no matching file in data directory")
        return None

    surveys = {
        region: _read_required(path, f"survey:{region}")
        for region, path in survey_paths.items()
    }
    inputs = BenchmarkInputs(
        surveys=surveys,
        employees=_read_required(table_paths["employees"], "employees"),
        level_aliases=_read_required(table_paths["level_aliases"], "level_aliases"),
        family_aliases=_read_optional(table_paths["family_aliases"], "family_aliases"),
        categories=_read_optional(table_paths["categories"], "categories"),
        fx_rates=_read_optional(table_paths["fx_rates"], "fx_rates"),
    )
    logger.info(
        "Loaded %d survey tables and %d employee records from %s",
        len(surveys), len(inputs.employees), data_dir,
    )
    return inputs
