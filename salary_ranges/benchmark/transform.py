"""Normalize raw source tables into the shapes the benchmark indices expect."""

import logging
import numbers
import re

import numpy as np
import pandas as pd

from salary_ranges.benchmark.levels import canonical_level
from salary_ranges.config import BenchmarkConfig
from salary_ranges.utils.transforms import clean_text, coerce_amounts, normalize_columns, snake_case

logger = logging.getLogger(__name__)

PERCENTILE_HEADER = re.compile(r"^\s*p\s*(\d+(?:\.\d+)?)\s*(?:th)?\s*$", re.IGNORECASE)

SURVEY_COLUMNS = {
    "code": "job_code",
    "aon_code": "job_code",
    "job_code": "job_code",
    "job_family": "family_name",
    "family": "family_name",
    "job_family_name": "family_name",
    "family_code": "family_code",
    "level": "level_token",
    "career_level": "level_token",
    "level_token": "level_token",
}

EMPLOYEE_COLUMNS = {
    "emp_id": "employee_id",
    "id": "employee_id",
    "site": "region",
    "country": "region",
    "location": "region",
    "job_family_code": "family_code",
    "job_code": "family_code",
    "mapped_family": "mapped_family_name",
    "job_family_name": "mapped_family_name",
    "family_name": "mapped_family_name",
    "level": "internal_level",
    "job_level": "internal_level",
    "base_salary": "base_pay",
    "salary": "base_pay",
    "active": "active_flag",
    "is_active": "active_flag",
    "status": "active_flag",
    "emp_type": "employment_type",
}

LEVEL_ALIAS_COLUMNS = {
    "level": "internal_level",
    "internal": "internal_level",
    "token": "external_token",
    "aon_level": "external_token",
    "external_level": "external_token",
    "survey_level": "external_token",
}

FAMILY_ALIAS_COLUMNS = {
    "old_code": "from_code",
    "from": "from_code",
    "source_code": "from_code",
    "new_code": "to_code",
    "to": "to_code",
    "target_code": "to_code",
}

CATEGORY_COLUMNS = {
    "code": "family_code",
    "job_family_code": "family_code",
    "category_tag": "category",
    "range_category": "category",
    "tag": "category",
}

FX_COLUMNS = {
    "fx_rate": "rate",
    "fx": "rate",
    "usd_rate": "rate",
    "rate_to_usd": "rate",
    "country": "region",
    "site": "region",
}


def canonical_percentile(name: object) -> str | None:
    """``p25`` / ``P 62.5`` / ``P90th`` → ``P25`` / ``P62.5`` / ``P90``."""
    found = PERCENTILE_HEADER.match(str(name))
    if found is None:
        return None
    number = float(found.group(1))
    return f"P{int(number)}" if number.is_integer() else f"P{number:g}"


def normalize_region(value: object, aliases: dict[str, str]) -> str:
    if not isinstance(value, str):
        return ""
    stripped = " ".join(value.split())
    return aliases.get(stripped.lower(), stripped)


def _coerce_active(value: object) -> bool:
    match value:
        case bool() | np.bool_():
            return bool(value)
        case numbers.Number():
            return value == 1
        case str():
            return value.strip().lower() in {"true", "yes", "y", "1", "active"}
        case _:
            return False


def _with_columns(df: pd.DataFrame, mapping: dict[str, str], required: list[str]) -> pd.DataFrame:
    df = normalize_columns(df, mapping)
    df = df.loc[:, ~df.columns.duplicated()]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    return df


def split_compound_code(code: object) -> tuple[str, str]:
    """``EN.SODE.P5`` → (``EN.SODE``, ``P5``); codes without a suffix have no token."""
    if not isinstance(code, str) or "." not in code.strip():
        return (code.strip().upper() if isinstance(code, str) else "", "")
    family, _, token = code.strip().rpartition(".")
    return family.upper(), token.upper()


def normalize_survey(raw: pd.DataFrame, region: str, config: BenchmarkConfig) -> pd.DataFrame:
    """Normalize one region's survey tab into family/token/percentile columns."""
    renamed = {col: canonical_percentile(col) or snake_case(col) for col in raw.columns}
    df = raw.rename(columns=renamed)
    df = df.rename(columns=SURVEY_COLUMNS)
    df = df.loc[:, ~df.columns.duplicated()]

    if "family_code" in df.columns and "level_token" in df.columns:
        families = clean_text(df["family_code"]).str.upper()
        tokens = clean_text(df["level_token"]).str.upper()
    elif "job_code" in df.columns:
        parts = clean_text(df["job_code"]).map(split_compound_code)
        families = parts.str[0]
        tokens = parts.str[1]
    else:
        raise ValueError(f"Survey table for {region} has no job code column")

    result = pd.DataFrame({
        "region": region,
        "family_code": families,
        "level_token": tokens,
        "family_name": clean_text(df["family_name"]) if "family_name" in df.columns else "",
    }, index=df.index)

    for name in config.percentile_names:
        if name in df.columns:
            result[name] = coerce_amounts(df[name])

    result = result[(result["family_code"] != "") & (result["level_token"] != "")]
    logger.info("Normalized %d survey rows for %s", len(result), region)
    return result.reset_index(drop=True)


def normalize_employee_records(raw: pd.DataFrame, config: BenchmarkConfig) -> pd.DataFrame:
    """Apply all cleaning and normalization steps to raw employee data.

    Rows with no region, an unparseable level, a blank family code or
    non-numeric pay are dropped here; they never reach the statistics.
    """
    df = _with_columns(raw, EMPLOYEE_COLUMNS, ["region", "family_code", "internal_level", "base_pay"])

    result = pd.DataFrame(index=df.index)
    result["employee_id"] = clean_text(df["employee_id"]) if "employee_id" in df.columns else ""
    result["region"] = df["region"].map(lambda r: normalize_region(r, config.region_aliases))
    result["family_code"] = clean_text(df["family_code"]).str.upper()
    result["mapped_family_name"] = (
        clean_text(df["mapped_family_name"]) if "mapped_family_name" in df.columns else ""
    )
    result["internal_level"] = df["internal_level"].map(canonical_level)
    result["base_pay"] = coerce_amounts(df["base_pay"])

    if "active_flag" in df.columns:
        result["is_active"] = df["active_flag"].map(_coerce_active)
    else:
        logger.info("No active flag column; treating all employee records as active")
        result["is_active"] = True

    # Only permanent staff count towards internal benchmarks
    if "employment_type" in df.columns and config.allowed_employment_types:
        result["employment_type"] = clean_text(df["employment_type"])
        result["is_active"] = result["is_active"] & result["employment_type"].isin(
            sorted(config.allowed_employment_types)
        )

    valid = (
        result["region"].ne("")
        & result["family_code"].ne("")
        & result["internal_level"].notna()
        & result["base_pay"].notna()
    )
    skipped = int((~valid).sum())
    if skipped:
        logger.warning("Skipped %d employee records with missing region, level, family or pay", skipped)
    result = result.loc[valid]

    ids = result.loc[result["employee_id"] != "", "employee_id"]
    repeated = int(ids.duplicated().sum())
    if repeated:
        # Every record counts; repeated IDs are reported, not collapsed
        logger.warning("%d employee records share an employee ID with another record", repeated)

    logger.info("Normalized %d employee records", len(result))
    return result.reset_index(drop=True)


def normalize_level_aliases(raw: pd.DataFrame) -> pd.DataFrame:
    """Level mapping rows with a parseable internal level; the rest are dropped with a warning."""
    df = _with_columns(raw, LEVEL_ALIAS_COLUMNS, ["internal_level"])
    result = pd.DataFrame({
        "internal_level": clean_text(df["internal_level"]),
        "external_token": (
            clean_text(df["external_token"]).str.upper() if "external_token" in df.columns else ""
        ),
    })
    parseable = result["internal_level"].map(canonical_level).notna()
    dropped = int((~parseable).sum())
    if dropped:
        logger.warning("Dropped %d level mapping rows with an unparseable internal level", dropped)
    return result.loc[parseable].reset_index(drop=True)


def normalize_family_aliases(raw: pd.DataFrame) -> pd.DataFrame:
    if raw.empty:
        return pd.DataFrame(columns=["from_code", "to_code"])
    df = _with_columns(raw, FAMILY_ALIAS_COLUMNS, ["from_code", "to_code"])
    result = pd.DataFrame({
        "from_code": clean_text(df["from_code"]).str.upper(),
        "to_code": clean_text(df["to_code"]).str.upper(),
    })
    return result[(result["from_code"] != "") & (result["to_code"] != "")].reset_index(drop=True)


def normalize_categories(raw: pd.DataFrame) -> pd.DataFrame:
    if raw.empty:
        return pd.DataFrame(columns=["family_code", "category"])
    df = _with_columns(raw, CATEGORY_COLUMNS, ["family_code", "category"])
    result = pd.DataFrame({
        "family_code": clean_text(df["family_code"]).str.upper(),
        "category": clean_text(df["category"]),
    })
    return result[result["family_code"] != ""].reset_index(drop=True)


def normalize_fx_rates(raw: pd.DataFrame, config: BenchmarkConfig) -> pd.DataFrame:
    if raw.empty:
        return pd.DataFrame(columns=["region", "rate"])
    df = _with_columns(raw, FX_COLUMNS, ["region", "rate"])
    result = pd.DataFrame({
        "region": df["region"].map(lambda r: normalize_region(r, config.region_aliases)),
        "rate": coerce_amounts(df["rate"]),
    })
    valid = result["region"].ne("") & result["rate"].gt(0)
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropped %d FX rows with a blank region or non-positive rate", dropped)
    return result.loc[valid].reset_index(drop=True)
