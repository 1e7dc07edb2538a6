"""Data validation utilities using pandera."""

import pandera as pa
import pandas as pd
from pandera import DataFrameSchema

type ValidationResult = dict[str, str | bool | list[str]]


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema) -> ValidationResult:
    """Validate a DataFrame against a pandera schema.

    Failures are summarized per (column, check) with one sample value.
    """
    try:
        schema.validate(df, lazy=True)
        return {"valid": True, "status": "ok", "errors": []}
    except pa.errors.SchemaErrors as e:
        errors = []
        grouped = e.failure_cases.groupby(["column", "check"], dropna=False, sort=False)
        for (col, check), cases in grouped:
            sample = cases["failure_case"].iloc[0]
            match len(cases):
                case 1:
                    errors.append(f"Column '{col}' failed check '{check}': {sample}")
                case n:
                    errors.append(f"Column '{col}' failed check '{check}' on {n} rows (e.g. {sample})")
        return {"valid": False, "status": "error", "errors": errors}
