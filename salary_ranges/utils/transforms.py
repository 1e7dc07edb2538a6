"""Common data transformation utilities."""

import pandas as pd

type ColumnMapping = dict[str, str]


def snake_case(name: str) -> str:
    return str(name).strip().lower().replace(" ", "_").replace("-", "_")


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Normalize column names to snake_case and apply optional mapping."""
    df = df.copy()
    df.columns = [snake_case(col) for col in df.columns]

    if mapping:
        df = df.rename(columns=mapping)

    return df


def coerce_amounts(values: pd.Series) -> pd.Series:
    """Parse amounts as floats (NaN when unparseable).

    Plain numerals, including scientific notation, parse as-is; anything else
    has currency symbols and separators stripped first.
    """
    if pd.api.types.is_numeric_dtype(values):
        return values.astype(float)

    text = values.astype(str).str.strip()
    parsed = pd.to_numeric(text, errors="coerce").astype(float)
    stripped = pd.to_numeric(text.str.replace(r"[^\d.\-]", "", regex=True), errors="coerce")
    return parsed.fillna(stripped).astype(float)


def clean_text(values: pd.Series) -> pd.Series:
    """Strip whitespace and map null-ish cells to empty strings."""
    return values.fillna("").astype(str).str.strip().replace({"nan": "", "None": ""})
