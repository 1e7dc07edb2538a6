"""File I/O utilities for reading source tables and writing benchmark output."""

from pathlib import Path

import pandas as pd
from rich.console import Console

type FilePath = str | Path

console = Console()

TABLE_SUFFIXES = (".csv", ".xlsx", ".xls")


def read_csv_file(path: FilePath) -> pd.DataFrame:
    """Read a single CSV export, handling encoding quirks.

    Everything is read as text; numeric coercion happens in the transform
    step so that malformed cells only drop their own row.
    """
    path = Path(path)
    for encoding in ("utf-8", "latin-1", "cp1252"):
        try:
            return pd.read_csv(path, encoding=encoding, dtype=str, keep_default_na=False)
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not decode {path}")


def read_excel_file(path: FilePath, sheet_name: str | int = 0) -> pd.DataFrame:
    """Read an Excel file with automatic format detection."""
    path = Path(path)

    match path.suffix:
        case ".xlsx":
            return pd.read_excel(path, sheet_name=sheet_name, engine="openpyxl", dtype=str)
        case ".xls":
            return pd.read_excel(path, sheet_name=sheet_name, engine="xlrd", dtype=str)
        case ext:
            raise ValueError(f"Unsupported Excel format: {ext}")


def read_table(path: FilePath) -> pd.DataFrame:
    """Read a tabular source file, dispatching on its suffix."""
    path = Path(path)
    console.print(f"  Reading {path.name}...")

    match path.suffix.lower():
        case ".csv":
            return read_csv_file(path)
        case ".xlsx" | ".xls":
            return read_excel_file(path)
        case ext:
            raise ValueError(f"Unsupported table format: {ext}")


def find_table(directory: FilePath, stems: list[str]) -> Path | None:
    """Return the first existing file matching any of the candidate stems."""
    directory = Path(directory)
    for stem in stems:
        for suffix in TABLE_SUFFIXES:
            candidate = directory / f"{stem}{suffix}"
            if candidate.exists():
                return candidate
    return None


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> None:
    """Write a DataFrame to the specified format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            df.to_csv(path, index=False)
        case "parquet":
            df.to_parquet(path, index=False)
        case "excel":
            df.to_excel(path, index=False)
        case "json":
            df.to_json(path, orient="records", indent=2)
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {path}")


def output_suffix(fmt: str) -> str:
    match fmt:
        case "csv" | "parquet" | "json":
            return f".{fmt}"
        case "excel":
            return ".xlsx"
        case other:
            raise ValueError(f"Unsupported output format: {other}")
