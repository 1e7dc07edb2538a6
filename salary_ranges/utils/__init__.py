"""Shared utilities for the benchmark engine."""

from salary_ranges.utils.cache import FingerprintCache, fingerprint_frames
from salary_ranges.utils.io import read_table, write_output
from salary_ranges.utils.transforms import normalize_columns, coerce_amounts
from salary_ranges.utils.validators import validate_dataframe
from salary_ranges.utils.types import InternalStats, Percentiles, RangeCategory, RangeSelection
