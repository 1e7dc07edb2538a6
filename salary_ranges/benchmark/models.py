"""Pandera schemas for normalized benchmark inputs and the benchmark output."""

import pandera as pa
from pandera import Column, Check

from salary_ranges.utils.types import RangeCategory

LEVEL_LABEL = r"^L\d+(\.5)? (IC|Mgr)$"
PERCENTILE_COLUMN = r"^P\d+(\.\d+)?$"


survey_schema = pa.DataFrameSchema(
    {
        "region": Column(str, Check.str_length(min_value=1)),
        "family_code": Column(str, Check.str_length(min_value=1)),
        "level_token": Column(str, Check.str_length(min_value=1)),
        "family_name": Column(str, nullable=True),
        PERCENTILE_COLUMN: Column(
            float,
            Check.greater_than(0),
            nullable=True,
            required=False,
            regex=True,
        ),
    },
    strict=False,
    coerce=True,
)


employee_schema = pa.DataFrameSchema(
    {
        "employee_id": Column(str, nullable=True),
        "region": Column(str, Check.str_length(min_value=1)),
        "family_code": Column(str, Check.str_length(min_value=1)),
        "mapped_family_name": Column(str, nullable=True),
        "internal_level": Column(str, Check.str_matches(LEVEL_LABEL)),
        "base_pay": Column(float, Check.greater_than_or_equal_to(0)),
        "is_active": Column(bool),
    },
    strict=False,
    coerce=True,
)


level_alias_schema = pa.DataFrameSchema(
    {
        "internal_level": Column(str, Check.str_matches(LEVEL_LABEL), unique=True),
        "external_token": Column(str, nullable=True),
    },
    coerce=True,
)


family_alias_schema = pa.DataFrameSchema(
    {
        "from_code": Column(str, Check.str_length(min_value=1), unique=True),
        "to_code": Column(str, Check.str_length(min_value=1)),
    },
    coerce=True,
)


category_schema = pa.DataFrameSchema(
    {
        "family_code": Column(str, Check.str_length(min_value=1), unique=True),
        "category": Column(str),
    },
    coerce=True,
)


fx_schema = pa.DataFrameSchema(
    {
        "region": Column(str, Check.str_length(min_value=1), unique=True),
        "rate": Column(float, Check.greater_than(0)),
    },
    coerce=True,
)


benchmark_schema = pa.DataFrameSchema(
    {
        "region": Column(str),
        "family_code": Column(str),
        "family_display_name": Column(str),
        "internal_level": Column(str, Check.str_matches(LEVEL_LABEL)),
        "category": Column(str, Check.isin([c.value for c in RangeCategory])),
        "currency": Column(str),
        "range_start": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "range_mid": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "range_end": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "internal_min": Column(float, nullable=True),
        "internal_median": Column(float, nullable=True),
        "internal_max": Column(float, nullable=True),
        "internal_count": Column("Int64", Check.greater_than(0), nullable=True),
        "lookup_key": Column(str, unique=True),
    },
    strict=True,
    coerce=True,
)
