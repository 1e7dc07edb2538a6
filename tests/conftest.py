"""Shared fixtures: a small two-region benchmark data set."""

import pandas as pd
import pytest

from salary_ranges.benchmark.engine import BenchmarkEngine, BenchmarkInputs
from salary_ranges.config import BenchmarkConfig, apply_overrides

PERCENTILE_HEADERS = ["P10", "P25", "P40", "P50", "P62.5", "P75", "P90"]


def survey_frame(rows: list[dict]) -> pd.DataFrame:
    """Raw survey tab: compound job code, family name, percentile columns."""
    records = []
    for row in rows:
        record = {"Job Code": row["code"], "Job Family": row.get("name", "")}
        for header in PERCENTILE_HEADERS:
            record[header] = row.get(header, "")
        records.append(record)
    return pd.DataFrame(records)


@pytest.fixture
def config() -> BenchmarkConfig:
    return apply_overrides(BenchmarkConfig(), {"regions": ["Japan", "US"]})


@pytest.fixture
def japan_survey() -> pd.DataFrame:
    return survey_frame([
        {"code": "EN.SODE.P5", "name": "Software Development", "P25": 100000, "P90": 200000},
        {"code": "EN.SODE.P6", "name": "Software Development", "P25": 120000, "P90": 240000},
        {"code": "FI.ACCT.F4", "name": "Accounting", "P10": 60000, "P25": 65000, "P40": 70000,
         "P50": 75000, "P62.5": 80000, "P75": 85000, "P90": 90000},
        {"code": "EX.GMGT.E1-2", "name": "General Management", "P50": 300000, "P75": 350000, "P90": 400000},
        {"code": "EX.GMGT.E3", "name": "General Management", "P50": 500000, "P75": 550000, "P90": 600000},
        {"code": "SA.ACCM.P5", "name": "Account Management", "P10": "n/a", "P25": 50000, "P40": 60000},
        {"code": "TE.NEWC.P5", "name": "Network Engineering", "P10": 70000, "P40": 80000, "P62.5": 90000},
    ])


@pytest.fixture
def us_survey() -> pd.DataFrame:
    return survey_frame([
        {"code": "EN.SODE.P5", "name": "Software Development", "P10": "$150,000", "P40": "$170,000",
         "P62.5": "$190,000"},
    ])


@pytest.fixture
def employees() -> pd.DataFrame:
    return pd.DataFrame([
        {"Employee ID": "E001", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "Software Development",
         "Internal Level": "L5 IC", "Base Pay": "70000", "Active": "TRUE"},
        {"Employee ID": "E002", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "Software Development",
         "Internal Level": "L5 IC", "Base Pay": "85,000", "Active": "TRUE"},
        {"Employee ID": "E003", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "Software Development",
         "Internal Level": "L5 IC", "Base Pay": "100000", "Active": "TRUE"},
        {"Employee ID": "E004", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "Software Development",
         "Internal Level": "L5 IC", "Base Pay": "500000", "Active": "FALSE"},
        {"Employee ID": "E005", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "L6 IC", "Base Pay": "70000", "Active": "TRUE"},
        {"Employee ID": "E006", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "L6 IC", "Base Pay": "80000", "Active": "TRUE"},
        {"Employee ID": "E007", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "L6 IC", "Base Pay": "90000", "Active": "TRUE"},
        {"Employee ID": "E008", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "L6 IC", "Base Pay": "100000", "Active": "TRUE"},
        {"Employee ID": "E009", "Site": "Japan", "Family Code": "TE.OLDC", "Mapped Family Name": "",
         "Internal Level": "L5 IC", "Base Pay": "90000", "Active": "TRUE"},
        {"Employee ID": "E010", "Site": "United States", "Family Code": "EN.SODE",
         "Mapped Family Name": "Software Development", "Internal Level": "L5 IC", "Base Pay": "$160,000",
         "Active": "TRUE"},
        # Malformed records: skipped without affecting anything else
        {"Employee ID": "E011", "Site": "", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "L5 IC", "Base Pay": "1", "Active": "TRUE"},
        {"Employee ID": "E012", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "Senior", "Base Pay": "1", "Active": "TRUE"},
        {"Employee ID": "E013", "Site": "Japan", "Family Code": "EN.SODE", "Mapped Family Name": "",
         "Internal Level": "L5 IC", "Base Pay": "n/a", "Active": "TRUE"},
        {"Employee ID": "E014", "Site": "Japan", "Family Code": "", "Mapped Family Name": "",
         "Internal Level": "L5 IC", "Base Pay": "1", "Active": "TRUE"},
    ])


@pytest.fixture
def level_aliases() -> pd.DataFrame:
    return pd.DataFrame(
        [
            ("L4 IC", "P4"),
            ("L5 IC", "P5"),
            ("L5.5 IC", ""),
            ("L6 IC", "P6"),
            ("L7 Mgr", "E1"),
            ("L8 Mgr", "E3"),
            ("L9 Mgr", "E4"),
        ],
        columns=["Internal Level", "External Token"],
    )


@pytest.fixture
def family_aliases() -> pd.DataFrame:
    return pd.DataFrame([("TE.OLDC", "TE.NEWC")], columns=["From Code", "To Code"])


@pytest.fixture
def categories() -> pd.DataFrame:
    return pd.DataFrame(
        [("EN.SODE", "broad-band-standard"), ("SA.ACCM", "standard")],
        columns=["Family Code", "Category"],
    )


@pytest.fixture
def fx_rates() -> pd.DataFrame:
    return pd.DataFrame([("Japan", "0.5")], columns=["Region", "Rate"])


@pytest.fixture
def inputs(japan_survey, us_survey, employees, level_aliases, family_aliases, categories, fx_rates) -> BenchmarkInputs:
    return BenchmarkInputs(
        surveys={"Japan": japan_survey, "US": us_survey},
        employees=employees,
        level_aliases=level_aliases,
        family_aliases=family_aliases,
        categories=categories,
        fx_rates=fx_rates,
    )


@pytest.fixture
def engine(inputs, config) -> BenchmarkEngine:
    return BenchmarkEngine.from_inputs(inputs, config)
