"""Benchmark configuration and environment setup."""

import dataclasses
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

type ConfigDict = dict[str, str | int | bool | list[str] | dict]

DEFAULT_REGIONS = ("US", "UK", "India")

DEFAULT_PERCENTILES = ("P10", "P25", "P40", "P50", "P62.5", "P75", "P90")

# Survey tabs as delivered by the market data vendor, one per region
DEFAULT_SURVEY_TABS = {
    "US": "Aon US Premium - 2025",
    "UK": "Aon UK London - 2025",
    "India": "Aon India - 2025",
}

# Executive survey levels collapse sub-bands: these composite tokens answer
# for two whole executive levels each. Fixed business rule, not derived.
EXECUTIVE_COMPOSITE_BANDS = {
    "E3-4": (3, 4),
    "E1-2": (1, 2),
}

# Vendor renamed the software development family code in the 2024 survey
SEED_FAMILY_ALIASES = {"EN.SWEN": "EN.SODE"}

CANONICAL_REGIONS = {
    "us": "US",
    "usa": "US",
    "united states": "US",
    "united states of america": "US",
    "uk": "UK",
    "gb": "UK",
    "gbr": "UK",
    "united kingdom": "UK",
    "great britain": "UK",
    "london": "UK",
    "in": "India",
    "ind": "India",
    "india": "India",
}


@dataclass(frozen=True)
class SurveyConfig:
    tabs: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SURVEY_TABS))
    year: int = 2025


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = True
    ttl_seconds: int = 600


@dataclass(frozen=True)
class BenchmarkConfig:
    env: str = "development"
    data_dir: Path = Path("data/dev")
    output_dir: Path = Path("output/dev")
    output_format: str = "csv"
    surveys: SurveyConfig = field(default_factory=SurveyConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    regions: tuple[str, ...] = DEFAULT_REGIONS
    percentile_names: tuple[str, ...] = DEFAULT_PERCENTILES
    executive_threshold: int = 7
    executive_composite_bands: dict[str, tuple[int, ...]] = field(
        default_factory=lambda: dict(EXECUTIVE_COMPOSITE_BANDS)
    )
    finance_prefixes: tuple[str, ...] = ("FI.",)
    high_band_prefixes: tuple[str, ...] = ("EX.", "LG.", "TE.AI")
    seed_family_aliases: dict[str, str] = field(default_factory=lambda: dict(SEED_FAMILY_ALIASES))
    allowed_employment_types: frozenset[str] = frozenset({"Permanent", "Regular Full-Time"})
    region_aliases: dict[str, str] = field(default_factory=lambda: dict(CANONICAL_REGIONS))
    rounding_unit: int = 100
    reference_currency: str = "USD"


def load_benchmark_config(env: str = "production") -> BenchmarkConfig:
    match env:
        case "production":
            data_dir = Path("/data/compensation/benchmarks")
            output_dir = Path("/data/compensation/output")
        case "staging":
            data_dir = Path("/data/staging/compensation/benchmarks")
            output_dir = Path("/data/staging/compensation/output")
        case "development":
            data_dir = Path("data/dev")
            output_dir = Path("output/dev")
        case other:
            raise ValueError(f"Unknown environment: {other}")

    return BenchmarkConfig(env=env, data_dir=data_dir, output_dir=output_dir)


def apply_overrides(config: BenchmarkConfig, overrides: ConfigDict) -> BenchmarkConfig:
    """Return a copy of ``config`` with recognised keys replaced.

    Nested ``surveys`` / ``cache`` tables are merged field by field.
    """
    changes: dict = {}
    for key, value in overrides.items():
        match key:
            case "data_dir" | "output_dir":
                changes[key] = Path(value)
            case "regions" | "percentile_names" | "finance_prefixes" | "high_band_prefixes":
                changes[key] = tuple(value)
            case "allowed_employment_types":
                changes[key] = frozenset(value)
            case "executive_composite_bands":
                changes[key] = {token: tuple(levels) for token, levels in value.items()}
            case "seed_family_aliases":
                changes[key] = dict(value)
            case "region_aliases":
                changes[key] = {**config.region_aliases, **{k.lower(): v for k, v in value.items()}}
            case "surveys":
                changes[key] = dataclasses.replace(config.surveys, **value)
            case "cache":
                changes[key] = dataclasses.replace(config.cache, **value)
            case "output_format" | "reference_currency" | "env":
                changes[key] = str(value)
            case "executive_threshold" | "rounding_unit":
                changes[key] = int(value)
            case other:
                raise ValueError(f"Unknown configuration key: {other}")

    return dataclasses.replace(config, **changes)


def get_env_config() -> ConfigDict:
    """Read benchmark config from pyproject.toml."""
    pyproject = Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("salary_ranges", {})
