"""Per-region index of market survey percentiles.

Survey rows are keyed ``"<family code>|<level token>"`` within each region.
Token matching has two regimes:

* Below the executive threshold, tokens match on (letter prefix, number).
  Finance families asking for a ``P`` token also accept the ``F`` token of
  the same number.
* At or above the threshold, tokens match on number, and the composite
  executive tokens answer for fixed pairs of numbers (``E3-4`` for 3 or 4,
  ``E1-2`` for 1 or 2).
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

import pandas as pd

from salary_ranges.benchmark.aliases import normalize_code
from salary_ranges.config import EXECUTIVE_COMPOSITE_BANDS
from salary_ranges.utils.types import FamilyCode, LevelToken, Percentiles, Region, is_present

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"^([A-Z]+)0*(\d+)$")


@dataclass(frozen=True)
class SurveyRow:
    region: Region
    family_code: FamilyCode
    level_token: LevelToken
    family_name: str = ""
    percentiles: Percentiles = field(default_factory=dict)


def normalize_token(token: object) -> LevelToken:
    """Canonical token text: ``p05`` → ``P5``, ``E3 / 4`` → ``E3-4``."""
    if not isinstance(token, str):
        return ""
    compact = re.sub(r"\s+", "", token.upper()).replace("/", "-").replace("–", "-")
    parsed = TOKEN_PATTERN.match(compact)
    if parsed:
        letter, number = parsed.groups()
        return f"{letter}{int(number)}"
    return compact


def parse_token(token: object) -> tuple[str, int] | None:
    parsed = TOKEN_PATTERN.match(normalize_token(token))
    if parsed is None:
        return None
    letter, number = parsed.groups()
    return letter, int(number)


def index_key(family_code: FamilyCode, token: LevelToken) -> str:
    return f"{normalize_code(family_code)}|{normalize_token(token)}"


def numeric_only(values: dict) -> Percentiles:
    return {name: float(value) for name, value in values.items() if is_present(value)}


class PercentileTableIndex:
    def __init__(
        self,
        rows: Iterable[SurveyRow],
        executive_threshold: int = 7,
        composite_bands: dict[str, tuple[int, ...]] | None = None,
        finance_prefixes: tuple[str, ...] = ("FI.",),
    ) -> None:
        self.executive_threshold = executive_threshold
        self.composite_bands = {
            normalize_token(token): tuple(levels)
            for token, levels in (composite_bands or EXECUTIVE_COMPOSITE_BANDS).items()
        }
        self.finance_prefixes = tuple(p.upper() for p in finance_prefixes)

        self._tables: dict[Region, dict[str, Percentiles]] = {}
        self._family_names: dict[FamilyCode, str] = {}

        for row in rows:
            table = self._tables.setdefault(row.region, {})
            key = index_key(row.family_code, row.level_token)
            existing = table.setdefault(key, {})
            # Duplicate keys fill gaps but never overwrite an earlier value
            for name, value in numeric_only(row.percentiles).items():
                existing.setdefault(name, value)

            code = normalize_code(row.family_code)
            if code and row.family_name and not self._family_names.get(code):
                self._family_names[code] = row.family_name.strip()
            elif code:
                self._family_names.setdefault(code, "")

        for region, table in self._tables.items():
            logger.info("Indexed %d survey keys for %s", len(table), region)

    @classmethod
    def from_frames(
        cls,
        surveys: dict[Region, pd.DataFrame],
        percentile_names: Iterable[str],
        **options,
    ) -> "PercentileTableIndex":
        """Build from normalized survey frames (see ``transform.normalize_survey``)."""
        names = list(percentile_names)

        def _rows():
            for region, frame in surveys.items():
                present = [n for n in names if n in frame.columns]
                for record in frame.to_dict("records"):
                    yield SurveyRow(
                        region=region,
                        family_code=record["family_code"],
                        level_token=record["level_token"],
                        family_name=record.get("family_name") or "",
                        percentiles={n: record[n] for n in present},
                    )

        return cls(_rows(), **options)

    @property
    def regions(self) -> list[Region]:
        return list(self._tables)

    @property
    def family_names(self) -> dict[FamilyCode, str]:
        """Every indexed family code mapped to its survey display name, sorted by code."""
        return dict(sorted(self._family_names.items()))

    def is_finance_family(self, family_code: FamilyCode) -> bool:
        return normalize_code(family_code).startswith(self.finance_prefixes)

    def get(self, region: Region, family_code: FamilyCode, token: LevelToken) -> Percentiles:
        """Exact key probe; empty when absent."""
        return self._tables.get(region, {}).get(index_key(family_code, token), {})

    def candidate_tokens(self, family_code: FamilyCode, token: LevelToken, level_number: int) -> list[LevelToken]:
        """Survey tokens that may answer for ``token`` at internal level ``level_number``, in preference order."""
        canonical = normalize_token(token)
        parsed = parse_token(canonical)
        if parsed is None:
            return [canonical] if canonical else []

        letter, number = parsed
        candidates = [f"{letter}{number}"]

        if level_number >= self.executive_threshold:
            candidates.extend(
                composite
                for composite, levels in self.composite_bands.items()
                if number in levels
            )
        elif letter == "P" and self.is_finance_family(family_code):
            candidates.append(f"F{number}")

        return candidates

    def lookup(
        self,
        region: Region,
        family_code: FamilyCode,
        token: LevelToken,
        level_number: int,
    ) -> Percentiles:
        """First candidate token with at least one numeric percentile, else empty."""
        for candidate in self.candidate_tokens(family_code, token, level_number):
            found = self.get(region, family_code, candidate)
            if found:
                return dict(found)
        return {}

    def __len__(self) -> int:
        return sum(len(table) for table in self._tables.values())
