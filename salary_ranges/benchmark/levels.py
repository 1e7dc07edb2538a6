"""Internal level parsing and internal-level → survey-token translation.

Internal levels look like ``L5 IC`` or ``L6 Mgr``; ``.5`` levels such as
``L5.5 IC`` sit between two whole levels of the same role and have no
survey token of their own. Their percentiles are interpolated from the two
neighbours (see :func:`average_percentiles`).
"""

import logging
import re
from dataclasses import dataclass

import pandas as pd

from salary_ranges.utils.types import LevelLabel, LevelToken, Percentiles, Role, is_present

logger = logging.getLogger(__name__)

LEVEL_PATTERN = re.compile(r"^L\s*(\d+)(\.5)?\s+(IC|MGR|MANAGER)$", re.IGNORECASE)


@dataclass(frozen=True, order=True)
class ParsedLevel:
    base: int
    is_half: bool
    role: Role

    @property
    def label(self) -> LevelLabel:
        suffix = ".5" if self.is_half else ""
        return f"L{self.base}{suffix} {self.role}"

    def neighbours(self) -> tuple["ParsedLevel", "ParsedLevel"]:
        """The two whole levels a half level interpolates between."""
        return (
            ParsedLevel(self.base, False, self.role),
            ParsedLevel(self.base + 1, False, self.role),
        )


def _parse_role(raw: str) -> Role:
    match raw.upper():
        case "IC":
            return Role.IC
        case _:
            return Role.MGR


def parse_level(label: object) -> ParsedLevel | None:
    """Parse an internal level label; ``None`` means unmapped."""
    if not isinstance(label, str):
        return None
    found = LEVEL_PATTERN.match(" ".join(label.split()))
    if found is None:
        return None
    base, half, role = found.groups()
    return ParsedLevel(int(base), half is not None, _parse_role(role))


def canonical_level(label: object) -> LevelLabel | None:
    parsed = parse_level(label)
    return parsed.label if parsed else None


def average_percentiles(lower: Percentiles, upper: Percentiles) -> Percentiles:
    """Component-wise mean; a value missing on one side takes the other side's."""
    result: Percentiles = {}
    for name in dict.fromkeys([*lower, *upper]):
        left, right = lower.get(name), upper.get(name)
        match (is_present(left), is_present(right)):
            case (True, True):
                result[name] = (left + right) / 2
            case (True, False):
                result[name] = left
            case (False, True):
                result[name] = right
            case _:
                continue
    return result


class LevelMapping:
    """Ordered internal level → survey token table."""

    def __init__(self, entries: list[tuple[str, str | None]]) -> None:
        self._tokens: dict[ParsedLevel, LevelToken | None] = {}
        self._order: list[ParsedLevel] = []

        for raw_level, raw_token in entries:
            parsed = parse_level(raw_level)
            if parsed is None:
                logger.warning("Ignoring unparseable level in level mapping: %r", raw_level)
                continue
            token = raw_token.strip().upper() if isinstance(raw_token, str) else ""
            if parsed not in self._tokens:
                self._order.append(parsed)
                self._tokens[parsed] = token or None
            elif token and self._tokens[parsed] is None:
                self._tokens[parsed] = token

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "LevelMapping":
        tokens = df["external_token"] if "external_token" in df.columns else [None] * len(df)
        return cls(list(zip(df["internal_level"], tokens)))

    @property
    def levels(self) -> list[LevelLabel]:
        return [level.label for level in self._order]

    def token_for(self, level: ParsedLevel) -> LevelToken | None:
        """Survey token for a whole level; half levels never map directly."""
        if level.is_half:
            return None
        return self._tokens.get(level)

    def __len__(self) -> int:
        return len(self._order)
