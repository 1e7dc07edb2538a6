"""Range category policy, percentile selection, rounding and FX conversion."""

import logging
import math
from dataclasses import dataclass

import pandas as pd

from salary_ranges.benchmark.aliases import normalize_code
from salary_ranges.utils.types import (
    Amount,
    FamilyCode,
    PercentileName,
    Percentiles,
    RangeCategory,
    RangeSelection,
    Region,
    is_present,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotRule:
    primary: PercentileName
    fallbacks: tuple[PercentileName, ...] = ()

    @property
    def chain(self) -> tuple[PercentileName, ...]:
        return (self.primary, *self.fallbacks)


@dataclass(frozen=True)
class CategoryDefinition:
    category: RangeCategory
    start: SlotRule
    mid: SlotRule
    end: SlotRule


# Range policies as agreed with the comp team. Fallbacks walk to the next
# available percentile in the listed order.
CATEGORY_DEFINITIONS: dict[RangeCategory, CategoryDefinition] = {
    RangeCategory.HIGH: CategoryDefinition(
        RangeCategory.HIGH,
        start=SlotRule("P50", ("P62.5", "P75")),
        mid=SlotRule("P75", ("P90",)),
        end=SlotRule("P90", ("P75",)),
    ),
    RangeCategory.STANDARD: CategoryDefinition(
        RangeCategory.STANDARD,
        start=SlotRule("P10", ("P25", "P40")),
        mid=SlotRule("P40", ("P50", "P62.5")),
        end=SlotRule("P62.5", ("P75", "P90")),
    ),
}


def parse_category(tag: object) -> RangeCategory | None:
    """Map a category tag from the assignment sheet to a category."""
    if not isinstance(tag, str):
        return None
    match tag.strip().lower().replace("_", "-").replace(" ", "-"):
        case "broad-band-high" | "high" | "x0" | "x1":
            return RangeCategory.HIGH
        case "broad-band-standard" | "standard" | "y1":
            return RangeCategory.STANDARD
        case _:
            return None


def structural_category(family_code: FamilyCode, high_prefixes: tuple[str, ...]) -> RangeCategory | None:
    code = normalize_code(family_code)
    if not code:
        return None
    if code.startswith(tuple(p.upper() for p in high_prefixes)):
        return RangeCategory.HIGH
    return RangeCategory.STANDARD


class CategoryAssigner:
    def __init__(self, explicit: dict[FamilyCode, RangeCategory], high_prefixes: tuple[str, ...]) -> None:
        self.explicit = {normalize_code(code): category for code, category in explicit.items()}
        self.high_prefixes = high_prefixes

    @classmethod
    def from_frame(cls, df: pd.DataFrame | None, high_prefixes: tuple[str, ...]) -> "CategoryAssigner":
        explicit: dict[FamilyCode, RangeCategory] = {}
        if df is not None and not df.empty:
            for code, tag in zip(df["family_code"], df["category"]):
                category = parse_category(tag)
                if category is None:
                    logger.warning("Unknown range category %r for %s; using structural rule", tag, code)
                    continue
                explicit.setdefault(normalize_code(code), category)
        return cls(explicit, high_prefixes)

    def category_for(self, family_code: FamilyCode) -> RangeCategory:
        code = normalize_code(family_code)
        if code in self.explicit:
            return self.explicit[code]
        return structural_category(code, self.high_prefixes) or RangeCategory.STANDARD


def select_slot(vector: Percentiles, rule: SlotRule) -> Amount:
    """First present value along the slot's chain; ``None`` when exhausted."""
    for name in rule.chain:
        value = vector.get(name)
        if is_present(value):
            return float(value)
    return None


def select_range(category: RangeCategory, vector: Percentiles) -> RangeSelection:
    """Pick raw (unrounded) start/mid/end percentiles for a category."""
    definition = CATEGORY_DEFINITIONS[category]
    return RangeSelection(
        start=select_slot(vector, definition.start),
        mid=select_slot(vector, definition.mid),
        end=select_slot(vector, definition.end),
    )


def round_to_unit(value: Amount, unit: int = 100) -> Amount:
    """Round half away from zero to the nearest ``unit``."""
    if not is_present(value):
        return None
    scaled = math.floor(abs(value) / unit + 0.5) * unit
    return float(math.copysign(scaled, value))


def round_selection(selection: RangeSelection, unit: int = 100) -> RangeSelection:
    return RangeSelection(
        start=round_to_unit(selection.start, unit),
        mid=round_to_unit(selection.mid, unit),
        end=round_to_unit(selection.end, unit),
    )


def convert_amount(value: Amount, rate: float) -> Amount:
    """Multiply into the reference currency without rounding."""
    if not is_present(value):
        return None
    return float(value) * rate


def convert_and_round(value: Amount, rate: float, unit: int = 100) -> Amount:
    return round_to_unit(convert_amount(value, rate), unit)


class FxRates:
    """Region → multiplicative rate into the reference currency (default 1)."""

    def __init__(self, rates: dict[Region, float]) -> None:
        self._rates = {region: float(rate) for region, rate in rates.items() if is_present(rate) and rate > 0}

    @classmethod
    def from_frame(cls, df: pd.DataFrame | None) -> "FxRates":
        if df is None or df.empty:
            return cls({})
        rates: dict[Region, float] = {}
        for region, rate in zip(df["region"], df["rate"]):
            rates.setdefault(region, rate)
        return cls(rates)

    def rate_for(self, region: Region) -> float:
        return self._rates.get(region, 1.0)
