"""Shared type definitions for the benchmark engine."""

import numbers
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

type Region = str
type FamilyCode = str
type LevelLabel = str
type LevelToken = str
type PercentileName = str
type Amount = float | None
type Percentiles = dict[PercentileName, float]


class Role(StrEnum):
    IC = "IC"
    MGR = "Mgr"


class RangeCategory(StrEnum):
    HIGH = "broad-band-high"
    STANDARD = "broad-band-standard"


@dataclass(frozen=True)
class InternalStats:
    """Pay statistics for one (region, family key, level) bucket."""

    min: Amount = None
    median: Amount = None
    max: Amount = None
    count: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.count


EMPTY_STATS = InternalStats()


@dataclass(frozen=True)
class RangeSelection:
    start: Amount = None
    mid: Amount = None
    end: Amount = None


def is_present(value: object) -> bool:
    """True for finite numbers; None, NaN, inf and non-numerics are absent."""
    match value:
        case bool():
            return False
        case numbers.Real():
            return bool(np.isfinite(value))
        case _:
            return False
