"""Resolve (region, family, internal level) to a market percentile vector."""

import logging

from salary_ranges.benchmark.aliases import FamilyAliasResolver, normalize_code
from salary_ranges.benchmark.levels import LevelMapping, ParsedLevel, average_percentiles, parse_level
from salary_ranges.benchmark.percentiles import PercentileTableIndex
from salary_ranges.utils.types import FamilyCode, PercentileName, Percentiles, Region

logger = logging.getLogger(__name__)

type PickKey = tuple[Region, FamilyCode, ParsedLevel]


class PercentilePicker:
    """Pure lookup over one set of loaded tables.

    The memo is owned by the instance, and an instance is bound to exactly
    one index / level mapping / alias table, so cached picks cannot outlive
    the tables they were computed from.
    """

    def __init__(
        self,
        index: PercentileTableIndex,
        levels: LevelMapping,
        aliases: FamilyAliasResolver,
    ) -> None:
        self.index = index
        self.levels = levels
        self.aliases = aliases
        self._memo: dict[PickKey, Percentiles] = {}

    def pick(self, region: Region, family_code: FamilyCode, internal_level: str) -> Percentiles:
        parsed = parse_level(internal_level)
        if parsed is None:
            return {}
        return dict(self._pick(region, normalize_code(family_code), parsed))

    def percentile(
        self,
        region: Region,
        family_code: FamilyCode,
        internal_level: str,
        name: PercentileName,
    ) -> float | None:
        return self.pick(region, family_code, internal_level).get(name)

    def _pick(self, region: Region, family_code: FamilyCode, level: ParsedLevel) -> Percentiles:
        key = (region, family_code, level)
        if key not in self._memo:
            if level.is_half:
                lower, upper = level.neighbours()
                self._memo[key] = average_percentiles(
                    self._pick(region, family_code, lower),
                    self._pick(region, family_code, upper),
                )
            else:
                self._memo[key] = self._pick_whole(region, family_code, level)
        return self._memo[key]

    def _pick_whole(self, region: Region, family_code: FamilyCode, level: ParsedLevel) -> Percentiles:
        token = self.levels.token_for(level)
        if not token:
            return {}

        for candidate in self.aliases.resolve(family_code):
            found = self.index.lookup(region, candidate, token, level.base)
            if found:
                if candidate != family_code:
                    logger.debug("Resolved %s %s via alias %s", family_code, level.label, candidate)
                return found
        return {}
