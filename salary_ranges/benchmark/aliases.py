"""Job-family code aliasing.

Survey vendors occasionally rename family codes. A single ``old → new``
entry makes both codes interchangeable: looking up either one yields the
candidates ``[code, forward(code), reverse(code)]``.
"""

import logging

import pandas as pd

from salary_ranges.utils.types import FamilyCode

logger = logging.getLogger(__name__)


def normalize_code(code: object) -> FamilyCode:
    if not isinstance(code, str):
        return ""
    return code.strip().upper()


class FamilyAliasResolver:
    def __init__(
        self,
        aliases: list[tuple[str, str]] | None = None,
        seed: dict[str, str] | None = None,
    ) -> None:
        self._forward: dict[FamilyCode, FamilyCode] = {}
        self._reverse: dict[FamilyCode, FamilyCode] = {}

        pairs = list(aliases or []) + list((seed or {}).items())
        for old, new in pairs:
            old, new = normalize_code(old), normalize_code(new)
            if not old or not new or old == new:
                continue
            # First entry wins in both directions
            self._forward.setdefault(old, new)
            self._reverse.setdefault(new, old)

    @classmethod
    def from_frame(cls, df: pd.DataFrame | None, seed: dict[str, str] | None = None) -> "FamilyAliasResolver":
        if df is None or df.empty:
            return cls([], seed=seed)
        resolver = cls(list(zip(df["from_code"], df["to_code"])), seed=seed)
        logger.info("Loaded %d family code aliases", len(resolver))
        return resolver

    def forward(self, code: FamilyCode) -> FamilyCode | None:
        return self._forward.get(normalize_code(code))

    def reverse(self, code: FamilyCode) -> FamilyCode | None:
        return self._reverse.get(normalize_code(code))

    def resolve(self, code: object) -> list[FamilyCode]:
        """Candidate codes to probe, in order: as given, forward, reverse."""
        code = normalize_code(code)
        candidates = [code, self._forward.get(code), self._reverse.get(code)]
        return list(dict.fromkeys(c for c in candidates if c))

    @property
    def pairs(self) -> list[tuple[FamilyCode, FamilyCode]]:
        return sorted(self._forward.items())

    def __len__(self) -> int:
        return len(self._forward)
