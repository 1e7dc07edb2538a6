import pandas as pd

from salary_ranges.benchmark.aliases import FamilyAliasResolver, normalize_code


def test_normalize_code():
    assert normalize_code("  en.sode ") == "EN.SODE"
    assert normalize_code(None) == ""


def test_resolve_is_symmetric():
    resolver = FamilyAliasResolver([("TE.OLDC", "TE.NEWC")])
    assert resolver.resolve("TE.OLDC") == ["TE.OLDC", "TE.NEWC"]
    assert resolver.resolve("te.newc") == ["TE.NEWC", "TE.OLDC"]


def test_unaliased_code_resolves_to_itself():
    resolver = FamilyAliasResolver([("TE.OLDC", "TE.NEWC")])
    assert resolver.resolve("SA.ACCM") == ["SA.ACCM"]
    assert resolver.resolve("") == []


def test_first_entry_wins():
    resolver = FamilyAliasResolver([("A.OLD", "A.NEW"), ("A.OLD", "A.OTHER")])
    assert resolver.forward("A.OLD") == "A.NEW"
    assert resolver.reverse("A.OTHER") == "A.OLD"


def test_table_entries_take_precedence_over_seed():
    resolver = FamilyAliasResolver([("EN.SWEN", "EN.DEVS")], seed={"EN.SWEN": "EN.SODE"})
    assert resolver.forward("EN.SWEN") == "EN.DEVS"
    # The seed still contributes its reverse direction
    assert resolver.reverse("EN.SODE") == "EN.SWEN"


def test_blank_and_self_aliases_are_ignored():
    resolver = FamilyAliasResolver([("", "X.ONE"), ("X.TWO", "x.two"), ("X.THREE", None)])
    assert len(resolver) == 0
    assert resolver.pairs == []


def test_from_frame_with_seed():
    df = pd.DataFrame({"from_code": ["TE.OLDC"], "to_code": ["TE.NEWC"]})
    resolver = FamilyAliasResolver.from_frame(df, seed={"EN.SWEN": "EN.SODE"})
    assert resolver.pairs == [("EN.SWEN", "EN.SODE"), ("TE.OLDC", "TE.NEWC")]


def test_from_empty_frame_uses_seed_only():
    resolver = FamilyAliasResolver.from_frame(pd.DataFrame(), seed={"EN.SWEN": "EN.SODE"})
    assert resolver.resolve("EN.SODE") == ["EN.SODE", "EN.SWEN"]
