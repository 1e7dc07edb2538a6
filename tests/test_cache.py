import pandas as pd
import pytest

from salary_ranges.utils.cache import FingerprintCache, fingerprint_frames


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return FingerprintCache(ttl_seconds=600, clock=clock)


def test_fingerprint_is_content_based():
    df = pd.DataFrame({"a": [1, 2], "b": ["x", "y"]})
    assert fingerprint_frames(df) == fingerprint_frames(df.copy())
    assert fingerprint_frames(df) != fingerprint_frames(df.assign(a=[1, 3]))
    assert fingerprint_frames(df) != fingerprint_frames(df.rename(columns={"a": "c"}))
    assert fingerprint_frames(df) != fingerprint_frames(df, salt="options")


def test_fingerprint_of_empty_and_missing_frames():
    assert fingerprint_frames(pd.DataFrame()) != fingerprint_frames(None)


def test_hit_within_ttl(cache, clock):
    calls = []

    def build():
        calls.append(1)
        return object()

    first = cache.get_or_build("index", "abc", build)
    clock.now = 599.0
    second = cache.get_or_build("index", "abc", build)

    assert first is second
    assert len(calls) == 1
    assert (cache.hits, cache.misses) == (1, 1)


def test_entries_expire_after_ttl(cache, clock):
    first = cache.get_or_build("index", "abc", object)
    clock.now = 600.0
    second = cache.get_or_build("index", "abc", object)

    assert first is not second
    assert cache.misses == 2


def test_kinds_and_fingerprints_are_separate(cache):
    a = cache.get_or_build("index", "abc", object)
    b = cache.get_or_build("stats", "abc", object)
    c = cache.get_or_build("index", "def", object)
    assert len({id(a), id(b), id(c)}) == 3
    assert len(cache) == 3


def test_expired_entries_are_evicted(cache, clock):
    cache.get_or_build("index", "abc", object)
    clock.now = 700.0
    cache.get_or_build("index", "def", object)
    assert len(cache) == 1


def test_invalidate(cache):
    cache.get_or_build("index", "abc", object)
    cache.get_or_build("stats", "abc", object)

    cache.invalidate("index")
    assert len(cache) == 1
    cache.invalidate()
    assert len(cache) == 0
