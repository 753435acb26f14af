"""
Tests for the analysis memo cache
"""

from chatquant.cache import AnalysisCache


def test_get_or_compute_memoizes(cache):
    """Test that the compute function runs once per key."""
    calls = []

    def compute():
        calls.append(1)
        return 0.8

    assert cache.get_or_compute("token_polarity", "love", compute) == 0.8
    assert cache.get_or_compute("token_polarity", "love", compute) == 0.8
    assert len(calls) == 1

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["namespaces"]["token_polarity"]["entries"] == 1


def test_namespaces_are_separate(cache):
    """Test the same key in two namespaces."""
    cache.set("token_polarity", "love", 0.9)
    cache.set("message_sentiment", "love", "scored")

    assert cache.get("token_polarity", "love") == 0.9
    assert cache.get("message_sentiment", "love") == "scored"
    assert len(cache) == 2


def test_get_default(cache):
    """Test missing key returns the default."""
    assert cache.get("token_polarity", "absent") is None
    assert cache.get("token_polarity", "absent", default=-1) == -1


def test_cached_none_is_a_hit(cache):
    """Test that a stored None is returned without recomputing."""
    calls = []
    cache.get_or_compute("token_polarity", "table", lambda: calls.append(1))
    cache.get_or_compute("token_polarity", "table", lambda: calls.append(1))
    assert len(calls) == 1


def test_clear_namespace(cache):
    """Test clearing one namespace leaves the other intact."""
    cache.set("token_polarity", "a", 1)
    cache.set("token_polarity", "b", 2)
    cache.set("message_sentiment", "a", 3)

    assert cache.clear("token_polarity") == 2
    assert cache.get("token_polarity", "a") is None
    assert cache.get("message_sentiment", "a") == 3

    assert cache.clear() == 1
    assert len(cache) == 0


def test_max_entries_evicts_oldest():
    """Test bounded cache eviction order."""
    cache = AnalysisCache(max_entries=2)
    cache.set("ns", "first", 1)
    cache.set("ns", "second", 2)
    cache.set("ns", "third", 3)

    assert len(cache) == 2
    assert cache.get("ns", "first") is None
    assert cache.get("ns", "third") == 3
