"""
Tests for the end-to-end analysis pipeline
"""

import pytest

from chatquant.cache import AnalysisCache
from chatquant.pipeline import analyze

from conftest import BASE_MS, MINUTE, alternating, conversation, dict_message, msg


def test_analyze_full_conversation(rich_messages):
    """Test that a long conversation fills every section."""
    result = analyze(conversation(rich_messages))

    assert result.total_messages == 360
    assert result.participants == ("Alice", "Bob")
    assert result.pair == ("Alice", "Bob")
    assert result.per_person["Alice"].total_messages == 180
    assert result.reciprocity is not None
    assert result.health_score is not None
    assert result.chronotype is not None
    assert len(result.threat_meters) == 4
    assert len(result.ranking_percentiles) == 4
    assert len(result.patterns.monthly_volume) == 4


def test_analyze_mapping_counts_skipped():
    """Test analyzing a JSON-shaped mapping with malformed entries."""
    data = {
        "participants": ["Alice", "Bob"],
        "messages": [
            dict_message("Alice", BASE_MS, "hey"),
            {"sender": "Bob"},
            dict_message("Bob", BASE_MS + MINUTE, "hello"),
        ],
    }
    result = analyze(data)
    assert result.total_messages == 2
    assert result.skipped_messages == 1


def test_analyze_rejects_other_types():
    """Test a clear error for unsupported input."""
    with pytest.raises(TypeError):
        analyze([dict_message("Alice", BASE_MS)])


def test_group_chat_uses_top_pair():
    """Test pairwise metrics use the two most active people in a group."""
    messages = alternating(30, senders=("Alice", "Bob", "Carol"))
    messages += alternating(10, start_ms=BASE_MS + 200 * MINUTE, senders=("Bob", "Carol"))
    result = analyze(conversation(messages))

    assert result.pair == ("Bob", "Carol")
    assert set(result.per_person) == {"Alice", "Bob", "Carol"}
    assert result.reciprocity.pair == ("Bob", "Carol")


def test_empty_conversation():
    """Test that an empty conversation produces an empty analysis."""
    result = analyze(conversation([], participants=["Alice", "Bob"]))

    assert result.total_messages == 0
    assert result.pair is None
    assert result.timing.longest_silence is None
    assert result.conflicts.total_conflicts == 0
    assert result.health_score is None
    assert result.ranking_percentiles is None
    assert result.badges == ()


def test_single_participant():
    """Test that pairwise metrics are absent with one sender."""
    messages = [msg("Alice", BASE_MS + i * MINUTE, "note to self") for i in range(40)]
    result = analyze(conversation(messages))

    assert result.pair is None
    assert result.reciprocity is None
    assert result.pursuit_withdrawal is None
    assert result.viral_scores is None
    assert result.per_person["Alice"].total_messages == 40


def test_cache_reused_across_calls(symmetric_messages):
    """Test a shared cache serves repeated text from memory."""
    cache = AnalysisCache()
    first = analyze(conversation(symmetric_messages), cache=cache)
    hits_before = cache.stats()["hits"]
    second = analyze(conversation(symmetric_messages), cache=cache)

    assert cache.stats()["hits"] > hits_before
    assert first.sentiment.overall_average == second.sentiment.overall_average


def test_result_mappings_are_read_only(rich_messages):
    """Test nested per-person mappings cannot be changed after analysis."""
    result = analyze(conversation(rich_messages))

    with pytest.raises(TypeError):
        result.per_person["Mallory"] = result.per_person["Alice"]
    with pytest.raises(TypeError):
        result.patterns.weekday_weekend["Alice"]["weekday"] = 0
    assert dict(result.engagement.double_texts) == result.engagement.double_texts
