"""
Tests for catchphrases and best time to text
"""

from chatquant.pipeline import analyze

from conftest import BASE_MS, DAY, HOUR, MINUTE, conversation, msg


def test_catchphrases_rank_by_count_and_uniqueness():
    """Test repeated, mostly-own phrases qualify and shared ones lose weight."""
    messages = [msg("Alice", BASE_MS + i * 2 * MINUTE, "that is wild honestly mate") for i in range(5)]
    messages.append(msg("Bob", BASE_MS + 20 * MINUTE, "honestly mate i agree"))
    result = analyze(conversation(messages))

    alice = result.catchphrases["Alice"]
    assert [c.phrase for c in alice] == ["wild honestly", "wild honestly mate", "honestly mate"]
    assert alice[2].count == 5
    assert alice[2].uniqueness == 0.83
    assert result.catchphrases["Bob"] == ()

    badges = {b.id: b for b in result.badges}
    assert badges["catchphrase"].holder == "Alice"
    assert badges["catchphrase"].evidence == '"wild honestly" 5 times'


def test_best_time_to_text():
    """Test the busiest weekday hour becomes a two-hour window."""
    wednesday_evening = BASE_MS + 2 * DAY + 21 * HOUR
    messages = [
        msg("Alice", wednesday_evening, "hey"),
        msg("Bob", wednesday_evening + 5 * MINUTE, "hey you"),
        msg("Alice", wednesday_evening + 10 * MINUTE, "dinner?"),
        msg("Bob", wednesday_evening + 15 * MINUTE, "sure"),
        msg("Alice", wednesday_evening + 20 * MINUTE, "great"),
        msg("Alice", BASE_MS + 9 * HOUR, "morning"),
    ]
    messages.sort(key=lambda m: m.timestamp_ms)
    best = analyze(conversation(messages, participants=["Alice", "Bob", "Carol"])).best_time_to_text

    assert best["Alice"].day == "Wednesday"
    assert best["Alice"].hour == 21
    assert best["Alice"].window == "Wednesdays 21:00-23:00"
    assert best["Alice"].median_response_ms == 5 * MINUTE
    assert best["Carol"] is None


def test_empty_conversation_has_no_phrases_or_times():
    """Test both are None without messages."""
    result = analyze(conversation([], participants=["Alice", "Bob"]))
    assert result.catchphrases is None
    assert result.best_time_to_text is None
