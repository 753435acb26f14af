"""
Tests for conflict detection and fingerprinting
"""

from chatquant.accumulator import accumulate
from chatquant.conflicts import (
    _dedupe,
    classify_escalation_style,
    conflict_fingerprint,
    conflict_windows,
    detect_conflicts,
    find_spikes,
)
from chatquant.models import ConflictEvent
from chatquant.timing import analyze_timing

from conftest import BASE_MS, DAY, HOUR, MINUTE, context, msg

LONG = "this is a long message with plenty of words in it"
SHORT = "ok sure"


def _prepared(messages):
    ctx = context(messages)
    accumulate(ctx)
    analyze_timing(ctx)
    return ctx


def _block(start_ms, n=10, text=LONG):
    return [msg("Alice" if i % 2 == 0 else "Bob", start_ms + i * 5 * MINUTE, text) for i in range(n)]


def _event(ts, kind="escalation"):
    return ConflictEvent(
        type=kind, timestamp_ms=ts, date="2024-01-01", participants=("Alice", "Bob"),
        severity=2, message_range=(0, 1), description="", accusatory=False,
    )


def test_cold_silence_and_resolution():
    """Test an intense exchange, a 4-day silence and a calmer restart."""
    messages = _block(BASE_MS) + _block(BASE_MS + DAY)
    messages += [
        msg("Alice", BASE_MS + 5 * DAY, "hey"),
        msg("Bob", BASE_MS + 5 * DAY + MINUTE, "hi there"),
        msg("Alice", BASE_MS + 5 * DAY + 2 * MINUTE, "sorry"),
    ]
    analysis = detect_conflicts(_prepared(messages))

    kinds = [e.type for e in analysis.events]
    assert kinds == ["cold_silence", "resolution"]
    assert analysis.total_conflicts == 1
    silence = analysis.events[0]
    assert silence.severity == 3
    assert silence.message_range == (19, 20)
    assert set(silence.participants) == {"Alice", "Bob"}


def test_quiet_exchange_before_silence_is_not_conflict():
    """Test that a silence after a slow exchange is not a cold silence."""
    messages = [msg("Alice" if i % 2 else "Bob", BASE_MS + i * HOUR, LONG) for i in range(22)]
    messages.append(msg("Alice", BASE_MS + 30 * DAY, "hey"))
    analysis = detect_conflicts(_prepared(messages))
    assert analysis.total_conflicts == 0


def test_escalation_detected():
    """Test two length spikes from different senders within 15 minutes."""
    messages = _block(BASE_MS, n=10, text=SHORT)
    ts = BASE_MS + 10 * 5 * MINUTE
    messages += [
        msg("Alice", ts, "you never listen to me and it is always the same with you"),
        msg("Bob", ts + 3 * MINUTE, "that is not true and you know it, i always try to listen"),
    ]
    messages += _block(ts + 10 * MINUTE, n=10, text=SHORT)
    ctx = _prepared(messages)

    assert find_spikes(ctx) == [10, 11]
    analysis = detect_conflicts(ctx)
    assert analysis.total_conflicts == 1
    event = analysis.events[0]
    assert event.type == "escalation"
    assert event.participants == ("Alice", "Bob")
    assert event.accusatory is True
    assert analysis.accusatory_messages["Alice"] == 1
    assert analysis.most_conflict_prone == "Alice"


def test_short_conversation_skipped():
    """Test that tiny conversations yield an empty analysis."""
    analysis = detect_conflicts(_prepared(_block(BASE_MS, n=6)))
    assert analysis.events == ()
    assert analysis.total_conflicts == 0


def test_dedupe_within_four_hours():
    """Test events within 4 hours collapse into the first."""
    events = [_event(BASE_MS), _event(BASE_MS + HOUR, "cold_silence"), _event(BASE_MS + 5 * HOUR)]
    kept = _dedupe(events)
    assert [e.timestamp_ms for e in kept] == [BASE_MS, BASE_MS + 5 * HOUR]


def test_conflict_windows_merge():
    """Test padded windows merge when they overlap."""
    events = [
        ConflictEvent("escalation", 0, "", ("A",), 2, (40, 41), "", False),
        ConflictEvent("escalation", 0, "", ("A",), 2, (60, 61), "", False),
        ConflictEvent("escalation", 0, "", ("A",), 2, (200, 201), "", False),
    ]
    assert conflict_windows(events, 300) == [(10, 91), (170, 231)]


def test_classify_escalation_style():
    """Test escalation style buckets."""
    assert classify_escalation_style(1.5, 4, 0.0, 0.0) == "direct"
    assert classify_escalation_style(1.0, 1, 0.3, 0.0) == "passive_aggressive"
    assert classify_escalation_style(1.0, 1, 0.0, 0.5) == "withdrawal"
    assert classify_escalation_style(1.0, 1, 0.0, 0.0) == "mixed"
    assert classify_escalation_style(1.5, 4, 0.3, 0.0) == "mixed"


def test_fingerprint_needs_three_conflicts():
    """Test the fingerprint minimum."""
    messages = _block(BASE_MS) + _block(BASE_MS + DAY) + [msg("Alice", BASE_MS + 5 * DAY, "hey")]
    ctx = _prepared(messages)
    assert conflict_fingerprint(ctx, detect_conflicts(ctx)) is None


def test_fingerprint_profiles():
    """Test per-person profiles after three cold silences."""
    messages = []
    for k in range(3):
        messages += _block(BASE_MS + k * 5 * DAY)
    end = BASE_MS + 15 * DAY
    messages += [
        msg("Alice", end, "sorry about that"),
        msg("Bob", end + MINUTE, "haha fine"),
        msg("Alice", end + 2 * MINUTE, "love you"),
        msg("Bob", end + 3 * MINUTE, "lol you too"),
    ]
    ctx = _prepared(messages)
    analysis = detect_conflicts(ctx)
    assert analysis.total_conflicts == 3

    fingerprint = conflict_fingerprint(ctx, analysis)
    assert fingerprint.total_conflict_windows == 1
    assert set(fingerprint.per_person) == {"Alice", "Bob"}
    assert fingerprint.per_person["Alice"].deescalation_style == "apologize"
    assert fingerprint.per_person["Bob"].deescalation_style == "humor"
    assert fingerprint.per_person["Alice"].escalation_style in {
        "direct", "passive_aggressive", "withdrawal", "mixed",
    }


def _three_silences(start_ms):
    messages = []
    for k in range(3):
        messages += _block(start_ms + k * 5 * DAY)
    return messages


def test_fingerprint_deflection():
    """Test deflecting phrases at the end of a conflict window."""
    messages = _three_silences(BASE_MS)
    end = BASE_MS + 15 * DAY
    messages += [
        msg("Alice", end, "can we not do this right now"),
        msg("Bob", end + 5 * MINUTE, "whatever you say"),
        msg("Alice", end + 10 * MINUTE, "fine"),
        msg("Bob", end + 15 * MINUTE, "ok"),
    ]
    ctx = _prepared(messages)
    fingerprint = conflict_fingerprint(ctx, detect_conflicts(ctx))

    assert fingerprint.per_person["Alice"].deescalation_style == "deflect"
    assert fingerprint.per_person["Bob"].deescalation_style == "deflect"


def test_fingerprint_ghosting_from_slow_replies():
    """Test replies far slower than the person's own baseline read as ghosting."""
    # Quick one-minute exchange outside any conflict window sets the baseline
    messages = [
        msg("Alice" if i % 2 == 0 else "Bob", BASE_MS + i * MINUTE, LONG) for i in range(40)
    ]
    messages += _three_silences(BASE_MS + DAY)
    end = BASE_MS + 16 * DAY
    messages += [
        msg("Alice", end, "sorry about that"),
        msg("Bob", end + 5 * MINUTE, "hm"),
    ]
    ctx = _prepared(messages)
    fingerprint = conflict_fingerprint(ctx, detect_conflicts(ctx))

    assert fingerprint.total_conflict_windows == 1
    assert fingerprint.per_person["Alice"].deescalation_style == "apologize"
    assert fingerprint.per_person["Bob"].deescalation_style == "ghost"
    assert fingerprint.per_person["Bob"].response_time_shift_ms > 0
