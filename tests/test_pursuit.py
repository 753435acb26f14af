"""
Tests for pursuit-withdrawal detection
"""

from dataclasses import replace

import pytest

from chatquant.context import AnalysisContext
from chatquant.models import ConversationMetadata
from chatquant.pursuit import detect_pursuit_withdrawal, has_demand_marker

from conftest import BASE_MS, DAY, HOUR, MINUTE, context, conversation, msg


def _volley(sender, start_ms, texts, gap_ms=5 * MINUTE):
    return [msg(sender, start_ms + i * gap_ms, t) for i, t in enumerate(texts)]


def test_single_cycle():
    """Test six unanswered messages then a 5 hour silence is one cycle."""
    messages = _volley("Alice", BASE_MS, ["hey"] * 6)
    messages.append(msg("Bob", BASE_MS + 25 * MINUTE + 5 * HOUR, "sorry, was busy"))
    result = detect_pursuit_withdrawal(context(messages))

    assert result.cycle_count == 1
    assert result.pursuer == "Alice"
    assert result.withdrawer == "Bob"
    cycle = result.cycles[0]
    assert cycle.pursuit_message_count == 6
    assert cycle.withdrawal_duration_ms == 5 * HOUR
    assert cycle.resolved is True
    assert result.avg_withdrawal_ms == pytest.approx(5 * HOUR)


def test_short_volley_needs_demand_marker():
    """Test four messages count only with a demand marker."""
    plain = _volley("Alice", BASE_MS, ["hey", "so", "anyway", "yeah"])
    plain.append(msg("Bob", BASE_MS + 6 * HOUR, "hi"))
    assert detect_pursuit_withdrawal(context(plain)).cycle_count == 0

    demanding = _volley("Alice", BASE_MS, ["hey", "so", "hello?", "answer me"])
    demanding.append(msg("Bob", BASE_MS + 6 * HOUR, "hi"))
    result = detect_pursuit_withdrawal(context(demanding))
    assert result.cycle_count == 1
    assert result.cycles[0].has_demand_marker is True


def test_quick_messages_merge_into_one_logical_message():
    """Test that rapid-fire messages under 2 minutes apart count once."""
    messages = _volley("Alice", BASE_MS, ["a", "b", "c", "d", "e", "f"], gap_ms=30 * 1000)
    messages.append(msg("Bob", BASE_MS + 6 * HOUR, "hi"))
    assert detect_pursuit_withdrawal(context(messages)).cycle_count == 0


def test_short_silence_is_not_withdrawal():
    """Test that a reply within 4 hours breaks the cycle."""
    messages = _volley("Alice", BASE_MS, ["hey"] * 6)
    messages.append(msg("Bob", BASE_MS + 2 * HOUR, "here"))
    assert detect_pursuit_withdrawal(context(messages)).cycle_count == 0


def test_mutual_pursuit():
    """Test even cycle counts make the roles mutual."""
    messages = []
    for k, (pursuer, other) in enumerate([("Alice", "Bob"), ("Bob", "Alice")]):
        start = BASE_MS + k * 2 * DAY
        messages += _volley(pursuer, start, ["hey"] * 6)
        messages.append(msg(other, start + 10 * HOUR, "hi"))
    result = detect_pursuit_withdrawal(context(messages))

    assert result.cycle_count == 2
    assert result.pursuer == "mutual"
    assert result.cycles_by_pursuer == {"Alice": 1, "Bob": 1}


def test_no_pair():
    """Test None for a one-person conversation."""
    assert detect_pursuit_withdrawal(context(_volley("Alice", BASE_MS, ["hey"] * 6))) is None


def test_demand_marker_punctuation():
    """Test a bare question mark is a demand."""
    assert has_demand_marker([msg("Alice", BASE_MS, "??")])
    assert not has_demand_marker([msg("Alice", BASE_MS, "how are you")])


def test_unanswered_final_volley_counts():
    """Test a volley that ends the conversation is an unresolved cycle."""
    messages = [msg("Bob", BASE_MS, "talk later")]
    messages += _volley("Alice", BASE_MS + HOUR, ["hey"] * 6)
    result = detect_pursuit_withdrawal(context(messages))

    assert result.cycle_count == 1
    cycle = result.cycles[0]
    assert cycle.pursuer == "Alice"
    assert cycle.resolved is False
    assert cycle.withdrawal_duration_ms is None
    assert result.avg_withdrawal_ms is None


def test_unanswered_final_volley_measured_to_export_end():
    """Test the export end bounds the silence after a final volley."""
    messages = [msg("Bob", BASE_MS, "talk later")]
    messages += _volley("Alice", BASE_MS + HOUR, ["hey"] * 6)
    last_ms = messages[-1].timestamp_ms
    convo = replace(
        conversation(messages),
        metadata=ConversationMetadata(date_range_start=BASE_MS, date_range_end=last_ms + DAY),
    )
    result = detect_pursuit_withdrawal(AnalysisContext(convo))

    assert result.cycles[0].withdrawal_duration_ms == DAY
    assert result.avg_withdrawal_ms == pytest.approx(DAY)

    short = replace(convo, metadata=ConversationMetadata(date_range_end=last_ms + HOUR))
    assert detect_pursuit_withdrawal(AnalysisContext(short)).cycle_count == 0
