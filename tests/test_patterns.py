"""
Tests for bursts, reciprocity, bids and chronotype
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.patterns import (
    chronotype_category,
    chronotype_match_score,
    circular_distance,
    circular_mean_hour,
    compute_bid_response,
    compute_chronotype,
    compute_reciprocity,
    detect_bursts,
    is_bid,
    is_dismissive,
)
from chatquant.timing import analyze_timing

from conftest import BASE_MS, DAY, HOUR, MINUTE, alternating, context, msg


def _timed(messages):
    ctx = context(messages)
    accumulate(ctx)
    timing, _ = analyze_timing(ctx)
    return ctx, timing


# ============================================================================
# BURSTS
# ============================================================================

def test_single_burst_day():
    """Test a 200-message day in a 20/day baseline is exactly one burst."""
    messages = []
    for day in range(30):
        count = 200 if day == 15 else 20
        for i in range(count):
            sender = "Alice" if i % 2 == 0 else "Bob"
            messages.append(msg(sender, BASE_MS + day * DAY + 8 * HOUR + i * MINUTE))
    bursts = detect_bursts(context(messages))

    assert len(bursts) == 1
    assert bursts[0].start_date == "2024-01-16"
    assert bursts[0].days == 1
    assert bursts[0].message_count == 200
    assert bursts[0].baseline_mean == pytest.approx(20.0)


def test_no_bursts_in_flat_activity():
    """Test steady volume produces no bursts."""
    messages = [msg("Alice", BASE_MS + d * DAY) for d in range(20)]
    assert detect_bursts(context(messages)) == ()


# ============================================================================
# RECIPROCITY
# ============================================================================

def test_symmetric_reciprocity(symmetric_messages):
    """Test a perfectly symmetric conversation scores 50."""
    ctx, timing = _timed(symmetric_messages)
    recip = compute_reciprocity(ctx, timing)

    assert recip.overall == pytest.approx(50.0)
    assert recip.message_balance == pytest.approx(50.0)
    assert recip.initiation_balance == pytest.approx(50.0)
    assert recip.response_time_symmetry == pytest.approx(50.0)
    assert recip.reaction_balance == pytest.approx(50.0)
    assert recip.neutral_components == ()


def test_reciprocity_without_reactions_is_neutral():
    """Test a conversation with no reactions marks reaction balance as neutral."""
    ctx, timing = _timed(alternating(40, gap_ms=3 * MINUTE))
    recip = compute_reciprocity(ctx, timing)

    assert recip.reaction_balance == pytest.approx(50.0)
    assert recip.neutral_components == ("reaction_balance",)


def test_one_sided_reciprocity():
    """Test that A carrying the conversation pushes the index above 50."""
    messages = []
    for i in range(40):
        messages.append(msg("Alice", BASE_MS + i * DAY, "hey"))
        messages.append(msg("Alice", BASE_MS + i * DAY + MINUTE, "you there"))
        if i % 4 == 0:
            messages.append(msg("Bob", BASE_MS + i * DAY + 30 * MINUTE, "yeah"))
    ctx, timing = _timed(messages)
    recip = compute_reciprocity(ctx, timing)
    assert recip.overall > 50
    assert recip.initiation_balance == pytest.approx(100.0)


def test_reciprocity_needs_messages():
    """Test the minimum message count."""
    ctx, timing = _timed(alternating(10))
    assert compute_reciprocity(ctx, timing) is None


# ============================================================================
# BIDS
# ============================================================================

def test_is_bid():
    """Test bid classification."""
    assert is_bid("how was your day?")
    assert is_bid("guess what happened today")
    assert is_bid("let's watch a movie")
    assert is_bid("look", has_link=True)
    assert not is_bid("i went to work")


def test_is_dismissive_whole_message():
    """Test dismissive replies match the whole message only."""
    assert is_dismissive("ok")
    assert is_dismissive("Whatever.")
    assert not is_dismissive("ok let's go then")


def test_bid_response():
    """Test turned-toward and turned-away counting."""
    messages = []
    for i in range(12):
        ts = BASE_MS + i * HOUR
        messages.append(msg("Alice", ts, "how was your day?"))
        reply = "it was lovely, thanks for asking" if i < 9 else "k"
        messages.append(msg("Bob", ts + 2 * MINUTE, reply))
    bids = compute_bid_response(context(messages))

    assert bids.total_bids == 12
    assert bids.turned_toward == 9
    assert bids.overall_rate == pytest.approx(0.75)
    assert bids.per_person["Alice"].success_rate == pytest.approx(0.75)
    assert bids.per_person["Bob"].bids_received == 12
    assert bids.per_person["Bob"].response_rate == pytest.approx(0.75)


def test_bid_response_needs_bids():
    """Test None under the minimum bid count."""
    assert compute_bid_response(context(alternating(10))) is None


# ============================================================================
# CHRONOTYPE
# ============================================================================

def _hours_messages(sender, hours, days=10):
    return [
        msg(sender, BASE_MS + d * DAY + int(h * HOUR))
        for d in range(days)
        for h in hours
    ]


def test_circular_mean_wraps_midnight():
    """Test the circular mean of 23:00 and 01:00 is midnight."""
    assert circular_distance(circular_mean_hour([23, 1]), 0.0) == pytest.approx(0.0, abs=1e-9)
    assert circular_mean_hour([]) is None
    assert circular_distance(22, 2) == pytest.approx(4.0)


def test_chronotype_categories():
    """Test category boundaries including post-midnight owls."""
    assert chronotype_category(1.5) == "night_owl"
    assert chronotype_category(21.0) == "night_owl"
    assert chronotype_category(7.0) == "early_bird"
    assert chronotype_category(14.0) == "intermediate"


def test_chronotype_match_falloff():
    """Test the cosine falloff."""
    assert chronotype_match_score(0.0) == pytest.approx(100.0)
    assert chronotype_match_score(3.0) == pytest.approx(50.0)
    assert chronotype_match_score(6.0) == pytest.approx(0.0, abs=1e-9)
    assert chronotype_match_score(10.0) == 0.0


def test_opposite_chronotypes():
    """Test evening versus morning people are about 10-14 hours apart."""
    messages = sorted(
        _hours_messages("Alice", [20, 21, 22, 23]) + _hours_messages("Bob", [6, 7, 8, 9]),
        key=lambda m: m.timestamp_ms,
    )
    chrono = compute_chronotype(context(messages, participants=["Alice", "Bob"]))

    assert 9.0 <= chrono.delta_hours <= 14.0
    assert chrono.match_score == pytest.approx(0.0, abs=1.0)
    assert chrono.persons[0].category == "night_owl"
    assert chrono.persons[1].category == "early_bird"


def test_identical_chronotypes():
    """Test identical hourly distributions score 100."""
    messages = []
    for d in range(10):
        for h in (9, 13, 18):
            messages.append(msg("Alice", BASE_MS + d * DAY + h * HOUR))
            messages.append(msg("Bob", BASE_MS + d * DAY + h * HOUR + MINUTE))
    chrono = compute_chronotype(context(messages))
    assert chrono.match_score == pytest.approx(100.0, abs=0.1)


def test_chronotype_needs_messages():
    """Test None below the per-person minimum."""
    assert compute_chronotype(context(alternating(10))) is None
