"""
Tests for badges and ranking percentiles
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.badges import compute_badges, format_duration, longest_daily_streaks
from chatquant.percentiles import EstimatedDistribution, compute_ranking_percentiles
from chatquant.timing import analyze_timing, build_heatmap

from conftest import BASE_MS, DAY, HOUR, MINUTE, context, msg


def _badges(messages):
    ctx = context(messages)
    accumulate(ctx)
    timing, engagement = analyze_timing(ctx)
    return {b.id: b for b in compute_badges(ctx, timing, engagement, build_heatmap(ctx))}


def test_format_duration():
    """Test human-readable durations."""
    assert format_duration(45_000) == "45s"
    assert format_duration(5 * MINUTE) == "5m"
    assert format_duration(2 * HOUR + 30 * MINUTE) == "2h 30m"
    assert format_duration(3 * HOUR) == "3h"
    assert format_duration(3 * DAY) == "3 days"


def test_night_owl_and_novelist():
    """Test badges go to the most extreme participant."""
    messages = []
    for d in range(5):
        messages.append(msg("Alice", BASE_MS + d * DAY + 23 * HOUR, "late again"))
        messages.append(msg("Bob", BASE_MS + d * DAY + 23 * HOUR + 2 * MINUTE,
                            "i am writing a much longer reply than you do every single time"))
    badges = _badges(messages)

    assert badges["night-owl"].holder in {"Alice", "Bob"}
    assert badges["novelist"].holder == "Bob"
    assert badges["ghost-champion"].holder == "Bob"


def test_heart_bomber_and_question_master():
    """Test reaction and question badges."""
    messages = [
        msg("Alice", BASE_MS, "are you free?", reactions=[("Bob", "❤️")]),
        msg("Bob", BASE_MS + MINUTE, "yes", reactions=[("Alice", "👍")]),
        msg("Alice", BASE_MS + 2 * MINUTE, "great, dinner?", reactions=[("Bob", "😍")]),
    ]
    badges = _badges(messages)
    assert badges["heart-bomber"].holder == "Bob"
    assert badges["heart-bomber"].evidence == "2 heart reactions"
    assert badges["question-master"].holder == "Alice"


def test_badge_without_data_is_not_awarded():
    """Test that nobody gets a badge for zero links."""
    badges = _badges([msg("Alice", BASE_MS), msg("Bob", BASE_MS + MINUTE)])
    assert "link-lord" not in badges


def test_longest_daily_streaks():
    """Test consecutive-day streaks."""
    messages = [msg("Alice", BASE_MS + d * DAY) for d in (0, 1, 2, 5, 6)]
    messages.append(msg("Bob", BASE_MS + 10 * DAY))
    ctx = context(messages)
    assert longest_daily_streaks(ctx) == {"Alice": 3, "Bob": 1}


def test_estimated_distribution():
    """Test log-normal percentiles around the median."""
    dist = EstimatedDistribution(median=100, sigma=1.0)
    assert dist.percentile(100) == pytest.approx(50.0)
    assert dist.percentile(1000) > 90
    assert dist.percentile(0) == 1.0

    lower_better = EstimatedDistribution(median=100, sigma=1.0, higher_is_better=False)
    assert lower_better.percentile(10) > 90


def test_ranking_percentiles():
    """Test the four ranked metrics."""
    messages = [msg("Alice" if i % 2 == 0 else "Bob", BASE_MS + i * 30 * 1000) for i in range(10)]
    ctx = context(messages)
    accumulate(ctx)
    timing, _ = analyze_timing(ctx)
    ranks = compute_ranking_percentiles(ctx, timing)

    assert [r.metric for r in ranks] == ["message_volume", "response_time", "ghost_frequency", "asymmetry"]
    assert all(1.0 <= r.percentile <= 99.0 for r in ranks)
    assert all(r.is_estimate for r in ranks)
    # Replies within a minute beat most conversations
    assert ranks[1].percentile > 90


def test_heart_bomber_counts_beyond_top_reactions():
    """Test hearts count even when they fall outside the top reaction list."""
    others = ["👍", "😂", "😮", "😢", "🔥", "👏", "🎉", "🙏", "💯", "👌", "🤔"]
    messages = []
    for i, e in enumerate(others):
        messages.append(msg("Alice", BASE_MS + i * 2 * MINUTE, "look", reactions=[("Bob", e), ("Bob", e)]))
        messages.append(msg("Bob", BASE_MS + i * 2 * MINUTE + MINUTE, "nice", reactions=[("Alice", "👍")]))
    messages.append(msg("Alice", BASE_MS + HOUR, "bye", reactions=[("Bob", "❤️")]))

    ctx = context(messages)
    summaries = accumulate(ctx)
    assert "❤️" not in dict(summaries["Bob"].top_reactions_given)
    assert summaries["Bob"].heart_reactions_given == 1

    timing, engagement = analyze_timing(ctx)
    badges = {b.id: b for b in compute_badges(ctx, timing, engagement, build_heatmap(ctx))}
    assert badges["heart-bomber"].holder == "Bob"
    assert badges["heart-bomber"].evidence == "1 heart reactions"
