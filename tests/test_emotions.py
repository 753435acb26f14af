"""
Tests for emotional granularity and intimacy progression
"""

import pytest

from chatquant.emotions import (
    compute_emotional_granularity,
    compute_intimacy_progression,
    granularity_score,
    intimacy_label,
)

from conftest import BASE_MS, DAY, HOUR, MINUTE, alternating, context

BOB_TEXT = "i am happy with the plan for the weekend"


def test_granularity_score():
    """Test diversity and coverage parts of the score."""
    assert granularity_score(6, 20, 200) == 65
    assert granularity_score(0, 0, 0) == 0


def test_granularity_rewards_distinct_categories():
    """Test naming many emotion categories beats repeating one."""
    texts = (
        "today i feel really happy about everything here", BOB_TEXT,
        "honestly i am so worried about the exam tomorrow", BOB_TEXT,
        "feeling quite lonely in this empty flat tonight", BOB_TEXT,
        "so proud that the project finally shipped", BOB_TEXT,
    )
    result = compute_emotional_granularity(context(alternating(120, texts=texts)))

    alice = result.per_person["Alice"]
    bob = result.per_person["Bob"]
    assert alice.distinct_categories == 4
    assert alice.score == 53
    assert alice.cooccurrence_index == 0.0
    assert alice.dominant_category in {"loneliness", "pride"}
    assert bob.category_counts == {"joy": 60}
    assert result.higher_granularity == "Alice"


def test_granularity_penalizes_mixed_messages():
    """Test several categories in every message lower the adjusted score."""
    texts = ("i am happy but also so worried about it today", BOB_TEXT)
    alice = compute_emotional_granularity(context(alternating(120, texts=texts))).per_person["Alice"]

    assert alice.cooccurrence_index == 1.0
    assert alice.score == 42
    assert alice.adjusted_score == 29


def test_granularity_needs_words():
    """Test None below the word minimum."""
    assert compute_emotional_granularity(context(alternating(20))) is None


def test_intimacy_labels():
    """Test slope thresholds."""
    assert intimacy_label(3) == "growing_closer"
    assert intimacy_label(1) == "slowly_closer"
    assert intimacy_label(0) == "stable"
    assert intimacy_label(-1) == "slowly_drifting"
    assert intimacy_label(-3) == "drifting_apart"


def test_intimacy_growing_closer():
    """Test longer, warmer, late-night messages raise the monthly score."""
    january = alternating(10, start_ms=BASE_MS + 12 * HOUR, texts=("ok sounds fine",))
    february = alternating(
        10, start_ms=BASE_MS + 40 * DAY + 23 * HOUR, gap_ms=MINUTE,
        texts=("i love you so much and miss you already! ❤️",),
    )
    result = compute_intimacy_progression(context(january + february))

    assert [p.month for p in result.points] == ["2024-01", "2024-02"]
    assert result.points[0].message_length_factor == 30
    assert result.points[0].late_night_factor == 0
    assert result.points[1].score == 100
    assert result.slope == pytest.approx(result.points[1].score - result.points[0].score)
    assert result.label == "growing_closer"


def test_intimacy_needs_two_months():
    """Test None for a single month."""
    assert compute_intimacy_progression(context(alternating(10))) is None
