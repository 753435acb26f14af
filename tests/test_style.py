"""
Tests for style and diversity metrics
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.style import (
    analyze_style,
    category_rates,
    compute_lsm,
    integrative_complexity,
    mtld,
    pronoun_stats,
    temporal_focus,
)
from chatquant.timing import analyze_timing

from conftest import BASE_MS, MINUTE, alternating, context

VOCAB = [
    "apple", "river", "stone", "cloud", "green", "house", "music", "paper", "light", "storm",
    "table", "train", "water", "field", "horse", "glass", "night", "sugar", "bread", "chair",
    "dream", "ocean", "tiger", "piano", "grape", "lemon", "candle", "forest", "garden", "window",
]


def _prepared(messages):
    ctx = context(messages)
    accumulate(ctx)
    analyze_timing(ctx)
    return ctx


def test_mtld_minimum_length():
    """Test MTLD needs enough words."""
    assert mtld(VOCAB[:10]) is None
    assert mtld((VOCAB * 20)[:600]) is not None


def test_mtld_length_invariance():
    """Test MTLD stays put when a repeating text doubles or quadruples."""
    base = mtld(VOCAB * 10)
    assert mtld(VOCAB * 20) == pytest.approx(base, rel=0.1)
    assert mtld(VOCAB * 40) == pytest.approx(base, rel=0.1)


def test_mtld_more_diverse_text_scores_higher():
    """Test that a richer vocabulary gives a higher MTLD."""
    poor = mtld(["yes", "no", "maybe"] * 100)
    rich = mtld(VOCAB * 10)
    assert rich > poor


def test_category_rates_per_thousand():
    """Test function-word category rates."""
    rates = category_rates(["the", "cat", "and", "the", "dog"])
    assert rates["articles"] == pytest.approx(400.0)
    assert rates["conjunctions"] == pytest.approx(200.0)
    assert category_rates([])["articles"] == 0.0


def test_english_i_is_not_a_conjunction():
    """Test the pronoun "I" only counts as a personal pronoun."""
    rates = category_rates(["i", "think", "i", "can"])
    assert rates["conjunctions"] == 0.0
    assert rates["personal_pronouns"] == pytest.approx(500.0)


def test_lsm_symmetric_conversation(symmetric_messages):
    """Test identical styles give LSM near 1 and no adapter."""
    lsm = compute_lsm(_prepared(symmetric_messages))
    assert lsm.overall >= 0.95
    assert lsm.pair == ("Alice", "Bob")
    assert lsm.adapter is None
    assert lsm.asymmetry == pytest.approx(0.0)


def test_lsm_needs_words():
    """Test LSM is None for short conversations."""
    assert compute_lsm(_prepared(alternating(10))) is None


def test_lsm_different_styles_lower():
    """Test different function-word profiles lower LSM."""
    a_text = "i think that we should go to the park and you can come with me"
    b_text = "really very always often still sometimes now then again already"
    messages = alternating(40, gap_ms=MINUTE, texts=[a_text, b_text])
    lsm = compute_lsm(_prepared(messages))
    assert lsm is None or lsm.overall < 0.95


def test_pronoun_stats():
    """Test I/we/you rates and the minimum word count."""
    assert pronoun_stats(["i", "love", "you"] * 10) is None
    stats = pronoun_stats(["i", "love", "you"] * 70)
    assert stats.i_rate == pytest.approx(1000 / 3)
    assert stats.you_rate == pytest.approx(1000 / 3)
    assert stats.we_rate == 0.0
    assert stats.i_you_ratio == pytest.approx(1.0)


def test_temporal_focus_prospective():
    """Test future markers make a prospective orientation."""
    focus = temporal_focus([["tomorrow", "we", "will", "go"]] * 130)
    assert focus.future_index == pytest.approx(1.0)
    assert focus.orientation == "prospective"
    assert temporal_focus([["tomorrow"]] * 10) is None


def test_temporal_focus_retrospective():
    """Test past markers make a retrospective orientation."""
    focus = temporal_focus([["yesterday", "we", "went", "out"]] * 130)
    assert focus.future_index == pytest.approx(0.0)
    assert focus.orientation == "retrospective"


def test_integrative_complexity():
    """Test differentiation and integration phrase density."""
    texts = [("2024-01", "however i see it differently")] + [("2024-01", "sounds good")] * 29
    ic = integrative_complexity(texts)
    assert ic.differentiation_count == 1
    assert ic.integration_count == 0
    assert ic.raw_score == pytest.approx(100 / 30)
    assert ic.score == pytest.approx(100 / 30 * 6.5)
    assert ic.example_phrases == ("however",)
    assert ic.trend is None
    assert integrative_complexity(texts[:10]) is None


def test_analyze_style_small_conversation():
    """Test that short conversations produce None metrics, not errors."""
    ctx = _prepared(alternating(6, start_ms=BASE_MS))
    style = analyze_style(ctx)
    assert style.mtld == {"Alice": None, "Bob": None}
    assert style.lsm is None
    assert style.pronouns["Alice"] is None
    assert style.integrative_complexity["Bob"] is None
