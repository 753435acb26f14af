"""
Tests for the lexical sentiment engine
"""

import pytest

from chatquant.sentiment import (
    LayeredLexicon,
    LexiconLayer,
    analyze_sentiment,
    build_default_lexicon,
    person_sentiment,
    score_message,
    volatility,
)

from conftest import BASE_MS, DAY, MINUTE, context, msg


def test_positive_and_negative_words():
    """Test basic valence."""
    assert score_message("I love you").score > 0
    assert score_message("this is terrible").score < 0


def test_negation_flips_sign():
    """Test negation yields opposite sign and comparable magnitude."""
    plain = score_message("I am happy")
    negated = score_message("I am not happy")
    assert plain.score > 0
    assert negated.score < 0
    assert abs(negated.score) == pytest.approx(abs(plain.score))


def test_negation_window_is_limited():
    """Test that a negation far before a word does not flip it."""
    result = score_message("not that i would ever say it but good")
    assert result.score > 0


def test_no_matched_tokens_is_none():
    """Test that unscorable text yields None rather than zero."""
    assert score_message("the table is brown") is None
    assert score_message("") is None
    assert score_message(None) is None


def test_elongated_words_match():
    """Test repeated letters collapse to the lexicon form."""
    assert score_message("loooove it").score == pytest.approx(score_message("love it").score)


def test_emoji_and_emoticons():
    """Test emoji and emoticon valence."""
    assert score_message("❤️").score > 0
    assert score_message("ok :(").score < 0


def test_polish_inflection():
    """Test Polish suffix stripping against base forms."""
    assert score_message("smutnego").score < 0


def test_layer_priority():
    """Test that the first layer wins for a shared token."""
    lexicon = LayeredLexicon([LexiconLayer("a", {"sick": 0.7}), LexiconLayer("b", {"sick": -0.5})])
    assert lexicon.lookup("sick") == 0.7
    assert build_default_lexicon().lookup("sick") < 0


def test_cache_namespaces(cache):
    """Test that scoring fills both memo namespaces."""
    score_message("I love this", cache=cache)
    score_message("I love this", cache=cache)
    namespaces = cache.stats()["namespaces"]
    assert namespaces["message_sentiment"]["hits"] == 1
    assert namespaces["token_polarity"]["entries"] >= 1


def test_lexicons_sharing_a_cache_do_not_collide(cache):
    """Test two lexicon configurations keep separate memo entries."""
    warm = LayeredLexicon([LexiconLayer("custom", {"storm": 0.6})])
    cold = LayeredLexicon([LexiconLayer("custom", {"storm": -0.6})])
    assert warm.fingerprint != cold.fingerprint

    assert score_message("storm tonight", lexicon=warm, cache=cache).score == pytest.approx(0.6)
    assert score_message("storm tonight", lexicon=cold, cache=cache).score == pytest.approx(-0.6)
    assert build_default_lexicon().fingerprint == build_default_lexicon().fingerprint


def test_volatility_minimum():
    """Test volatility needs at least three scores."""
    assert volatility([0.5, -0.5]) is None
    assert volatility([0.0, 0.5, 1.0]) == pytest.approx(0.0)
    assert volatility([0.5, -0.5, 0.5]) == pytest.approx(1.0)


def test_person_sentiment_ratios():
    """Test positive/negative/neutral split with the neutral band."""
    stats = person_sentiment([0.8, -0.6, 0.01, 0.5], [None])
    assert stats.positive_ratio == pytest.approx(0.5)
    assert stats.negative_ratio == pytest.approx(0.25)
    assert stats.neutral_ratio == pytest.approx(0.25)
    assert stats.trend_slope is None
    assert person_sentiment([], []) is None


def test_analyze_sentiment_per_person():
    """Test per-person aggregation and monthly series."""
    ctx = context([
        msg("Alice", BASE_MS, "I love this"),
        msg("Bob", BASE_MS + MINUTE, "I hate this"),
        msg("Alice", BASE_MS + 40 * DAY, "great news"),
        msg("Bob", BASE_MS + 40 * DAY + MINUTE, "the table"),
    ])
    analysis, series = analyze_sentiment(ctx)

    assert analysis.scored_messages == 3
    assert analysis.unscored_messages == 1
    assert analysis.per_person["Alice"].average > 0
    assert analysis.per_person["Bob"].average < 0
    assert len(ctx.message_sentiments) == 4
    assert ctx.message_sentiments[3] is None
    assert [p.month for p in series] == ["2024-01", "2024-02"]
    assert series[1].per_person["Bob"] is None
