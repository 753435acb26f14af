"""
Lexical sentiment engine for ChatQuant
Layered valence lexicon with negation handling, memoized per analysis run
"""

import hashlib
import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import numpy as np

from . import config
from .cache import AnalysisCache
from .context import AnalysisContext
from .helpers import (
    collapse_repeats,
    extract_emojis,
    linear_regression_slope,
    population_variance,
    strip_emojis,
    tokenize_words,
)
from .lexicons import CORE_LEXICON, NEGATIONS, POLISH_LEXICON, POLISH_SUFFIXES, SLANG_LEXICON
from .models import MessageSentiment, SentimentAnalysis, SentimentStats, TrendPoint

logger = logging.getLogger(__name__)

EMOTICON_RE = re.compile(r"(?<!\S)(?::-?\)|:-?\(|:d|;-?\)|<3|</3|:\*|:/|:'\()(?!\S)", re.IGNORECASE)
SINGLE_LETTERS_RE = re.compile(r"(.)\1+")

# Scores within this band count as neutral in the ratio breakdown
NEUTRAL_BAND = 0.05


# ============================================================================
# LEXICON LAYERS
# ============================================================================

class LexiconLayer:
    """One valence table, optionally with inflection-aware lookups."""

    def __init__(self, name: str, entries: Mapping[str, float],
                 suffixes: Optional[Sequence[Tuple[str, Tuple[str, ...]]]] = None):
        self.name = name
        self.entries = dict(entries)
        self.suffixes = list(suffixes or [])

    def lookup(self, token: str) -> Optional[float]:
        score = self.entries.get(token)
        if score is not None:
            return score
        for suffix, endings in self.suffixes:
            if not token.endswith(suffix) or len(token) - len(suffix) < 3:
                continue
            stem = token[: len(token) - len(suffix)]
            for ending in endings:
                score = self.entries.get(stem + ending)
                if score is not None:
                    return score
        return None


def _fingerprint(layers: Sequence[LexiconLayer]) -> str:
    """Short digest of the layer contents, used to namespace memo keys."""
    digest = hashlib.sha256()
    for layer in layers:
        digest.update(layer.name.encode("utf-8"))
        for token, score in sorted(layer.entries.items()):
            digest.update(f"\x00{token}={score}".encode("utf-8"))
        for suffix, endings in layer.suffixes:
            digest.update(f"\x01{suffix}>{','.join(endings)}".encode("utf-8"))
    return digest.hexdigest()[:16]


class LayeredLexicon:
    """
    Ordered lexicon layers with first-match-wins lookup.

    A token is tried as written, then with letters repeated 3+ times collapsed
    to two and to one ("loooove" -> "loove" -> "love"). For each form every
    layer is tried in priority order.
    """

    def __init__(self, layers: Sequence[LexiconLayer]):
        self.layers = list(layers)
        self.fingerprint = _fingerprint(self.layers)

    def lookup(self, token: str) -> Optional[float]:
        forms = [token]
        doubled = collapse_repeats(token)
        if doubled != token:
            forms.append(doubled)
            single = SINGLE_LETTERS_RE.sub(r"\1", token)
            if single not in forms:
                forms.append(single)

        for form in forms:
            for layer in self.layers:
                score = layer.lookup(form)
                if score is not None:
                    return score
        return None


def build_default_lexicon() -> LayeredLexicon:
    return LayeredLexicon([
        LexiconLayer("core", CORE_LEXICON),
        LexiconLayer("polish", POLISH_LEXICON, suffixes=POLISH_SUFFIXES),
        LexiconLayer("slang", SLANG_LEXICON),
        LexiconLayer("emoji", config.EMOJI_LEXICON),
    ])


DEFAULT_LEXICON = build_default_lexicon()


# ============================================================================
# MESSAGE SCORING
# ============================================================================

def _sentiment_tokens(text: str) -> Tuple[List[str], List[str]]:
    """Split text into (word tokens in order, emoticon and emoji tokens)."""
    symbols = [m.group(0).lower() for m in EMOTICON_RE.finditer(text)]
    without_emoticons = EMOTICON_RE.sub(" ", text)
    symbols.extend(extract_emojis(without_emoticons))
    words = tokenize_words(strip_emojis(without_emoticons))
    return words, symbols


def score_message(
    text: Optional[str],
    lexicon: Optional[LayeredLexicon] = None,
    cache: Optional[AnalysisCache] = None,
) -> Optional[MessageSentiment]:
    """
    Score one message as the mean valence of its matched tokens.

    A negation within NEGATION_WINDOW tokens before a word inverts its sign.
    Returns None when no token matches the lexicon.
    """
    if not text or not text.strip():
        return None
    lexicon = lexicon or DEFAULT_LEXICON
    if cache is not None:
        key = f"{lexicon.fingerprint}:{text}"
        return cache.get_or_compute("message_sentiment", key, lambda: _score(text, lexicon, cache))
    return _score(text, lexicon, None)


def _token_score(token: str, lexicon: LayeredLexicon, cache: Optional[AnalysisCache]) -> Optional[float]:
    if cache is None:
        return lexicon.lookup(token)
    key = f"{lexicon.fingerprint}:{token}"
    return cache.get_or_compute("token_polarity", key, lambda: lexicon.lookup(token))


def _score(text: str, lexicon: LayeredLexicon, cache: Optional[AnalysisCache]) -> Optional[MessageSentiment]:
    words, symbols = _sentiment_tokens(text)
    scores: List[float] = []

    for i, token in enumerate(words):
        if token in NEGATIONS:
            continue
        score = _token_score(token, lexicon, cache)
        if score is None:
            continue
        window = words[max(0, i - config.NEGATION_WINDOW):i]
        if any(w in NEGATIONS for w in window):
            score = -score
        scores.append(score)

    for symbol in symbols:
        score = _token_score(symbol, lexicon, cache)
        if score is not None:
            scores.append(score)

    if not scores:
        return None
    return MessageSentiment(
        score=float(np.mean(scores)),
        matched_tokens=len(scores),
        positive=sum(1 for s in scores if s > 0),
        negative=sum(1 for s in scores if s < 0),
    )


# ============================================================================
# AGGREGATES
# ============================================================================

def volatility(scores: Sequence[float]) -> Optional[float]:
    """Population variance of consecutive score deltas; None under MIN_VOLATILITY_MESSAGES."""
    if len(scores) < config.MIN_VOLATILITY_MESSAGES:
        return None
    deltas = np.diff(np.asarray(scores, dtype=float))
    return population_variance(deltas)


def _monthly_means(ctx: AnalysisContext, indices: Sequence[int], months: Sequence[str]) -> List[Optional[float]]:
    totals: Dict[str, List[float]] = {}
    for idx in indices:
        score = ctx.sentiment_score(idx)
        if score is None:
            continue
        totals.setdefault(ctx.frame.at[idx, "month"], []).append(score)
    return [float(np.mean(totals[m])) if m in totals else None for m in months]


def _trend(monthly: Sequence[Optional[float]]) -> Optional[float]:
    if sum(1 for v in monthly if v is not None) < config.MIN_TREND_MONTHS:
        return None
    return linear_regression_slope(monthly)


def person_sentiment(scores: Sequence[float], monthly: Sequence[Optional[float]]) -> Optional[SentimentStats]:
    if not scores:
        return None
    n = len(scores)
    positive = sum(1 for s in scores if s > NEUTRAL_BAND)
    negative = sum(1 for s in scores if s < -NEUTRAL_BAND)
    return SentimentStats(
        average=float(np.mean(scores)),
        positive_ratio=positive / n,
        negative_ratio=negative / n,
        neutral_ratio=(n - positive - negative) / n,
        volatility=volatility(scores),
        scored_messages=n,
        trend_slope=_trend(monthly),
    )


def analyze_sentiment(
    ctx: AnalysisContext,
    lexicon: Optional[LayeredLexicon] = None,
) -> Tuple[SentimentAnalysis, Tuple[TrendPoint, ...]]:
    """
    Score every message and aggregate per person.

    Populates ctx.message_sentiments. Returns the analysis and the monthly
    sentiment series.
    """
    lexicon = lexicon or DEFAULT_LEXICON
    ctx.message_sentiments = [score_message(m.content, lexicon, ctx.cache) for m in ctx.messages]

    months = ctx.months()
    per_person: Dict[str, Optional[SentimentStats]] = {}
    monthly_by_person: Dict[str, List[Optional[float]]] = {}
    for p in ctx.participants:
        indices = [i for i, m in enumerate(ctx.messages) if m.sender == p]
        scores = [ctx.sentiment_score(i) for i in indices]
        scores = [s for s in scores if s is not None]
        monthly_by_person[p] = _monthly_means(ctx, indices, months)
        per_person[p] = person_sentiment(scores, monthly_by_person[p])

    all_scores = [s.score for s in ctx.message_sentiments if s is not None]
    overall_monthly = _monthly_means(ctx, range(len(ctx.messages)), months)
    analysis = SentimentAnalysis(
        per_person=per_person,
        overall_average=float(np.mean(all_scores)) if all_scores else None,
        trend_slope=_trend(overall_monthly),
        scored_messages=len(all_scores),
        unscored_messages=len(ctx.messages) - len(all_scores),
    )
    series = tuple(
        TrendPoint(month=m, per_person={p: monthly_by_person[p][i] for p in ctx.participants})
        for i, m in enumerate(months)
    )
    logger.info(f"Scored {len(all_scores)}/{len(ctx.messages)} messages for sentiment")
    return analysis, series
