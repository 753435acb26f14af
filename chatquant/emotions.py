"""
Emotional vocabulary metrics for ChatQuant
Emotional granularity per person and the month-by-month closeness trend
"""

import logging
from typing import Dict, Optional

import pandas as pd

from . import config
from .context import AnalysisContext
from .helpers import extract_emojis, linear_regression_slope, ngram_matches, tokenize_words
from .lexicons import EMOTION_CATEGORIES, INTIMACY_WORDS
from .models import (
    EmotionalGranularity,
    IntimacyPoint,
    IntimacyProgression,
    PersonEmotionalGranularity,
)

logger = logging.getLogger(__name__)

GRANULARITY_MIN_WORDS = 200
# Longest multi-word entry in EMOTION_CATEGORIES ("nie mogę się doczekać")
EMOTION_MAX_NGRAM = 4
# Co-occurring categories in one message lower the score by up to 30%
COOCCURRENCE_PENALTY = 0.3

INTIMACY_WEIGHTS: Dict[str, float] = {
    "message_length": 0.25,
    "emotional_words": 0.30,
    "informality": 0.25,
    "late_night": 0.20,
}


# ============================================================================
# EMOTIONAL GRANULARITY
# ============================================================================

def granularity_score(distinct: int, emotion_words: int, total_words: int) -> int:
    """Category diversity (up to 70) plus emotional vocabulary coverage (up to 30)."""
    if total_words <= 0:
        return 0
    diversity = distinct / len(EMOTION_CATEGORIES) * 70
    coverage = min(30.0, emotion_words / total_words * 300)
    return round(min(100.0, diversity + coverage))


def compute_emotional_granularity(ctx: AnalysisContext) -> Optional[EmotionalGranularity]:
    """
    How many distinct emotion categories each person names.

    People who write "frustrated", "lonely" and "proud" score higher than
    people who only ever say "happy" and "sad". Messages naming two or more
    categories at once lower the adjusted score, since undifferentiated
    emotional language is the opposite of granularity.

    None unless two people have written GRANULARITY_MIN_WORDS+ words.
    """
    if len(ctx.participants) < 2:
        return None

    stats = {
        p: {"counts": {}, "emotion_words": 0, "total_words": 0, "emotional": 0, "mixed": 0}
        for p in ctx.participants
    }
    for msg in ctx.messages:
        if not msg.content or msg.sender not in stats:
            continue
        s = stats[msg.sender]
        tokens = [t for t in tokenize_words(msg.content) if len(t) >= 2]
        s["total_words"] += len(tokens)

        found = 0
        for category, words in EMOTION_CATEGORIES.items():
            hits = ngram_matches(tokens, words, max_n=EMOTION_MAX_NGRAM)
            if hits:
                s["counts"][category] = s["counts"].get(category, 0) + hits
                s["emotion_words"] += hits
                found += 1
        if found >= 1:
            s["emotional"] += 1
        if found >= 2:
            s["mixed"] += 1

    per_person: Dict[str, PersonEmotionalGranularity] = {}
    for name, s in stats.items():
        if s["total_words"] < GRANULARITY_MIN_WORDS:
            continue
        counts = s["counts"]
        score = granularity_score(len(counts), s["emotion_words"], s["total_words"])
        cooccurrence = round(s["mixed"] / s["emotional"], 2) if s["emotional"] else 0.0
        per_person[name] = PersonEmotionalGranularity(
            distinct_categories=len(counts),
            emotion_word_count=s["emotion_words"],
            category_counts=dict(counts),
            score=score,
            dominant_category=max(counts, key=counts.get) if counts else None,
            cooccurrence_index=cooccurrence,
            adjusted_score=max(0, round(score * (1 - min(1.0, cooccurrence) * COOCCURRENCE_PENALTY))),
        )

    if len(per_person) < 2:
        logger.debug("Emotional granularity skipped: fewer than two people with enough words")
        return None

    higher = max(per_person, key=lambda n: per_person[n].adjusted_score)
    return EmotionalGranularity(per_person=per_person, higher_granularity=higher)


# ============================================================================
# INTIMACY PROGRESSION
# ============================================================================

def intimacy_label(slope: float) -> str:
    if slope > 2:
        return "growing_closer"
    if slope > 0.5:
        return "slowly_closer"
    if slope > -0.5:
        return "stable"
    if slope > -2:
        return "slowly_drifting"
    return "drifting_apart"


def _normalize(values: pd.Series) -> pd.Series:
    """Each month as a share of the busiest month, 0-100."""
    peak = max(float(values.max()), 0.001)
    return (values / peak * 100).clip(upper=100).round().astype(int)


def compute_intimacy_progression(ctx: AnalysisContext) -> Optional[IntimacyProgression]:
    """
    Monthly closeness score from message length, emotional vocabulary,
    informality (exclamations, emoji) and late-night messaging.

    Each factor is normalized against its own peak month, so the score shows
    the shape of the relationship rather than an absolute level. None with
    fewer than two months of messages.
    """
    df = ctx.frame
    if df.empty or df["month"].nunique() < 2:
        return None

    features = pd.DataFrame({
        "month": df["month"],
        "words": df["words"],
        "emotional": df["text"].map(lambda t: sum(1 for tok in tokenize_words(t) if tok in INTIMACY_WORDS)),
        "informality": df["text"].map(lambda t: t.count("!") + 2 * len(extract_emojis(t))),
        "late_night": (
            (df["hour_int"] >= config.LATE_NIGHT_START_HOUR) | (df["hour_int"] < config.LATE_NIGHT_END_HOUR)
        ).astype(int),
    })
    monthly = features.groupby("month").agg(
        messages=("words", "size"),
        words=("words", "sum"),
        emotional=("emotional", "sum"),
        informality=("informality", "sum"),
        late_night=("late_night", "sum"),
    ).sort_index()

    words = monthly["words"].where(monthly["words"] > 0)
    factors = pd.DataFrame({
        "message_length": _normalize(monthly["words"] / monthly["messages"]),
        "emotional_words": _normalize((monthly["emotional"] / words).fillna(0.0)),
        "informality": _normalize(monthly["informality"] / monthly["messages"]),
        "late_night": _normalize(monthly["late_night"] / monthly["messages"]),
    })

    points = []
    for month, row in factors.iterrows():
        score = round(sum(row[name] * weight for name, weight in INTIMACY_WEIGHTS.items()))
        points.append(IntimacyPoint(
            month=month,
            score=score,
            message_length_factor=int(row["message_length"]),
            emotional_words_factor=int(row["emotional_words"]),
            informality_factor=int(row["informality"]),
            late_night_factor=int(row["late_night"]),
        ))

    slope = linear_regression_slope([p.score for p in points]) or 0.0
    logger.info(f"Intimacy over {len(points)} months: slope {slope:+.2f}")
    return IntimacyProgression(points=tuple(points), slope=slope, label=intimacy_label(slope))
