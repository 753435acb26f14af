"""
Style & diversity metrics for ChatQuant
MTLD lexical diversity, language style matching, pronoun use,
time orientation and integrative complexity
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple
import numpy as np

from . import config
from .context import AnalysisContext
from .helpers import find_phrases, linear_regression_slope, ngram_matches, safe_divide, tokenize_words
from .lexicons import (
    DIFFERENTIATION_PHRASES,
    FUTURE_MARKERS,
    I_WORDS,
    INTEGRATION_PHRASES,
    LSM_CATEGORIES,
    PAST_MARKERS,
    PRESENT_MARKERS,
    WE_WORDS,
    YOU_WORDS,
)
from .models import (
    IntegrativeComplexity,
    LSMResult,
    PronounStats,
    StyleMetrics,
    TemporalFocus,
)

logger = logging.getLogger(__name__)


# ============================================================================
# MTLD
# ============================================================================

def _mtld_pass(tokens: Sequence[str], threshold: float) -> float:
    segments = 0.0
    types: Set[str] = set()
    count = 0
    for token in tokens:
        count += 1
        types.add(token)
        if len(types) / count <= threshold:
            segments += 1
            types = set()
            count = 0

    if count > 0:
        ttr = len(types) / count
        segments += (1 - ttr) / (1 - threshold)

    if segments == 0:
        # Every token distinct: diversity is bounded only by text length
        return float(len(tokens))
    return len(tokens) / segments


def mtld(tokens: Sequence[str], threshold: Optional[float] = None) -> Optional[float]:
    """
    Measure of Textual Lexical Diversity (McCarthy & Jarvis).

    Average of a forward and a reverse pass. None below MTLD_MIN_WORDS tokens.
    """
    if len(tokens) < config.MTLD_MIN_WORDS:
        return None
    threshold = config.MTLD_TTR_THRESHOLD if threshold is None else threshold
    forward = _mtld_pass(tokens, threshold)
    backward = _mtld_pass(list(reversed(tokens)), threshold)
    return (forward + backward) / 2


# ============================================================================
# LANGUAGE STYLE MATCHING
# ============================================================================

def category_rates(tokens: Sequence[str]) -> Dict[str, float]:
    """Function-word category rates per 1000 tokens."""
    n = len(tokens)
    rates = {}
    for name, words in LSM_CATEGORIES.items():
        hits = sum(1 for t in tokens if t in words)
        rates[name] = safe_divide(hits * 1000.0, n)
    return rates


def _category_similarity(a: float, b: float) -> Optional[float]:
    if a + b == 0:
        return None
    return 1 - abs(a - b) / (a + b)


def _profile_similarity(a: Dict[str, float], b: Dict[str, float], categories: Sequence[str]) -> Optional[float]:
    scores = [_category_similarity(a[c], b[c]) for c in categories]
    scores = [s for s in scores if s is not None]
    return float(np.mean(scores)) if scores else None


def _reply_tokens(ctx: AnalysisContext, person: str, partner: str) -> List[str]:
    """Tokens from this person's turns that directly answer a partner turn."""
    tokens: List[str] = []
    for prev, turn in zip(ctx.turns, ctx.turns[1:]):
        if turn.sender != person or prev.sender != partner:
            continue
        for i in range(turn.start_index, turn.end_index + 1):
            tokens.extend(tokenize_words(ctx.messages[i].content))
    return tokens


def compute_lsm(ctx: AnalysisContext) -> Optional[LSMResult]:
    """
    Language style matching for the analysis pair.

    Category LSM = 1 - |a - b| / (a + b); the overall score averages categories
    where both rates exceed LSM_MIN_RATE_PER_1000. Adaptation compares how
    similar a person's replies are to the partner's profile against how
    similar their overall profile is.
    """
    if ctx.pair is None:
        return None
    a, b = ctx.pair
    tokens_a = ctx.tokens_by_person.get(a, [])
    tokens_b = ctx.tokens_by_person.get(b, [])
    if len(tokens_a) < config.LSM_MIN_WORDS or len(tokens_b) < config.LSM_MIN_WORDS:
        logger.warning(f"LSM skipped: needs {config.LSM_MIN_WORDS} words per person")
        return None

    rates_a = category_rates(tokens_a)
    rates_b = category_rates(tokens_b)
    per_category: Dict[str, Optional[float]] = {}
    used: List[str] = []
    for cat in LSM_CATEGORIES:
        if rates_a[cat] > config.LSM_MIN_RATE_PER_1000 and rates_b[cat] > config.LSM_MIN_RATE_PER_1000:
            per_category[cat] = _category_similarity(rates_a[cat], rates_b[cat])
            used.append(cat)
        else:
            per_category[cat] = None

    if not used:
        logger.warning("LSM skipped: no function-word category used by both people")
        return None
    overall = float(np.mean([per_category[c] for c in used]))

    adaptation: Dict[str, Optional[float]] = {}
    for person, partner, own_rates, partner_rates in ((a, b, rates_a, rates_b), (b, a, rates_b, rates_a)):
        reply = _reply_tokens(ctx, person, partner)
        if not reply:
            adaptation[person] = None
            continue
        reply_sim = _profile_similarity(category_rates(reply), partner_rates, used)
        base_sim = _profile_similarity(own_rates, partner_rates, used)
        if reply_sim is None or base_sim is None:
            adaptation[person] = None
        else:
            adaptation[person] = reply_sim - base_sim

    asymmetry = None
    adapter = None
    if adaptation[a] is not None and adaptation[b] is not None:
        asymmetry = adaptation[a] - adaptation[b]
        if abs(asymmetry) >= config.LSM_ADAPTER_MIN_DIFF:
            adapter = a if asymmetry > 0 else b

    return LSMResult(
        pair=(a, b),
        overall=overall,
        per_category=per_category,
        rates={a: rates_a, b: rates_b},
        categories_used=len(used),
        adaptation=adaptation,
        asymmetry=asymmetry,
        adapter=adapter,
    )


# ============================================================================
# PRONOUNS & TIME ORIENTATION
# ============================================================================

def pronoun_stats(tokens: Sequence[str]) -> Optional[PronounStats]:
    """I / we / you rates per 1000 words; None below PRONOUN_MIN_WORDS."""
    n = len(tokens)
    if n < config.PRONOUN_MIN_WORDS:
        return None
    i_count = sum(1 for t in tokens if t in I_WORDS)
    we_count = sum(1 for t in tokens if t in WE_WORDS)
    you_count = sum(1 for t in tokens if t in YOU_WORDS)
    return PronounStats(
        total_words=n,
        i_rate=i_count * 1000.0 / n,
        we_rate=we_count * 1000.0 / n,
        you_rate=you_count * 1000.0 / n,
        i_you_ratio=safe_divide(i_count, you_count, default=None),
    )


def _orientation(future_index: float) -> str:
    if future_index >= 0.35:
        return "prospective"
    if future_index >= 0.20:
        return "present_focused"
    return "retrospective"


def temporal_focus(messages_tokens: Sequence[Sequence[str]]) -> Optional[TemporalFocus]:
    """
    Past / present / future marker rates per 1000 words.

    Markers are matched per message as unigrams, bigrams and trigrams.
    None below TEMPORAL_MIN_WORDS words.
    """
    n = sum(len(t) for t in messages_tokens)
    if n < config.TEMPORAL_MIN_WORDS:
        return None
    past = sum(ngram_matches(t, PAST_MARKERS) for t in messages_tokens)
    present = sum(ngram_matches(t, PRESENT_MARKERS) for t in messages_tokens)
    future = sum(ngram_matches(t, FUTURE_MARKERS) for t in messages_tokens)
    total = past + present + future
    future_index = safe_divide(future, total, default=None)
    return TemporalFocus(
        total_words=n,
        past_rate=past * 1000.0 / n,
        present_rate=present * 1000.0 / n,
        future_rate=future * 1000.0 / n,
        future_index=future_index,
        orientation=_orientation(future_index) if future_index is not None else None,
    )


# ============================================================================
# INTEGRATIVE COMPLEXITY
# ============================================================================

def _ic_score(diff: int, integ: int, messages: int) -> Tuple[float, float]:
    raw = (diff + 2 * integ) / messages * 100
    return raw, min(100.0, raw * config.IC_COMPRESSION)


def integrative_complexity(texts: Sequence[Tuple[str, str]]) -> Optional[IntegrativeComplexity]:
    """
    Differentiation and integration phrase density.

    Args:
        texts: (month, message text) for one person's text messages

    Returns:
        None below IC_MIN_MESSAGES messages
    """
    if len(texts) < config.IC_MIN_MESSAGES:
        return None

    diff_total = 0
    integ_total = 0
    examples: List[str] = []
    monthly: Dict[str, List[int]] = {}
    for month, text in texts:
        diff_hits = find_phrases(text, DIFFERENTIATION_PHRASES)
        integ_hits = find_phrases(text, INTEGRATION_PHRASES)
        diff_total += len(diff_hits)
        integ_total += len(integ_hits)
        bucket = monthly.setdefault(month, [0, 0, 0])
        bucket[0] += len(diff_hits)
        bucket[1] += len(integ_hits)
        bucket[2] += 1
        for phrase in diff_hits + integ_hits:
            if phrase not in examples and len(examples) < 5:
                examples.append(phrase)

    raw, score = _ic_score(diff_total, integ_total, len(texts))
    trend = None
    if len(monthly) >= config.MIN_TREND_MONTHS:
        trend = linear_regression_slope([_ic_score(*monthly[m])[0] for m in sorted(monthly)])

    return IntegrativeComplexity(
        messages=len(texts),
        differentiation_count=diff_total,
        integration_count=integ_total,
        raw_score=raw,
        score=score,
        trend=trend,
        example_phrases=tuple(examples),
    )


def analyze_style(ctx: AnalysisContext) -> StyleMetrics:
    mtld_scores: Dict[str, Optional[float]] = {}
    pronouns: Dict[str, Optional[PronounStats]] = {}
    temporal: Dict[str, Optional[TemporalFocus]] = {}
    complexity: Dict[str, Optional[IntegrativeComplexity]] = {}

    for p in ctx.participants:
        tokens = ctx.tokens_by_person.get(p, [])
        mtld_scores[p] = mtld(tokens)
        pronouns[p] = pronoun_stats(tokens)

        person = ctx.person_frame(p)
        person = person[person["is_text"]]
        temporal[p] = temporal_focus([tokenize_words(t) for t in person["text"]])
        complexity[p] = integrative_complexity(list(zip(person["month"], person["text"])))

        if mtld_scores[p] is None:
            logger.warning(f"MTLD skipped for {p}: fewer than {config.MTLD_MIN_WORDS} words")

    return StyleMetrics(
        mtld=mtld_scores,
        lsm=compute_lsm(ctx),
        pronouns=pronouns,
        temporal_focus=temporal,
        integrative_complexity=complexity,
    )
