"""
Four Horsemen markers for ChatQuant
Criticism, contempt, defensiveness and stonewalling from phrase markers and
the timing, pursuit and ghost-risk signals computed earlier

A lexical heuristic mapped onto Gottman's categories, not an observational
coding of the conversation.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from . import config
from .context import AnalysisContext
from .helpers import clamp, find_phrases, safe_divide
from .lexicons import CONTEMPT_MARKERS, CRITICISM_MARKERS, DEFENSIVENESS_MARKERS
from .models import FourHorsemen, Horseman, PursuitWithdrawal, TimingMetrics, ViralScores
from .patterns import is_dismissive

logger = logging.getLogger(__name__)

# Marker hits per 100 messages are scaled by this to a 0-100 score
MARKER_RATE_SCALE = 10
PRESENT_THRESHOLD = 25

HORSEMEN: Tuple[Tuple[str, str, str], ...] = (
    ("criticism", "Criticism", "⚔️"),
    ("contempt", "Contempt", "🗡️"),
    ("defensiveness", "Defensiveness", "🛡️"),
    ("stonewalling", "Stonewalling", "🧱"),
)

RISK_LEVELS = ("low", "moderate", "elevated", "high", "critical")


def severity(score: float) -> str:
    if score >= 70:
        return "severe"
    if score >= 45:
        return "moderate"
    if score >= PRESENT_THRESHOLD:
        return "mild"
    return "none"


def _count_markers(ctx: AnalysisContext, pair: Sequence[str], markers: Sequence[str]) -> Dict[str, int]:
    counts = {p: 0 for p in pair}
    for msg in ctx.messages:
        if msg.sender in counts and find_phrases(msg.content, markers):
            counts[msg.sender] += 1
    return counts


def _dismissive_replies(ctx: AnalysisContext, pair: Sequence[str]) -> Tuple[Dict[str, int], int]:
    """Brush-off replies per person, and the number of replies between the pair."""
    counts = {p: 0 for p in pair}
    replies = 0
    for prev, msg in zip(ctx.messages, ctx.messages[1:]):
        if msg.sender not in counts or prev.sender not in counts or prev.sender == msg.sender:
            continue
        replies += 1
        if is_dismissive(msg.text):
            counts[msg.sender] += 1
    return counts, replies


def _horseman(index: int, score: float, counts: Dict[str, int], evidence: List[str]) -> Horseman:
    horseman_id, label, emoji_char = HORSEMEN[index]
    score = round(clamp(score))
    return Horseman(
        id=horseman_id,
        label=label,
        emoji=emoji_char,
        score=score,
        severity=severity(score),
        present=score >= PRESENT_THRESHOLD,
        marker_counts=counts,
        evidence=tuple(evidence),
    )


def _marker_evidence(counts: Dict[str, int], noun: str) -> List[str]:
    return [f"{name}: {count} {noun}" for name, count in counts.items() if count > 0]


def compute_four_horsemen(
    ctx: AnalysisContext,
    timing: TimingMetrics,
    pursuit: Optional[PursuitWithdrawal],
    viral: Optional[ViralScores],
) -> Optional[FourHorsemen]:
    """
    Score each horseman 0-100 for the analysis pair.

    Criticism, contempt and defensiveness come from the share of messages
    carrying their phrase markers. Contempt also rises with a lopsided
    median reply time, and stonewalling blends brush-off replies, pursuit
    cycles and the worst ghost risk. A horseman is present from 25.
    """
    pair = ctx.pair
    if pair is None or ctx.total_messages < config.COMPOSITE_MIN_MESSAGES:
        return None
    a, b = pair
    pair_messages = sum(1 for m in ctx.messages if m.sender in pair and m.text.strip())

    def marker_score(counts: Dict[str, int]) -> float:
        return safe_divide(sum(counts.values()) * 100.0, pair_messages) * MARKER_RATE_SCALE

    criticism = _count_markers(ctx, pair, CRITICISM_MARKERS)
    contempt = _count_markers(ctx, pair, CONTEMPT_MARKERS)
    defensiveness = _count_markers(ctx, pair, DEFENSIVENESS_MARKERS)

    rt_a, rt_b = timing.per_person.get(a), timing.per_person.get(b)
    asymmetry_min = 0.0
    if rt_a is not None and rt_b is not None:
        asymmetry_min = abs(rt_a.median_ms - rt_b.median_ms) / config.MINUTE_MS
    contempt_evidence = _marker_evidence(contempt, "contemptuous messages")
    if asymmetry_min > 30:
        contempt_evidence.append(f"Median reply times differ by {asymmetry_min:.0f} min")

    dismissive, replies = _dismissive_replies(ctx, pair)
    dismissive_share = safe_divide(sum(dismissive.values()) * 100.0, replies)
    cycles = pursuit.cycle_count if pursuit is not None else 0
    ghost_scores = [g.score for p, g in viral.ghost_risk.items() if p in pair and g is not None] if viral else []
    max_ghost = max(ghost_scores, default=0.0)
    stonewall_evidence = _marker_evidence(dismissive, "brush-off replies")
    if cycles:
        stonewall_evidence.append(f"{cycles} pursuit-withdrawal cycles")
    if max_ghost > 50:
        stonewall_evidence.append(f"Ghost risk: {max_ghost:.0f}%")

    horsemen = (
        _horseman(0, marker_score(criticism), criticism, _marker_evidence(criticism, "critical messages")),
        _horseman(1, marker_score(contempt) + min(20.0, asymmetry_min / 5), contempt, contempt_evidence),
        _horseman(
            2, marker_score(defensiveness), defensiveness,
            _marker_evidence(defensiveness, "defensive messages"),
        ),
        _horseman(
            3, dismissive_share * 2 + min(30.0, cycles * 5.0) + max_ghost * 0.2, dismissive, stonewall_evidence,
        ),
    )
    active = sum(1 for h in horsemen if h.present)
    logger.info(f"Four horsemen: {active} present")
    return FourHorsemen(horsemen=horsemen, active_count=active, risk_level=RISK_LEVELS[active])
