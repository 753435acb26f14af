"""
Pattern detectors for ChatQuant
Activity bursts, reciprocity index, bids for connection and chronotypes
"""

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple
import numpy as np
import pandas as pd

from . import config
from .context import AnalysisContext
from .helpers import find_phrases, safe_divide
from .lexicons import DISCLOSURE_STARTERS, DISMISSIVE_PHRASES, INVITATION_MARKERS
from .models import (
    BidResponse,
    Burst,
    ChronotypeCompatibility,
    PersonBidStats,
    PersonChronotype,
    ReciprocityIndex,
    ScoreComponent,
    TimingMetrics,
)

logger = logging.getLogger(__name__)

PUNCTUATION_RE = re.compile(r"[^\w\s']+")


# ============================================================================
# BURSTS
# ============================================================================

def daily_counts(ctx: AnalysisContext) -> pd.Series:
    """Messages per local calendar day, zero-filled between first and last day."""
    if ctx.frame.empty:
        return pd.Series(dtype="int64")
    counts = ctx.frame.groupby("date").size()
    counts.index = pd.to_datetime(counts.index)
    return counts.resample("D").sum().astype("int64")


def detect_bursts(ctx: AnalysisContext) -> Tuple[Burst, ...]:
    """
    Days whose volume exceeds the baseline mean + BURST_SIGMA standard deviations.

    The baseline is the preceding BURST_WINDOW_DAYS days; the first days of the
    conversation are compared against the whole-conversation statistics.
    Adjacent burst days are merged into one burst.
    """
    daily = daily_counts(ctx)
    if daily.empty:
        return ()

    values = daily.to_numpy(dtype=float)
    overall_mean = values.mean()
    overall_std = values.std()
    window = config.BURST_WINDOW_DAYS

    flagged: List[Tuple[int, float]] = []
    for i, count in enumerate(values):
        if i < window:
            mean, std = overall_mean, overall_std
        else:
            previous = values[i - window:i]
            mean, std = previous.mean(), previous.std()
        if count > mean + config.BURST_SIGMA * std:
            flagged.append((i, mean))

    bursts: List[Burst] = []
    group: List[Tuple[int, float]] = []
    for item in flagged + [(-2, 0.0)]:
        if group and item[0] != group[-1][0] + 1:
            days = [g[0] for g in group]
            total = int(values[days].sum())
            bursts.append(Burst(
                start_date=daily.index[days[0]].strftime("%Y-%m-%d"),
                end_date=daily.index[days[-1]].strftime("%Y-%m-%d"),
                days=len(days),
                message_count=total,
                avg_daily=total / len(days),
                baseline_mean=float(np.mean([g[1] for g in group])),
            ))
            group = []
        if item[0] >= 0:
            group.append(item)

    logger.info(f"Detected {len(bursts)} activity bursts over {len(values)} days")
    return tuple(bursts)


# ============================================================================
# RECIPROCITY
# ============================================================================

def _balance(a: float, b: float) -> Optional[float]:
    """50 = equal, above 50 = A carries more; None for a zero denominator."""
    if a + b == 0:
        return None
    return 50 * (1 + (a - b) / (a + b))


def _rt_symmetry(median_a: Optional[float], median_b: Optional[float]) -> Optional[float]:
    if median_a is None or median_b is None:
        return None
    hi = max(median_a, median_b)
    if hi == 0:
        return None
    sign = 1 if median_a < median_b else -1
    return 50 + 50 * (1 - min(median_a, median_b) / hi) * sign


def compute_reciprocity(ctx: AnalysisContext, timing: TimingMetrics) -> Optional[ReciprocityIndex]:
    """
    Pairwise reciprocity index on a 0-100 scale where 50 is perfect symmetry.

    Sub-scores with a zero denominator take the neutral value 50 and are
    listed in `neutral_components`.
    """
    if ctx.pair is None or ctx.total_messages < config.RECIPROCITY_MIN_MESSAGES:
        return None
    a, b = ctx.pair

    rt_a = timing.per_person.get(a)
    rt_b = timing.per_person.get(b)
    raw = {
        "message_balance": _balance(ctx.message_counts[a], ctx.message_counts[b]),
        "initiation_balance": _balance(
            timing.conversation_initiations.get(a, 0), timing.conversation_initiations.get(b, 0)
        ),
        "response_time_symmetry": _rt_symmetry(
            rt_a.median_ms if rt_a else None, rt_b.median_ms if rt_b else None
        ),
        "reaction_balance": _balance(ctx.summaries[a].reactions_given, ctx.summaries[b].reactions_given),
    }

    neutral = tuple(name for name, value in raw.items() if value is None)
    values = {name: (50.0 if value is None else value) for name, value in raw.items()}
    components = tuple(
        ScoreComponent(name=name, value=values[name], weight=config.RECIPROCITY_WEIGHTS[name])
        for name in values
    )
    overall = sum(c.value * c.weight for c in components)

    return ReciprocityIndex(
        pair=(a, b),
        overall=overall,
        message_balance=values["message_balance"],
        initiation_balance=values["initiation_balance"],
        response_time_symmetry=values["response_time_symmetry"],
        reaction_balance=values["reaction_balance"],
        components=components,
        neutral_components=neutral,
    )


# ============================================================================
# BIDS FOR CONNECTION
# ============================================================================

def is_bid(text: str, has_link: bool = False) -> bool:
    """A question, a disclosure or invitation opener, or a shared link."""
    if has_link or "?" in text:
        return True
    lower = text.lower().strip()
    if any(lower.startswith(s) for s in DISCLOSURE_STARTERS):
        return True
    return bool(find_phrases(lower, INVITATION_MARKERS))


def is_dismissive(text: str) -> bool:
    """Whole-message stock brush-off ("ok", "whatever", "k")."""
    normalized = PUNCTUATION_RE.sub(" ", text.lower()).strip()
    normalized = " ".join(normalized.split())
    return normalized in DISMISSIVE_PHRASES


def _turns_toward(bid_ms: int, response_ms: int, text: str) -> bool:
    if response_ms - bid_ms > config.BID_RESPONSE_WINDOW_MS:
        return False
    if len(text.split()) < 2 and len(text) < 10:
        return False
    return not is_dismissive(text)


def compute_bid_response(ctx: AnalysisContext) -> Optional[BidResponse]:
    """
    Bids for connection and whether the other side turned toward them.

    The response is the next message from another sender within the
    following BID_LOOKAHEAD_MESSAGES messages. None below BID_MIN_COUNT bids.
    """
    stats = {
        p: {"made": 0, "toward": 0, "away": 0, "received": 0, "responded": 0}
        for p in ctx.participants
    }
    messages = ctx.messages
    total = 0
    toward_total = 0

    for i, msg in enumerate(messages):
        if not msg.text.strip() or not is_bid(msg.text, msg.has_link):
            continue
        total += 1
        stats[msg.sender]["made"] += 1

        response = None
        for j in range(i + 1, min(i + 1 + config.BID_LOOKAHEAD_MESSAGES, len(messages))):
            if messages[j].sender != msg.sender:
                response = messages[j]
                break

        receiver = response.sender if response is not None else _default_receiver(ctx, msg.sender)
        if receiver is not None:
            stats[receiver]["received"] += 1

        if response is not None and _turns_toward(msg.timestamp_ms, response.timestamp_ms, response.text):
            toward_total += 1
            stats[msg.sender]["toward"] += 1
            stats[response.sender]["responded"] += 1
        else:
            stats[msg.sender]["away"] += 1

    if total < config.BID_MIN_COUNT:
        logger.warning(f"Bid analysis skipped: {total} bids (< {config.BID_MIN_COUNT})")
        return None

    per_person = {
        p: PersonBidStats(
            bids_made=s["made"],
            turned_toward=s["toward"],
            turned_away=s["away"],
            bids_received=s["received"],
            bids_responded_to=s["responded"],
            success_rate=safe_divide(s["toward"], s["made"], default=None),
            response_rate=safe_divide(s["responded"], s["received"], default=None),
        )
        for p, s in stats.items()
    }
    return BidResponse(
        per_person=per_person,
        total_bids=total,
        turned_toward=toward_total,
        overall_rate=toward_total / total,
    )


def _default_receiver(ctx: AnalysisContext, sender: str) -> Optional[str]:
    """The partner of an unanswered bid, when the pair makes that unambiguous."""
    if ctx.pair is not None and sender in ctx.pair:
        return ctx.pair[1] if sender == ctx.pair[0] else ctx.pair[0]
    return None


# ============================================================================
# CHRONOTYPE
# ============================================================================

def circular_mean_hour(hours: Sequence[float]) -> Optional[float]:
    """Mean clock hour on the 24 h circle via atan2 of summed unit vectors."""
    if len(hours) == 0:
        return None
    angles = np.asarray(hours, dtype=float) / 24.0 * 2 * math.pi
    mean_angle = math.atan2(float(np.sin(angles).sum()), float(np.cos(angles).sum()))
    return (mean_angle / (2 * math.pi) * 24.0) % 24.0


def circular_distance(h1: float, h2: float) -> float:
    diff = abs(h1 - h2) % 24.0
    return min(diff, 24.0 - diff)


def chronotype_category(midpoint: float) -> str:
    # Midpoints past midnight (00-04) belong to night owls
    if midpoint >= 20 or midpoint < 4:
        return "night_owl"
    if midpoint < 10:
        return "early_bird"
    return "intermediate"


def chronotype_match_score(delta_hours: float) -> float:
    """100 for identical rhythms, cosine falloff to 0 at CHRONOTYPE_FALLOFF_HOURS."""
    falloff = config.CHRONOTYPE_FALLOFF_HOURS
    if delta_hours > falloff:
        return 0.0
    return 100 * (1 + math.cos(math.pi * delta_hours / falloff)) / 2


def person_chronotype(name: str, df: pd.DataFrame) -> Optional[PersonChronotype]:
    if len(df) < config.CHRONOTYPE_MIN_MESSAGES:
        return None

    midpoint = circular_mean_hour(df["hour"].tolist())
    weekend = df["weekday"] >= 5
    weekday_hours = df.loc[~weekend, "hour"].tolist()
    weekend_hours = df.loc[weekend, "hour"].tolist()
    if min(len(weekday_hours), len(weekend_hours)) < config.CHRONOTYPE_SPLIT_MIN_MESSAGES:
        weekday_mid = weekend_mid = midpoint
    else:
        weekday_mid = circular_mean_hour(weekday_hours)
        weekend_mid = circular_mean_hour(weekend_hours)

    hist = np.bincount(df["hour_int"].to_numpy(dtype=int), minlength=24)
    return PersonChronotype(
        name=name,
        peak_hour=int(hist.argmax()),
        midpoint=midpoint,
        weekday_midpoint=weekday_mid,
        weekend_midpoint=weekend_mid,
        social_jetlag_hours=circular_distance(weekday_mid, weekend_mid),
        category=chronotype_category(midpoint),
        hourly_distribution=tuple(int(v) for v in hist),
    )


def compute_chronotype(ctx: AnalysisContext) -> Optional[ChronotypeCompatibility]:
    """Chronotype compatibility for the pair; None below CHRONOTYPE_MIN_MESSAGES each."""
    if ctx.pair is None:
        return None
    a, b = ctx.pair
    chrono_a = person_chronotype(a, ctx.person_frame(a))
    chrono_b = person_chronotype(b, ctx.person_frame(b))
    if chrono_a is None or chrono_b is None:
        logger.warning(f"Chronotype skipped: needs {config.CHRONOTYPE_MIN_MESSAGES} messages per person")
        return None

    delta = circular_distance(chrono_a.midpoint, chrono_b.midpoint)
    return ChronotypeCompatibility(
        persons=(chrono_a, chrono_b),
        delta_hours=delta,
        match_score=chronotype_match_score(delta),
        avg_social_jetlag=(chrono_a.social_jetlag_hours + chrono_b.social_jetlag_hours) / 2,
    )
