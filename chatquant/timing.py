"""
Timing analyzer for ChatQuant
Turns, response times, sessions, silences, engagement and monthly series
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
import pandas as pd

from . import config
from .context import AnalysisContext
from .helpers import (
    filter_outliers,
    linear_regression_slope,
    percentile,
    safe_divide,
    skewness,
    trend_direction,
    trimmed_mean,
)
from .models import (
    EngagementMetrics,
    HeatmapData,
    LongestSilence,
    MonthlyVolume,
    ResponseTimeStats,
    Session,
    TimingMetrics,
    TrendPoint,
    Turn,
    UnifiedMessage,
)

logger = logging.getLogger(__name__)


# ============================================================================
# TURNS & SESSIONS
# ============================================================================

def build_turns(messages: Sequence[UnifiedMessage]) -> List[Turn]:
    """
    Merge consecutive same-sender messages into turns.

    A message joins the open turn when it has the same sender and follows the
    previous message by at most TURN_MERGE_GAP_MS.
    """
    turns: List[Turn] = []
    if not messages:
        return turns

    start = 0
    for i in range(1, len(messages) + 1):
        closes = (
            i == len(messages)
            or messages[i].sender != messages[start].sender
            or messages[i].timestamp_ms - messages[i - 1].timestamp_ms > config.TURN_MERGE_GAP_MS
        )
        if closes:
            turns.append(Turn(
                sender=messages[start].sender,
                start_index=start,
                end_index=i - 1,
                start_ms=messages[start].timestamp_ms,
                end_ms=messages[i - 1].timestamp_ms,
                message_count=i - start,
            ))
            start = i
    return turns


def build_sessions(messages: Sequence[UnifiedMessage]) -> List[Session]:
    """Split the conversation wherever the gap exceeds SESSION_GAP_MS."""
    sessions: List[Session] = []
    if not messages:
        return sessions

    start = 0
    for i in range(1, len(messages) + 1):
        if i == len(messages) or messages[i].timestamp_ms - messages[i - 1].timestamp_ms > config.SESSION_GAP_MS:
            sessions.append(Session(
                start_index=start,
                end_index=i - 1,
                initiator=messages[start].sender,
                ender=messages[i - 1].sender,
                message_count=i - start,
            ))
            start = i
    return sessions


def compute_response_times(turns: Sequence[Turn], participants: Sequence[str]) -> Dict[str, List[Tuple[int, float]]]:
    """
    Response times measured first-message-to-first-message between turns.

    Only replies within the session gap count. Each value is attributed to
    the replier as (reply message index, milliseconds).
    """
    result: Dict[str, List[Tuple[int, float]]] = {p: [] for p in participants}
    for prev, turn in zip(turns, turns[1:]):
        if turn.sender == prev.sender:
            continue
        delta = turn.start_ms - prev.start_ms
        if delta < 0 or delta >= config.SESSION_GAP_MS:
            continue
        result.setdefault(turn.sender, []).append((turn.start_index, float(delta)))
    return result


# ============================================================================
# RESPONSE TIME DISTRIBUTION
# ============================================================================

def _monthly_medians(ctx: AnalysisContext, samples: Sequence[Tuple[int, float]], months: Sequence[str]) -> List[Optional[float]]:
    if not samples:
        return [None] * len(months)
    idx = [s[0] for s in samples]
    series = pd.Series([s[1] for s in samples], index=ctx.frame.loc[idx, "month"].values)
    medians = series.groupby(level=0).median()
    return [float(medians[m]) if m in medians.index else None for m in months]


def response_time_stats(
    samples: Sequence[float],
    monthly_medians: Optional[Sequence[Optional[float]]] = None,
) -> Optional[ResponseTimeStats]:
    """
    Robust distribution statistics for one person's response times.

    Returns None when the person never replied.
    """
    raw = [float(v) for v in samples]
    if not raw:
        return None

    filtered, removed = filter_outliers(raw)
    arr = np.asarray(filtered, dtype=float)
    q1 = percentile(filtered, 25)
    q3 = percentile(filtered, 75)
    median = percentile(filtered, 50)

    slope = None
    direction = None
    if monthly_medians is not None:
        usable = [m for m in monthly_medians if m is not None]
        if len(usable) >= config.MIN_TREND_MONTHS:
            slope = linear_regression_slope(monthly_medians)
            # Rising response times mean slower replies; under 5% of the median is stable
            direction = trend_direction(slope, 0.05 * median, labels=("slower", "faster"))

    return ResponseTimeStats(
        sample_size=len(raw),
        filtered_sample_size=len(filtered),
        outliers_removed=removed,
        mean_ms=float(arr.mean()),
        median_ms=median,
        trimmed_mean_ms=trimmed_mean(filtered),
        std_dev_ms=float(arr.std()),
        q1_ms=q1,
        q3_ms=q3,
        iqr_ms=q3 - q1,
        p75_ms=q3,
        p90_ms=percentile(filtered, 90),
        p95_ms=percentile(filtered, 95),
        skewness=skewness(filtered),
        fastest_ms=min(raw),
        slowest_ms=max(raw),
        filtered_fastest_ms=float(arr.min()),
        filtered_slowest_ms=float(arr.max()),
        trend_slope_ms_per_month=slope,
        trend_direction=direction,
    )


# ============================================================================
# SILENCE, LATE NIGHT, ENGAGEMENT
# ============================================================================

def find_longest_silence(messages: Sequence[UnifiedMessage]) -> Optional[LongestSilence]:
    if len(messages) < 2:
        return None
    best = None
    best_gap = -1
    for prev, msg in zip(messages, messages[1:]):
        gap = msg.timestamp_ms - prev.timestamp_ms
        if gap > best_gap:
            best_gap = gap
            best = (prev, msg)
    prev, msg = best
    return LongestSilence(
        duration_ms=best_gap,
        start_ms=prev.timestamp_ms,
        end_ms=msg.timestamp_ms,
        last_sender=prev.sender,
        next_sender=msg.sender,
    )


def count_late_night(ctx: AnalysisContext) -> Dict[str, int]:
    """Messages sent between LATE_NIGHT_START_HOUR and LATE_NIGHT_END_HOUR local time."""
    df = ctx.frame
    late = df[(df["hour_int"] >= config.LATE_NIGHT_START_HOUR) | (df["hour_int"] < config.LATE_NIGHT_END_HOUR)]
    counts = late.groupby("sender").size()
    return {p: int(counts.get(p, 0)) for p in ctx.participants}


def _sender_runs(messages: Sequence[UnifiedMessage]) -> List[Tuple[str, int]]:
    runs: List[Tuple[str, int]] = []
    for msg in messages:
        if runs and runs[-1][0] == msg.sender:
            runs[-1] = (msg.sender, runs[-1][1] + 1)
        else:
            runs.append((msg.sender, 1))
    return runs


def compute_engagement(ctx: AnalysisContext) -> EngagementMetrics:
    """Double texts, streaks, message share, reaction rates and session sizes."""
    double_texts = {p: 0 for p in ctx.participants}
    max_consecutive = {p: 0 for p in ctx.participants}
    for sender, length in _sender_runs(ctx.messages):
        if length >= 2:
            double_texts[sender] += 1
        max_consecutive[sender] = max(max_consecutive[sender], length)

    total = ctx.total_messages
    message_ratio = {p: safe_divide(ctx.message_counts[p], total) for p in ctx.participants}

    give_rate = {}
    receive_rate = {}
    for p in ctx.participants:
        summary = ctx.summaries.get(p)
        sent = ctx.message_counts[p]
        give_rate[p] = safe_divide(summary.reactions_given, sent, default=None) if summary else None
        receive_rate[p] = safe_divide(summary.reactions_received, sent, default=None) if summary else None

    sessions = ctx.sessions
    avg_session = safe_divide(sum(s.message_count for s in sessions), len(sessions), default=None)

    return EngagementMetrics(
        double_texts=double_texts,
        max_consecutive=max_consecutive,
        message_ratio=message_ratio,
        reaction_give_rate=give_rate,
        reaction_receive_rate=receive_rate,
        total_sessions=len(sessions),
        avg_session_length=avg_session,
    )


def analyze_timing(ctx: AnalysisContext) -> Tuple[TimingMetrics, EngagementMetrics]:
    """
    Run the timing stage.

    Populates ctx.turns, ctx.sessions and ctx.response_times, then builds the
    timing and engagement records.
    """
    ctx.turns = build_turns(ctx.messages)
    ctx.sessions = build_sessions(ctx.messages)
    ctx.response_times = compute_response_times(ctx.turns, ctx.participants)
    logger.info(f"Built {len(ctx.turns)} turns and {len(ctx.sessions)} sessions")

    months = ctx.months()
    per_person: Dict[str, Optional[ResponseTimeStats]] = {}
    for p in ctx.participants:
        samples = ctx.response_times.get(p, [])
        per_person[p] = response_time_stats(
            [s[1] for s in samples],
            _monthly_medians(ctx, samples, months),
        )
        if per_person[p] is None:
            logger.warning(f"No response times for {p}")

    initiations = {p: 0 for p in ctx.participants}
    endings = {p: 0 for p in ctx.participants}
    for s in ctx.sessions:
        initiations[s.initiator] += 1
        endings[s.ender] += 1

    timing = TimingMetrics(
        per_person=per_person,
        conversation_initiations=initiations,
        conversation_endings=endings,
        longest_silence=find_longest_silence(ctx.messages),
        late_night_messages=count_late_night(ctx),
    )
    return timing, compute_engagement(ctx)


# ============================================================================
# MONTHLY SERIES & HEATMAP
# ============================================================================

def monthly_volume(ctx: AnalysisContext) -> Tuple[MonthlyVolume, ...]:
    """Messages per calendar month per person (zero-filled)."""
    months = ctx.months()
    if not months:
        return ()
    table = ctx.frame.groupby(["month", "sender"]).size().unstack(fill_value=0)
    table = table.reindex(index=months, columns=ctx.participants, fill_value=0)
    return tuple(
        MonthlyVolume(
            month=month,
            per_person={p: int(row[p]) for p in ctx.participants},
            total=int(row.sum()),
        )
        for month, row in table.iterrows()
    )


def volume_trend(volumes: Sequence[MonthlyVolume]) -> Optional[float]:
    """OLS slope of monthly totals (messages per month); None under MIN_TREND_MONTHS."""
    if len(volumes) < config.MIN_TREND_MONTHS:
        return None
    return linear_regression_slope([v.total for v in volumes])


def weekday_weekend(ctx: AnalysisContext) -> Dict[str, Dict[str, int]]:
    df = ctx.frame
    weekend = df["weekday"] >= 5
    result = {}
    for p in ctx.participants:
        mine = df["sender"] == p
        result[p] = {
            "weekday": int((mine & ~weekend).sum()),
            "weekend": int((mine & weekend).sum()),
        }
    return result


def build_heatmap(ctx: AnalysisContext) -> HeatmapData:
    """7x24 message counts by local weekday (Monday = 0) and hour."""

    def grid(df: pd.DataFrame) -> Tuple[Tuple[int, ...], ...]:
        counts = df.groupby(["weekday", "hour_int"]).size()
        counts = counts.reindex(
            pd.MultiIndex.from_product([range(7), range(24)], names=["weekday", "hour_int"]),
            fill_value=0,
        )
        values = counts.to_numpy().reshape(7, 24)
        return tuple(tuple(int(v) for v in row) for row in values)

    per_person = {p: grid(ctx.person_frame(p)) for p in ctx.participants}
    return HeatmapData(per_person=per_person, combined=grid(ctx.frame))


def response_time_trend(ctx: AnalysisContext) -> Tuple[TrendPoint, ...]:
    months = ctx.months()
    medians = {
        p: _monthly_medians(ctx, ctx.response_times.get(p, []), months)
        for p in ctx.participants
    }
    return tuple(
        TrendPoint(month=m, per_person={p: medians[p][i] for p in ctx.participants})
        for i, m in enumerate(months)
    )


def message_length_trend(ctx: AnalysisContext) -> Tuple[TrendPoint, ...]:
    """Mean words per text message per month."""
    months = ctx.months()
    text = ctx.frame[ctx.frame["is_text"]]
    means = text.groupby(["month", "sender"])["words"].mean()
    points = []
    for m in months:
        per_person = {}
        for p in ctx.participants:
            value = means.get((m, p))
            per_person[p] = float(value) if value is not None else None
        points.append(TrendPoint(month=m, per_person=per_person))
    return tuple(points)


def initiation_trend(ctx: AnalysisContext) -> Tuple[TrendPoint, ...]:
    """Session initiations per month per person."""
    months = ctx.months()
    counts: Dict[Tuple[str, str], int] = {}
    for s in ctx.sessions:
        month = ctx.frame.at[s.start_index, "month"]
        counts[(month, s.initiator)] = counts.get((month, s.initiator), 0) + 1
    return tuple(
        TrendPoint(month=m, per_person={p: float(counts.get((m, p), 0)) for p in ctx.participants})
        for m in months
    )
