"""
Analysis pipeline for ChatQuant
Runs every stage over one conversation and assembles the QuantitativeAnalysis
"""

import logging
from typing import Any, Mapping, Optional, Union

from .accumulator import accumulate
from .badges import compute_badges
from .cache import AnalysisCache
from .catchphrases import compute_best_time_to_text, compute_catchphrases
from .conflicts import conflict_fingerprint, detect_conflicts
from .context import AnalysisContext
from .discourse import compute_repair_patterns, compute_shift_support
from .emotions import compute_emotional_granularity, compute_intimacy_progression
from .horsemen import compute_four_horsemen
from .loader import ConversationLoader
from .models import ParsedConversation, PatternMetrics, QuantitativeAnalysis, TrendData
from .patterns import compute_bid_response, compute_chronotype, compute_reciprocity, detect_bursts
from .percentiles import compute_ranking_percentiles
from .pursuit import detect_pursuit_withdrawal
from .sentiment import analyze_sentiment
from .style import analyze_style
from .synthesis import (
    compute_damage_report,
    compute_health_score,
    compute_threat_meters,
    compute_viral_scores,
)
from .timing import (
    analyze_timing,
    build_heatmap,
    initiation_trend,
    message_length_trend,
    monthly_volume,
    response_time_trend,
    volume_trend,
    weekday_weekend,
)

logger = logging.getLogger(__name__)


def _load(conversation: Union[ParsedConversation, Mapping[str, Any]]):
    loader = ConversationLoader()
    if isinstance(conversation, ParsedConversation):
        parsed = loader.normalize(conversation)
    elif isinstance(conversation, Mapping):
        parsed = loader.load_dict(conversation)
    else:
        raise TypeError(
            f"analyze() expects a ParsedConversation or a mapping, got {type(conversation).__name__}"
        )
    return parsed, loader.skipped


def analyze(
    conversation: Union[ParsedConversation, Mapping[str, Any]],
    cache: Optional[AnalysisCache] = None,
) -> QuantitativeAnalysis:
    """
    Run the complete quantitative analysis on one conversation.

    Args:
        conversation: ParsedConversation, or a JSON-shaped mapping of one
        cache: Optional memo cache shared across calls (a fresh one otherwise)

    Returns:
        QuantitativeAnalysis with every metric; metrics without enough data are None
    """

    # Step 1: Validate input
    logger.info("Step 1/8: Validating conversation")
    parsed, skipped = _load(conversation)
    ctx = AnalysisContext(parsed, cache=cache, skipped_messages=skipped)
    logger.info(f"Analyzing {ctx.total_messages} messages from {len(ctx.participants)} participants")

    # Step 2: Per-person accumulation
    logger.info("Step 2/8: Accumulating per-person summaries")
    per_person = accumulate(ctx)

    # Step 3: Timing and engagement
    logger.info("Step 3/8: Computing timing and engagement")
    timing, engagement = analyze_timing(ctx)

    # Step 4: Sentiment
    logger.info("Step 4/8: Scoring sentiment")
    sentiment, sentiment_trend = analyze_sentiment(ctx)

    # Step 5: Style and diversity
    logger.info("Step 5/8: Computing style and diversity metrics")
    style = analyze_style(ctx)

    volumes = monthly_volume(ctx)
    patterns = PatternMetrics(
        monthly_volume=volumes,
        weekday_weekend=weekday_weekend(ctx),
        volume_trend=volume_trend(volumes),
        bursts=detect_bursts(ctx),
    )
    heatmap = build_heatmap(ctx)
    trends = TrendData(
        response_time_trend=response_time_trend(ctx),
        message_length_trend=message_length_trend(ctx),
        initiation_trend=initiation_trend(ctx),
        sentiment_trend=sentiment_trend,
    )

    # Step 6: Pattern detectors
    logger.info("Step 6/8: Running pattern detectors")
    conflicts = detect_conflicts(ctx)
    fingerprint = conflict_fingerprint(ctx, conflicts)
    pursuit = detect_pursuit_withdrawal(ctx)
    reciprocity = compute_reciprocity(ctx, timing)
    bids = compute_bid_response(ctx)
    chronotype = compute_chronotype(ctx)

    # Step 7: Discourse and emotional vocabulary
    logger.info("Step 7/8: Analyzing repair, shift/support and emotional vocabulary")
    repairs = compute_repair_patterns(ctx)
    shift_support = compute_shift_support(ctx)
    granularity = compute_emotional_granularity(ctx)
    intimacy = compute_intimacy_progression(ctx)
    catchphrases = compute_catchphrases(ctx)
    best_time = compute_best_time_to_text(ctx, heatmap, timing)

    # Step 8: Composite scores
    logger.info("Step 8/8: Synthesizing composite scores")
    viral = compute_viral_scores(ctx, timing, engagement, patterns, heatmap, trends)
    health = compute_health_score(ctx, timing, engagement, patterns, sentiment, conflicts, reciprocity)
    damage = compute_damage_report(ctx, sentiment, conflicts, reciprocity, bids, fingerprint)
    threats = compute_threat_meters(ctx, timing, engagement, reciprocity, viral)
    horsemen = compute_four_horsemen(ctx, timing, pursuit, viral)
    badges = compute_badges(ctx, timing, engagement, heatmap, catchphrases)
    percentiles = compute_ranking_percentiles(ctx, timing)

    result = QuantitativeAnalysis(
        participants=tuple(ctx.participants),
        total_messages=ctx.total_messages,
        skipped_messages=skipped,
        per_person=per_person,
        timing=timing,
        engagement=engagement,
        patterns=patterns,
        heatmap=heatmap,
        trends=trends,
        sentiment=sentiment,
        style=style,
        conflicts=conflicts,
        badges=badges,
        pair=ctx.pair,
        conflict_fingerprint=fingerprint,
        pursuit_withdrawal=pursuit,
        reciprocity=reciprocity,
        bid_response=bids,
        chronotype=chronotype,
        health_score=health,
        damage_report=damage,
        threat_meters=threats,
        viral_scores=viral,
        ranking_percentiles=percentiles,
        repair_patterns=repairs,
        shift_support=shift_support,
        emotional_granularity=granularity,
        intimacy=intimacy,
        four_horsemen=horsemen,
        catchphrases=catchphrases,
        best_time_to_text=best_time,
    )

    logger.info("Analysis complete:")
    if health is not None:
        logger.info(f"  Health: {health.overall:.1f}/100 ({health.label})")
    logger.info(f"  Conflicts: {conflicts.total_conflicts}")
    if horsemen is not None:
        logger.info(f"  Horsemen present: {horsemen.active_count}/4")
    logger.info(f"  Badges: {len(badges)}")
    logger.debug(f"Cache stats: {ctx.cache.stats()}")

    return result
