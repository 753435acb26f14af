"""
Composite score synthesizer for ChatQuant
Health score, damage report, threat meters and viral scores.

Every composite is a weighted blend of 0-100 components, and the components
are returned alongside the overall value so it can be re-derived. These are
heuristics built on the metrics above, not validated psychometric scales.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple
import numpy as np

from . import config
from .context import AnalysisContext
from .helpers import clamp, linear_regression_slope, safe_divide
from .models import (
    BidResponse,
    CompositeScore,
    ConflictAnalysis,
    ConflictFingerprint,
    DamageReport,
    EngagementMetrics,
    GhostRisk,
    HeatmapData,
    MonthlyVolume,
    PatternMetrics,
    ReciprocityIndex,
    ScoreComponent,
    SentimentAnalysis,
    ThreatMeter,
    TimingMetrics,
    TrendData,
    TrendPoint,
    ViralScores,
)

logger = logging.getLogger(__name__)

NEUTRAL = 50.0


def _gate(ctx: AnalysisContext) -> Optional[Tuple[str, str]]:
    """The analysis pair, or None when composites lack data."""
    if ctx.pair is None or ctx.total_messages < config.COMPOSITE_MIN_MESSAGES:
        return None
    return ctx.pair


def _weighted(components: Sequence[ScoreComponent]) -> float:
    return clamp(sum(c.value * c.weight for c in components))


def _symmetry(value_50_centred: Optional[float]) -> float:
    """Map a 50-centred balance score to 0-100 symmetry (100 = perfectly even)."""
    if value_50_centred is None:
        return NEUTRAL
    return clamp(100 - abs(value_50_centred - 50) * 2)


def _component(name: str, value: Optional[float], weight: float, neutral: List[str]) -> ScoreComponent:
    """A component whose missing input becomes NEUTRAL and is recorded by name."""
    if value is None:
        neutral.append(name)
        value = NEUTRAL
    return ScoreComponent(name, value, weight)


# ============================================================================
# HEALTH SCORE
# ============================================================================

def health_label(score: float) -> str:
    if score >= 80:
        return "healthy"
    if score >= 60:
        return "stable"
    if score >= 40:
        return "needs_attention"
    return "concerning"


def _response_stability(timing: TimingMetrics, pair: Tuple[str, str]) -> Optional[float]:
    """IQR relative to the median: tight distributions score high."""
    values = []
    for name in pair:
        stats = timing.per_person.get(name)
        if stats is None or stats.median_ms <= 0:
            continue
        values.append(clamp(100 - stats.iqr_ms / stats.median_ms * 25))
    return float(np.mean(values)) if values else None


def _emotional_safety(sentiment: SentimentAnalysis, conflicts: ConflictAnalysis, total_messages: int) -> float:
    base = NEUTRAL if sentiment.overall_average is None else 50 + 50 * sentiment.overall_average
    conflicts_per_100 = conflicts.total_conflicts / total_messages * 100 if total_messages else 0.0
    return clamp(base - conflicts_per_100 * 10)


def _trajectory(patterns: PatternMetrics, sentiment: SentimentAnalysis) -> Optional[float]:
    parts = []
    if patterns.volume_trend is not None and patterns.monthly_volume:
        mean_volume = np.mean([m.total for m in patterns.monthly_volume])
        if mean_volume > 0:
            parts.append(clamp(50 + patterns.volume_trend / mean_volume * 100))
    if sentiment.trend_slope is not None:
        parts.append(clamp(50 + sentiment.trend_slope * 500))
    return float(np.mean(parts)) if parts else None


def compute_health_score(
    ctx: AnalysisContext,
    timing: TimingMetrics,
    engagement: EngagementMetrics,
    patterns: PatternMetrics,
    sentiment: SentimentAnalysis,
    conflicts: ConflictAnalysis,
    reciprocity: Optional[ReciprocityIndex],
) -> Optional[CompositeScore]:
    """
    Weighted relationship health index for the analysis pair.

    balance 0.25, reciprocity 0.20, response stability 0.20,
    emotional safety 0.20, trajectory 0.15 (weights from config). Components
    whose inputs are missing score NEUTRAL and are listed in neutral_components.
    """
    pair = _gate(ctx)
    if pair is None:
        return None

    a, b = pair
    pair_total = ctx.message_counts[a] + ctx.message_counts[b]
    ratio_a = ctx.message_counts[a] / pair_total

    neutral: List[str] = []
    safety = _emotional_safety(sentiment, conflicts, ctx.total_messages)
    components = (
        ScoreComponent("balance", clamp(100 - abs(ratio_a - 0.5) * 200), config.HEALTH_WEIGHT_BALANCE),
        _component(
            "reciprocity",
            _symmetry(reciprocity.overall) if reciprocity else None,
            config.HEALTH_WEIGHT_RECIPROCITY,
            neutral,
        ),
        _component("response_stability", _response_stability(timing, pair), config.HEALTH_WEIGHT_RESPONSE, neutral),
        ScoreComponent("emotional_safety", safety, config.HEALTH_WEIGHT_SAFETY),
        _component("trajectory", _trajectory(patterns, sentiment), config.HEALTH_WEIGHT_TRAJECTORY, neutral),
    )
    # Without scored messages the safety base is NEUTRAL; the conflict penalty still applies
    if sentiment.overall_average is None:
        neutral.append("emotional_safety")
    overall = _weighted(components)
    return CompositeScore(
        name="health",
        overall=overall,
        label=health_label(overall),
        components=components,
        neutral_components=tuple(c.name for c in components if c.name in neutral),
    )


# ============================================================================
# DAMAGE REPORT
# ============================================================================

def communication_grade(score: float) -> str:
    if score >= 85:
        return "A"
    if score >= 70:
        return "B"
    if score >= 55:
        return "C"
    if score >= 40:
        return "D"
    return "F"


def compute_damage_report(
    ctx: AnalysisContext,
    sentiment: SentimentAnalysis,
    conflicts: ConflictAnalysis,
    reciprocity: Optional[ReciprocityIndex],
    bids: Optional[BidResponse],
    fingerprint: Optional[ConflictFingerprint],
) -> Optional[DamageReport]:
    """Emotional damage, a letter grade for communication and repair potential."""
    pair = _gate(ctx)
    if pair is None:
        return None

    neutral: List[str] = []
    negative = [
        sentiment.per_person[p].negative_ratio for p in pair if sentiment.per_person.get(p) is not None
    ]
    negative_share = clamp(float(np.mean(negative)) * 100) if negative else None
    conflict_density = clamp(conflicts.total_conflicts / ctx.total_messages * 100 * 20)
    imbalance = 100 - _symmetry(reciprocity.overall) if reciprocity else None

    damage_components = (
        _component("negative_sentiment", negative_share, 0.40, neutral),
        ScoreComponent("conflict_density", conflict_density, 0.35),
        _component("reciprocity_imbalance", imbalance, 0.25, neutral),
    )
    damage = _weighted(damage_components)

    silences = sum(1 for e in conflicts.events if e.type == "cold_silence")
    resolutions = sum(1 for e in conflicts.events if e.type == "resolution")
    resolution_rate = safe_divide(resolutions * 100.0, silences, default=None)
    bid_rate = clamp(bids.overall_rate * 100) if bids is not None else None
    apology_share = None
    if fingerprint is not None and fingerprint.per_person:
        apologizers = sum(1 for prof in fingerprint.per_person.values() if prof.deescalation_style == "apologize")
        apology_share = apologizers / len(fingerprint.per_person) * 100

    if resolution_rate is not None:
        resolution_rate = clamp(resolution_rate)
    bid_component = _component("bid_responsiveness", bid_rate, 0.35, neutral)
    repair_components = (
        _component("resolution_rate", resolution_rate, 0.40, neutral),
        bid_component,
        _component("apology_deescalation", apology_share, 0.25, neutral),
    )

    grade_basis = ((100 - damage) + bid_component.value) / 2
    return DamageReport(
        emotional_damage=damage,
        communication_grade=communication_grade(grade_basis),
        repair_potential=_weighted(repair_components),
        damage_components=damage_components,
        repair_components=repair_components,
        neutral_components=tuple(c.name for c in damage_components + repair_components if c.name in neutral),
    )


# ============================================================================
# VIRAL SCORES
# ============================================================================

def _activity_overlap(heatmap: HeatmapData, a: str, b: str) -> float:
    """Shared share of the hourly activity distributions."""
    hourly_a = np.asarray(heatmap.per_person[a]).sum(axis=0)
    hourly_b = np.asarray(heatmap.per_person[b]).sum(axis=0)
    if hourly_a.sum() == 0 or hourly_b.sum() == 0:
        return 0.0
    overlap = np.minimum(hourly_a / hourly_a.sum(), hourly_b / hourly_b.sum()).sum()
    return clamp(float(overlap) * 100)


def _min_max_match(x: Optional[float], y: Optional[float]) -> Optional[float]:
    """Closeness of two non-negative values; None when both are zero or missing."""
    x = x or 0.0
    y = y or 0.0
    hi = max(x, y)
    if hi == 0:
        return None
    return clamp(100 - abs(x - y) / hi * 100)


def _series(points: Sequence[TrendPoint], name: str) -> List[float]:
    return [p.per_person.get(name) or 0.0 for p in points]


def interest_score(
    ctx: AnalysisContext,
    name: str,
    timing: TimingMetrics,
    engagement: EngagementMetrics,
    trends: TrendData,
) -> CompositeScore:
    """How invested one person looks: initiative, warming replies, engagement."""
    total_init = sum(timing.conversation_initiations.values())
    init_score = (
        clamp(timing.conversation_initiations.get(name, 0) / total_init * 100) if total_init else None
    )

    rt_slope = linear_regression_slope([v for v in _series(trends.response_time_trend, name) if v > 0]) or 0.0
    ml_slope = linear_regression_slope([v for v in _series(trends.message_length_trend, name) if v > 0]) or 0.0

    receive = engagement.reaction_receive_rate.get(name) or 0.0
    own_messages = ctx.message_counts.get(name, 0)
    dt_per_1000 = safe_divide(engagement.double_texts.get(name, 0) * 1000, ctx.total_messages)
    late_per_1000 = safe_divide(timing.late_night_messages.get(name, 0) * 1000, own_messages)

    neutral: List[str] = []
    components = (
        _component("initiation", init_score, 0.25, neutral),
        ScoreComponent("response_time_trend", clamp(50 - rt_slope / 1200), 0.20),
        ScoreComponent("message_length_trend", clamp(50 + ml_slope * 25), 0.15),
        _component("engagement", clamp(receive * 500) if receive > 0 else None, 0.20, neutral),
        ScoreComponent("double_texting", clamp(dt_per_1000 * 2), 0.10),
        ScoreComponent("late_night", clamp(late_per_1000), 0.10),
    )
    overall = _weighted(components)
    return CompositeScore(
        name="interest",
        overall=overall,
        label=_level_label(overall),
        components=components,
        neutral_components=tuple(neutral),
    )


def _recent_vs_earlier(values: Sequence[float], positive_only: bool = True) -> Tuple[float, float]:
    recent, earlier = values[-3:], values[:-3]

    def avg(chunk: Sequence[float]) -> float:
        if positive_only:
            filled = [v for v in chunk if v > 0]
            return sum(chunk) / (len(filled) or 1)
        return sum(chunk) / len(chunk) if chunk else 0.0

    return avg(recent), avg(earlier)


def ghost_risk(name: str, volumes: Sequence[MonthlyVolume], trends: TrendData) -> Optional[GhostRisk]:
    """
    Compare the last 3 months against the earlier ones.

    Slower replies, shorter messages, fewer initiations and lower volume each
    raise the risk. None without at least one month before the last three.
    """
    if len(volumes) <= 3:
        return None

    factors: List[str] = []

    recent, earlier = _recent_vs_earlier(_series(trends.response_time_trend, name))
    rt_sub = clamp((recent - earlier) / earlier * 100) if earlier > 0 and recent > earlier else 0.0
    if rt_sub > 30:
        factors.append("response time rising")

    recent, earlier = _recent_vs_earlier(_series(trends.message_length_trend, name))
    ml_sub = clamp((earlier - recent) / earlier * 100) if earlier > 0 and recent < earlier else 0.0
    if ml_sub > 30:
        factors.append("messages getting shorter")

    recent, earlier = _recent_vs_earlier(_series(trends.initiation_trend, name), positive_only=False)
    init_sub = clamp((earlier - recent) / earlier * 100) if earlier > 0 and recent < earlier else 0.0
    if init_sub > 30:
        factors.append("initiating less often")

    recent, earlier = _recent_vs_earlier([float(v.per_person.get(name, 0)) for v in volumes], positive_only=False)
    vol_sub = clamp((earlier - recent) / earlier * 100) if earlier > 0 and recent < earlier else 0.0
    if vol_sub > 30:
        factors.append("fewer messages in recent months")

    components = (
        ScoreComponent("response_time_increase", rt_sub, 0.30),
        ScoreComponent("message_length_decrease", ml_sub, 0.25),
        ScoreComponent("initiation_decrease", init_sub, 0.25),
        ScoreComponent("volume_decrease", vol_sub, 0.20),
    )
    score = _weighted(components)
    if not factors and score > 0:
        factors.append("minor changes in activity")
    return GhostRisk(score=score, factors=tuple(factors), components=components)


def _level_label(score: float) -> str:
    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"


def compute_viral_scores(
    ctx: AnalysisContext,
    timing: TimingMetrics,
    engagement: EngagementMetrics,
    patterns: PatternMetrics,
    heatmap: HeatmapData,
    trends: TrendData,
) -> Optional[ViralScores]:
    pair = _gate(ctx)
    if pair is None:
        return None
    a, b = pair

    rt_a = timing.per_person.get(a)
    rt_b = timing.per_person.get(b)
    avg_len_a = ctx.summaries[a].average_message_length
    avg_len_b = ctx.summaries[b].average_message_length
    ratio_a = engagement.message_ratio[a] / (engagement.message_ratio[a] + engagement.message_ratio[b])

    compat_neutral: List[str] = []
    compat_components = (
        ScoreComponent("activity_overlap", _activity_overlap(heatmap, a, b), 0.2),
        _component(
            "response_symmetry",
            _min_max_match(rt_a.median_ms if rt_a else None, rt_b.median_ms if rt_b else None),
            0.2,
            compat_neutral,
        ),
        ScoreComponent("message_balance", clamp(100 - abs(ratio_a - 0.5) * 200), 0.2),
        _component(
            "engagement_balance",
            _min_max_match(engagement.reaction_give_rate.get(a), engagement.reaction_give_rate.get(b)),
            0.2,
            compat_neutral,
        ),
        _component("length_match", _min_max_match(avg_len_a, avg_len_b), 0.2, compat_neutral),
    )
    compat_overall = _weighted(compat_components)
    compatibility = CompositeScore(
        name="compatibility",
        overall=compat_overall,
        label=_level_label(compat_overall),
        components=compat_components,
        neutral_components=tuple(compat_neutral),
    )

    interest = {p: interest_score(ctx, p, timing, engagement, trends) for p in ctx.participants}
    ghosts = {p: ghost_risk(p, patterns.monthly_volume, trends) for p in ctx.participants}

    # The less interested of the pair is the one holding illusions about the other
    ranked = sorted(pair, key=lambda p: -interest[p].overall)
    delusion = abs(interest[a].overall - interest[b].overall)
    holder = ranked[1] if delusion >= 5 else None

    return ViralScores(
        compatibility=compatibility,
        interest_scores=interest,
        ghost_risk=ghosts,
        delusion_score=clamp(delusion),
        delusion_holder=holder,
    )


# ============================================================================
# THREAT METERS
# ============================================================================

def threat_level(score: float) -> str:
    if score >= 75:
        return "critical"
    if score >= 50:
        return "elevated"
    if score >= 30:
        return "moderate"
    return "low"


def _meter(meter_id: str, label: str, components: Sequence[ScoreComponent], factors: List[str],
           higher_is_safer: bool = False, neutral: Sequence[str] = ()) -> ThreatMeter:
    """Weighted meter; for safety meters (trust) the level reflects the missing share."""
    score = _weighted(components)
    return ThreatMeter(
        id=meter_id,
        label=label,
        score=score,
        level=threat_level(100 - score if higher_is_safer else score),
        factors=tuple(factors),
        components=tuple(components),
        neutral_components=tuple(neutral),
    )


def compute_threat_meters(
    ctx: AnalysisContext,
    timing: TimingMetrics,
    engagement: EngagementMetrics,
    reciprocity: Optional[ReciprocityIndex],
    viral: Optional[ViralScores],
) -> Optional[Tuple[ThreatMeter, ...]]:
    """Ghost risk, codependency, power imbalance and trust meters for the pair."""
    pair = _gate(ctx)
    if pair is None:
        return None
    a, b = pair

    # Ghost risk: worst per-person ghost risk
    ghost_scores = {p: g for p, g in (viral.ghost_risk.items() if viral else []) if p in pair and g is not None}
    max_ghost = max((g.score for g in ghost_scores.values()), default=0.0)
    ghost_factors = [f"{p}: {f}" for p, g in ghost_scores.items() if g.score > 30 for f in g.factors]
    ghost_meter = _meter("ghost_risk", "Ghost Risk", [ScoreComponent("max_ghost_risk", max_ghost, 1.0)], ghost_factors)

    # Codependency
    init_a = timing.conversation_initiations.get(a, 0)
    init_b = timing.conversation_initiations.get(b, 0)
    init_total = init_a + init_b
    init_ratios = (init_a / init_total, init_b / init_total) if init_total else (0.5, 0.5)
    init_imbalance = abs(init_ratios[0] - init_ratios[1]) * 100

    dt_rates = [
        safe_divide(engagement.double_texts.get(p, 0) * 1000, ctx.message_counts.get(p, 0)) for p in pair
    ]
    max_dt = max(dt_rates)
    rt_a = timing.per_person.get(a)
    rt_b = timing.per_person.get(b)
    rt_ratio = 1.0
    if rt_a is not None and rt_b is not None and rt_b.median_ms > 0:
        rt_ratio = rt_a.median_ms / rt_b.median_ms
    rt_asymmetry = clamp(abs(math.log10(max(rt_ratio, 0.01))) * 30)

    codependency_factors = []
    if init_imbalance > 15:
        codependency_factors.append(f"Uneven initiation: {max(init_ratios) * 100:.0f}%")
    if max_dt > 5:
        codependency_factors.append(f"Double texts: {max_dt:.1f}/1000 msgs")
    if rt_asymmetry > 20:
        codependency_factors.append("Response time asymmetry")
    codependency = _meter("codependency", "Attachment Intensity", [
        ScoreComponent("initiation_imbalance", init_imbalance, 0.45),
        ScoreComponent("double_text_rate", min(max_dt, 80.0), 0.22),
        ScoreComponent("response_time_asymmetry", rt_asymmetry, 0.33),
    ], codependency_factors)

    # Power imbalance
    power_neutral: List[str] = []
    power_components = [
        _component(
            "reciprocity_imbalance", 100 - _symmetry(reciprocity.overall) if reciprocity else None, 0.5, power_neutral,
        ),
        _component(
            "reaction_imbalance",
            100 - _symmetry(reciprocity.reaction_balance) if reciprocity else None,
            0.3,
            power_neutral,
        ),
        ScoreComponent("initiation_imbalance", init_imbalance, 0.2),
    ]
    recip_imbalance = power_components[0].value
    power_factors = []
    if recip_imbalance > 30:
        power_factors.append(f"Uneven reciprocity: {recip_imbalance:.0f}%")
    if power_components[1].value > 30:
        power_factors.append("Uneven reactions")
    power = _meter("power_imbalance", "Power Imbalance", power_components, power_factors, neutral=power_neutral)

    # Trust
    trust_neutral: List[str] = []
    trust_components = [
        _component("reciprocity", _symmetry(reciprocity.overall) if reciprocity else None, 0.4, trust_neutral),
        _component(
            "response_consistency",
            _symmetry(reciprocity.response_time_symmetry) if reciprocity else None,
            0.4,
            trust_neutral,
        ),
        ScoreComponent("ghost_safety", 100 - max_ghost, 0.2),
    ]
    response_consistency = trust_components[1].value
    trust_score = _weighted(trust_components)
    trust_factors = []
    if trust_score < 40:
        trust_factors.append("Low reciprocity")
    if max_ghost > 50:
        trust_factors.append("High ghosting risk")
    if response_consistency < 30:
        trust_factors.append("Unstable response times")
    trust = _meter("trust", "Trust Index", trust_components, trust_factors, higher_is_safer=True, neutral=trust_neutral)

    return ghost_meter, codependency, power, trust
