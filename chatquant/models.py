"""
Typed records for ChatQuant
Input messages, per-person summaries and every derived metric record.

Derived records are frozen: a stage builds a record once and nothing mutates
it afterwards. A metric without enough data is represented by None at the
place where the record would be, never by a record filled with defaults.
"""

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


class FrozenRecord:
    """Base for derived records: dict fields become read-only mappings."""

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, dict):
                object.__setattr__(self, f.name, _freeze(value))


# ============================================================================
# INPUT
# ============================================================================

@dataclass(frozen=True)
class Reaction:
    actor: str
    emoji: str


@dataclass(frozen=True)
class UnifiedMessage:
    """One normalized chat message as produced by a platform parser."""

    sender: str
    timestamp_ms: int
    content: Optional[str] = None
    reactions: Tuple[Reaction, ...] = ()
    has_media: bool = False
    has_link: bool = False
    is_unsent: bool = False

    @property
    def text(self) -> str:
        return self.content or ""


@dataclass(frozen=True)
class Participant:
    name: str


@dataclass(frozen=True)
class ConversationMetadata:
    date_range_start: Optional[int] = None
    date_range_end: Optional[int] = None
    duration_days: Optional[float] = None
    is_group: bool = False


@dataclass(frozen=True)
class ParsedConversation:
    platform: str
    participants: Tuple[Participant, ...]
    messages: Tuple[UnifiedMessage, ...]
    metadata: ConversationMetadata = field(default_factory=ConversationMetadata)

    @property
    def participant_names(self) -> List[str]:
        return [p.name for p in self.participants]


# ============================================================================
# SHARED INTERMEDIATES
# ============================================================================

@dataclass(frozen=True)
class Turn:
    """Consecutive same-sender messages merged into one logical message."""

    sender: str
    start_index: int
    end_index: int
    start_ms: int
    end_ms: int
    message_count: int


@dataclass(frozen=True)
class Session:
    start_index: int
    end_index: int
    initiator: str
    ender: str
    message_count: int


# ============================================================================
# PER-PERSON SUMMARY
# ============================================================================

@dataclass(frozen=True)
class MessageRef:
    content: str
    length: int
    timestamp_ms: int


@dataclass(frozen=True)
class PersonSummary:
    name: str
    total_messages: int
    total_words: int
    total_characters: int
    average_message_length: Optional[float]
    average_message_chars: Optional[float]
    longest_message: Optional[MessageRef]
    shortest_message: Optional[MessageRef]
    messages_with_emoji: int
    emoji_count: int
    top_emojis: Tuple[Tuple[str, int], ...]
    questions_asked: int
    media_shared: int
    links_shared: int
    reactions_given: int
    reactions_received: int
    top_reactions_given: Tuple[Tuple[str, int], ...]
    heart_reactions_given: int
    unsent_messages: int
    top_words: Tuple[Tuple[str, int], ...]
    top_phrases: Tuple[Tuple[str, int], ...]
    unique_words: int
    vocabulary_richness: Optional[float]
    questions_per_1k: Optional[float]
    media_per_1k: Optional[float]
    links_per_1k: Optional[float]
    emoji_messages_per_1k: Optional[float]


# ============================================================================
# TIMING & ENGAGEMENT
# ============================================================================

@dataclass(frozen=True)
class ResponseTimeStats:
    sample_size: int
    filtered_sample_size: int
    outliers_removed: int
    mean_ms: float
    median_ms: float
    trimmed_mean_ms: float
    std_dev_ms: float
    q1_ms: float
    q3_ms: float
    iqr_ms: float
    p75_ms: float
    p90_ms: float
    p95_ms: float
    skewness: Optional[float]
    fastest_ms: float
    slowest_ms: float
    filtered_fastest_ms: float
    filtered_slowest_ms: float
    trend_slope_ms_per_month: Optional[float]
    trend_direction: Optional[str]


@dataclass(frozen=True)
class LongestSilence:
    duration_ms: int
    start_ms: int
    end_ms: int
    last_sender: str
    next_sender: str


@dataclass(frozen=True)
class TimingMetrics(FrozenRecord):
    per_person: Dict[str, Optional[ResponseTimeStats]]
    conversation_initiations: Dict[str, int]
    conversation_endings: Dict[str, int]
    longest_silence: Optional[LongestSilence]
    late_night_messages: Dict[str, int]


@dataclass(frozen=True)
class EngagementMetrics(FrozenRecord):
    double_texts: Dict[str, int]
    max_consecutive: Dict[str, int]
    message_ratio: Dict[str, float]
    reaction_give_rate: Dict[str, Optional[float]]
    reaction_receive_rate: Dict[str, Optional[float]]
    total_sessions: int
    avg_session_length: Optional[float]


# ============================================================================
# SERIES, PATTERNS, HEATMAP
# ============================================================================

@dataclass(frozen=True)
class TrendPoint(FrozenRecord):
    month: str
    per_person: Dict[str, Optional[float]]


@dataclass(frozen=True)
class MonthlyVolume(FrozenRecord):
    month: str
    per_person: Dict[str, int]
    total: int


@dataclass(frozen=True)
class Burst:
    start_date: str
    end_date: str
    days: int
    message_count: int
    avg_daily: float
    baseline_mean: float


@dataclass(frozen=True)
class PatternMetrics(FrozenRecord):
    monthly_volume: Tuple[MonthlyVolume, ...]
    weekday_weekend: Dict[str, Dict[str, int]]
    volume_trend: Optional[float]
    bursts: Tuple[Burst, ...]


@dataclass(frozen=True)
class HeatmapData(FrozenRecord):
    """7x24 grids indexed [day_of_week][hour], Monday = 0."""

    per_person: Dict[str, Tuple[Tuple[int, ...], ...]]
    combined: Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class TrendData:
    response_time_trend: Tuple[TrendPoint, ...]
    message_length_trend: Tuple[TrendPoint, ...]
    initiation_trend: Tuple[TrendPoint, ...]
    sentiment_trend: Tuple[TrendPoint, ...]


# ============================================================================
# SENTIMENT
# ============================================================================

@dataclass(frozen=True)
class MessageSentiment:
    score: float
    matched_tokens: int
    positive: int
    negative: int


@dataclass(frozen=True)
class SentimentStats:
    average: float
    positive_ratio: float
    negative_ratio: float
    neutral_ratio: float
    volatility: Optional[float]
    scored_messages: int
    trend_slope: Optional[float]


@dataclass(frozen=True)
class SentimentAnalysis(FrozenRecord):
    per_person: Dict[str, Optional[SentimentStats]]
    overall_average: Optional[float]
    trend_slope: Optional[float]
    scored_messages: int
    unscored_messages: int


# ============================================================================
# STYLE & DIVERSITY
# ============================================================================

@dataclass(frozen=True)
class LSMResult(FrozenRecord):
    pair: Tuple[str, str]
    overall: float
    per_category: Dict[str, Optional[float]]
    rates: Dict[str, Dict[str, float]]
    categories_used: int
    adaptation: Dict[str, Optional[float]]
    asymmetry: Optional[float]
    adapter: Optional[str]


@dataclass(frozen=True)
class PronounStats:
    total_words: int
    i_rate: float
    we_rate: float
    you_rate: float
    i_you_ratio: Optional[float]


@dataclass(frozen=True)
class TemporalFocus:
    total_words: int
    past_rate: float
    present_rate: float
    future_rate: float
    future_index: Optional[float]
    orientation: Optional[str]


@dataclass(frozen=True)
class IntegrativeComplexity:
    messages: int
    differentiation_count: int
    integration_count: int
    raw_score: float
    score: float
    trend: Optional[float]
    example_phrases: Tuple[str, ...]


@dataclass(frozen=True)
class StyleMetrics(FrozenRecord):
    mtld: Dict[str, Optional[float]]
    lsm: Optional[LSMResult]
    pronouns: Dict[str, Optional[PronounStats]]
    temporal_focus: Dict[str, Optional[TemporalFocus]]
    integrative_complexity: Dict[str, Optional[IntegrativeComplexity]]


# ============================================================================
# CONFLICTS
# ============================================================================

@dataclass(frozen=True)
class ConflictEvent:
    type: str  # escalation | cold_silence | resolution
    timestamp_ms: int
    date: str
    participants: Tuple[str, ...]
    severity: int
    message_range: Tuple[int, int]
    description: str
    accusatory: bool


@dataclass(frozen=True)
class ConflictAnalysis(FrozenRecord):
    events: Tuple[ConflictEvent, ...]
    total_conflicts: int
    most_conflict_prone: Optional[str]
    accusatory_messages: Dict[str, int]


@dataclass(frozen=True)
class PersonConflictProfile:
    escalation_style: str
    deescalation_style: str
    avg_burst_length_in_conflict: float
    avg_burst_length_normal: float
    msg_length_ratio: float
    response_time_shift_ms: Optional[float]
    double_text_rate_in_conflict: float
    interruption_rate: float
    conflict_vocabulary: Tuple[str, ...]
    conflict_initiation_rate: Optional[float]


@dataclass(frozen=True)
class ConflictFingerprint(FrozenRecord):
    per_person: Dict[str, PersonConflictProfile]
    total_conflict_windows: int
    avg_conflict_duration_ms: float
    avg_conflict_duration_messages: float
    top_trigger_words: Tuple[str, ...]


# ============================================================================
# PURSUIT-WITHDRAWAL, RECIPROCITY, BIDS, CHRONOTYPE
# ============================================================================

@dataclass(frozen=True)
class PursuitCycle:
    pursuer: str
    responder: str
    pursuit_timestamp_ms: int
    pursuit_message_count: int
    withdrawal_duration_ms: Optional[int]  # None: unanswered volley at the end of the data
    resolved: bool
    has_demand_marker: bool


@dataclass(frozen=True)
class PursuitWithdrawal(FrozenRecord):
    pursuer: Optional[str]
    withdrawer: Optional[str]
    cycle_count: int
    cycles: Tuple[PursuitCycle, ...]
    cycles_by_pursuer: Dict[str, int]
    avg_withdrawal_ms: Optional[float]
    escalation_trend: Optional[float]


@dataclass(frozen=True)
class ScoreComponent:
    name: str
    value: float
    weight: float


@dataclass(frozen=True)
class ReciprocityIndex:
    pair: Tuple[str, str]
    overall: float
    message_balance: float
    initiation_balance: float
    response_time_symmetry: float
    reaction_balance: float
    components: Tuple[ScoreComponent, ...]
    neutral_components: Tuple[str, ...]


@dataclass(frozen=True)
class PersonBidStats:
    bids_made: int
    turned_toward: int
    turned_away: int
    bids_received: int
    bids_responded_to: int
    success_rate: Optional[float]
    response_rate: Optional[float]


@dataclass(frozen=True)
class BidResponse(FrozenRecord):
    per_person: Dict[str, PersonBidStats]
    total_bids: int
    turned_toward: int
    overall_rate: float


@dataclass(frozen=True)
class PersonChronotype:
    name: str
    peak_hour: int
    midpoint: float
    weekday_midpoint: float
    weekend_midpoint: float
    social_jetlag_hours: float
    category: str
    hourly_distribution: Tuple[int, ...]


@dataclass(frozen=True)
class ChronotypeCompatibility:
    persons: Tuple[PersonChronotype, PersonChronotype]
    delta_hours: float
    match_score: float
    avg_social_jetlag: float


# ============================================================================
# DISCOURSE: REPAIR, SHIFT/SUPPORT
# ============================================================================

@dataclass(frozen=True)
class PersonRepairStats:
    self_repairs: int
    other_repairs: int
    self_repair_rate: float  # per 100 messages
    other_repair_rate: float
    repair_initiation_ratio: float
    label: str


@dataclass(frozen=True)
class RepairPatterns(FrozenRecord):
    per_person: Dict[str, PersonRepairStats]
    mutual_repair_index: float
    dominant_self_repairer: str


@dataclass(frozen=True)
class PersonShiftSupport:
    shift_count: int
    support_count: int
    ambiguous_count: int
    shift_ratio: Optional[float]
    narcissism_index: Optional[int]


@dataclass(frozen=True)
class ShiftSupport(FrozenRecord):
    per_person: Dict[str, PersonShiftSupport]
    higher_index: Optional[str]
    index_gap: int


# ============================================================================
# EMOTIONAL VOCABULARY & CLOSENESS
# ============================================================================

@dataclass(frozen=True)
class PersonEmotionalGranularity(FrozenRecord):
    distinct_categories: int
    emotion_word_count: int
    category_counts: Dict[str, int]
    score: int
    dominant_category: Optional[str]
    cooccurrence_index: float
    adjusted_score: int


@dataclass(frozen=True)
class EmotionalGranularity(FrozenRecord):
    per_person: Dict[str, PersonEmotionalGranularity]
    higher_granularity: str


@dataclass(frozen=True)
class IntimacyPoint:
    month: str
    score: int
    message_length_factor: int
    emotional_words_factor: int
    informality_factor: int
    late_night_factor: int


@dataclass(frozen=True)
class IntimacyProgression:
    points: Tuple[IntimacyPoint, ...]
    slope: float
    label: str


# ============================================================================
# FOUR HORSEMEN
# ============================================================================

@dataclass(frozen=True)
class Horseman(FrozenRecord):
    id: str
    label: str
    emoji: str
    score: float
    severity: str
    present: bool
    marker_counts: Dict[str, int]
    evidence: Tuple[str, ...]


@dataclass(frozen=True)
class FourHorsemen:
    horsemen: Tuple[Horseman, ...]
    active_count: int
    risk_level: str


# ============================================================================
# CATCHPHRASES & BEST TIME TO TEXT
# ============================================================================

@dataclass(frozen=True)
class Catchphrase:
    phrase: str
    count: int
    uniqueness: float


@dataclass(frozen=True)
class BestTimeToText:
    day: str
    hour: int
    window: str
    median_response_ms: Optional[float]


# ============================================================================
# COMPOSITES
# ============================================================================

@dataclass(frozen=True)
class CompositeScore:
    name: str
    overall: float
    label: str
    components: Tuple[ScoreComponent, ...]
    neutral_components: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DamageReport:
    emotional_damage: float
    communication_grade: str
    repair_potential: float
    damage_components: Tuple[ScoreComponent, ...]
    repair_components: Tuple[ScoreComponent, ...]
    neutral_components: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ThreatMeter:
    id: str
    label: str
    score: float
    level: str
    factors: Tuple[str, ...]
    components: Tuple[ScoreComponent, ...]
    neutral_components: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GhostRisk:
    score: float
    factors: Tuple[str, ...]
    components: Tuple[ScoreComponent, ...]


@dataclass(frozen=True)
class ViralScores(FrozenRecord):
    compatibility: CompositeScore
    interest_scores: Dict[str, CompositeScore]
    ghost_risk: Dict[str, Optional[GhostRisk]]
    delusion_score: float
    delusion_holder: Optional[str]


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    emoji: str
    description: str
    holder: str
    evidence: str


@dataclass(frozen=True)
class RankingPercentile:
    metric: str
    label: str
    emoji: str
    value: float
    percentile: float
    is_estimate: bool = True


# ============================================================================
# RESULT
# ============================================================================

@dataclass(frozen=True)
class QuantitativeAnalysis(FrozenRecord):
    participants: Tuple[str, ...]
    total_messages: int
    skipped_messages: int
    per_person: Dict[str, PersonSummary]
    timing: TimingMetrics
    engagement: EngagementMetrics
    patterns: PatternMetrics
    heatmap: HeatmapData
    trends: TrendData
    sentiment: SentimentAnalysis
    style: StyleMetrics
    conflicts: ConflictAnalysis
    badges: Tuple[Badge, ...]
    pair: Optional[Tuple[str, str]] = None
    conflict_fingerprint: Optional[ConflictFingerprint] = None
    pursuit_withdrawal: Optional[PursuitWithdrawal] = None
    reciprocity: Optional[ReciprocityIndex] = None
    bid_response: Optional[BidResponse] = None
    chronotype: Optional[ChronotypeCompatibility] = None
    health_score: Optional[CompositeScore] = None
    damage_report: Optional[DamageReport] = None
    threat_meters: Optional[Tuple[ThreatMeter, ...]] = None
    viral_scores: Optional[ViralScores] = None
    ranking_percentiles: Optional[Tuple[RankingPercentile, ...]] = None
    repair_patterns: Optional[RepairPatterns] = None
    shift_support: Optional[ShiftSupport] = None
    emotional_granularity: Optional[EmotionalGranularity] = None
    intimacy: Optional[IntimacyProgression] = None
    four_horsemen: Optional[FourHorsemen] = None
    catchphrases: Optional[Dict[str, Tuple[Catchphrase, ...]]] = None
    best_time_to_text: Optional[Dict[str, Optional[BestTimeToText]]] = None
