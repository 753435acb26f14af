"""
Configuration module for ChatQuant
Loads environment variables and provides analysis thresholds and weights
"""

import os
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

# Local time used for hour-of-day / weekday bucketing (heatmap, chronotype, late night)
ANALYSIS_TIMEZONE = os.getenv("CHATQUANT_TIMEZONE", "UTC")

# ============================================================================
# Timing
# ============================================================================

# Gap that separates two conversation sessions
SESSION_GAP_MS = int(float(os.getenv("SESSION_GAP_HOURS", "6")) * HOUR_MS)

# Same-sender messages closer than this merge into one logical turn
TURN_MERGE_GAP_MS = int(float(os.getenv("TURN_MERGE_GAP_MINUTES", "2")) * MINUTE_MS)

# Response-time outlier fence: Q3 + factor * IQR (applied only with enough samples)
OUTLIER_IQR_FACTOR = float(os.getenv("OUTLIER_IQR_FACTOR", "3.0"))
OUTLIER_MIN_SAMPLES = int(os.getenv("OUTLIER_MIN_SAMPLES", "10"))
TRIMMED_MEAN_PROPORTION = float(os.getenv("TRIMMED_MEAN_PROPORTION", "0.1"))

# Monthly regressions need at least this many months
MIN_TREND_MONTHS = int(os.getenv("MIN_TREND_MONTHS", "3"))

LATE_NIGHT_START_HOUR = 22
LATE_NIGHT_END_HOUR = 4

# ============================================================================
# Sentiment
# ============================================================================

NEGATION_WINDOW = int(os.getenv("NEGATION_WINDOW", "2"))
MIN_VOLATILITY_MESSAGES = 3

# ============================================================================
# Style & diversity minimum samples
# ============================================================================

MTLD_TTR_THRESHOLD = float(os.getenv("MTLD_TTR_THRESHOLD", "0.72"))
MTLD_MIN_WORDS = int(os.getenv("MTLD_MIN_WORDS", "50"))
LSM_MIN_WORDS = int(os.getenv("LSM_MIN_WORDS", "50"))
LSM_MIN_RATE_PER_1000 = float(os.getenv("LSM_MIN_RATE_PER_1000", "1.0"))  # 0.1%
LSM_ADAPTER_MIN_DIFF = 0.05
PRONOUN_MIN_WORDS = int(os.getenv("PRONOUN_MIN_WORDS", "200"))
TEMPORAL_MIN_WORDS = int(os.getenv("TEMPORAL_MIN_WORDS", "500"))
IC_MIN_MESSAGES = int(os.getenv("IC_MIN_MESSAGES", "30"))
IC_COMPRESSION = 6.5  # typical informal chat values 0-15 per 100 msgs -> 0-100

# ============================================================================
# Pattern detectors
# ============================================================================

BURST_WINDOW_DAYS = int(os.getenv("BURST_WINDOW_DAYS", "7"))
BURST_SIGMA = float(os.getenv("BURST_SIGMA", "2.0"))

CONFLICT_MIN_MESSAGES = 20
ESCALATION_ROLLING_WINDOW = 10
ESCALATION_MIN_HISTORY = 5
ESCALATION_MULTIPLIER = float(os.getenv("ESCALATION_MULTIPLIER", "2.0"))
ESCALATION_CONFIRM_WINDOW_MS = 15 * MINUTE_MS
CONFLICT_DEDUP_MS = 4 * HOUR_MS
COLD_SILENCE_MS = int(float(os.getenv("COLD_SILENCE_DAYS", "3")) * DAY_MS)
INTENSE_MSGS_PER_HOUR = 8
INTENSITY_LOOKBACK_MS = HOUR_MS
PRE_SILENCE_MSG_COUNT = 5

FINGERPRINT_WINDOW_PADDING = 30
FINGERPRINT_MIN_CONFLICTS = int(os.getenv("FINGERPRINT_MIN_CONFLICTS", "3"))
# Replies this many times slower than the person's own median read as ghosting
FINGERPRINT_GHOST_RT_FACTOR = float(os.getenv("FINGERPRINT_GHOST_RT_FACTOR", "3.0"))

PURSUIT_WINDOW_MS = 30 * MINUTE_MS
PURSUIT_MIN_MESSAGES = 4
PURSUIT_ALWAYS_FLAG = 6
WITHDRAWAL_MS = int(float(os.getenv("WITHDRAWAL_HOURS", "4")) * HOUR_MS)

RECIPROCITY_MIN_MESSAGES = int(os.getenv("RECIPROCITY_MIN_MESSAGES", "30"))
RECIPROCITY_WEIGHTS: Dict[str, float] = {
    "message_balance": 0.30,
    "initiation_balance": 0.25,
    "response_time_symmetry": 0.15,
    "reaction_balance": 0.30,
}

BID_RESPONSE_WINDOW_MS = 4 * HOUR_MS
BID_LOOKAHEAD_MESSAGES = 4
BID_MIN_COUNT = int(os.getenv("BID_MIN_COUNT", "10"))

CHRONOTYPE_MIN_MESSAGES = 20
CHRONOTYPE_SPLIT_MIN_MESSAGES = 10
CHRONOTYPE_FALLOFF_HOURS = 6.0

# ============================================================================
# Composite scores
# ============================================================================

COMPOSITE_MIN_MESSAGES = 30

HEALTH_WEIGHT_BALANCE = float(os.getenv("HEALTH_WEIGHT_BALANCE", "0.25"))
HEALTH_WEIGHT_RECIPROCITY = float(os.getenv("HEALTH_WEIGHT_RECIPROCITY", "0.20"))
HEALTH_WEIGHT_RESPONSE = float(os.getenv("HEALTH_WEIGHT_RESPONSE", "0.20"))
HEALTH_WEIGHT_SAFETY = float(os.getenv("HEALTH_WEIGHT_SAFETY", "0.20"))
HEALTH_WEIGHT_TRAJECTORY = float(os.getenv("HEALTH_WEIGHT_TRAJECTORY", "0.15"))

# Memo cache bound (0 = unbounded)
CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "50000"))

# ============================================================================
# Emoji lexicon (valence in [-1, 1]), used as the last sentiment layer
# ============================================================================

EMOJI_LEXICON: Dict[str, float] = {
    # Affection
    "❤️": 1.0, "😍": 1.0, "💖": 1.0, "💕": 1.0, "💘": 1.0, "💓": 1.0,
    "💝": 1.0, "💞": 1.0, "😘": 0.9, "🥰": 1.0, "💗": 1.0, "🤗": 0.8,
    "😊": 0.6, "💛": 0.7, "💙": 0.7, "💚": 0.7, "💜": 0.7, "🫶": 0.8,
    "🫂": 0.8, "🌹": 0.7,
    # Laughter / playful
    "😂": 0.4, "🤣": 0.4, "😆": 0.4, "😜": 0.3, "😛": 0.3, "🤪": 0.3,
    # Approval / excitement
    "👍": 0.4, "👏": 0.5, "💯": 0.6, "👌": 0.4, "🙏": 0.5, "🎉": 0.7,
    "🥳": 0.8, "🤩": 0.8, "😃": 0.5, "😄": 0.5, "😁": 0.5, "🔥": 0.5,
    # Negative
    "🙄": -0.3, "😒": -0.5, "😕": -0.3, "😡": -1.0, "🤬": -1.0,
    "😠": -0.9, "😤": -0.6, "👎": -0.6, "☹️": -0.5, "😖": -0.5,
    "😢": -0.6, "😭": -0.6, "😞": -0.5, "🥺": -0.3, "💔": -0.9,
    "😥": -0.5, "😰": -0.6, "😟": -0.5, "😔": -0.5,
}

# Heart emojis (heart reactions, badges)
HEART_EMOJIS = ["❤️", "❤", "😍", "🥰", "💕", "💖", "💗", "💘", "💞", "😘"]


def get_config_summary() -> Dict[str, Any]:
    """Return a summary of current configuration."""
    return {
        "timing": {
            "session_gap_ms": SESSION_GAP_MS,
            "turn_merge_gap_ms": TURN_MERGE_GAP_MS,
            "outlier_iqr_factor": OUTLIER_IQR_FACTOR,
            "timezone": ANALYSIS_TIMEZONE,
        },
        "minimum_samples": {
            "mtld_words": MTLD_MIN_WORDS,
            "pronoun_words": PRONOUN_MIN_WORDS,
            "temporal_words": TEMPORAL_MIN_WORDS,
            "ic_messages": IC_MIN_MESSAGES,
            "reciprocity_messages": RECIPROCITY_MIN_MESSAGES,
            "bids": BID_MIN_COUNT,
            "fingerprint_conflicts": FINGERPRINT_MIN_CONFLICTS,
        },
        "detectors": {
            "burst_window_days": BURST_WINDOW_DAYS,
            "burst_sigma": BURST_SIGMA,
            "cold_silence_ms": COLD_SILENCE_MS,
            "withdrawal_ms": WITHDRAWAL_MS,
        },
        "weights": {
            "reciprocity": dict(RECIPROCITY_WEIGHTS),
            "health": {
                "balance": HEALTH_WEIGHT_BALANCE,
                "reciprocity": HEALTH_WEIGHT_RECIPROCITY,
                "response_stability": HEALTH_WEIGHT_RESPONSE,
                "emotional_safety": HEALTH_WEIGHT_SAFETY,
                "trajectory": HEALTH_WEIGHT_TRAJECTORY,
            },
        },
        "cache": {
            "max_entries": CACHE_MAX_ENTRIES,
        },
    }


def validate_config() -> tuple[bool, str]:
    """Validate configuration. Returns (is_valid, message)."""
    health_total = (
        HEALTH_WEIGHT_BALANCE + HEALTH_WEIGHT_RECIPROCITY + HEALTH_WEIGHT_RESPONSE
        + HEALTH_WEIGHT_SAFETY + HEALTH_WEIGHT_TRAJECTORY
    )
    if abs(health_total - 1.0) > 0.01:
        return False, f"Health weights sum to {health_total:.2f}, should be ~1.0"

    recip_total = sum(RECIPROCITY_WEIGHTS.values())
    if abs(recip_total - 1.0) > 0.01:
        return False, f"Reciprocity weights sum to {recip_total:.2f}, should be ~1.0"

    if SESSION_GAP_MS <= 0 or TURN_MERGE_GAP_MS <= 0:
        return False, "Session and turn gaps must be positive"

    if not 0 < MTLD_TTR_THRESHOLD < 1:
        return False, f"MTLD_TTR_THRESHOLD must be in (0, 1), got {MTLD_TTR_THRESHOLD}"

    return True, "Configuration valid"


if __name__ == "__main__":
    # Print config summary for debugging
    import json
    print("ChatQuant Configuration:")
    print(json.dumps(get_config_summary(), indent=2))
    print()
    valid, msg = validate_config()
    print(f"Validation: {msg}")
