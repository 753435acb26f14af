"""
Shared numeric and text helpers for ChatQuant
Robust statistics, regression, tokenizing and emoji extraction
"""

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple
import numpy as np
import emoji

from . import config

logger = logging.getLogger(__name__)

WORD_RE = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")
REPEATED_LETTERS_RE = re.compile(r"(.)\1{2,}")
URL_RE = re.compile(r"(https?://|www\.)\S+", re.IGNORECASE)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def safe_divide(numerator: float, denominator: float, default: Optional[float] = 0.0) -> Optional[float]:
    """Safe division with default fallback (pass default=None for an explicit null)."""
    if denominator == 0 or np.isnan(denominator) or np.isnan(numerator):
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def clamp(value: float, min_val: float = 0.0, max_val: float = 100.0) -> float:
    """Clamp value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


# ============================================================================
# ROBUST STATISTICS
# ============================================================================

def percentile(values: Sequence[float], pct: float) -> Optional[float]:
    """Percentile with linear interpolation between closest ranks."""
    if len(values) == 0:
        return None
    return float(np.percentile(np.asarray(values, dtype=float), pct))


def trimmed_mean(values: Sequence[float], proportion: Optional[float] = None) -> Optional[float]:
    """
    Mean after cutting `proportion` of the sorted values from each tail.

    Falls back to the plain mean when the sample is too small to trim.
    """
    if len(values) == 0:
        return None
    prop = config.TRIMMED_MEAN_PROPORTION if proportion is None else proportion
    arr = np.sort(np.asarray(values, dtype=float))
    cut = int(math.floor(len(arr) * prop))
    if cut > 0 and len(arr) - 2 * cut > 0:
        arr = arr[cut:len(arr) - cut]
    return float(arr.mean())


def filter_outliers(values: Sequence[float]) -> Tuple[List[float], int]:
    """
    Drop values above Q3 + k*IQR.

    Only applied with at least OUTLIER_MIN_SAMPLES values; smaller samples are
    returned unchanged. Returns (kept_values, removed_count).
    """
    vals = [float(v) for v in values]
    if len(vals) < config.OUTLIER_MIN_SAMPLES:
        return vals, 0

    q1, q3 = np.percentile(vals, [25, 75])
    upper = q3 + config.OUTLIER_IQR_FACTOR * (q3 - q1)
    kept = [v for v in vals if v <= upper]
    return kept, len(vals) - len(kept)


def population_variance(values: Sequence[float]) -> Optional[float]:
    if len(values) == 0:
        return None
    return float(np.var(np.asarray(values, dtype=float)))


def skewness(values: Sequence[float]) -> Optional[float]:
    """Fisher-Pearson skewness; None when undefined (n < 3 or zero spread)."""
    if len(values) < 3:
        return None
    arr = np.asarray(values, dtype=float)
    std = arr.std()
    if std == 0:
        return None
    return float(np.mean(((arr - arr.mean()) / std) ** 3))


def linear_regression_slope(values: Sequence[Optional[float]]) -> Optional[float]:
    """
    OLS slope of values against their index (0, 1, 2, ...).

    None/NaN entries are dropped while keeping the original x positions.
    Returns None with fewer than two usable points.
    """
    points = [
        (x, float(y)) for x, y in enumerate(values)
        if y is not None and math.isfinite(float(y))
    ]
    if len(points) < 2:
        return None
    xs = np.array([p[0] for p in points], dtype=float)
    ys = np.array([p[1] for p in points], dtype=float)
    if np.all(xs == xs[0]):
        return None
    slope, _intercept = np.polyfit(xs, ys, 1)
    return float(slope)


def trend_direction(
    slope: Optional[float],
    tolerance: float = 0.0,
    labels: Tuple[str, str] = ("rising", "falling"),
) -> Optional[str]:
    """Name a slope as (up_label, down_label) or "stable" within +/- tolerance."""
    if slope is None:
        return None
    if slope > tolerance:
        return labels[0]
    if slope < -tolerance:
        return labels[1]
    return "stable"


# ============================================================================
# TEXT
# ============================================================================

def tokenize_words(text: Optional[str]) -> List[str]:
    """Lowercase word tokens with punctuation stripped ("don't" -> "dont")."""
    if not text:
        return []
    tokens = []
    for match in WORD_RE.findall(text.lower()):
        token = match.replace("'", "").replace("’", "")
        if token and not token.isdigit():
            tokens.append(token)
    return tokens


def count_words(text: Optional[str]) -> int:
    """Whitespace word count (0 for empty/None)."""
    if not text:
        return 0
    return len(text.split())


def collapse_repeats(token: str) -> str:
    """Collapse letters repeated 3+ times down to two ("sooo" -> "soo")."""
    return REPEATED_LETTERS_RE.sub(r"\1\1", token)


def extract_emojis(text: Optional[str]) -> List[str]:
    """
    Extract emojis as whole graphemes.

    Multi-codepoint sequences (ZWJ families, skin tones, flags) are returned
    as a single item.
    """
    if not text:
        return []
    return [item["emoji"] for item in emoji.emoji_list(text)]


def strip_emojis(text: str) -> str:
    return emoji.replace_emoji(text, replace=" ")


def contains_link(text: Optional[str]) -> bool:
    if not text:
        return False
    return URL_RE.search(text) is not None


def find_phrases(text: Optional[str], phrases: Sequence[str]) -> List[str]:
    """
    Return the phrases that occur in the text as whole words.

    Short markers such as "k" or "ok" do not match inside longer words.
    """
    if not text:
        return []
    lower = text.lower()
    found = []
    for phrase in phrases:
        pattern = r"(?<!\w)" + re.escape(phrase) + r"(?!\w)"
        if re.search(pattern, lower):
            found.append(phrase)
    return found


def ngram_matches(tokens: Sequence[str], markers: frozenset, max_n: int = 3) -> int:
    """Count unigram, bigram and trigram hits of tokens against a marker set."""
    count = 0
    n_tokens = len(tokens)
    for i in range(n_tokens):
        gram = tokens[i]
        if gram in markers:
            count += 1
        for n in range(2, max_n + 1):
            if i + n > n_tokens:
                break
            gram = gram + " " + tokens[i + n - 1]
            if gram in markers:
                count += 1
    return count
