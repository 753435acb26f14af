"""
Catchphrases and best time to text for ChatQuant
Phrases one person repeats and the other rarely uses, and each person's
busiest hour of the week
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Tuple

import numpy as np

from .context import AnalysisContext
from .helpers import strip_emojis, tokenize_words
from .lexicons import STOPWORDS
from .models import BestTimeToText, Catchphrase, HeatmapData, TimingMetrics

logger = logging.getLogger(__name__)

CATCHPHRASE_MIN_COUNT = 3
# Share of all uses of the phrase that must come from this person
CATCHPHRASE_MIN_UNIQUENESS = 0.6
CATCHPHRASE_LIMIT = 8

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
BEST_WINDOW_HOURS = 2


def _phrase_tokens(text: str) -> List[str]:
    return [t for t in tokenize_words(strip_emojis(text)) if len(t) >= 2 and t not in STOPWORDS]


def compute_catchphrases(ctx: AnalysisContext) -> Optional[Dict[str, Tuple[Catchphrase, ...]]]:
    """
    Up to CATCHPHRASE_LIMIT signature bigrams/trigrams per person.

    A phrase qualifies when the person used it CATCHPHRASE_MIN_COUNT+ times
    and owns CATCHPHRASE_MIN_UNIQUENESS of its uses across everyone. Ranked by
    count x uniqueness. None for an empty conversation.
    """
    if ctx.total_messages == 0:
        return None

    per_person: Dict[str, Counter] = {p: Counter() for p in ctx.participants}
    for msg in ctx.messages:
        if msg.sender not in per_person or not msg.text.strip():
            continue
        tokens = _phrase_tokens(msg.text)
        counts = per_person[msg.sender]
        for n in (2, 3):
            for i in range(len(tokens) - n + 1):
                counts[" ".join(tokens[i:i + n])] += 1

    overall: Counter = Counter()
    for counts in per_person.values():
        overall.update(counts)

    result = {}
    for name, counts in per_person.items():
        candidates = [
            Catchphrase(phrase=phrase, count=count, uniqueness=round(count / overall[phrase], 2))
            for phrase, count in counts.items()
            if count >= CATCHPHRASE_MIN_COUNT and count / overall[phrase] >= CATCHPHRASE_MIN_UNIQUENESS
        ]
        candidates.sort(key=lambda c: c.count * c.uniqueness, reverse=True)
        result[name] = tuple(candidates[:CATCHPHRASE_LIMIT])

    logger.info(f"Catchphrases: {sum(len(v) for v in result.values())} found")
    return result


def compute_best_time_to_text(
    ctx: AnalysisContext,
    heatmap: HeatmapData,
    timing: TimingMetrics,
) -> Optional[Dict[str, Optional[BestTimeToText]]]:
    """
    The weekday and hour each person writes most, as a two-hour window.

    Ties go to the earlier slot in the week. None per person without
    messages; None overall for an empty conversation.
    """
    if ctx.total_messages == 0:
        return None

    result: Dict[str, Optional[BestTimeToText]] = {}
    for name in ctx.participants:
        grid = np.asarray(heatmap.per_person[name])
        if grid.sum() == 0:
            result[name] = None
            continue
        day, hour = np.unravel_index(int(np.argmax(grid)), grid.shape)
        day, hour = int(day), int(hour)
        end = min(hour + BEST_WINDOW_HOURS, 24)
        stats = timing.per_person.get(name)
        result[name] = BestTimeToText(
            day=DAY_NAMES[day],
            hour=hour,
            window=f"{DAY_NAMES[day]}s {hour:02d}:00-{end:02d}:00",
            median_response_ms=stats.median_ms if stats is not None else None,
        )
    return result
