"""
Ranking percentiles for ChatQuant
Where a conversation sits against hand-set log-normal reference distributions.
These are estimates, not benchmarks measured on a real population.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from .context import AnalysisContext
from .helpers import clamp
from .models import RankingPercentile, TimingMetrics

logger = logging.getLogger(__name__)


class EstimatedDistribution:
    """
    Log-normal reference distribution given by its median and log-sigma.

    `percentile(value)` returns the share of conversations (1-99) this value
    beats. With higher_is_better=False, smaller values rank higher.
    """

    def __init__(self, median: float, sigma: float, higher_is_better: bool = True):
        self.median = median
        self.sigma = sigma
        self.higher_is_better = higher_is_better

    def cdf(self, value: float) -> float:
        z = (math.log(value) - math.log(self.median)) / (self.sigma * math.sqrt(2))
        return 0.5 * (1 + math.erf(z))

    def percentile(self, value: float) -> float:
        if value <= 0:
            return 1.0
        share = self.cdf(value)
        if not self.higher_is_better:
            share = 1 - share
        return clamp(share * 100, 1.0, 99.0)


# metric -> (label, emoji, distribution)
DISTRIBUTIONS: Dict[str, Tuple[str, str, EstimatedDistribution]] = {
    "message_volume": ("Message volume", "💬", EstimatedDistribution(median=3000, sigma=1.2)),
    "response_time": (
        "Response speed", "⚡", EstimatedDistribution(median=480, sigma=1.5, higher_is_better=False),
    ),
    "ghost_frequency": ("Longest silence", "👻", EstimatedDistribution(median=12, sigma=1.2)),
    "asymmetry": ("Initiation asymmetry", "⚖️", EstimatedDistribution(median=20, sigma=0.8)),
}


def _rank(metric: str, value: float) -> RankingPercentile:
    label, emoji_char, dist = DISTRIBUTIONS[metric]
    pct = dist.percentile(value)
    if metric == "response_time" and value <= 0:
        # No replies measured: neither fast nor slow
        pct = 50.0
    return RankingPercentile(metric=metric, label=label, emoji=emoji_char, value=value, percentile=pct)


def compute_ranking_percentiles(ctx: AnalysisContext, timing: TimingMetrics) -> Optional[Tuple[RankingPercentile, ...]]:
    """Rank message volume, response speed, longest silence and initiation asymmetry."""
    if ctx.total_messages == 0:
        return None

    all_rts: List[float] = [rt for samples in ctx.response_times.values() for _, rt in samples]
    median_rt_seconds = float(np.median(all_rts)) / 1000 if all_rts else 0.0

    silence = timing.longest_silence
    silence_hours = silence.duration_ms / 3_600_000 if silence is not None else 0.0

    asymmetry = 0.0
    if ctx.pair is not None:
        a, b = ctx.pair
        init_a = timing.conversation_initiations.get(a, 0)
        init_b = timing.conversation_initiations.get(b, 0)
        if init_a + init_b:
            asymmetry = abs(init_a - init_b) / (init_a + init_b) * 100

    return (
        _rank("message_volume", float(ctx.total_messages)),
        _rank("response_time", median_rt_seconds),
        _rank("ghost_frequency", silence_hours),
        _rank("asymmetry", asymmetry),
    )
