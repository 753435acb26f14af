"""
Badges for ChatQuant
Fun per-person superlatives derived from the computed metrics
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from .context import AnalysisContext
from .models import Badge, Catchphrase, EngagementMetrics, HeatmapData, TimingMetrics

logger = logging.getLogger(__name__)

EARLY_HOURS = range(0, 8)


def _winner(values: Dict[str, float], lowest: bool = False) -> Optional[Tuple[str, float]]:
    """Best positive value; ties go to the earlier participant."""
    best = None
    for name, value in values.items():
        if value is None or value <= 0:
            continue
        if best is None or (value < best[1] if lowest else value > best[1]):
            best = (name, value)
    return best


def format_duration(ms: float) -> str:
    seconds = int(ms // 1000)
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {rest}m" if rest else f"{hours}h"
    return f"{hours // 24} days"


def longest_daily_streaks(ctx: AnalysisContext) -> Dict[str, int]:
    """Longest run of consecutive local days on which each person wrote."""
    streaks = {}
    for name in ctx.participants:
        days = pd.to_datetime(ctx.person_frame(name)["date"].unique())
        if len(days) == 0:
            streaks[name] = 0
            continue
        days = days.sort_values()
        best = current = 1
        for prev, day in zip(days, days[1:]):
            current = current + 1 if (day - prev).days == 1 else 1
            best = max(best, current)
        streaks[name] = best
    return streaks


def compute_badges(
    ctx: AnalysisContext,
    timing: TimingMetrics,
    engagement: EngagementMetrics,
    heatmap: HeatmapData,
    catchphrases: Optional[Dict[str, Tuple[Catchphrase, ...]]] = None,
) -> Tuple[Badge, ...]:
    """Award each badge to the participant with the most extreme value."""
    names = ctx.participants
    summaries = ctx.summaries
    totals = {n: summaries[n].total_messages for n in names}
    badges: List[Badge] = []

    def award(badge_id: str, title: str, emoji_char: str, description: str,
              values: Dict[str, float], evidence: Callable[[float], str], lowest: bool = False):
        won = _winner(values, lowest=lowest)
        if won is None:
            return
        badges.append(Badge(
            id=badge_id, name=title, emoji=emoji_char, description=description,
            holder=won[0], evidence=evidence(won[1]),
        ))

    award(
        "night-owl", "Night Owl", "🦉", "Highest share of messages sent between 22:00 and 04:00",
        {n: timing.late_night_messages.get(n, 0) / totals[n] * 100 if totals[n] else 0 for n in names},
        lambda v: f"{v:.1f}% of messages after 22:00",
    )

    early = {}
    for n in names:
        grid = heatmap.per_person[n]
        count = sum(grid[day][hour] for day in range(7) for hour in EARLY_HOURS)
        early[n] = count / totals[n] * 100 if totals[n] else 0
    award(
        "early-bird", "Early Bird", "🐦", "Highest share of messages sent before 08:00",
        early, lambda v: f"{v:.1f}% of messages before 08:00",
    )

    silence = timing.longest_silence
    if silence is not None and silence.duration_ms > 0:
        badges.append(Badge(
            id="ghost-champion", name="Ghosting Champion", emoji="👻",
            description="Sent the last message before the longest silence",
            holder=silence.last_sender,
            evidence=f"The silence lasted {format_duration(silence.duration_ms)}",
        ))

    award(
        "double-texter", "Double Texter", "💬", "Most often wrote again without a reply",
        {n: engagement.double_texts.get(n, 0) for n in names},
        lambda v: f"{int(v)} unanswered follow-ups",
    )
    award(
        "novelist", "Novelist", "📖", "Highest average message length",
        {n: summaries[n].average_message_length or 0 for n in names},
        lambda v: f"{v:.1f} words per message on average",
    )
    award(
        "speed-demon", "Speed Demon", "⚡", "Fastest median response time",
        {n: timing.per_person[n].median_ms if timing.per_person.get(n) else 0 for n in names},
        lambda v: f"Median reply: {format_duration(v)}",
        lowest=True,
    )
    award(
        "emoji-monarch", "Emoji Monarch", "😂", "Most emoji per message",
        {n: summaries[n].emoji_count / totals[n] if totals[n] else 0 for n in names},
        lambda v: f"{v:.2f} emoji per message",
    )

    total_init = sum(timing.conversation_initiations.values())
    award(
        "initiator", "Initiator", "🔁", "Started the most conversations",
        {n: timing.conversation_initiations.get(n, 0) for n in names},
        lambda v: f"Started {v / total_init * 100:.0f}% of conversations",
    )

    award(
        "heart-bomber", "Heart Bomber", "❤️", "Most heart reactions given",
        {n: summaries[n].heart_reactions_given for n in names}, lambda v: f"{int(v)} heart reactions",
    )
    award(
        "question-master", "Question Master", "❓", "Asked the most questions",
        {n: summaries[n].questions_asked for n in names},
        lambda v: f"{int(v)} questions asked",
    )
    award(
        "link-lord", "Link Lord", "📎", "Shared the most links",
        {n: summaries[n].links_shared for n in names},
        lambda v: f"{int(v)} links shared",
    )
    award(
        "streak-master", "Streak Master", "🔥", "Longest run of consecutive days writing",
        longest_daily_streaks(ctx), lambda v: f"{int(v)} days in a row",
    )

    if catchphrases:
        top = {n: phrases[0] for n, phrases in catchphrases.items() if phrases}
        won = _winner({n: top[n].count if n in top else 0 for n in names})
        if won is not None:
            phrase = top[won[0]]
            badges.append(Badge(
                id="catchphrase", name="Catchphrase Machine", emoji="🗣️",
                description="Repeats a signature phrase more than anyone",
                holder=won[0], evidence=f"\"{phrase.phrase}\" {phrase.count} times",
            ))

    logger.info(f"Awarded {len(badges)} badges")
    return tuple(badges)
