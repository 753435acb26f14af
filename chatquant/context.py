"""
Analysis context for ChatQuant
Holds the validated messages, their DataFrame view and the intermediates
shared by every detector in one analysis run
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple
import pandas as pd

from . import config
from .cache import AnalysisCache
from .helpers import count_words
from .models import (
    MessageSentiment,
    ParsedConversation,
    PersonSummary,
    Session,
    Turn,
    UnifiedMessage,
)

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "sender", "timestamp_ms", "text", "words", "chars",
    "has_media", "has_link", "is_unsent", "reaction_count",
]


def build_frame(messages: Sequence[UnifiedMessage]) -> pd.DataFrame:
    """
    Build the message DataFrame (one row per message, index = message index).

    Local-time columns (hour, weekday, month, date) use config.ANALYSIS_TIMEZONE.
    """
    records = [
        {
            "sender": m.sender,
            "timestamp_ms": m.timestamp_ms,
            "text": m.text,
            "words": count_words(m.text),
            "chars": len(m.text),
            "has_media": m.has_media,
            "has_link": m.has_link,
            "is_unsent": m.is_unsent,
            "reaction_count": len(m.reactions),
        }
        for m in messages
    ]
    df = pd.DataFrame(records, columns=FRAME_COLUMNS)
    df["timestamp_ms"] = df["timestamp_ms"].astype("int64")
    df["words"] = df["words"].astype("int64")
    df["chars"] = df["chars"].astype("int64")

    local_ts = pd.to_datetime(df["timestamp_ms"], unit="ms", utc=True).dt.tz_convert(
        config.ANALYSIS_TIMEZONE
    )
    df["local_ts"] = local_ts
    df["hour"] = local_ts.dt.hour + local_ts.dt.minute / 60.0 + local_ts.dt.second / 3600.0
    df["hour_int"] = local_ts.dt.hour
    df["weekday"] = local_ts.dt.dayofweek
    df["month"] = local_ts.dt.strftime("%Y-%m")
    df["date"] = local_ts.dt.strftime("%Y-%m-%d")
    df["is_text"] = df["text"].str.strip().str.len() > 0
    return df


def select_pair(participants: Sequence[str], counts: Dict[str, int]) -> Optional[Tuple[str, str]]:
    """
    The two most active participants, ties broken by participant order.

    None when fewer than two participants have sent a message.
    """
    active = [p for p in participants if counts.get(p, 0) > 0]
    if len(active) < 2:
        return None
    ranked = sorted(active, key=lambda p: (-counts[p], participants.index(p)))
    return ranked[0], ranked[1]


class AnalysisContext:
    """
    Shared state for one `analyze()` invocation.

    Stages populate the intermediate attributes in pipeline order (turns and
    sessions by the timing stage, sentiment scores by the sentiment stage,
    person summaries and token streams by the accumulator) and later stages
    only read them.
    """

    def __init__(
        self,
        conversation: ParsedConversation,
        cache: Optional[AnalysisCache] = None,
        skipped_messages: int = 0,
    ):
        self.conversation = conversation
        self.messages: Tuple[UnifiedMessage, ...] = conversation.messages
        self.participants: List[str] = conversation.participant_names
        self.cache = cache if cache is not None else AnalysisCache()
        self.skipped_messages = skipped_messages

        self.frame = build_frame(self.messages)
        self.message_counts: Dict[str, int] = {
            p: int((self.frame["sender"] == p).sum()) for p in self.participants
        }
        self.pair = select_pair(self.participants, self.message_counts)
        if len(self.participants) > 2 and self.pair:
            logger.info(f"Group chat: pairwise metrics use {self.pair[0]} and {self.pair[1]}")

        # Populated by pipeline stages
        self.summaries: Dict[str, PersonSummary] = {}
        self.tokens_by_person: Dict[str, List[str]] = {p: [] for p in self.participants}
        self.turns: List[Turn] = []
        self.sessions: List[Session] = []
        # (reply message index, response time ms) per replier
        self.response_times: Dict[str, List[Tuple[int, float]]] = {p: [] for p in self.participants}
        self.message_sentiments: List[Optional[MessageSentiment]] = []

    @property
    def total_messages(self) -> int:
        return len(self.messages)

    @property
    def is_group(self) -> bool:
        return len(self.participants) > 2

    def months(self) -> List[str]:
        """Every calendar month from the first to the last message ("YYYY-MM")."""
        if self.frame.empty:
            return []
        observed = sorted(self.frame["month"].unique())
        periods = pd.period_range(start=observed[0], end=observed[-1], freq="M")
        return [str(p) for p in periods]

    def person_frame(self, name: str) -> pd.DataFrame:
        return self.frame[self.frame["sender"] == name]

    def sentiment_score(self, index: int) -> Optional[float]:
        if index >= len(self.message_sentiments):
            return None
        scored = self.message_sentiments[index]
        return scored.score if scored is not None else None
