"""
Shared fixtures and conversation builders for ChatQuant tests
"""

from typing import Iterable, List, Optional, Sequence

import pytest

from chatquant.cache import AnalysisCache
from chatquant.context import AnalysisContext
from chatquant.models import (
    ConversationMetadata,
    ParsedConversation,
    Participant,
    Reaction,
    UnifiedMessage,
)

# Monday 2024-01-01 00:00:00 UTC
BASE_MS = 1_704_067_200_000
MINUTE = 60 * 1000
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def msg(sender: str, ts: int, text: Optional[str] = "hi", reactions: Iterable[tuple] = (), **kwargs) -> UnifiedMessage:
    """Build one message; reactions are (actor, emoji) pairs."""
    return UnifiedMessage(
        sender=sender,
        timestamp_ms=ts,
        content=text,
        reactions=tuple(Reaction(actor=a, emoji=e) for a, e in reactions),
        **kwargs,
    )


def conversation(messages: Sequence[UnifiedMessage], participants: Optional[Sequence[str]] = None) -> ParsedConversation:
    if participants is None:
        participants = list(dict.fromkeys(m.sender for m in messages))
    return ParsedConversation(
        platform="test",
        participants=tuple(Participant(name=p) for p in participants),
        messages=tuple(messages),
        metadata=ConversationMetadata(is_group=len(participants) > 2),
    )


def context(messages: Sequence[UnifiedMessage], participants: Optional[Sequence[str]] = None) -> AnalysisContext:
    return AnalysisContext(conversation(messages, participants), cache=AnalysisCache())


def alternating(n: int, start_ms: int = BASE_MS, gap_ms: int = 5 * MINUTE,
                texts: Sequence[str] = ("hello there",), senders: Sequence[str] = ("Alice", "Bob")) -> List[UnifiedMessage]:
    """n messages alternating between the senders, gap_ms apart."""
    return [
        msg(senders[i % len(senders)], start_ms + i * gap_ms, texts[i % len(texts)])
        for i in range(n)
    ]


def dict_message(sender, ts, text="hi", **extra) -> dict:
    raw = {"sender": sender, "timestampMs": ts, "content": text}
    raw.update(extra)
    return raw


@pytest.fixture
def cache():
    """Fresh memo cache."""
    return AnalysisCache()


@pytest.fixture
def symmetric_messages():
    """
    Two sessions of perfectly alternating, identical messages (one started by
    each person); every message gets a 👍 from the other side.
    """
    sentence = "i think that we should go to the park and you can come with me if it is nice"
    first = alternating(20, start_ms=BASE_MS + 10 * HOUR, gap_ms=3 * MINUTE, texts=[sentence])
    second = alternating(
        20, start_ms=BASE_MS + DAY + 10 * HOUR, gap_ms=3 * MINUTE, texts=[sentence], senders=("Bob", "Alice")
    )
    other = {"Alice": "Bob", "Bob": "Alice"}
    return [
        msg(m.sender, m.timestamp_ms, m.content, reactions=[(other[m.sender], "👍")])
        for m in first + second
    ]


@pytest.fixture
def rich_messages():
    """Four months of varied two-person chat, enough for every composite."""
    texts_a = [
        "good morning! how did you sleep?",
        "i love this song so much ❤️",
        "let's get dinner tomorrow, how about the italian place?",
        "work was terrible today, my boss is so annoying",
        "haha that is amazing 😂",
        "i was thinking about our trip, we should plan it soon",
    ]
    texts_b = [
        "slept great thanks, you?",
        "yes that sounds perfect, i will book a table",
        "sorry to hear that, what happened at work?",
        "i miss you, can't wait to see you",
        "that is so funny, you made my day",
        "we will have a great time, i am excited",
    ]
    messages = []
    ts = BASE_MS + 9 * HOUR
    for day in range(0, 120, 2):
        day_start = BASE_MS + day * DAY + 9 * HOUR
        for i in range(6):
            sender = "Alice" if i % 2 == 0 else "Bob"
            texts = texts_a if sender == "Alice" else texts_b
            ts = day_start + i * 4 * MINUTE + (day % 5) * HOUR
            reactions = [("Bob", "❤️")] if sender == "Alice" and i == 0 else []
            messages.append(msg(sender, ts, texts[(day // 2 + i) % len(texts)], reactions=reactions))
    return messages
