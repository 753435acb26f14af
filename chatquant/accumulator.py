"""
Per-person accumulator for ChatQuant
Single forward pass over the messages building each participant's summary
"""

import logging
import math
from collections import Counter
from typing import Dict, List, Optional, Set, Tuple

from . import config
from .context import AnalysisContext
from .helpers import count_words, extract_emojis, safe_divide, tokenize_words
from .lexicons import STOPWORDS
from .models import MessageRef, PersonSummary, UnifiedMessage

logger = logging.getLogger(__name__)

TOP_WORDS = 20
TOP_PHRASES = 10
TOP_EMOJIS = 10
TOP_REACTIONS = 10


class PersonAccumulator:
    """Mutable running totals for one participant; closed by `finalize()`."""

    def __init__(self, name: str):
        self.name = name
        self.messages = 0
        self.text_messages = 0
        self.words = 0
        self.characters = 0
        self.emoji_count = 0
        self.messages_with_emoji = 0
        self.questions = 0
        self.media = 0
        self.links = 0
        self.unsent = 0
        self.reactions_given = 0
        self.reactions_received = 0
        self.heart_reactions_given = 0
        self.longest: Optional[MessageRef] = None
        self.shortest: Optional[MessageRef] = None
        self.word_counts: Counter = Counter()
        self.phrase_counts: Counter = Counter()
        self.emoji_counts: Counter = Counter()
        self.reaction_counts: Counter = Counter()
        self.vocabulary: Set[str] = set()
        self.tokens: List[str] = []

    def add_message(self, msg: UnifiedMessage):
        """Update counters with one message sent by this person."""
        self.messages += 1
        if msg.has_media:
            self.media += 1
        if msg.has_link:
            self.links += 1
        if msg.is_unsent:
            self.unsent += 1

        text = msg.text
        if not text.strip():
            return

        self.text_messages += 1
        n_words = count_words(text)
        self.words += n_words
        self.characters += len(text)
        if "?" in text:
            self.questions += 1

        emojis = extract_emojis(text)
        if emojis:
            self.messages_with_emoji += 1
            self.emoji_count += len(emojis)
            self.emoji_counts.update(emojis)

        tokens = tokenize_words(text)
        self.tokens.extend(tokens)
        self.vocabulary.update(tokens)
        self.word_counts.update(t for t in tokens if t not in STOPWORDS and len(t) > 1)
        self._count_phrases(tokens)

        ref = MessageRef(content=text, length=n_words, timestamp_ms=msg.timestamp_ms)
        if self.longest is None or n_words > self.longest.length:
            self.longest = ref
        if n_words > 0 and (self.shortest is None or n_words < self.shortest.length):
            self.shortest = ref

    def _count_phrases(self, tokens: List[str]):
        for n in (2, 3):
            for i in range(len(tokens) - n + 1):
                gram = tokens[i:i + n]
                # Skip phrases made only of stopwords ("it is", "and the")
                if all(t in STOPWORDS for t in gram):
                    continue
                self.phrase_counts[" ".join(gram)] += 1

    def add_reaction_given(self, emoji_char: str):
        self.reactions_given += 1
        self.reaction_counts[emoji_char] += 1
        if emoji_char in config.HEART_EMOJIS:
            self.heart_reactions_given += 1

    def finalize(self) -> PersonSummary:
        """Freeze the running totals into a PersonSummary."""
        n_tokens = len(self.tokens)
        unique = len(self.vocabulary)
        richness = unique / math.sqrt(n_tokens) if n_tokens else None

        def per_1k(count: int) -> Optional[float]:
            return safe_divide(count * 1000.0, self.messages, default=None)

        return PersonSummary(
            name=self.name,
            total_messages=self.messages,
            total_words=self.words,
            total_characters=self.characters,
            average_message_length=safe_divide(self.words, self.text_messages, default=None),
            average_message_chars=safe_divide(self.characters, self.text_messages, default=None),
            longest_message=self.longest,
            shortest_message=self.shortest,
            messages_with_emoji=self.messages_with_emoji,
            emoji_count=self.emoji_count,
            top_emojis=_top(self.emoji_counts, TOP_EMOJIS),
            questions_asked=self.questions,
            media_shared=self.media,
            links_shared=self.links,
            reactions_given=self.reactions_given,
            reactions_received=self.reactions_received,
            top_reactions_given=_top(self.reaction_counts, TOP_REACTIONS),
            heart_reactions_given=self.heart_reactions_given,
            unsent_messages=self.unsent,
            top_words=_top(self.word_counts, TOP_WORDS),
            top_phrases=_top(self.phrase_counts, TOP_PHRASES, min_count=2),
            unique_words=unique,
            vocabulary_richness=richness,
            questions_per_1k=per_1k(self.questions),
            media_per_1k=per_1k(self.media),
            links_per_1k=per_1k(self.links),
            emoji_messages_per_1k=per_1k(self.messages_with_emoji),
        )


def _top(counter: Counter, n: int, min_count: int = 1) -> Tuple[Tuple[str, int], ...]:
    # Counter.most_common keeps first-seen order for ties
    return tuple((k, v) for k, v in counter.most_common(n) if v >= min_count)


def accumulate(ctx: AnalysisContext) -> Dict[str, PersonSummary]:
    """
    Run the forward pass and store summaries and token streams on the context.

    Reactions update the reactor's given count and the sender's received count.
    """
    accumulators = {name: PersonAccumulator(name) for name in ctx.participants}

    for msg in ctx.messages:
        sender_acc = accumulators[msg.sender]
        sender_acc.add_message(msg)
        for reaction in msg.reactions:
            sender_acc.reactions_received += 1
            actor_acc = accumulators.get(reaction.actor)
            if actor_acc is None:
                logger.debug(f"Reaction from non-participant '{reaction.actor}' ignored for given counts")
                continue
            actor_acc.add_reaction_given(reaction.emoji)

    summaries = {name: acc.finalize() for name, acc in accumulators.items()}
    ctx.summaries = summaries
    ctx.tokens_by_person = {name: acc.tokens for name, acc in accumulators.items()}

    logger.info(f"Accumulated summaries for {len(summaries)} participants")
    return summaries
