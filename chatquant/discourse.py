"""
Discourse patterns for ChatQuant
Conversational repair (clarifying yourself vs. asking the other to clarify)
and shift/support responses (turning the talk to yourself vs. staying on the
partner's topic)
"""

import logging
import re
from typing import Dict, List, Optional

from . import config
from .context import AnalysisContext
from .helpers import find_phrases, tokenize_words
from .lexicons import (
    ACKNOWLEDGMENT_TOKENS,
    OTHER_REPAIR_MARKERS,
    PARTNER_REFERENCE_TOKENS,
    QUESTION_START_TOKENS,
    SELF_REPAIR_MARKERS,
    SELF_START_TOKENS,
)
from .models import PersonRepairStats, PersonShiftSupport, RepairPatterns, ShiftSupport

logger = logging.getLogger(__name__)

# "*their" correcting a typo in the previous message
ASTERISK_REPAIR_RE = re.compile(r"(?:^|\s)\*[^\W\d_]")

REPAIR_MIN_MESSAGES = 100
REPAIR_MIN_TOTAL = 5
REPAIR_MIN_PERSON_MESSAGES = 10

SHIFT_MIN_RESPONSES = 10
# Content words shared with the previous message that make a reply on-topic
SHIFT_OVERLAP_MIN_LENGTH = 4
SHIFT_OVERLAP_SUPPORT = 2


# ============================================================================
# REPAIR PATTERNS
# ============================================================================

def detect_repair(text: str) -> Dict[str, bool]:
    """Whether a message repairs itself and/or asks the partner to repair."""
    is_self = ASTERISK_REPAIR_RE.search(text) is not None or bool(find_phrases(text, SELF_REPAIR_MARKERS))
    is_other = bool(find_phrases(text, OTHER_REPAIR_MARKERS))
    return {"self": is_self, "other": is_other}


def repair_label(self_rate: float, other_rate: float) -> str:
    if self_rate >= 8 and other_rate < 3:
        return "precise"
    if self_rate < 2 and other_rate >= 5:
        return "often_unclear"
    if self_rate >= 5:
        return "careful"
    if other_rate >= 4:
        return "often_asked_to_clarify"
    return "typical"


def compute_repair_patterns(ctx: AnalysisContext) -> Optional[RepairPatterns]:
    """
    Self-initiated vs. other-initiated repair per person.

    Self-repair: "I mean", "*correction", "wait no". Other-initiated repair:
    "what do you mean?", "huh?". Rates are per 100 messages with content.

    None with fewer than two participants, fewer than 100 messages or fewer
    than 5 repairs overall, or when fewer than two people have 10+ messages.
    """
    if len(ctx.participants) < 2 or ctx.total_messages < REPAIR_MIN_MESSAGES:
        return None

    counts = {p: {"self": 0, "other": 0, "total": 0} for p in ctx.participants}
    for msg in ctx.messages:
        if not msg.content or msg.sender not in counts:
            continue
        c = counts[msg.sender]
        c["total"] += 1
        found = detect_repair(msg.content)
        c["self"] += found["self"]
        c["other"] += found["other"]

    total_repairs = sum(c["self"] + c["other"] for c in counts.values())
    if total_repairs < REPAIR_MIN_TOTAL:
        logger.debug(f"Repair patterns skipped: {total_repairs} repairs (< {REPAIR_MIN_TOTAL})")
        return None

    per_person: Dict[str, PersonRepairStats] = {}
    for name, c in counts.items():
        if c["total"] < REPAIR_MIN_PERSON_MESSAGES:
            continue
        self_rate = round(c["self"] / c["total"] * 100, 1)
        other_rate = round(c["other"] / c["total"] * 100, 1)
        per_person[name] = PersonRepairStats(
            self_repairs=c["self"],
            other_repairs=c["other"],
            self_repair_rate=self_rate,
            other_repair_rate=other_rate,
            repair_initiation_ratio=round(c["self"] / (c["self"] + c["other"] + 0.001), 2),
            label=repair_label(self_rate, other_rate),
        )

    if len(per_person) < 2:
        return None

    valid_messages = sum(counts[n]["total"] for n in per_person)
    dominant = max(per_person, key=lambda n: per_person[n].self_repairs)
    logger.info(f"Repair patterns: {total_repairs} repairs, most self-repair by {dominant}")
    return RepairPatterns(
        per_person=per_person,
        mutual_repair_index=round(min(100.0, total_repairs / valid_messages * 500)),
        dominant_self_repairer=dominant,
    )


# ============================================================================
# SHIFT / SUPPORT
# ============================================================================

def _content_words(tokens: List[str]) -> set:
    return {t for t in tokens if len(t) >= SHIFT_OVERLAP_MIN_LENGTH}


def classify_response(previous: str, reply: str) -> str:
    """
    "support" when the reply stays with the partner's topic, "shift" when it
    turns the conversation to the replier, "ambiguous" otherwise.
    """
    tokens = tokenize_words(reply)
    if not tokens:
        return "ambiguous"
    first = tokens[0]
    starts_with_self = first in SELF_START_TOKENS
    overlap = len(_content_words(tokens) & _content_words(tokenize_words(previous)))

    if first in QUESTION_START_TOKENS:
        return "support"
    if "?" in reply and not starts_with_self:
        return "support"
    if overlap >= SHIFT_OVERLAP_SUPPORT:
        return "support"
    if first in ACKNOWLEDGMENT_TOKENS:
        return "support"
    if any(t in PARTNER_REFERENCE_TOKENS for t in tokens[:4]):
        return "support"
    if starts_with_self and overlap == 0:
        return "shift"
    return "ambiguous"


def compute_shift_support(ctx: AnalysisContext) -> Optional[ShiftSupport]:
    """
    How often each person answers by shifting to themselves.

    Every reply to another sender within the session gap is classified. The
    narcissism index is the shift share of classified replies (0-100); it is
    None for a person whose replies were all ambiguous. None overall unless
    two people have SHIFT_MIN_RESPONSES+ replies.
    """
    if len(ctx.participants) < 2:
        return None

    counts = {p: {"shift": 0, "support": 0, "ambiguous": 0} for p in ctx.participants}
    messages = ctx.messages
    for prev, msg in zip(messages, messages[1:]):
        if prev.sender == msg.sender or msg.sender not in counts:
            continue
        if not prev.text.strip() or not msg.text.strip():
            continue
        if msg.timestamp_ms - prev.timestamp_ms > config.SESSION_GAP_MS:
            continue
        counts[msg.sender][classify_response(prev.text, msg.text)] += 1

    per_person: Dict[str, PersonShiftSupport] = {}
    for name, c in counts.items():
        if sum(c.values()) < SHIFT_MIN_RESPONSES:
            continue
        classified = c["shift"] + c["support"]
        ratio = round(c["shift"] / classified, 2) if classified else None
        per_person[name] = PersonShiftSupport(
            shift_count=c["shift"],
            support_count=c["support"],
            ambiguous_count=c["ambiguous"],
            shift_ratio=ratio,
            narcissism_index=round(ratio * 100) if ratio is not None else None,
        )

    if len(per_person) < 2:
        logger.debug("Shift/support skipped: fewer than two people with enough replies")
        return None

    scored = [n for n in per_person if per_person[n].narcissism_index is not None]
    higher = max(scored, key=lambda n: per_person[n].narcissism_index) if scored else None
    indexes = sorted((per_person[n].narcissism_index for n in scored), reverse=True)
    gap = indexes[0] - indexes[1] if len(indexes) >= 2 else 0
    return ShiftSupport(per_person=per_person, higher_index=higher, index_gap=gap)
