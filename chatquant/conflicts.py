"""
Conflict detection for ChatQuant
Escalations, cold silences, resolutions and per-person conflict fingerprints
"""

import logging
from collections import Counter, deque
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple
import numpy as np

from . import config
from .context import AnalysisContext
from .helpers import find_phrases, safe_divide, tokenize_words
from .lexicons import (
    ACCUSATORY_PHRASES,
    APOLOGY_MARKERS,
    DEFLECTION_MARKERS,
    HUMOR_MARKERS,
    PASSIVE_AGGRESSION_MARKERS,
    STOPWORDS,
    TOPIC_CHANGE_MARKERS,
)
from .models import ConflictAnalysis, ConflictEvent, ConflictFingerprint, PersonConflictProfile

logger = logging.getLogger(__name__)

# A person going quiet this long inside a conflict window counts as withdrawing
MID_CONFLICT_SILENCE_MS = 2 * config.HOUR_MS


def _event_date(ctx: AnalysisContext, index: int) -> str:
    return str(ctx.frame.at[index, "date"])


def _has_accusation(ctx: AnalysisContext, start: int, end: int) -> bool:
    return any(
        find_phrases(ctx.messages[i].content, ACCUSATORY_PHRASES)
        for i in range(max(0, start), min(end, len(ctx.messages) - 1) + 1)
    )


# ============================================================================
# DETECTION
# ============================================================================

def find_spikes(ctx: AnalysisContext) -> List[int]:
    """
    Indices of messages at least ESCALATION_MULTIPLIER times longer than the
    sender's rolling average, sent right after someone else spoke.
    """
    history: Dict[str, Deque[int]] = {
        p: deque(maxlen=config.ESCALATION_ROLLING_WINDOW) for p in ctx.participants
    }
    words = ctx.frame["words"].to_numpy()
    spikes: List[int] = []
    for i, msg in enumerate(ctx.messages):
        if not msg.text.strip():
            continue
        past = history.setdefault(msg.sender, deque(maxlen=config.ESCALATION_ROLLING_WINDOW))
        if (
            len(past) >= config.ESCALATION_MIN_HISTORY
            and i > 0
            and ctx.messages[i - 1].sender != msg.sender
        ):
            avg = float(np.mean(past))
            if avg > 0 and words[i] >= config.ESCALATION_MULTIPLIER * avg:
                spikes.append(i)
        past.append(int(words[i]))
    return spikes


def detect_escalations(ctx: AnalysisContext, spikes: Sequence[int]) -> List[ConflictEvent]:
    """Two spikes from different senders within ESCALATION_CONFIRM_WINDOW_MS."""
    events: List[ConflictEvent] = []
    for pos, i in enumerate(spikes):
        start_ms = ctx.messages[i].timestamp_ms
        in_window = [
            j for j in spikes[pos:]
            if ctx.messages[j].timestamp_ms - start_ms <= config.ESCALATION_CONFIRM_WINDOW_MS
        ]
        partner = next((j for j in in_window if ctx.messages[j].sender != ctx.messages[i].sender), None)
        if partner is None:
            continue
        end = in_window[-1]
        senders = tuple(dict.fromkeys(ctx.messages[j].sender for j in in_window))
        events.append(ConflictEvent(
            type="escalation",
            timestamp_ms=start_ms,
            date=_event_date(ctx, i),
            participants=senders,
            severity=3 if len(in_window) >= 3 else 2,
            message_range=(i, end),
            description=f"Message length spiked for {' and '.join(senders)} within {len(in_window)} messages",
            accusatory=_has_accusation(ctx, i, end),
        ))
    return events


def _silence_severity(gap_ms: int) -> int:
    hours = gap_ms / config.HOUR_MS
    if hours >= 72:
        return 3
    if hours >= 48:
        return 2
    return 1


def detect_cold_silences(ctx: AnalysisContext) -> List[Tuple[ConflictEvent, int]]:
    """
    Silences of at least COLD_SILENCE_MS right after an intense two-sided exchange.

    Returns (event, index of the first message after the silence).
    """
    messages = ctx.messages
    found: List[Tuple[ConflictEvent, int]] = []
    for i in range(1, len(messages)):
        gap = messages[i].timestamp_ms - messages[i - 1].timestamp_ms
        if gap < config.COLD_SILENCE_MS:
            continue
        last_ms = messages[i - 1].timestamp_ms
        recent = 0
        j = i - 1
        while j >= 0 and last_ms - messages[j].timestamp_ms <= config.INTENSITY_LOOKBACK_MS:
            recent += 1
            j -= 1
        if recent < config.INTENSE_MSGS_PER_HOUR:
            continue
        tail_start = max(0, i - config.PRE_SILENCE_MSG_COUNT)
        senders = tuple(dict.fromkeys(m.sender for m in messages[tail_start:i]))
        if len(senders) < 2:
            continue
        event = ConflictEvent(
            type="cold_silence",
            timestamp_ms=last_ms,
            date=_event_date(ctx, i - 1),
            participants=senders,
            severity=_silence_severity(gap),
            message_range=(i - 1, i),
            description=f"{gap / config.DAY_MS:.1f} days of silence after {recent} messages in the last hour",
            accusatory=_has_accusation(ctx, tail_start, i - 1),
        )
        found.append((event, i))
    return found


def detect_resolution(ctx: AnalysisContext, resume_index: int) -> Optional[ConflictEvent]:
    """Messages after the silence are shorter on average than the ones before it."""
    n = config.PRE_SILENCE_MSG_COUNT
    words = ctx.frame["words"]
    before = words.iloc[max(0, resume_index - n):resume_index]
    after = words.iloc[resume_index:resume_index + n]
    if len(after) == 0 or len(before) == 0 or after.mean() >= before.mean():
        return None
    end = min(len(ctx.messages) - 1, resume_index + n - 1)
    return ConflictEvent(
        type="resolution",
        timestamp_ms=ctx.messages[resume_index].timestamp_ms,
        date=_event_date(ctx, resume_index),
        participants=tuple(dict.fromkeys(m.sender for m in ctx.messages[resume_index:end + 1])),
        severity=1,
        message_range=(resume_index, end),
        description="Conversation resumed with calmer, shorter messages",
        accusatory=False,
    )


def _dedupe(events: Sequence[ConflictEvent]) -> List[ConflictEvent]:
    kept: List[ConflictEvent] = []
    for event in sorted(events, key=lambda e: e.timestamp_ms):
        if kept and event.timestamp_ms - kept[-1].timestamp_ms < config.CONFLICT_DEDUP_MS:
            continue
        kept.append(event)
    return kept


def detect_conflicts(ctx: AnalysisContext) -> ConflictAnalysis:
    """
    Detect escalations, cold silences and resolutions.

    Escalations and cold silences within CONFLICT_DEDUP_MS of each other are
    reported once. Conversations under CONFLICT_MIN_MESSAGES messages yield an
    empty analysis.
    """
    accusatory = {p: 0 for p in ctx.participants}
    for msg in ctx.messages:
        if find_phrases(msg.content, ACCUSATORY_PHRASES):
            accusatory[msg.sender] = accusatory.get(msg.sender, 0) + 1

    if ctx.total_messages < config.CONFLICT_MIN_MESSAGES:
        logger.warning(f"Conflict detection skipped: {ctx.total_messages} messages")
        return ConflictAnalysis(events=(), total_conflicts=0, most_conflict_prone=None, accusatory_messages=accusatory)

    escalations = detect_escalations(ctx, find_spikes(ctx))
    silences = detect_cold_silences(ctx)
    conflicts = _dedupe(escalations + [s[0] for s in silences])

    kept_silences = {id(e) for e in conflicts if e.type == "cold_silence"}
    resolutions = []
    for event, resume_index in silences:
        if id(event) not in kept_silences:
            continue
        resolution = detect_resolution(ctx, resume_index)
        if resolution is not None:
            resolutions.append(resolution)

    events = sorted(conflicts + resolutions, key=lambda e: (e.timestamp_ms, e.type))

    prone_scores = dict(accusatory)
    for event in conflicts:
        if event.type == "escalation":
            initiator = ctx.messages[event.message_range[0]].sender
            prone_scores[initiator] = prone_scores.get(initiator, 0) + 1
    most_prone = None
    if any(prone_scores.values()):
        most_prone = max(ctx.participants, key=lambda p: (prone_scores.get(p, 0), -ctx.participants.index(p)))

    logger.info(f"Detected {len(conflicts)} conflicts and {len(resolutions)} resolutions")
    return ConflictAnalysis(
        events=tuple(events),
        total_conflicts=len(conflicts),
        most_conflict_prone=most_prone,
        accusatory_messages=accusatory,
    )


# ============================================================================
# FINGERPRINT
# ============================================================================

def conflict_windows(events: Sequence[ConflictEvent], n_messages: int) -> List[Tuple[int, int]]:
    """Padded message windows around conflict events, overlapping ones merged."""
    pad = config.FINGERPRINT_WINDOW_PADDING
    raw = sorted(
        (max(0, e.message_range[0] - pad), min(n_messages - 1, e.message_range[1] + pad))
        for e in events
    )
    merged: List[Tuple[int, int]] = []
    for start, end in raw:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _runs(ctx: AnalysisContext, indices: Sequence[int], name: str) -> List[int]:
    """Lengths of this person's consecutive-message runs within the index set."""
    runs: List[int] = []
    prev_idx = None
    current = 0
    for idx in indices:
        contiguous = prev_idx is not None and idx == prev_idx + 1
        if ctx.messages[idx].sender == name:
            if current and contiguous:
                current += 1
            else:
                if current:
                    runs.append(current)
                current = 1
        elif current:
            runs.append(current)
            current = 0
        prev_idx = idx
    if current:
        runs.append(current)
    return runs


def _interruptions(ctx: AnalysisContext, indices: Sequence[int], name: str) -> int:
    """Times this person cut in while someone else was mid-burst (2+ messages)."""
    count = 0
    burst_sender = None
    burst_length = 0
    for idx in indices:
        sender = ctx.messages[idx].sender
        if sender == burst_sender:
            burst_length += 1
            continue
        if sender == name and burst_sender is not None and burst_length >= 2:
            count += 1
        burst_sender = sender
        burst_length = 1
    return count


def _avg_words(ctx: AnalysisContext, indices: Sequence[int], name: str) -> float:
    counts = [ctx.frame.at[i, "words"] for i in indices if ctx.messages[i].sender == name]
    return float(np.mean(counts)) if counts else 0.0


def _median_rt(ctx: AnalysisContext, index_set: Set[int], name: str) -> Optional[float]:
    values = [rt for idx, rt in ctx.response_times.get(name, []) if idx in index_set]
    return float(np.median(values)) if values else None


def _conflict_vocabulary(ctx: AnalysisContext, conflict_idx: Sequence[int], normal_idx: Sequence[int], name: str) -> Tuple[str, ...]:
    def counts(indices: Sequence[int]) -> Tuple[Counter, int]:
        counter: Counter = Counter()
        total = 0
        for i in indices:
            if ctx.messages[i].sender != name:
                continue
            tokens = tokenize_words(ctx.messages[i].content)
            total += len(tokens)
            counter.update(t for t in tokens if t not in STOPWORDS and len(t) > 2)
        return counter, total

    in_conflict, n_conflict = counts(conflict_idx)
    normal, n_normal = counts(normal_idx)
    if n_conflict == 0:
        return ()
    scored = []
    for word, c in in_conflict.items():
        if c < 2:
            continue
        ratio = (c / n_conflict) / ((normal.get(word, 0) + 1) / (n_normal + 1))
        if ratio > 2:
            scored.append((ratio, c, word))
    scored.sort(key=lambda s: (-s[0], -s[1], s[2]))
    return tuple(word for _, _, word in scored[:10])


def classify_escalation_style(length_ratio: float, burst_length: float, pa_rate: float, silence_rate: float) -> str:
    direct = (1 if length_ratio > 1.3 else 0) + (1 if burst_length > 3 else 0)
    passive = 2 if pa_rate > 0.15 else 1 if pa_rate > 0.05 else 0
    silent = 2 if silence_rate > 0.3 else 1 if silence_rate > 0.15 else 0

    scores = {"direct": direct, "passive_aggressive": passive, "withdrawal": silent}
    top = max(scores.values())
    leaders = [style for style, score in scores.items() if score == top]
    if top == 0 or len(leaders) > 1:
        return "mixed"
    return leaders[0]


DEESCALATION_MARKERS = (
    ("apologize", APOLOGY_MARKERS),
    ("humor", HUMOR_MARKERS),
    ("topic_change", TOPIC_CHANGE_MARKERS),
    ("deflect", DEFLECTION_MARKERS),
)
# Order encodes priority on ties
DEESCALATION_STYLES = ("apologize", "humor", "topic_change", "deflect", "ghost")
CLOSING_STRETCH = 15


def classify_deescalation_style(
    ctx: AnalysisContext,
    windows: Sequence[Tuple[int, int]],
    name: str,
    baseline_rt_ms: Optional[float] = None,
) -> str:
    """
    How this person closes each conflict window.

    The last messages of the window are read first (up to 5 of the person's
    own within the closing stretch). Without a marker the person ghosts when
    they are absent from the closing stretch or answer there at least
    FINGERPRINT_GHOST_RT_FACTOR times slower than their baseline median;
    staying at their usual pace without a repair move reads as deflecting.
    """
    if not windows:
        return "deflect"
    tally = {style: 0 for style in DEESCALATION_STYLES}
    for start, end in windows:
        closing_start = max(start, end - CLOSING_STRETCH + 1)
        own = [i for i in range(end, closing_start - 1, -1) if ctx.messages[i].sender == name][:5]

        found = None
        for i in own:
            text = ctx.messages[i].content
            found = next((style for style, markers in DEESCALATION_MARKERS if find_phrases(text, markers)), None)
            if found:
                break

        if found is None:
            closing_rt = _median_rt(ctx, set(range(closing_start, end + 1)), name)
            slow = (
                closing_rt is not None
                and baseline_rt_ms is not None
                and baseline_rt_ms > 0
                and closing_rt >= config.FINGERPRINT_GHOST_RT_FACTOR * baseline_rt_ms
            )
            found = "ghost" if not own or slow else "deflect"
        tally[found] += 1

    return max(DEESCALATION_STYLES, key=lambda k: tally[k])


def _is_passive_aggressive(text: str) -> bool:
    lower = text.lower().strip().rstrip(".!")
    return any(lower == m or lower.startswith(m + " ") for m in PASSIVE_AGGRESSION_MARKERS)


def conflict_fingerprint(ctx: AnalysisContext, analysis: ConflictAnalysis) -> Optional[ConflictFingerprint]:
    """
    Per-person behaviour inside conflict windows compared with their baseline.

    None with fewer than FINGERPRINT_MIN_CONFLICTS escalations or cold silences.
    """
    conflicts = [e for e in analysis.events if e.type in ("escalation", "cold_silence")]
    if len(conflicts) < config.FINGERPRINT_MIN_CONFLICTS:
        return None

    n = ctx.total_messages
    windows = conflict_windows(conflicts, n)
    conflict_set: Set[int] = set()
    for start, end in windows:
        conflict_set.update(range(start, end + 1))
    conflict_idx = sorted(conflict_set)
    normal_idx = [i for i in range(n) if i not in conflict_set]
    normal_set = set(normal_idx)

    initiations: Counter = Counter(
        ctx.messages[e.message_range[0]].sender for e in conflicts if e.type == "escalation"
    )
    total_initiations = sum(initiations.values())

    per_person: Dict[str, PersonConflictProfile] = {}
    for name in ctx.participants:
        conflict_runs = _runs(ctx, conflict_idx, name)
        normal_runs = _runs(ctx, normal_idx, name)
        avg_conflict_burst = float(np.mean(conflict_runs)) if conflict_runs else 0.0
        avg_normal_burst = float(np.mean(normal_runs)) if normal_runs else 0.0

        normal_len = _avg_words(ctx, normal_idx, name)
        length_ratio = _avg_words(ctx, conflict_idx, name) / normal_len if normal_len > 0 else 1.0

        rt_conflict = _median_rt(ctx, conflict_set, name)
        rt_normal = _median_rt(ctx, normal_set, name)
        rt_shift = rt_conflict - rt_normal if rt_conflict is not None and rt_normal is not None else None
        baseline_rt = rt_normal if rt_normal is not None else _median_rt(ctx, set(range(n)), name)

        mine = [i for i in conflict_idx if ctx.messages[i].sender == name]
        pa_count = sum(1 for i in mine if _is_passive_aggressive(ctx.messages[i].text))
        pa_rate = safe_divide(pa_count, len(mine))

        silences = 0
        for start, end in windows:
            last_own = max((i for i in range(start, end + 1) if ctx.messages[i].sender == name), default=-1)
            if 0 <= last_own < end - 5:
                if ctx.messages[end].timestamp_ms - ctx.messages[last_own].timestamp_ms > MID_CONFLICT_SILENCE_MS:
                    silences += 1
        silence_rate = silences / len(windows)

        per_person[name] = PersonConflictProfile(
            escalation_style=classify_escalation_style(length_ratio, avg_conflict_burst, pa_rate, silence_rate),
            deescalation_style=classify_deescalation_style(ctx, windows, name, baseline_rt),
            avg_burst_length_in_conflict=avg_conflict_burst,
            avg_burst_length_normal=avg_normal_burst,
            msg_length_ratio=length_ratio,
            response_time_shift_ms=rt_shift,
            double_text_rate_in_conflict=safe_divide(sum(1 for r in conflict_runs if r >= 2), len(conflict_runs)),
            interruption_rate=safe_divide(_interruptions(ctx, conflict_idx, name), len(mine)),
            conflict_vocabulary=_conflict_vocabulary(ctx, conflict_idx, normal_idx, name),
            conflict_initiation_rate=safe_divide(initiations.get(name, 0) * 100.0, total_initiations, default=None),
        )

    trigger_counts: Counter = Counter()
    for event in conflicts:
        if event.type != "escalation":
            continue
        first = event.message_range[0]
        for i in range(max(0, first - 10), first):
            trigger_counts.update(
                t for t in tokenize_words(ctx.messages[i].content) if t not in STOPWORDS and len(t) > 2
            )
    triggers = tuple(w for w, c in trigger_counts.most_common(10) if c >= 2)

    durations = [ctx.messages[e].timestamp_ms - ctx.messages[s].timestamp_ms for s, e in windows]
    return ConflictFingerprint(
        per_person=per_person,
        total_conflict_windows=len(windows),
        avg_conflict_duration_ms=float(np.mean(durations)),
        avg_conflict_duration_messages=float(np.mean([e - s + 1 for s, e in windows])),
        top_trigger_words=triggers,
    )
