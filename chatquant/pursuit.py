"""
Pursuit-withdrawal detection for ChatQuant
One person sends a volley of unanswered messages, the other goes quiet
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from . import config
from .context import AnalysisContext
from .helpers import find_phrases, linear_regression_slope
from .lexicons import DEMAND_MARKERS, DEMAND_PUNCTUATION
from .models import PursuitCycle, PursuitWithdrawal, UnifiedMessage

logger = logging.getLogger(__name__)

# Pursuer/withdrawer roles are "mutual" when cycle counts differ by less than this share
MUTUAL_SHARE = 0.2


def _logical_count(run: Sequence[UnifiedMessage]) -> int:
    """Messages within TURN_MERGE_GAP_MS of the previous one merge into one."""
    count = 1
    for prev, msg in zip(run, run[1:]):
        if msg.timestamp_ms - prev.timestamp_ms > config.TURN_MERGE_GAP_MS:
            count += 1
    return count


def has_demand_marker(run: Sequence[UnifiedMessage]) -> bool:
    for msg in run:
        text = msg.text.strip()
        if text in DEMAND_PUNCTUATION[1:]:
            return True
        if find_phrases(text, DEMAND_MARKERS):
            return True
    return False


def _split_runs(messages: Sequence[UnifiedMessage]) -> List[List[UnifiedMessage]]:
    """Same-sender runs where each gap stays under PURSUIT_WINDOW_MS."""
    runs: List[List[UnifiedMessage]] = []
    for msg in messages:
        if (
            runs
            and runs[-1][-1].sender == msg.sender
            and msg.timestamp_ms - runs[-1][-1].timestamp_ms < config.PURSUIT_WINDOW_MS
        ):
            runs[-1].append(msg)
        else:
            runs.append([msg])
    return runs


def detect_pursuit_withdrawal(ctx: AnalysisContext) -> Optional[PursuitWithdrawal]:
    """
    Find pursuit volleys followed by a withdrawal silence.

    A volley of PURSUIT_ALWAYS_FLAG+ logical messages always counts; shorter
    volleys (PURSUIT_MIN_MESSAGES+) need a demand marker. The silence after
    the volley must last at least WITHDRAWAL_MS.

    A volley that closes the conversation was never answered: it counts as an
    unresolved cycle. Its withdrawal runs to the export's date_range_end when
    that is known, otherwise the duration is None and it is left out of the
    average.
    """
    if ctx.pair is None:
        return None
    a, b = ctx.pair
    messages = [m for m in ctx.messages if m.sender in (a, b)]
    runs = _split_runs(messages)
    export_end = ctx.conversation.metadata.date_range_end

    cycles: List[PursuitCycle] = []
    for position, run in enumerate(runs):
        logical = _logical_count(run)
        if logical < config.PURSUIT_MIN_MESSAGES:
            continue
        demand = has_demand_marker(run)
        if logical < config.PURSUIT_ALWAYS_FLAG and not demand:
            continue
        pursuer = run[0].sender

        following = runs[position + 1] if position + 1 < len(runs) else None
        if following is not None:
            silence: Optional[int] = following[0].timestamp_ms - run[-1].timestamp_ms
            if silence < config.WITHDRAWAL_MS:
                continue
            resolved = following[0].sender != pursuer
        else:
            silence = None
            if export_end is not None and export_end > run[-1].timestamp_ms:
                silence = export_end - run[-1].timestamp_ms
                if silence < config.WITHDRAWAL_MS:
                    continue
            resolved = False

        cycles.append(PursuitCycle(
            pursuer=pursuer,
            responder=b if pursuer == a else a,
            pursuit_timestamp_ms=run[0].timestamp_ms,
            pursuit_message_count=logical,
            withdrawal_duration_ms=silence,
            resolved=resolved,
            has_demand_marker=demand,
        ))

    by_pursuer: Dict[str, int] = {a: 0, b: 0}
    for cycle in cycles:
        by_pursuer[cycle.pursuer] += 1

    pursuer = withdrawer = None
    if cycles:
        if abs(by_pursuer[a] - by_pursuer[b]) < MUTUAL_SHARE * len(cycles):
            pursuer = withdrawer = "mutual"
        else:
            pursuer = a if by_pursuer[a] > by_pursuer[b] else b
            withdrawer = b if pursuer == a else a

    trend = None
    if len(cycles) >= 3:
        trend = linear_regression_slope([c.pursuit_message_count for c in cycles])

    durations = [c.withdrawal_duration_ms for c in cycles if c.withdrawal_duration_ms is not None]

    logger.info(f"Found {len(cycles)} pursuit-withdrawal cycles")
    return PursuitWithdrawal(
        pursuer=pursuer,
        withdrawer=withdrawer,
        cycle_count=len(cycles),
        cycles=tuple(cycles),
        cycles_by_pursuer=by_pursuer,
        avg_withdrawal_ms=float(np.mean(durations)) if durations else None,
        escalation_trend=trend,
    )
