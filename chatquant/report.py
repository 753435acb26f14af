"""
Report generation for ChatQuant
JSON-shaped payloads and a plain-text digest of a QuantitativeAnalysis
"""

import logging
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from typing import Any, Dict, List, Optional

from .badges import format_duration
from .models import QuantitativeAnalysis

logger = logging.getLogger(__name__)

# Above this share of all messages one sender dominates the conversation
DOMINANT_SHARE = 0.6


def _jsonable(value: Any) -> Any:
    """Records and mappings become dicts, tuples become lists, recursively."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def analysis_to_dict(result: QuantitativeAnalysis) -> Dict[str, Any]:
    """
    Convert an analysis to a JSON-shaped dict.

    Every field is present; metrics without enough data stay None.
    """
    return _jsonable(result)


def dominant_sender(result: QuantitativeAnalysis) -> Optional[str]:
    """Participant with more than DOMINANT_SHARE of all messages, if any."""
    if result.total_messages == 0:
        return None
    for name, ratio in result.engagement.message_ratio.items():
        if ratio > DOMINANT_SHARE:
            return name
    return None


def generate_text_summary(result: QuantitativeAnalysis) -> str:
    """Render a short plain-text digest of the analysis."""
    lines: List[str] = []
    names = ", ".join(result.participants) or "nobody"
    lines.append(f"Conversation between {names}")
    lines.append(f"Messages: {result.total_messages} ({result.skipped_messages} skipped)")

    if result.total_messages == 0:
        lines.append("No messages to analyze.")
        return "\n".join(lines)

    lines.append("")
    lines.append("Per person:")
    for name in result.participants:
        summary = result.per_person[name]
        ratio = result.engagement.message_ratio.get(name, 0.0)
        line = f"  {name}: {summary.total_messages} messages ({ratio:.0%})"
        rt = result.timing.per_person.get(name)
        if rt is not None:
            line += f", median reply {format_duration(rt.median_ms)}"
        stats = result.sentiment.per_person.get(name)
        if stats is not None:
            line += f", sentiment {stats.average:+.2f}"
        lines.append(line)

    leader = dominant_sender(result)
    if leader:
        lines.append(f"  {leader} carries most of the conversation")

    silence = result.timing.longest_silence
    if silence is not None:
        lines.append("")
        lines.append(
            f"Longest silence: {format_duration(silence.duration_ms)} "
            f"(after {silence.last_sender}, broken by {silence.next_sender})"
        )

    if result.patterns.bursts:
        lines.append(f"Activity bursts: {len(result.patterns.bursts)}")
    lines.append(f"Conflicts: {result.conflicts.total_conflicts}")

    if result.health_score is not None:
        lines.append("")
        lines.append(f"Health: {result.health_score.overall:.0f}/100 ({result.health_score.label})")
    if result.reciprocity is not None:
        lines.append(f"Reciprocity: {result.reciprocity.overall:.0f}/100")
    if result.style.lsm is not None:
        lines.append(f"Language style matching: {result.style.lsm.overall:.2f}")
    if result.chronotype is not None:
        lines.append(f"Chronotype match: {result.chronotype.match_score:.0f}/100")
    if result.damage_report is not None:
        lines.append(f"Communication grade: {result.damage_report.communication_grade}")
    if result.pursuit_withdrawal is not None and result.pursuit_withdrawal.cycle_count:
        pw = result.pursuit_withdrawal
        lines.append(f"Pursuit-withdrawal cycles: {pw.cycle_count} (pursuer: {pw.pursuer})")
    if result.four_horsemen is not None:
        active = [h.label for h in result.four_horsemen.horsemen if h.present]
        lines.append(f"Four horsemen: {', '.join(active) or 'none'} ({result.four_horsemen.risk_level} risk)")
    if result.intimacy is not None:
        lines.append(f"Closeness trend: {result.intimacy.label.replace('_', ' ')}")
    if result.repair_patterns is not None:
        lines.append(f"Most self-corrections: {result.repair_patterns.dominant_self_repairer}")

    if result.best_time_to_text:
        best = [(name, slot) for name, slot in result.best_time_to_text.items() if slot is not None]
        if best:
            lines.append("")
            lines.append("Best time to text:")
            for name, slot in best:
                lines.append(f"  {name}: {slot.window}")

    if result.badges:
        lines.append("")
        lines.append("Badges:")
        for badge in result.badges:
            lines.append(f"  {badge.emoji} {badge.name}: {badge.holder} ({badge.evidence})")

    return "\n".join(lines)
