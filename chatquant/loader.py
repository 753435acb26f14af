"""
Conversation loader for ChatQuant
Turns the normalizer's JSON-shaped ParsedConversation into typed records,
skipping (and counting) malformed messages instead of failing
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .helpers import contains_link
from .models import (
    ConversationMetadata,
    ParsedConversation,
    Participant,
    Reaction,
    UnifiedMessage,
)

logger = logging.getLogger(__name__)


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key wins (accepts camelCase and snake_case spellings)."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _coerce_timestamp(value: Any) -> Optional[int]:
    """Epoch milliseconds as int, or None when missing / not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return None
    return None


def _coerce_sender(value: Any) -> Optional[str]:
    if value is None:
        return None
    sender = str(value).strip()
    return sender or None


def _parse_reactions(raw: Any) -> Tuple[Reaction, ...]:
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        return ()
    reactions = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        actor = _coerce_sender(_pick(item, "actor", "sender"))
        emoji_char = _pick(item, "emoji", "reaction")
        if actor and emoji_char:
            reactions.append(Reaction(actor=actor, emoji=str(emoji_char)))
    return tuple(reactions)


def _parse_message(raw: Any) -> Optional[UnifiedMessage]:
    """Build a UnifiedMessage; None if sender or timestamp is missing."""
    if isinstance(raw, UnifiedMessage):
        if _coerce_sender(raw.sender) is None or _coerce_timestamp(raw.timestamp_ms) is None:
            return None
        return raw
    if not isinstance(raw, Mapping):
        return None

    sender = _coerce_sender(_pick(raw, "sender", "senderName"))
    timestamp = _coerce_timestamp(_pick(raw, "timestampMs", "timestamp_ms", "timestamp"))
    if sender is None or timestamp is None:
        return None

    content = _pick(raw, "content", "text")
    content = str(content) if content is not None else None
    has_link = _pick(raw, "hasLink", "has_link")
    if has_link is None:
        has_link = contains_link(content)

    return UnifiedMessage(
        sender=sender,
        timestamp_ms=timestamp,
        content=content,
        reactions=_parse_reactions(_pick(raw, "reactions", default=[])),
        has_media=bool(_pick(raw, "hasMedia", "has_media", default=False)),
        has_link=bool(has_link),
        is_unsent=bool(_pick(raw, "isUnsent", "is_unsent", default=False)),
    )


def validate_messages(messages: Sequence[Any]) -> Tuple[List[UnifiedMessage], int]:
    """
    Validate and sort raw messages.

    Returns:
        (valid messages sorted by timestamp, skipped count)
    """
    valid: List[UnifiedMessage] = []
    skipped = 0
    for i, raw in enumerate(messages):
        msg = _parse_message(raw)
        if msg is None:
            skipped += 1
            logger.debug(f"Message {i}: missing sender or timestamp; skipping")
            continue
        valid.append(msg)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed messages (missing sender or timestamp)")

    # Stable sort keeps export order for equal timestamps
    valid.sort(key=lambda m: m.timestamp_ms)
    return valid, skipped


def _merge_participants(declared: Sequence[str], messages: Sequence[UnifiedMessage]) -> List[str]:
    """Declared participants first, then any sender the header did not list."""
    names = list(dict.fromkeys(declared))
    known = set(names)
    for msg in messages:
        if msg.sender not in known:
            logger.warning(f"Sender '{msg.sender}' not in participant list; adding")
            names.append(msg.sender)
            known.add(msg.sender)
    return names


def _build_metadata(raw: Mapping[str, Any], messages: Sequence[UnifiedMessage], n_participants: int) -> ConversationMetadata:
    start = messages[0].timestamp_ms if messages else None
    end = messages[-1].timestamp_ms if messages else None
    duration = (end - start) / 86_400_000 if messages else None
    is_group = _pick(raw, "isGroup", "is_group")
    return ConversationMetadata(
        date_range_start=start,
        date_range_end=end,
        duration_days=duration,
        is_group=bool(is_group) if is_group is not None else n_participants > 2,
    )


class ConversationLoader:
    """Load ParsedConversation records from dicts, JSON text or files."""

    def __init__(self):
        self.skipped = 0

    def load_file(self, file_path: str) -> ParsedConversation:
        """Load a JSON export from disk."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Conversation file not found: {file_path}")

        encodings = ["utf-8", "utf-8-sig"]
        last_err: Optional[Exception] = None

        for enc in encodings:
            try:
                text = path.read_text(encoding=enc)
                return self.load_text(text)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                last_err = e
                continue

        raise ValueError(f"Failed to read/parse file {file_path}: {last_err}")

    def load_text(self, text: str) -> ParsedConversation:
        """Load a JSON document already read into memory."""
        data = json.loads(text)
        if not isinstance(data, Mapping):
            raise ValueError("Conversation JSON must be an object")
        return self.load_dict(data)

    def load_dict(self, data: Mapping[str, Any]) -> ParsedConversation:
        """
        Build a ParsedConversation from a JSON-shaped mapping.

        Malformed messages are skipped; the count is kept on `self.skipped`.
        """
        raw_participants = _pick(data, "participants", default=[])
        declared = []
        for p in raw_participants:
            name = p.get("name") if isinstance(p, Mapping) else getattr(p, "name", p)
            name = _coerce_sender(name)
            if name:
                declared.append(name)

        messages, self.skipped = validate_messages(_pick(data, "messages", default=[]))
        names = _merge_participants(declared, messages)
        raw_meta = _pick(data, "metadata", default={})

        conversation = ParsedConversation(
            platform=str(_pick(data, "platform", default="unknown")),
            participants=tuple(Participant(name=n) for n in names),
            messages=tuple(messages),
            metadata=_build_metadata(raw_meta, messages, len(names)),
        )
        logger.info(
            f"Loaded {len(messages)} messages from {len(names)} participants "
            f"({self.skipped} skipped)"
        )
        return conversation

    def normalize(self, conversation: ParsedConversation) -> ParsedConversation:
        """Re-validate an already typed conversation (drops malformed messages)."""
        messages, self.skipped = validate_messages(conversation.messages)
        names = _merge_participants(conversation.participant_names, messages)
        return ParsedConversation(
            platform=conversation.platform,
            participants=tuple(Participant(name=n) for n in names),
            messages=tuple(messages),
            metadata=conversation.metadata,
        )


def conversation_from_dict(data: Dict[str, Any]) -> Tuple[ParsedConversation, int]:
    """Convenience wrapper returning (conversation, skipped_count)."""
    loader = ConversationLoader()
    conversation = loader.load_dict(data)
    return conversation, loader.skipped
