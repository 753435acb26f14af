"""
Tests for report generation
"""

import json

from chatquant.models import QuantitativeAnalysis
from chatquant.pipeline import analyze
from chatquant.report import analysis_to_dict, dominant_sender, generate_text_summary

from conftest import BASE_MS, MINUTE, conversation, msg


def test_analysis_to_dict_is_json_ready(rich_messages):
    """Test every field is present and the payload serializes."""
    payload = analysis_to_dict(analyze(conversation(rich_messages)))

    assert set(payload) == set(QuantitativeAnalysis.__dataclass_fields__)
    assert isinstance(payload["participants"], list)
    assert isinstance(payload["threat_meters"], list)
    assert isinstance(payload["heatmap"]["combined"][0], list)
    json.dumps(payload)


def test_absent_metrics_stay_none():
    """Test sections without data are None, not missing."""
    payload = analysis_to_dict(analyze(conversation([msg("Alice", BASE_MS)])))
    assert payload["health_score"] is None
    assert payload["reciprocity"] is None
    assert "viral_scores" in payload


def test_text_summary(rich_messages):
    """Test the digest mentions people and headline numbers."""
    text = generate_text_summary(analyze(conversation(rich_messages)))

    assert text.startswith("Conversation between Alice, Bob")
    assert "Messages: 360 (0 skipped)" in text
    assert "Alice: 180 messages" in text
    assert "Health:" in text
    assert "Badges:" in text


def test_text_summary_empty():
    """Test the digest for an empty conversation."""
    text = generate_text_summary(analyze(conversation([], participants=["Alice", "Bob"])))
    assert "No messages to analyze." in text


def test_dominant_sender():
    """Test one-sided conversations name the dominant sender."""
    messages = [msg("Alice", BASE_MS + i * MINUTE) for i in range(8)]
    messages += [msg("Bob", BASE_MS + 10 * MINUTE)]
    assert dominant_sender(analyze(conversation(messages))) == "Alice"


def test_read_only_mappings_serialize(symmetric_messages):
    """Test read-only record mappings come out as plain dicts."""
    payload = analysis_to_dict(analyze(conversation(symmetric_messages)))

    assert type(payload["per_person"]) is dict
    assert type(payload["timing"]["conversation_initiations"]) is dict
    assert isinstance(payload["health_score"]["neutral_components"], list)
    json.dumps(payload)
