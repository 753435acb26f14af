"""
Tests for the four horsemen markers
"""

from chatquant.horsemen import severity
from chatquant.pipeline import analyze

from conftest import alternating, conversation


def _by_id(result):
    return {h.id: h for h in result.four_horsemen.horsemen}


def test_severity_thresholds():
    """Test severity bands."""
    assert severity(80) == "severe"
    assert severity(50) == "moderate"
    assert severity(30) == "mild"
    assert severity(10) == "none"


def test_criticism_and_defensiveness():
    """Test phrase markers drive criticism and defensiveness per person."""
    texts = ("you never listen to me", "that's not true, i was just tired")
    result = analyze(conversation(alternating(40, texts=texts)))
    horsemen = _by_id(result)

    assert horsemen["criticism"].score == 100
    assert horsemen["criticism"].severity == "severe"
    assert horsemen["criticism"].marker_counts == {"Alice": 20, "Bob": 0}
    assert horsemen["criticism"].evidence == ("Alice: 20 critical messages",)
    assert horsemen["defensiveness"].present
    assert not horsemen["contempt"].present
    assert horsemen["stonewalling"].score == 0
    assert result.four_horsemen.active_count == 2
    assert result.four_horsemen.risk_level == "elevated"


def test_stonewalling_from_brush_off_replies():
    """Test one-word brush-offs register as stonewalling."""
    result = analyze(conversation(alternating(40, texts=("how was your day at work", "ok"))))
    stonewalling = _by_id(result)["stonewalling"]

    assert stonewalling.present
    assert stonewalling.marker_counts["Bob"] == 20
    assert "Bob: 20 brush-off replies" in stonewalling.evidence
    assert result.four_horsemen.active_count == 1
    assert result.four_horsemen.risk_level == "moderate"


def test_horsemen_need_enough_messages():
    """Test None for short conversations."""
    assert analyze(conversation(alternating(10))).four_horsemen is None
