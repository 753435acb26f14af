"""
ChatQuant - Quantitative Analysis Engine for chat conversations

Deterministic statistical and linguistic metrics per participant and per
relationship: response times, sentiment, style matching, conflicts,
reciprocity, chronotypes and composite scores. No AI calls.
"""

__version__ = "1.0.0"
__author__ = "ChatQuant Team"

from . import config
from . import models
from . import loader
from . import pipeline
from . import report
from .cache import AnalysisCache
from .loader import ConversationLoader, conversation_from_dict
from .models import ParsedConversation, QuantitativeAnalysis, UnifiedMessage
from .pipeline import analyze
from .report import analysis_to_dict, generate_text_summary

__all__ = [
    "config",
    "models",
    "loader",
    "pipeline",
    "report",
    "AnalysisCache",
    "ConversationLoader",
    "conversation_from_dict",
    "ParsedConversation",
    "QuantitativeAnalysis",
    "UnifiedMessage",
    "analyze",
    "analysis_to_dict",
    "generate_text_summary",
]
