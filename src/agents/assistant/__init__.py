"""
Advisor Assistant - intent classification, context resolution, data
gathering, prompt assembly and the card protocol, wired as one workflow
"""

from src.agents.assistant.agent import AdvisorAssistant, TurnResult
from src.agents.assistant.cards import (
    DecodedContent,
    decode_content,
    encode_card,
    extract_cards,
    has_card_markers,
    strip_card_markers,
)
from src.agents.assistant.context import ResolvedContext, build_updated_context, resolve_context
from src.agents.assistant.entities import ExtractedEntities, extract_entities
from src.agents.assistant.gathering import DataBundle, DataGatherer
from src.agents.assistant.intents import (
    INTENT_CATALOG,
    Intent,
    IntentClassification,
    classify_intent,
    intent_requires_entity,
)
from src.agents.assistant.prompts import build_system_prompt
from src.agents.assistant.state import TurnState

__all__ = [
    "AdvisorAssistant",
    "TurnResult",
    "TurnState",
    "DecodedContent",
    "decode_content",
    "encode_card",
    "extract_cards",
    "has_card_markers",
    "strip_card_markers",
    "ResolvedContext",
    "build_updated_context",
    "resolve_context",
    "ExtractedEntities",
    "extract_entities",
    "DataBundle",
    "DataGatherer",
    "INTENT_CATALOG",
    "Intent",
    "IntentClassification",
    "classify_intent",
    "intent_requires_entity",
    "build_system_prompt",
]
