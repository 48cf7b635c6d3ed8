"""
Turn pipeline state
"""

from typing import List, Optional, TypedDict

from src.agents.assistant.cards import DecodedContent
from src.agents.assistant.context import ResolvedContext
from src.agents.assistant.gathering import DataBundle
from src.agents.assistant.intents import IntentClassification
from src.models.chat import ChatTurn, ConversationContext


class TurnState(TypedDict):
    """State for one turn through the assistant workflow"""
    message: str
    prior_context: Optional[ConversationContext]
    history: List[ChatTurn]
    classification: Optional[IntentClassification]
    resolved: Optional[ResolvedContext]
    bundle: Optional[DataBundle]
    action_performed: bool
    reply: Optional[str]
    decoded: Optional[DecodedContent]
    context: Optional[ConversationContext]  # Updated context returned to the caller
