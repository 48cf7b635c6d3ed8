"""
Models layer - records and chat value types
"""

from src.models.records import Task, Client, Policy, AICompletion, POLICY_TYPES
from src.models.chat import ConversationContext, Card, CardType, ContentSegment, ChatTurn

__all__ = [
    "Task",
    "Client",
    "Policy",
    "AICompletion",
    "POLICY_TYPES",
    "ConversationContext",
    "Card",
    "CardType",
    "ContentSegment",
    "ChatTurn",
]
