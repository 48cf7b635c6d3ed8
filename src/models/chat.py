"""
Chat value types carried across a turn.

ConversationContext is the only state that survives between turns; the
caller owns it. Cards and content segments are produced fresh every turn.
"""

import enum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ConversationContext(BaseModel):
    """
    Focus state supplied by the caller and returned, updated, every turn.

    Frozen: a turn never mutates the caller's context, it returns a new one.
    """
    model_config = ConfigDict(frozen=True)

    session_id: Optional[str] = None
    focused_task_id: Optional[str] = None
    focused_client_id: Optional[str] = None
    focused_policy_id: Optional[str] = None
    last_intent: Optional[str] = None

    def has_focus(self) -> bool:
        return bool(self.focused_task_id or self.focused_client_id or self.focused_policy_id)


class CardType(str, enum.Enum):
    """Closed set of card types that may be embedded in generated text."""
    TASK_LIST = "task-list"
    TASK = "task"
    CLIENT = "client"
    CLIENT_LIST = "client-list"
    POLICY = "policy"
    POLICY_LIST = "policy-list"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


class Card(BaseModel):
    """Typed JSON payload for rich rendering by the caller."""
    type: CardType
    data: Dict[str, Any]


class ContentSegment(BaseModel):
    """One piece of decoded generated text: prose or a card, in authored order."""
    type: Literal["text", "card"]
    content: str
    card: Optional[Card] = None


class ChatTurn(BaseModel):
    """Role-tagged message sent to the language model."""
    role: Literal["system", "user", "assistant"]
    content: str = Field(..., min_length=1)
