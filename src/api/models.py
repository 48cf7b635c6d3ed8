"""
Pydantic models for the chat API contract
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.chat import Card, ChatTurn, ContentSegment, ConversationContext


class ChatRequest(BaseModel):
    """One user message plus the context returned by the previous turn"""
    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="The advisor's message"
    )
    context: Optional[ConversationContext] = Field(
        default=None,
        description="Context from the previous response, passed back unchanged"
    )
    history: List[ChatTurn] = Field(
        default_factory=list,
        description="Optional prior turns, oldest first"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Show me Dylan Jackson's info"},
                {
                    "message": "create a compliance check",
                    "context": {"focused_client_id": "C001", "last_intent": "show_client_info"}
                }
            ]
        }
    }


class ChatResponse(BaseModel):
    """
    Chat turn response

    Attributes:
        content: Generated reply with card markers still embedded
        plain_text: Reply with markers removed and whitespace normalized
        segments: Ordered text and card segments
        cards: Decoded cards (possibly empty)
        context: Updated context to send with the next message
        action_performed: Whether a task approve/reject/complete happened
    """
    model_config = ConfigDict(populate_by_name=True)

    content: str
    plain_text: str
    segments: List[ContentSegment] = Field(default_factory=list)
    cards: List[Card] = Field(default_factory=list)
    context: ConversationContext
    action_performed: bool = Field(default=False, alias="actionPerformed")
    intent: str
    confidence: float


class ErrorResponse(BaseModel):
    error: str
    kind: Optional[str] = None
    message: str


class HealthResponse(BaseModel):
    """
    Health check response

    Attributes:
        status: Service health status
        service: Service name
        version: API version
    """
    status: str = Field(..., description="Health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
