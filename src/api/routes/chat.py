"""
Chat endpoint

POST /api/chat runs one assistant turn. The caller keeps the returned
context and sends it back with the next message.
"""

from fastapi import APIRouter, Depends, Request
from loguru import logger

from src.api.models import ChatRequest, ChatResponse, ErrorResponse
from src.agents.assistant import AdvisorAssistant


router = APIRouter(prefix="/api", tags=["chat"])


def get_assistant(request: Request) -> AdvisorAssistant:
    """Assistant built at startup and stored on the application state."""
    return request.app.state.assistant


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={502: {"model": ErrorResponse, "description": "Language model call failed"}},
)
async def chat(body: ChatRequest, assistant: AdvisorAssistant = Depends(get_assistant)) -> ChatResponse:
    """
    Process a chat message.

    CompletionError is turned into a 502 by the application's exception handler.
    """
    session = body.context.session_id if body.context and body.context.session_id else "-"
    logger.info(f"Chat request - session={session}, message={body.message[:100]}")

    result = await assistant.handle_turn(body.message, context=body.context, history=body.history)

    return ChatResponse(
        content=result.content,
        plain_text=result.plain_text,
        segments=result.segments,
        cards=result.cards,
        context=result.context,
        action_performed=result.action_performed,
        intent=result.intent.value,
        confidence=result.confidence,
    )
