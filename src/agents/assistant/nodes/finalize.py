"""
Finalize node - decode cards and build the updated context
"""

from loguru import logger

from src.agents.assistant.cards import decode_content
from src.agents.assistant.context import build_updated_context
from src.agents.assistant.deps import AssistantContext
from src.agents.assistant.state import TurnState


async def finalize_node(state: TurnState, ctx: AssistantContext) -> dict:
    decoded = decode_content(state["reply"])
    context = build_updated_context(
        state.get("prior_context"),
        state["bundle"].focus,
        state["classification"].intent,
    )
    logger.debug(f"Decoded {len(decoded.cards)} cards; updated context: {context.model_dump(exclude_none=True)}")
    return {"decoded": decoded, "context": context}
