"""
Classify node - intent, entities and context resolution
"""

from loguru import logger

from src.agents.assistant.context import resolve_context
from src.agents.assistant.deps import AssistantContext
from src.agents.assistant.intents import classify_intent
from src.agents.assistant.state import TurnState


async def classify_node(state: TurnState, ctx: AssistantContext) -> dict:
    """Classify the message and resolve which focused records it refers to."""
    message = state["message"]
    classification = classify_intent(message)
    resolved = resolve_context(
        message,
        state.get("prior_context"),
        entities=classification.entities,
        intent=classification.intent,
    )

    logger.info(f"Intent: {classification.intent.value} (confidence {classification.confidence})")
    logger.debug(f"Entities: {classification.entities.model_dump(exclude_none=True)}")
    logger.debug(f"Resolved context: {resolved.model_dump(exclude_none=True)}")

    return {"classification": classification, "resolved": resolved}
