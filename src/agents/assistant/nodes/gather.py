"""
Gather node - record lookups for the classified intent
"""

from src.agents.assistant.deps import AssistantContext
from src.agents.assistant.state import TurnState


async def gather_node(state: TurnState, ctx: AssistantContext) -> dict:
    classification = state["classification"]
    bundle = await ctx.gatherer.gather(classification.intent, classification.entities, state["resolved"])
    return {"bundle": bundle}
