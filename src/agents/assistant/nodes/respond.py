"""
Generate-reply node - prompt assembly and the completion call
"""

from typing import List

from src.agents.assistant.deps import AssistantContext
from src.agents.assistant.prompts import build_system_prompt
from src.agents.assistant.state import TurnState
from src.config.settings import settings
from src.models.chat import ChatTurn


def build_turns(system_prompt: str, history: List[ChatTurn], message: str) -> List[ChatTurn]:
    """System instructions, then the most recent history, then the user's message."""
    recent = list(history)[-settings.max_history_messages:] if settings.max_history_messages > 0 else []
    return [
        ChatTurn(role="system", content=system_prompt),
        *[turn for turn in recent if turn.role != "system"],
        ChatTurn(role="user", content=message),
    ]


async def generate_reply_node(state: TurnState, ctx: AssistantContext) -> dict:
    """Ask the model for the reply. CompletionError propagates and fails the turn."""
    system_prompt = build_system_prompt(state["classification"].intent, state["bundle"])
    turns = build_turns(system_prompt, state.get("history") or [], state["message"])
    reply = await ctx.completion_client.complete(turns)
    return {"reply": reply}
