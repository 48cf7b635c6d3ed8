"""
Context resolution - which prior focus ids a message implicitly refers to,
and how focus carries forward into the next turn.
"""

import re
from typing import Literal, Optional

from pydantic import BaseModel

from src.agents.assistant.entities import ExtractedEntities
from src.agents.assistant.intents import Intent, intent_requires_entity
from src.models.chat import ConversationContext


REFERRING_TOKENS = re.compile(
    r"\b(?:it|that|this|the\s*task|the\s*client|the\s*policy)\b", re.IGNORECASE
)


class ResolvedContext(BaseModel):
    """Entity ids the current message refers to, tagged with how they were found."""
    task_id: Optional[str] = None
    client_id: Optional[str] = None
    policy_id: Optional[str] = None
    resolved_from: Literal["explicit", "context", "none"] = "none"


class Focus(BaseModel):
    """New focus produced by a turn; None means this turn found nothing of that kind."""
    task_id: Optional[str] = None
    client_id: Optional[str] = None
    policy_id: Optional[str] = None


def has_referring_token(message: str) -> bool:
    return REFERRING_TOKENS.search(message) is not None


def resolve_context(
    message: str,
    context: Optional[ConversationContext],
    entities: Optional[ExtractedEntities] = None,
    intent: Optional[Intent] = None,
) -> ResolvedContext:
    """
    Decide which entity ids the message points at.

    Explicit ids in the message win. Otherwise a referring word ("it",
    "the client", ...) copies every focus id the prior context holds, without
    telling apart which kind the word meant. With no referring word, an
    intent that needs a subject picks up the focus id of that one kind.
    """
    if entities and (entities.task_id or entities.client_id or entities.policy_id):
        return ResolvedContext(
            task_id=entities.task_id,
            client_id=entities.client_id,
            policy_id=entities.policy_id,
            resolved_from="explicit",
        )

    if context is None or not context.has_focus():
        return ResolvedContext()

    if has_referring_token(message):
        return ResolvedContext(
            task_id=context.focused_task_id,
            client_id=context.focused_client_id,
            policy_id=context.focused_policy_id,
            resolved_from="context",
        )

    kind = intent_requires_entity(intent) if intent else None
    if kind == "task" and context.focused_task_id:
        return ResolvedContext(task_id=context.focused_task_id, resolved_from="context")
    if kind == "client" and context.focused_client_id:
        return ResolvedContext(client_id=context.focused_client_id, resolved_from="context")
    if kind == "policy" and context.focused_policy_id:
        return ResolvedContext(policy_id=context.focused_policy_id, resolved_from="context")

    return ResolvedContext()


def build_updated_context(
    prior: Optional[ConversationContext],
    focus: Focus,
    intent: Intent,
) -> ConversationContext:
    """
    Merge this turn's focus into the prior context.

    A focus id is replaced only when the turn produced a new one; known ids
    are never cleared. last_intent is always this turn's intent.
    """
    prior = prior or ConversationContext()
    return prior.model_copy(update={
        "focused_task_id": focus.task_id or prior.focused_task_id,
        "focused_client_id": focus.client_id or prior.focused_client_id,
        "focused_policy_id": focus.policy_id or prior.focused_policy_id,
        "last_intent": intent.value,
    })
