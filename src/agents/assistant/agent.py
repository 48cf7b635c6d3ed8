"""
Advisor Assistant - turn pipeline as a LangGraph workflow

Workflow: START → classify → gather_data → [perform_action] → generate_reply → finalize → END
"""

from typing import List, Optional, Sequence

from langgraph.graph import StateGraph, END
from loguru import logger
from pydantic import BaseModel, Field

from src.agents.assistant.deps import AssistantContext
from src.agents.assistant.gathering import DataGatherer
from src.agents.assistant.intents import ACTION_INTENTS, Intent
from src.agents.assistant.nodes import (
    classify_node,
    gather_node,
    perform_action_node,
    generate_reply_node,
    finalize_node,
)
from src.agents.assistant.state import TurnState
from src.llm.client import CompletionClient
from src.models.chat import Card, ChatTurn, ContentSegment, ConversationContext
from src.store.base import RecordStore


class TurnResult(BaseModel):
    """Everything a turn hands back to the caller."""
    content: str  # Raw generated text, card markers included
    plain_text: str
    segments: List[ContentSegment] = Field(default_factory=list)
    cards: List[Card] = Field(default_factory=list)
    context: ConversationContext
    action_performed: bool = False
    intent: Intent
    confidence: float


def _route_after_gather(state: TurnState) -> str:
    """Run the action only for action intents with a resolved task id."""
    if state["classification"].intent in ACTION_INTENTS and state["resolved"].task_id:
        return "perform_action"
    return "generate_reply"


class AdvisorAssistant:
    """
    Conversational dispatcher for the advisor assistant.

    One handle_turn call is one pass through the workflow; the only state kept
    between turns is the ConversationContext the caller passes back in.
    """

    def __init__(
        self,
        store: RecordStore,
        completion_client: Optional[CompletionClient] = None,
        gatherer: Optional[DataGatherer] = None,
    ):
        self.store = store
        self.ctx = AssistantContext(
            store=store,
            gatherer=gatherer or DataGatherer(store),
            completion_client=completion_client or CompletionClient(),
        )
        self.workflow = self._build_workflow()
        logger.info(f"Initialized AdvisorAssistant (store: {type(store).__name__})")

    def _build_workflow(self):
        """Build the LangGraph workflow."""
        ctx = self.ctx
        workflow = StateGraph(TurnState)

        async def classify(s):
            return await classify_node(s, ctx)

        async def gather_data(s):
            return await gather_node(s, ctx)

        async def perform_action(s):
            return await perform_action_node(s, ctx)

        async def generate_reply(s):
            return await generate_reply_node(s, ctx)

        async def finalize(s):
            return await finalize_node(s, ctx)

        workflow.add_node("classify", classify)
        workflow.add_node("gather_data", gather_data)
        workflow.add_node("perform_action", perform_action)
        workflow.add_node("generate_reply", generate_reply)
        workflow.add_node("finalize", finalize)

        workflow.set_entry_point("classify")
        workflow.add_edge("classify", "gather_data")
        workflow.add_conditional_edges(
            "gather_data",
            _route_after_gather,
            {"perform_action": "perform_action", "generate_reply": "generate_reply"}
        )
        workflow.add_edge("perform_action", "generate_reply")
        workflow.add_edge("generate_reply", "finalize")
        workflow.add_edge("finalize", END)

        return workflow.compile()

    async def handle_turn(
        self,
        message: str,
        context: Optional[ConversationContext] = None,
        history: Optional[Sequence[ChatTurn]] = None,
    ) -> TurnResult:
        """
        Process one user message.

        Raises:
            ValueError: the message is empty or blank; no turn is run
            CompletionError: the language-model call failed; nothing else aborts a turn
        """
        if not message or not message.strip():
            raise ValueError("message must not be empty")

        logger.info(f"Turn: {message[:200]}")

        initial_state: TurnState = {
            "message": message,
            "prior_context": context,
            "history": list(history or []),
            "classification": None,
            "resolved": None,
            "bundle": None,
            "action_performed": False,
            "reply": None,
            "decoded": None,
            "context": None,
        }

        final_state = await self.workflow.ainvoke(initial_state)

        decoded = final_state["decoded"]
        classification = final_state["classification"]
        return TurnResult(
            content=final_state["reply"],
            plain_text=decoded.plain_text,
            segments=decoded.segments,
            cards=decoded.cards,
            context=final_state["context"],
            action_performed=final_state["action_performed"],
            intent=classification.intent,
            confidence=classification.confidence,
        )
