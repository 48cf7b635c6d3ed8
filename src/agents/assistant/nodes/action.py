"""
Perform-action node - approve, reject or complete the resolved task

A refused or failed action never fails the turn: the outcome is recorded in
the bundle's action result and the reply is still generated.
"""

from loguru import logger

from src.agents.assistant.deps import AssistantContext
from src.agents.assistant.intents import Intent
from src.agents.assistant.state import TurnState
from src.utils.errors import ActionNotAllowedError, RecordNotFoundError


async def perform_action_node(state: TurnState, ctx: AssistantContext) -> dict:
    """Run the task transition for an action intent."""
    intent = state["classification"].intent
    task_id = state["resolved"].task_id
    bundle = state["bundle"]

    transitions = {
        Intent.APPROVE_TASK: ("approve", ctx.store.approve_task),
        Intent.REJECT_TASK: ("reject", ctx.store.reject_task),
        Intent.COMPLETE_TASK: ("complete", ctx.store.complete_task),
    }
    action, transition = transitions[intent]

    try:
        task = await transition(task_id)
    except (ActionNotAllowedError, RecordNotFoundError) as e:
        logger.warning(f"Action '{action}' on task {task_id} not performed: {e}")
        bundle.action_result = {"action": action, "task_id": task_id, "performed": False, "reason": str(e)}
        return {"bundle": bundle, "action_performed": False}
    except Exception as e:
        logger.warning(f"Action '{action}' on task {task_id} failed in the record store: {type(e).__name__}: {e}")
        bundle.action_result = {
            "action": action,
            "task_id": task_id,
            "performed": False,
            "reason": "The record store could not be updated. Nothing was changed; try again later.",
        }
        return {"bundle": bundle, "action_performed": False}

    logger.info(f"Action '{action}' performed on task {task_id}")
    bundle.focus_task(task)
    bundle.action_result = {"action": action, "task_id": task_id, "performed": True, "new_status": task.status}
    return {"bundle": bundle, "action_performed": True}
