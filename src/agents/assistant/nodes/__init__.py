"""
Assistant workflow nodes
"""

from src.agents.assistant.nodes.classify import classify_node
from src.agents.assistant.nodes.gather import gather_node
from src.agents.assistant.nodes.action import perform_action_node
from src.agents.assistant.nodes.respond import generate_reply_node
from src.agents.assistant.nodes.finalize import finalize_node

__all__ = [
    "classify_node",
    "gather_node",
    "perform_action_node",
    "generate_reply_node",
    "finalize_node",
]
