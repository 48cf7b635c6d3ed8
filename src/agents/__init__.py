"""
Agents package
"""

from src.agents.assistant import AdvisorAssistant, TurnResult

__all__ = ["AdvisorAssistant", "TurnResult"]
