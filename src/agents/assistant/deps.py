"""
Assistant context - dependencies passed to workflow nodes
"""

from dataclasses import dataclass

from src.agents.assistant.gathering import DataGatherer
from src.llm.client import CompletionClient
from src.store.base import RecordStore


@dataclass
class AssistantContext:
    """Context holding dependencies for assistant nodes"""

    store: RecordStore
    gatherer: DataGatherer
    completion_client: CompletionClient
