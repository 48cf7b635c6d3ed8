"""
LLM layer - client factory, completion call and response utilities
"""

from src.llm.client import create_llm, CompletionClient, to_langchain_messages
from src.llm.response_utils import extract_text_from_response

__all__ = [
    "create_llm",
    "CompletionClient",
    "to_langchain_messages",
    "extract_text_from_response",
]
