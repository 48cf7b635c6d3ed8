"""
LLM client

create_llm builds the LangChain chat model for the configured provider.
CompletionClient is the single fallible completion call used by a turn.
"""

import asyncio
from typing import Any, List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from loguru import logger

from src.config.settings import settings
from src.llm.response_utils import extract_text_from_response
from src.models.chat import ChatTurn
from src.utils.errors import CompletionError


def create_llm(
    temperature: Optional[float] = None,
    max_completion_tokens: Optional[int] = None,
    model: Optional[str] = None,
):
    """
    Factory function to create the chat model for the configured provider.

    Args:
        temperature: Generation temperature (defaults to settings.llm_temperature)
        max_completion_tokens: Max tokens for completion (defaults to settings.max_output_tokens)
        model: Model name (defaults to the provider's configured model)

    Returns:
        LangChain ChatModel instance (ChatOpenAI or ChatOllama)
    """
    provider = settings.llm_provider.lower()
    max_tokens = max_completion_tokens or settings.max_output_tokens
    temperature = temperature if temperature is not None else settings.llm_temperature

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")

        logger.info(f"LLM Provider: OpenAI | Model: {model or settings.openai_model}")
        return ChatOpenAI(
            model=model or settings.openai_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            temperature=temperature,
            max_completion_tokens=max_tokens,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    elif provider == "ollama":
        from langchain_community.chat_models import ChatOllama

        logger.info(f"LLM Provider: Ollama | Base URL: {settings.ollama_base_url} | Model: {model or settings.ollama_model}")
        return ChatOllama(
            model=model or settings.ollama_model,
            base_url=settings.ollama_base_url,
            temperature=temperature,
            num_predict=max_tokens,  # Ollama uses num_predict instead of max_completion_tokens
        )

    else:
        raise ValueError(f"Unsupported LLM provider: {provider}. Supported: 'openai', 'ollama'")


def to_langchain_messages(turns: Sequence[ChatTurn]) -> List[BaseMessage]:
    """Convert role-tagged turns into LangChain messages, preserving order."""
    messages: List[BaseMessage] = []
    for turn in turns:
        if turn.role == "system":
            messages.append(SystemMessage(content=turn.content))
        elif turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))
    return messages


class CompletionClient:
    """
    One bounded completion call per turn.

    Every failure (timeout, transport error, non-success status, empty
    output) surfaces as CompletionError. Nothing is retried here.
    """

    def __init__(self, llm: Optional[Any] = None, timeout_seconds: Optional[float] = None):
        self.llm = llm or create_llm()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.llm_timeout_seconds

    async def complete(self, turns: Sequence[ChatTurn]) -> str:
        messages = to_langchain_messages(turns)
        logger.debug(f"Calling LLM with {len(messages)} messages (timeout {self.timeout_seconds}s)")

        try:
            response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(f"LLM call timed out after {self.timeout_seconds}s")
            raise CompletionError("timeout", f"no response within {self.timeout_seconds}s") from e
        except CompletionError:
            raise
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            if status_code is not None:
                logger.error(f"LLM API error: {status_code} - {e}")
                raise CompletionError("status", f"LLM API returned status {status_code}") from e
            logger.error(f"LLM transport error: {type(e).__name__}: {e}")
            raise CompletionError("transport", f"{type(e).__name__}: {e}") from e

        text = extract_text_from_response(response)
        if not text.strip():
            logger.error("LLM returned an empty response")
            raise CompletionError("empty_response", "no response from LLM")

        logger.debug(f"LLM response length: {len(text)}")
        return text
