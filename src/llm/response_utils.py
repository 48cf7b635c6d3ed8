"""
LLM response utilities.

Chat models return either a plain string or a list of content blocks
(reasoning models interleave reasoning and text blocks). The assistant only
ever wants the text.
"""

from typing import Any

from loguru import logger


def extract_text_from_response(response: Any) -> str:
    """
    Extract text content from an LLM response.

    Args:
        response: AIMessage, content list, or plain string

    Returns:
        Concatenated text blocks, or "" if the response carries no text
    """
    content = response.content if hasattr(response, "content") else response

    if not content:
        return ""

    if isinstance(content, str):
        return content

    if isinstance(content, list):
        text_parts = []
        for block in content:
            if isinstance(block, str):
                text_parts.append(block)
            elif isinstance(block, dict) and block.get("type") != "reasoning" and "text" in block:
                text_parts.append(block["text"])

        if not text_parts:
            logger.warning(f"No text blocks found in structured response: {str(content)[:200]}")
        return "".join(text_parts)

    return str(content)
