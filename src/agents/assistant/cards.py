"""
Card protocol codec.

Cards travel inside generated text as markers:

    <<<CARD:<type>:<json object>>>>

The payload is located by brace-depth scanning that understands JSON
strings and escapes, so nested objects, arrays and quoted braces survive.
Decoding never raises: unknown types and bad payloads are dropped with a
warning and the rest of the text is kept in order.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger
from pydantic import BaseModel

from src.models.chat import Card, CardType, ContentSegment
from src.utils.errors import CardEncodingError


MARKER_OPEN = "<<<CARD:"
MARKER_CLOSE = ">>>"

_TYPE_TOKEN = re.compile(r"([a-z-]+):")
_BLANK_LINES = re.compile(r"\n{3,}")

KNOWN_CARD_TYPES = {card_type.value for card_type in CardType}


class DecodedContent(BaseModel):
    """Result of decoding generated text."""
    segments: List[ContentSegment]
    cards: List[Card]
    plain_text: str


def encode_card(card_type: Union[CardType, str], payload: Dict[str, Any]) -> str:
    """Build the marker string for one card."""
    type_value = card_type.value if isinstance(card_type, CardType) else card_type
    if type_value not in KNOWN_CARD_TYPES:
        raise CardEncodingError(f"Unknown card type: {type_value}")
    if not isinstance(payload, dict):
        raise CardEncodingError(f"Card payload must be a JSON object, got {type(payload).__name__}")

    try:
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise CardEncodingError(f"Card payload is not JSON-serializable: {e}") from e

    return f"{MARKER_OPEN}{type_value}:{body}{MARKER_CLOSE}"


def _match_braces(text: str, start: int) -> Optional[int]:
    """
    Index of the '}' closing the '{' at start, or None if it never closes.

    Braces inside JSON strings are ignored; backslash escapes are honoured.
    """
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def _scan_marker(text: str, start: int) -> Tuple[Optional[Card], int]:
    """
    Parse the marker opening at start.

    Returns (card, end) where end is the index just past the marker, or
    (None, start) when the text at start is not a marker at all and must be
    kept literally. A recognisable but undecodable marker yields (None, end)
    so the caller drops it.
    """
    cursor = start + len(MARKER_OPEN)
    type_match = _TYPE_TOKEN.match(text, cursor)
    if not type_match:
        return None, start
    card_type = type_match.group(1)
    cursor = type_match.end()

    while cursor < len(text) and text[cursor].isspace():
        cursor += 1

    close_brace = _match_braces(text, cursor) if cursor < len(text) and text[cursor] == "{" else None
    if close_brace is not None and text.startswith(MARKER_CLOSE, close_brace + 1):
        end = close_brace + 1 + len(MARKER_CLOSE)
        payload_text = text[cursor:close_brace + 1]
    else:
        # No well-formed object: drop up to the next closing delimiter, if any
        close = text.find(MARKER_CLOSE, cursor)
        if close == -1:
            return None, start
        end = close + len(MARKER_CLOSE)
        logger.warning(f"Dropping malformed card marker: {text[start:end][:200]}")
        return None, end

    if card_type not in KNOWN_CARD_TYPES:
        logger.warning(f"Dropping card with unknown type: {card_type}")
        return None, end

    try:
        payload = json.loads(payload_text)
    except json.JSONDecodeError as e:
        logger.warning(f"Dropping card '{card_type}' with invalid JSON payload: {e}")
        return None, end

    if not isinstance(payload, dict):
        logger.warning(f"Dropping card '{card_type}': payload is not a JSON object")
        return None, end

    return Card(type=CardType(card_type), data=payload), end


def decode_content(text: str) -> DecodedContent:
    """
    Split generated text into ordered text and card segments.

    plain_text is the text segments joined by newlines with runs of three or
    more newlines collapsed to two.
    """
    segments: List[ContentSegment] = []
    cards: List[Card] = []
    buffer: List[str] = []

    def flush():
        chunk = "".join(buffer)
        buffer.clear()
        if chunk.strip():
            segments.append(ContentSegment(type="text", content=chunk))

    position = 0
    while position < len(text):
        marker_at = text.find(MARKER_OPEN, position)
        if marker_at == -1:
            buffer.append(text[position:])
            break

        buffer.append(text[position:marker_at])
        card, end = _scan_marker(text, marker_at)

        if end == marker_at:
            # Not a marker; keep the opening literally and move past it
            buffer.append(MARKER_OPEN)
            position = marker_at + len(MARKER_OPEN)
            continue

        if card is not None:
            flush()
            segments.append(ContentSegment(type="card", content=text[marker_at:end], card=card))
            cards.append(card)
        position = end

    flush()

    plain_text = "\n".join(s.content for s in segments if s.type == "text")
    plain_text = _BLANK_LINES.sub("\n\n", plain_text).strip()

    return DecodedContent(segments=segments, cards=cards, plain_text=plain_text)


def strip_card_markers(text: str) -> str:
    """Generated text with every marker removed."""
    return decode_content(text).plain_text


def has_card_markers(text: str) -> bool:
    """True if the text holds at least one decodable card."""
    return bool(decode_content(text).cards)


def extract_cards(text: str) -> List[Card]:
    return decode_content(text).cards
