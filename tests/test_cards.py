"""
Tests for the card marker codec
"""

import pytest

from src.agents.assistant.cards import (
    decode_content,
    encode_card,
    extract_cards,
    has_card_markers,
    strip_card_markers,
)
from src.models.chat import CardType
from src.utils.errors import CardEncodingError


class TestEncode:
    """Marker construction"""

    def test_compact_marker(self):
        marker = encode_card(CardType.TASK, {"id": "T002", "title": "Draft follow-up email"})
        assert marker == '<<<CARD:task:{"id":"T002","title":"Draft follow-up email"}>>>'

    def test_string_type(self):
        assert encode_card("client-list", {"clients": []}).startswith("<<<CARD:client-list:")

    def test_unicode_is_kept(self):
        assert "Müller" in encode_card(CardType.CLIENT, {"name": "Müller"})

    def test_unknown_type(self):
        with pytest.raises(CardEncodingError):
            encode_card("chart", {"x": 1})

    def test_payload_must_be_object(self):
        with pytest.raises(CardEncodingError):
            encode_card(CardType.TASK_LIST, [1, 2])

    def test_payload_must_serialize(self):
        with pytest.raises(CardEncodingError):
            encode_card(CardType.TASK, {"when": object()})


class TestDecode:
    """Splitting generated text into text and card segments"""

    def test_text_card_text(self):
        text = 'Here you go\n\n<<<CARD:task:{"id":"T001","title":"Annual portfolio review"}>>>\n\nThanks'
        decoded = decode_content(text)

        assert [s.type for s in decoded.segments] == ["text", "card", "text"]
        assert decoded.cards[0].type == CardType.TASK
        assert decoded.cards[0].data == {"id": "T001", "title": "Annual portfolio review"}
        assert decoded.plain_text == "Here you go\n\nThanks"

    def test_confirmation_between_single_newlines(self):
        text = 'Here you go\n<<<CARD:confirmation:{"type":"success","message":"Done"}>>>\nThanks'
        decoded = decode_content(text)

        assert [s.type for s in decoded.segments] == ["text", "card", "text"]
        assert decoded.cards[0].type == CardType.CONFIRMATION
        assert decoded.cards[0].data == {"type": "success", "message": "Done"}
        assert decoded.plain_text == "Here you go\n\nThanks"

    @pytest.mark.parametrize("card_type", list(CardType))
    def test_every_type_decodes(self, card_type):
        payload = {"id": "X1", "items": [1, 2]}
        decoded = decode_content(f"before {encode_card(card_type, payload)} after")
        assert len(decoded.cards) == 1
        assert decoded.cards[0].type == card_type
        assert decoded.cards[0].data == payload

    def test_nested_and_quoted_braces(self):
        payload = {
            "title": 'curly } and { "quoted" \\ slash',
            "tasks": [{"id": "T1", "meta": {"tags": ["a", "b"]}}],
        }
        decoded = decode_content(encode_card(CardType.TASK_LIST, payload))
        assert decoded.cards[0].data == payload
        assert decoded.plain_text == ""

    def test_whitespace_before_payload(self):
        decoded = decode_content('<<<CARD:task: {"id":"T1"}>>>')
        assert decoded.cards[0].data == {"id": "T1"}

    def test_unknown_type_is_dropped(self):
        decoded = decode_content('a <<<CARD:chart:{"x":1}>>> b')
        assert decoded.cards == []
        assert decoded.plain_text == "a  b"

    def test_invalid_json_is_dropped(self):
        decoded = decode_content("start <<<CARD:task:{bad json}>>> end")
        assert decoded.cards == []
        assert "<<<CARD" not in decoded.plain_text
        assert decoded.plain_text.startswith("start")
        assert decoded.plain_text.endswith("end")

    def test_non_object_payload_is_dropped(self):
        decoded = decode_content("x <<<CARD:task:[1,2]>>> y")
        assert decoded.cards == []
        assert "<<<CARD" not in decoded.plain_text

    def test_unterminated_marker_is_literal(self):
        text = 'see <<<CARD:task:{"id":"T1"'
        decoded = decode_content(text)
        assert decoded.cards == []
        assert decoded.plain_text == text

    def test_marker_prefix_without_type_is_literal(self):
        text = "the prefix <<<CARD: marks a card"
        assert decode_content(text).plain_text == text

    def test_multiple_cards_keep_order(self):
        text = (
            "Tasks:"
            + encode_card(CardType.TASK, {"id": "T1"})
            + "and client:"
            + encode_card(CardType.CLIENT, {"id": "C1"})
        )
        decoded = decode_content(text)
        assert [s.type for s in decoded.segments] == ["text", "card", "text", "card"]
        assert [c.data["id"] for c in decoded.cards] == ["T1", "C1"]

    def test_plain_text_only(self):
        decoded = decode_content("Nothing special here.")
        assert decoded.cards == []
        assert len(decoded.segments) == 1
        assert decoded.plain_text == "Nothing special here."

    def test_empty(self):
        decoded = decode_content("")
        assert decoded.segments == []
        assert decoded.plain_text == ""


class TestHelpers:
    def test_strip(self):
        text = "Done." + encode_card(CardType.CONFIRMATION, {"ok": True})
        assert strip_card_markers(text) == "Done."

    def test_has_markers(self):
        assert has_card_markers(encode_card(CardType.REVIEW, {"id": "T2"}))
        assert not has_card_markers("<<<CARD:chart:{}>>>")
        assert not has_card_markers("plain")

    def test_extract(self):
        cards = extract_cards(encode_card(CardType.POLICY, {"number": "LI-2023-001"}) + " text")
        assert len(cards) == 1
        assert cards[0].type == CardType.POLICY
