"""
Tests for system prompt composition
"""

from src.agents.assistant.gathering import DataBundle
from src.agents.assistant.intents import Intent
from src.agents.assistant.prompts import (
    CAPABILITIES,
    GUIDELINES,
    INTENT_GUIDANCE,
    build_system_prompt,
    format_data_bundle,
    get_output_format,
    get_persona,
)
from src.config.settings import settings


class TestBuildSystemPrompt:
    """Section order and omission of empty data"""

    def test_section_order(self):
        bundle = DataBundle(tasks=[{"task_id": "T001"}], totals={"tasks": 1})
        prompt = build_system_prompt(Intent.SHOW_TODAYS_TASKS, bundle)

        positions = [
            prompt.index(get_persona()),
            prompt.index(CAPABILITIES),
            prompt.index(GUIDELINES),
            prompt.index("## Output Format"),
            prompt.index("## Current Request"),
            prompt.index("## Available Data"),
        ]
        assert positions == sorted(positions)
        assert INTENT_GUIDANCE[Intent.SHOW_TODAYS_TASKS] in prompt

    def test_empty_bundle_has_no_data_section(self):
        prompt = build_system_prompt(Intent.GREETING, DataBundle())
        assert "## Available Data" not in prompt
        assert prompt.rstrip().endswith(INTENT_GUIDANCE[Intent.GREETING].rstrip())

    def test_persona_uses_configured_name(self, monkeypatch):
        monkeypatch.setattr(settings, "assistant_name", "Nova")
        assert build_system_prompt(Intent.HELP, DataBundle()).startswith("You are Nova")

    def test_output_format_documents_every_card(self):
        text = get_output_format()
        for card_type in ("task-list", "task", "client", "client-list", "policy",
                          "policy-list", "review", "confirmation"):
            assert f"<<<CARD:{card_type}:" in text

    def test_every_intent_has_guidance(self):
        assert set(INTENT_GUIDANCE) == set(Intent)


class TestFormatDataBundle:
    def test_block_order_and_labels(self):
        bundle = DataBundle(
            focused_client={"client_id": "C001"},
            tasks=[{"task_id": "T001"}],
            totals={"tasks": 40},
            metrics={"tasks": {"total": 40}},
            action_result={"action": "approve_task", "performed": True},
        )
        text = format_data_bundle(bundle)

        labels = ["### Focused Client", "### Tasks (40 total)", "### Metrics", "### Action Result"]
        positions = [text.index(label) for label in labels]
        assert positions == sorted(positions)
        assert "### Focused Task" not in text
        assert "### Policies" not in text

    def test_empty(self):
        assert format_data_bundle(DataBundle()) == ""
