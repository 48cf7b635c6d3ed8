"""
Tests for intent-driven data gathering
"""

import asyncio

from src.agents.assistant.context import resolve_context
from src.agents.assistant.gathering import DataGatherer
from src.agents.assistant.intents import Intent, classify_intent
from src.config.settings import settings
from src.models.chat import ConversationContext
from src.store.memory import InMemoryRecordStore
from tests.conftest import make_clients, make_policies, make_tasks


def gather(store, message, context=None):
    classification = classify_intent(message)
    resolved = resolve_context(message, context, classification.entities, classification.intent)
    gatherer = DataGatherer(store)
    return asyncio.run(gatherer.gather(classification.intent, classification.entities, resolved))


class BrokenPolicyStore(InMemoryRecordStore):
    """Store whose policy listing always fails."""

    async def list_policies(self, filters=None):
        raise RuntimeError("policy backend unavailable")


class TestHandlerTable:
    def test_every_intent_has_a_handler(self, store):
        gatherer = DataGatherer(store)
        assert set(gatherer._handlers) == set(Intent)


class TestClientLookups:
    def test_client_info_by_name(self, store):
        bundle = gather(store, "Show me Dylan Jackson's info")
        assert bundle.focused_client["client_id"] == "C001"
        assert bundle.focus.client_id == "C001"
        assert [p["policy_id"] for p in bundle.policies] == ["POL001", "POL002"]

    def test_unknown_name_does_not_fall_back(self, store):
        context = ConversationContext(focused_client_id="C002")
        bundle = gather(store, "Tell me about Zed Unknown", context)
        assert bundle.focused_client is None
        assert bundle.focus.client_id is None

    def test_implicit_client_from_context(self, store):
        context = ConversationContext(focused_client_id="C001")
        bundle = gather(store, "create a compliance check", context)
        assert bundle.focus.client_id == "C001"
        assert {t["task_id"] for t in bundle.tasks} == {"T001", "T002", "T004"}
        assert len(bundle.policies) == 2

    def test_high_net_worth_list(self, store):
        bundle = gather(store, "Show high net worth clients")
        assert [c["client_id"] for c in bundle.clients] == ["C001"]
        assert bundle.totals["clients"] == 1


class TestTaskLookups:
    def test_pending_reviews_focus_first(self, store):
        bundle = gather(store, "What needs my approval?")
        assert [t["task_id"] for t in bundle.tasks] == ["T002", "T005"]
        assert bundle.focus.task_id == "T002"

    def test_task_status_by_title(self, store):
        bundle = gather(store, "What's the status of the portfolio review task?")
        assert bundle.focused_task["task_id"] == "T001"

    def test_action_without_task_makes_no_lookup(self, recording_store):
        bundle = gather(recording_store, "approve it")
        assert bundle.action_result["performed"] is False
        assert bundle.action_result["action"] == "approve_task"
        assert recording_store.calls == []

    def test_action_loads_resolved_task(self, store):
        context = ConversationContext(focused_task_id="T002")
        bundle = gather(store, "approve it", context)
        assert bundle.focused_task["task_id"] == "T002"
        assert bundle.action_result is None

    def test_list_is_capped_but_total_kept(self, store, monkeypatch):
        monkeypatch.setattr(settings, "list_result_limit", 2)
        bundle = gather(store, "Show me all my tasks")
        assert len(bundle.tasks) == 2
        assert bundle.totals["tasks"] == 6


class TestPolicyLookups:
    def test_policy_by_number_brings_owner(self, store):
        bundle = gather(store, "Show policy LI-2023-001")
        assert bundle.focused_policy["policy_id"] == "POL001"
        assert bundle.focused_client["client_id"] == "C001"
        assert bundle.focus.policy_id == "POL001"
        assert bundle.focus.client_id is None

    def test_expiring_this_week(self, store):
        bundle = gather(store, "Which policies are expiring this week?")
        assert [p["policy_id"] for p in bundle.policies] == ["POL001"]


class TestGeneral:
    def test_metrics(self, store):
        bundle = gather(store, "Give me an overview")
        assert bundle.metrics["dashboard"]["tasks"]["total"] == 6

    def test_greeting_cross_section(self, store):
        bundle = gather(store, "Hello!")
        assert [t["task_id"] for t in bundle.tasks] == ["T001", "T002", "T005"]

    def test_global_search(self, store):
        bundle = gather(store, "search for compliance")
        assert [t["task_id"] for t in bundle.tasks] == ["T003", "T005"]
        assert bundle.clients == []
        assert bundle.policies == []

    def test_empty_bundle(self, store):
        bundle = gather(store, "search for nothing-matches-this")
        assert bundle.is_empty()


class TestFailureIsolation:
    def test_failed_lookup_is_omitted(self):
        store = BrokenPolicyStore(make_tasks(), make_clients(), make_policies())
        bundle = gather(store, "create a compliance check for Dylan Jackson")
        assert bundle.focus.client_id == "C001"
        assert bundle.policies == []
        assert len(bundle.tasks) == 3

    def test_failed_metrics_are_omitted(self):
        store = BrokenPolicyStore(make_tasks(), make_clients(), make_policies())
        bundle = gather(store, "Give me an overview")
        assert bundle.metrics == {}
