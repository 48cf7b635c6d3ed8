"""
Tests for context resolution and focus carry-forward
"""

from src.agents.assistant.context import (
    Focus,
    build_updated_context,
    has_referring_token,
    resolve_context,
)
from src.agents.assistant.entities import extract_entities
from src.agents.assistant.intents import Intent
from src.models.chat import ConversationContext


FOCUSED = ConversationContext(
    focused_task_id="T002",
    focused_client_id="C001",
    focused_policy_id="POL001",
)


class TestResolveContext:
    """Explicit ids, referring words and implicit subjects"""

    def test_explicit_ids_win(self):
        message = "approve T005"
        resolved = resolve_context(message, FOCUSED, extract_entities(message), Intent.APPROVE_TASK)
        assert resolved.resolved_from == "explicit"
        assert resolved.task_id == "T005"
        assert resolved.client_id is None

    def test_referring_word_copies_every_focus_id(self):
        message = "approve it"
        resolved = resolve_context(message, FOCUSED, extract_entities(message), Intent.APPROVE_TASK)
        assert resolved.resolved_from == "context"
        assert resolved.task_id == "T002"
        assert resolved.client_id == "C001"
        assert resolved.policy_id == "POL001"

    def test_implicit_subject_by_required_kind(self):
        """No referring word: only the focus id of the kind the intent needs"""
        message = "create a compliance check"
        context = ConversationContext(focused_client_id="C001", focused_task_id="T002")
        resolved = resolve_context(message, context, extract_entities(message), Intent.CREATE_COMPLIANCE_CHECK)
        assert resolved.resolved_from == "context"
        assert resolved.client_id == "C001"
        assert resolved.task_id is None

    def test_implicit_subject_missing_kind(self):
        message = "create a compliance check"
        context = ConversationContext(focused_task_id="T002")
        resolved = resolve_context(message, context, extract_entities(message), Intent.CREATE_COMPLIANCE_CHECK)
        assert resolved.resolved_from == "none"
        assert resolved.client_id is None

    def test_task_action_needs_a_reference(self):
        """A focused task is not acted on when the message names a different one"""
        message = "Is the KYC refresh task done?"
        context = ConversationContext(focused_task_id="T001")
        resolved = resolve_context(message, context, extract_entities(message), Intent.COMPLETE_TASK)
        assert resolved.resolved_from == "none"
        assert resolved.task_id is None

    def test_no_context(self):
        resolved = resolve_context("approve it", None, None, Intent.APPROVE_TASK)
        assert resolved.resolved_from == "none"
        assert resolved.task_id is None

    def test_empty_context(self):
        resolved = resolve_context("approve it", ConversationContext(), None, Intent.APPROVE_TASK)
        assert resolved.resolved_from == "none"

    def test_intent_without_subject(self):
        resolved = resolve_context("list my clients", FOCUSED, None, Intent.SHOW_CLIENT_LIST)
        assert resolved.resolved_from == "none"

    def test_referring_words(self):
        assert has_referring_token("send it")
        assert has_referring_token("Tell me about the client")
        assert not has_referring_token("list my clients")
        assert not has_referring_token("submit")  # 'it' inside a word


class TestBuildUpdatedContext:
    """Focus ids are replaced, never cleared"""

    def test_new_focus_replaces(self):
        updated = build_updated_context(FOCUSED, Focus(client_id="C002"), Intent.SHOW_CLIENT_INFO)
        assert updated.focused_client_id == "C002"
        assert updated.focused_task_id == "T002"
        assert updated.focused_policy_id == "POL001"
        assert updated.last_intent == "show_client_info"

    def test_empty_focus_keeps_prior(self):
        updated = build_updated_context(FOCUSED, Focus(), Intent.GREETING)
        assert updated.focused_task_id == "T002"
        assert updated.focused_client_id == "C001"
        assert updated.last_intent == "greeting"

    def test_session_id_is_kept(self):
        prior = ConversationContext(session_id="abc")
        updated = build_updated_context(prior, Focus(task_id="T001"), Intent.SHOW_TASK_STATUS)
        assert updated.session_id == "abc"
        assert updated.focused_task_id == "T001"

    def test_prior_is_not_mutated(self):
        build_updated_context(FOCUSED, Focus(client_id="C004"), Intent.SHOW_CLIENT_INFO)
        assert FOCUSED.focused_client_id == "C001"
        assert FOCUSED.last_intent is None

    def test_no_prior(self):
        updated = build_updated_context(None, Focus(policy_id="POL003"), Intent.SHOW_POLICY_INFO)
        assert updated.focused_policy_id == "POL003"
        assert updated.focused_task_id is None
