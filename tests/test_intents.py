"""
Tests for intent classification and catalog order
"""

import pytest

from src.agents.assistant.intents import (
    INTENT_CATALOG,
    Intent,
    classify_intent,
    intent_requires_entity,
    match_intent,
)


@pytest.mark.parametrize("message,expected", [
    ("What do I have today?", Intent.SHOW_TODAYS_TASKS),
    ("Show me overdue tasks", Intent.SHOW_OVERDUE_TASKS),
    ("Any high priority items?", Intent.SHOW_HIGH_PRIORITY_TASKS),
    ("Show my tasks for this week", Intent.SHOW_TASKS_THIS_WEEK),
    ("tasks due this month", Intent.SHOW_TASKS_THIS_MONTH),
    ("What am I working on?", Intent.SHOW_IN_PROGRESS_TASKS),
    ("What needs my approval?", Intent.SHOW_PENDING_REVIEWS),
    ("Show me all my tasks", Intent.SHOW_ALL_TASKS),
    ("What's the status of the portfolio review task?", Intent.SHOW_TASK_STATUS),
    ("Mark it as done", Intent.COMPLETE_TASK),
    ("Create a task to call Priya", Intent.CREATE_TASK),
    ("Draft an email to Dylan Jackson", Intent.DRAFT_EMAIL),
    ("Send birthday wishes to Elena", Intent.DRAFT_BIRTHDAY_MESSAGE),
    ("create a compliance check", Intent.CREATE_COMPLIANCE_CHECK),
    ("Analyze their portfolio", Intent.CREATE_PORTFOLIO_ANALYSIS),
    ("Prepare for the meeting with Dylan", Intent.CREATE_MEETING_PREP),
    ("Prepare for my meeting with Dylan Jackson", Intent.CREATE_MEETING_PREP),
    ("Show me Dylan Jackson's policies", Intent.SHOW_CLIENT_POLICIES),
    ("Show me Dylan Jackson's info", Intent.SHOW_CLIENT_INFO),
    ("Tell me about Priya Patel", Intent.SHOW_CLIENT_INFO),
    ("Who is Marcus Chen?", Intent.SHOW_CLIENT_INFO),
    ("List my clients", Intent.SHOW_CLIENT_LIST),
    ("Show high net worth clients", Intent.SHOW_HIGH_NET_WORTH_CLIENTS),
    ("Show inactive clients", Intent.SHOW_INACTIVE_CLIENTS),
    ("Show me my prospects", Intent.SHOW_PROSPECT_CLIENTS),
    ("Show policy LI-2023-001", Intent.SHOW_POLICY_INFO),
    ("Which policies are expiring this week?", Intent.SHOW_EXPIRING_THIS_WEEK),
    ("Any upcoming renewals?", Intent.SHOW_EXPIRING_POLICIES),
    ("Show missed payments", Intent.SHOW_OVERDUE_POLICIES),
    ("How many tasks do I have?", Intent.SHOW_TASK_SUMMARY),
    ("What's my total AUM?", Intent.SHOW_PORTFOLIO_SUMMARY),
    ("Give me an overview", Intent.SHOW_DASHBOARD),
    ("search for retirement", Intent.GLOBAL_SEARCH),
    ("find tasks about compliance", Intent.SEARCH_TASKS),
    ("Hello!", Intent.GREETING),
    ("What can you do?", Intent.HELP),
])
def test_classify_examples(message, expected):
    """Representative messages land on the expected intent"""
    assert classify_intent(message).intent == expected


class TestCatalogOrder:
    """The first matching pattern in catalog order wins"""

    def test_reject_before_approve(self):
        """'don't send it' contains 'send it' but must not approve"""
        assert classify_intent("don't send it").intent == Intent.REJECT_TASK
        assert classify_intent("send it").intent == Intent.APPROVE_TASK

    def test_bare_yes_and_no(self):
        assert classify_intent("yes").intent == Intent.APPROVE_TASK
        assert classify_intent("no").intent == Intent.REJECT_TASK

    def test_approve_it(self):
        assert classify_intent("approve it").intent == Intent.APPROVE_TASK

    def test_inactive_is_not_active(self):
        assert classify_intent("show inactive clients").intent == Intent.SHOW_INACTIVE_CLIENTS
        assert classify_intent("show active clients").intent == Intent.SHOW_ACTIVE_CLIENTS

    def test_client_policies_before_client_info(self):
        """Both entries match; the earlier catalog entry wins"""
        message = "Show me Dylan Jackson's policies and info"
        match = match_intent(message)
        assert match.intent == Intent.SHOW_CLIENT_POLICIES

    def test_client_summary_document_before_summary_metrics(self):
        assert classify_intent("create a client summary").intent == Intent.CREATE_CLIENT_SUMMARY
        assert classify_intent("client count").intent == Intent.SHOW_CLIENT_SUMMARY

    def test_tell_me_about_the_policy(self):
        assert classify_intent("tell me about the policy").intent == Intent.SHOW_POLICY_INFO

    def test_catalog_positions_are_reported(self):
        match = match_intent("approve it")
        assert INTENT_CATALOG[match.position].intent == Intent.APPROVE_TASK

    def test_each_intent_appears_once(self):
        intents = [entry.intent for entry in INTENT_CATALOG]
        assert len(intents) == len(set(intents))
        assert Intent.GENERAL_QUESTION not in intents


class TestConfidence:
    """Fixed confidence constants"""

    def test_match_confidence(self):
        result = classify_intent("Show me Dylan Jackson's info")
        assert result.intent == Intent.SHOW_CLIENT_INFO
        assert result.confidence == 0.9
        assert result.entities.client_name == "Dylan Jackson"

    def test_fallback(self):
        result = classify_intent("What's the capital of Mongolia?")
        assert result.intent == Intent.GENERAL_QUESTION
        assert result.confidence == 0.5
        assert result.match is None

    def test_case_insensitive(self):
        assert classify_intent("SHOW ME OVERDUE TASKS").intent == Intent.SHOW_OVERDUE_TASKS


def test_intent_requires_entity():
    assert intent_requires_entity(Intent.CREATE_COMPLIANCE_CHECK) == "client"
    assert intent_requires_entity(Intent.SHOW_TASK_STATUS) == "task"
    assert intent_requires_entity(Intent.APPROVE_TASK) is None
    assert intent_requires_entity(Intent.COMPLETE_TASK) is None
    assert intent_requires_entity(Intent.SHOW_POLICY_INFO) == "policy"
    assert intent_requires_entity(Intent.SHOW_CLIENT_LIST) is None
