"""
Shared fixtures: a seeded in-memory store on a fixed clock, and scripted
chat models for the completion call.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from src.agents.assistant import AdvisorAssistant
from src.llm.client import CompletionClient
from src.models.records import AICompletion, Client, Policy, Task
from src.store.memory import InMemoryRecordStore


# Wednesday; the week started Sunday 2026-01-18
NOW = datetime(2026, 1, 21, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


def make_clients() -> List[Client]:
    return [
        Client(
            client_id="C001", first_name="Dylan", last_name="Jackson",
            client_status="Active", client_segment="High Net Worth",
            primary_email="dylan.jackson@example.com", portfolio_value=2_500_000,
            risk_profile="moderate", created_at=NOW - timedelta(days=400), updated_at=NOW,
        ),
        Client(
            client_id="C002", first_name="Priya", last_name="Patel",
            client_status="Active", client_segment="Mass Affluent",
            portfolio_value=600_000, risk_profile="aggressive",
            created_at=NOW - timedelta(days=2), updated_at=NOW,
        ),
        Client(
            client_id="C003", first_name="Marcus", last_name="Chen",
            client_status="Prospect", client_segment="Retail",
            portfolio_value=80_000, risk_profile="conservative",
            created_at=NOW - timedelta(days=30), updated_at=NOW,
        ),
        Client(
            client_id="C004", first_name="Elena", last_name="Rossi",
            client_status="Dormant", client_segment="Retail",
            portfolio_value=150_000, created_at=NOW - timedelta(days=700), updated_at=NOW,
        ),
    ]


def make_policies() -> List[Policy]:
    return [
        Policy(
            policy_id="POL001", client_id="C001", policy_number="LI-2023-001",
            policy_type="Life Insurance", policy_status="Active",
            coverage_amount=500_000, premium_amount=250, premium_frequency="Monthly",
            renewal_date=NOW + timedelta(days=3), payment_status="Current",
            created_at=NOW - timedelta(days=900), updated_at=NOW,
        ),
        Policy(
            policy_id="POL002", client_id="C001", policy_number="HO-2022-002",
            policy_type="Home Insurance", policy_status="Active",
            coverage_amount=800_000, premium_amount=120, premium_frequency="Monthly",
            renewal_date=NOW + timedelta(days=20), payment_status="Overdue",
            created_at=NOW - timedelta(days=1200), updated_at=NOW,
        ),
        Policy(
            policy_id="POL003", client_id="C002", policy_number="AI-2024-003",
            policy_type="Auto Insurance", policy_status="Pending",
            coverage_amount=50_000, premium_amount=900, premium_frequency="Annual",
            renewal_date=NOW + timedelta(days=90), payment_status="Current",
            created_at=NOW - timedelta(days=300), updated_at=NOW,
        ),
    ]


def make_tasks() -> List[Task]:
    created = NOW - timedelta(days=5)
    return [
        Task(
            task_id="T001", title="Annual portfolio review", status="pending", priority="high",
            due_date=NOW + timedelta(hours=2), created_at=created, updated_at=created,
            client_id="C001", client_name="Dylan Jackson", tags=["review"],
        ),
        Task(
            task_id="T002", title="Draft follow-up email", status="needs-review", priority="medium",
            due_date=NOW + timedelta(days=1), created_at=created, updated_at=created,
            client_id="C001", client_name="Dylan Jackson", tags=["ai"],
            ai_completed=True, ai_action_type="email_draft",
            ai_completion_data=AICompletion(
                completed_at=NOW - timedelta(hours=3), summary="Follow-up email drafted",
                action_type="email_draft", confidence=88, generated_content="Dear Dylan, ...",
            ),
        ),
        Task(
            task_id="T003", title="KYC refresh", status="pending", priority="medium",
            due_date=NOW - timedelta(days=3), created_at=created, updated_at=created,
            client_id="C002", client_name="Priya Patel", tags=["compliance"],
        ),
        Task(
            task_id="T004", title="Renewal discussion", status="completed", priority="low",
            due_date=NOW - timedelta(days=1), created_at=created, updated_at=created,
            completed_at=NOW - timedelta(days=1), client_id="C001", client_name="Dylan Jackson",
        ),
        Task(
            task_id="T005", title="Compliance check", status="needs-review", priority="high",
            due_date=NOW + timedelta(days=2), created_at=created, updated_at=created,
            client_id="C002", client_name="Priya Patel", tags=["ai", "compliance"],
            ai_completed=True, ai_action_type="compliance_check",
        ),
        Task(
            task_id="T006", title="Update beneficiary forms", status="in-progress", priority="low",
            due_date=NOW + timedelta(days=10), created_at=created, updated_at=created,
            client_id="C003", client_name="Marcus Chen", tags=["paperwork"],
        ),
    ]


class RecordingStore:
    """Store proxy that records the name of every async store call."""

    def __init__(self, inner: InMemoryRecordStore):
        self.inner = inner
        self.calls: List[str] = []

    def now(self) -> datetime:
        return self.inner.now()

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if not asyncio.iscoroutinefunction(attr):
            return attr

        async def recorded(*args, **kwargs):
            self.calls.append(name)
            return await attr(*args, **kwargs)
        return recorded


class FailingChatModel:
    """Chat model stand-in whose call always fails with the given exception."""

    def __init__(self, error: Exception):
        self.error = error

    async def ainvoke(self, messages):
        raise self.error


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore(make_tasks(), make_clients(), make_policies(), now=fixed_clock)


@pytest.fixture
def recording_store(store) -> RecordingStore:
    return RecordingStore(store)


def scripted_client(*responses: str) -> CompletionClient:
    """CompletionClient over a FakeListChatModel returning responses in order."""
    return CompletionClient(llm=FakeListChatModel(responses=list(responses)), timeout_seconds=5)


@pytest.fixture
def make_assistant(recording_store):
    """Factory for an assistant over the recording store with scripted replies."""
    def factory(*responses: str) -> AdvisorAssistant:
        return AdvisorAssistant(recording_store, completion_client=scripted_client(*(responses or ("OK",))))
    return factory
