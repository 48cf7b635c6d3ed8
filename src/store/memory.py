"""
In-memory record store.

Dict-backed reference implementation of RecordStore, loaded from a JSON seed
file or from record lists. Used for local development, demos and tests.
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from loguru import logger

from src.models.records import Client, Policy, Task
from src.store.base import ClientFilters, PolicyFilters, RecordStore, TaskFilters
from src.utils.dates import aware, start_of_next_month, start_of_week, utc_now
from src.utils.errors import ActionNotAllowedError, RecordNotFoundError


T = TypeVar("T")

Clock = Callable[[], datetime]


def _limit(items: List[T], limit: Optional[int]) -> List[T]:
    return items[:limit] if limit else items


class InMemoryRecordStore(RecordStore):
    """
    Record store holding tasks, clients and policies in dictionaries.

    Args:
        tasks, clients, policies: Initial records
        now: Clock used for due-date and renewal buckets (defaults to UTC now)
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        clients: Iterable[Client] = (),
        policies: Iterable[Policy] = (),
        now: Optional[Clock] = None,
    ):
        self._tasks: Dict[str, Task] = {t.task_id: t for t in tasks}
        self._clients: Dict[str, Client] = {c.client_id: c for c in clients}
        self._policies: Dict[str, Policy] = {p.policy_id: p for p in policies}
        self._now = now or utc_now
        self._lock = asyncio.Lock()

    @classmethod
    def from_seed_file(cls, path: Path, now: Optional[Clock] = None) -> "InMemoryRecordStore":
        """Load records from a JSON file with "tasks", "clients" and "policies" arrays."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        store = cls(
            tasks=[Task.model_validate(t) for t in raw.get("tasks", [])],
            clients=[Client.model_validate(c) for c in raw.get("clients", [])],
            policies=[Policy.model_validate(p) for p in raw.get("policies", [])],
            now=now,
        )
        logger.info(
            f"Loaded seed data from {path}: {len(store._tasks)} tasks, "
            f"{len(store._clients)} clients, {len(store._policies)} policies"
        )
        return store

    def now(self) -> datetime:
        return aware(self._now())

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_task(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    async def get_client(self, client_id: str) -> Optional[Client]:
        client = self._clients.get(client_id)
        return client.model_copy(deep=True) if client else None

    async def get_policy(self, policy_id: str) -> Optional[Policy]:
        policy = self._policies.get(policy_id)
        return policy.model_copy(deep=True) if policy else None

    async def find_client_by_name(self, name: str) -> Optional[Client]:
        matches = await self.list_clients(ClientFilters(name=name, limit=1))
        return matches[0] if matches else None

    async def find_task_by_title(self, title: str) -> Optional[Task]:
        needle = title.lower()
        for task in self._sorted_tasks(self._tasks.values()):
            if needle in task.title.lower():
                return task.model_copy(deep=True)
        return None

    async def find_policy_by_number(self, policy_number: str) -> Optional[Policy]:
        needle = policy_number.lower()
        for policy in self._policies.values():
            if policy.policy_number.lower() == needle:
                return policy.model_copy(deep=True)
        return None

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    async def list_tasks(self, filters: Optional[TaskFilters] = None) -> List[Task]:
        filters = filters or TaskFilters()
        tasks = list(self._tasks.values())

        if filters.status:
            tasks = [t for t in tasks if t.status == filters.status]
        if filters.priority:
            tasks = [t for t in tasks if t.priority == filters.priority]
        if filters.client_id:
            tasks = [t for t in tasks if t.client_id == filters.client_id]
        if filters.ai_completed is not None:
            tasks = [t for t in tasks if t.ai_completed == filters.ai_completed]
        if filters.due:
            tasks = [t for t in tasks if self._in_due_bucket(t, filters.due)]

        tasks = self._sorted_tasks(tasks)
        return [t.model_copy(deep=True) for t in _limit(tasks, filters.limit)]

    async def list_clients(self, filters: Optional[ClientFilters] = None) -> List[Client]:
        filters = filters or ClientFilters()
        clients = list(self._clients.values())

        if filters.name:
            needle = filters.name.lower()
            clients = [
                c for c in clients
                if needle in c.first_name.lower()
                or needle in c.last_name.lower()
                or needle in c.full_name.lower()
            ]
        if filters.statuses:
            clients = [c for c in clients if c.client_status in filters.statuses]
        if filters.segment:
            clients = [c for c in clients if c.client_segment == filters.segment]
        if filters.risk_profile:
            clients = [c for c in clients if c.risk_profile == filters.risk_profile]

        if filters.order_by == "recent":
            clients.sort(key=lambda c: aware(c.created_at), reverse=True)
        elif filters.order_by == "portfolio":
            clients.sort(key=lambda c: c.portfolio_value or 0, reverse=True)

        return [c.model_copy(deep=True) for c in _limit(clients, filters.limit)]

    async def list_policies(self, filters: Optional[PolicyFilters] = None) -> List[Policy]:
        filters = filters or PolicyFilters()
        policies = list(self._policies.values())
        now = self.now()

        if filters.client_id:
            policies = [p for p in policies if p.client_id == filters.client_id]
        if filters.policy_type:
            policies = [p for p in policies if p.policy_type == filters.policy_type]
        if filters.status:
            policies = [p for p in policies if p.policy_status == filters.status]
        if filters.payment_status:
            policies = [p for p in policies if p.payment_status == filters.payment_status]

        if filters.renewal_within_days is not None:
            horizon = now + timedelta(days=filters.renewal_within_days)
            policies = [p for p in policies if self._renews_between(p, now, horizon, inclusive=True)]
        if filters.renewal_window == "week":
            end = start_of_week(now) + timedelta(days=7)
            policies = [p for p in policies if self._renews_between(p, now, end)]
        elif filters.renewal_window == "month":
            end = start_of_next_month(now)
            policies = [p for p in policies if self._renews_between(p, now, end)]

        policies.sort(key=lambda p: aware(p.renewal_date) if p.renewal_date else datetime.max.replace(tzinfo=timezone.utc))
        return [p.model_copy(deep=True) for p in _limit(policies, filters.limit)]

    # ------------------------------------------------------------------
    # Keyword search
    # ------------------------------------------------------------------

    async def search_tasks(self, query: str) -> List[Task]:
        term = query.lower()
        hits = [
            t for t in self._tasks.values()
            if term in t.title.lower()
            or term in t.description.lower()
            or any(term in tag.lower() for tag in t.tags)
            or (t.client_name and term in t.client_name.lower())
        ]
        return [t.model_copy(deep=True) for t in self._sorted_tasks(hits)]

    async def search_clients(self, query: str) -> List[Client]:
        term = query.lower()
        hits = [
            c for c in self._clients.values()
            if term in c.full_name.lower()
            or (c.primary_email and term in c.primary_email.lower())
            or any(term in tag.lower() for tag in c.client_tags)
        ]
        return [c.model_copy(deep=True) for c in hits]

    async def search_policies(self, query: str) -> List[Policy]:
        term = query.lower()
        hits = [
            p for p in self._policies.values()
            if term in p.policy_number.lower()
            or term in p.policy_type.lower()
            or term in p.policy_status.lower()
            or (p.agent_notes and term in p.agent_notes.lower())
            or any(term in tag.lower() for tag in p.tags)
        ]
        return [p.model_copy(deep=True) for p in hits]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def approve_task(self, task_id: str) -> Task:
        async with self._lock:
            task = self._require_task(task_id)
            self._require_pending_review(task, "approve")
            now = self.now()
            updated = task.model_copy(update={
                "status": "completed",
                "completed_at": now,
                "updated_at": now,
            })
            self._tasks[task_id] = updated
        logger.info(f"Task {task_id} approved")
        return updated.model_copy(deep=True)

    async def reject_task(self, task_id: str, reason: Optional[str] = None) -> Task:
        async with self._lock:
            task = self._require_task(task_id)
            self._require_pending_review(task, "reject")
            updated = task.model_copy(update={
                "status": "pending",
                "ai_completed": False,
                "ai_completion_data": None,
                "updated_at": self.now(),
            })
            self._tasks[task_id] = updated
        logger.info(f"Task {task_id} rejected" + (f": {reason}" if reason else ""))
        return updated.model_copy(deep=True)

    async def complete_task(self, task_id: str) -> Task:
        async with self._lock:
            task = self._require_task(task_id)
            if task.status == "completed":
                raise ActionNotAllowedError(task_id, "complete", "task is already completed")
            now = self.now()
            updated = task.model_copy(update={
                "status": "completed",
                "completed_at": task.completed_at or now,
                "updated_at": now,
            })
            self._tasks[task_id] = updated
        logger.info(f"Task {task_id} completed")
        return updated.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_task(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise RecordNotFoundError("task", task_id)
        return task

    @staticmethod
    def _require_pending_review(task: Task, action: str) -> None:
        if not task.ai_completed or task.status != "needs-review":
            raise ActionNotAllowedError(task.task_id, action, "task is not pending review")

    @staticmethod
    def _sorted_tasks(tasks: Iterable[Task]) -> List[Task]:
        return sorted(tasks, key=lambda t: aware(t.due_date))

    def _in_due_bucket(self, task: Task, bucket: str) -> bool:
        now = self.now()
        due = aware(task.due_date)
        if bucket == "today":
            return due.date() == now.date()
        if bucket == "week":
            start = start_of_week(now)
            return start <= due < start + timedelta(days=7)
        if bucket == "month":
            return due.year == now.year and due.month == now.month
        if bucket == "overdue":
            return task.status != "completed" and due < now
        if bucket == "upcoming":
            return task.status != "completed" and due > now
        return True

    @staticmethod
    def _renews_between(policy: Policy, start: datetime, end: datetime, inclusive: bool = False) -> bool:
        if not policy.renewal_date:
            return False
        renewal = aware(policy.renewal_date)
        if inclusive:
            return start <= renewal <= end
        return start <= renewal < end
