"""
Aggregated metrics for dashboard and summary intents.

Computed from record store list queries; independent queries run concurrently.
"""

import asyncio
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from src.config.settings import settings
from src.store.base import PolicyFilters, RecordStore, TaskFilters
from src.utils.dates import aware, start_of_week, utc_now


class TaskMetrics(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    needs_review: int
    overdue: int
    due_today: int


class ClientMetrics(BaseModel):
    total: int
    active: int
    prospects: int
    by_segment: Dict[str, int]


class PolicyMetrics(BaseModel):
    total: int
    active: int
    expiring_soon: int
    by_type: Dict[str, int]


class PortfolioMetrics(BaseModel):
    total_aum: float
    average_client_value: float


class DashboardMetrics(BaseModel):
    tasks: TaskMetrics
    clients: ClientMetrics
    policies: PolicyMetrics
    portfolio: PortfolioMetrics


class TodaySummary(BaseModel):
    tasks_today: int
    overdue_count: int
    pending_reviews: int
    expiring_policies: int


class WeeklySummary(BaseModel):
    tasks_this_week: int
    completed_this_week: int
    new_clients: int
    renewals_due: int


def _pending_reviews() -> TaskFilters:
    return TaskFilters(status="needs-review", ai_completed=True)


def _expiring() -> PolicyFilters:
    return PolicyFilters(renewal_within_days=settings.expiring_window_days)


class Analytics:
    """Metric calculations over a record store."""

    def __init__(self, store: RecordStore, now: Optional[Callable[[], datetime]] = None):
        self.store = store
        self._now = now or utc_now

    async def task_metrics(self) -> TaskMetrics:
        tasks, today, overdue = await asyncio.gather(
            self.store.list_tasks(),
            self.store.list_tasks(TaskFilters(due="today")),
            self.store.list_tasks(TaskFilters(due="overdue")),
        )
        by_status = Counter(t.status for t in tasks)
        return TaskMetrics(
            total=len(tasks),
            pending=by_status["pending"],
            in_progress=by_status["in-progress"],
            completed=by_status["completed"],
            needs_review=by_status["needs-review"],
            overdue=len(overdue),
            due_today=len(today),
        )

    async def client_metrics(self) -> ClientMetrics:
        clients = await self.store.list_clients()
        by_status = Counter(c.client_status for c in clients)
        by_segment = Counter(c.client_segment for c in clients if c.client_segment)
        return ClientMetrics(
            total=len(clients),
            active=by_status["Active"],
            prospects=by_status["Prospect"],
            by_segment={
                "High Net Worth": by_segment["High Net Worth"],
                "Mass Affluent": by_segment["Mass Affluent"],
                "Retail": by_segment["Retail"],
            },
        )

    async def policy_metrics(self) -> PolicyMetrics:
        policies, expiring = await asyncio.gather(
            self.store.list_policies(),
            self.store.list_policies(_expiring()),
        )
        return PolicyMetrics(
            total=len(policies),
            active=sum(1 for p in policies if p.policy_status == "Active"),
            expiring_soon=len(expiring),
            by_type=dict(Counter(p.policy_type for p in policies)),
        )

    async def portfolio_metrics(self) -> PortfolioMetrics:
        clients = await self.store.list_clients()
        values = [c.portfolio_value for c in clients if c.portfolio_value and c.portfolio_value > 0]
        total = sum(values)
        return PortfolioMetrics(
            total_aum=total,
            average_client_value=total / len(values) if values else 0.0,
        )

    async def dashboard(self) -> DashboardMetrics:
        tasks, clients, policies, portfolio = await asyncio.gather(
            self.task_metrics(),
            self.client_metrics(),
            self.policy_metrics(),
            self.portfolio_metrics(),
        )
        return DashboardMetrics(tasks=tasks, clients=clients, policies=policies, portfolio=portfolio)

    async def today_summary(self) -> TodaySummary:
        today, overdue, reviews, expiring = await asyncio.gather(
            self.store.list_tasks(TaskFilters(due="today")),
            self.store.list_tasks(TaskFilters(due="overdue")),
            self.store.list_tasks(_pending_reviews()),
            self.store.list_policies(_expiring()),
        )
        return TodaySummary(
            tasks_today=len(today),
            overdue_count=len(overdue),
            pending_reviews=len(reviews),
            expiring_policies=len(expiring),
        )

    async def weekly_summary(self) -> WeeklySummary:
        week_tasks, all_tasks, clients, expiring = await asyncio.gather(
            self.store.list_tasks(TaskFilters(due="week")),
            self.store.list_tasks(),
            self.store.list_clients(),
            self.store.list_policies(_expiring()),
        )
        week_start = start_of_week(aware(self._now()))
        completed = [
            t for t in all_tasks
            if t.status == "completed" and t.completed_at and aware(t.completed_at) >= week_start
        ]
        new_clients = [c for c in clients if aware(c.created_at) >= week_start]
        return WeeklySummary(
            tasks_this_week=len(week_tasks),
            completed_this_week=len(completed),
            new_clients=len(new_clients),
            renewals_due=len(expiring),
        )
