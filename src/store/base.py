"""
Record store interface.

The assistant reads tasks, clients and policies through this interface and
asks it to perform task state transitions. Concurrency control on records
belongs to the implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Literal, Optional

from src.models.records import Client, Policy, Task


DueBucket = Literal["today", "week", "month", "overdue", "upcoming"]


@dataclass
class TaskFilters:
    """Task list filters; unset fields do not filter."""
    status: Optional[str] = None
    priority: Optional[str] = None
    client_id: Optional[str] = None
    ai_completed: Optional[bool] = None
    due: Optional[DueBucket] = None
    limit: Optional[int] = None


@dataclass
class ClientFilters:
    """Client list filters; unset fields do not filter."""
    name: Optional[str] = None
    statuses: List[str] = field(default_factory=list)
    segment: Optional[str] = None
    risk_profile: Optional[str] = None
    order_by: Optional[Literal["recent", "portfolio"]] = None
    limit: Optional[int] = None


@dataclass
class PolicyFilters:
    """Policy list filters; unset fields do not filter."""
    client_id: Optional[str] = None
    policy_type: Optional[str] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    renewal_within_days: Optional[int] = None
    renewal_window: Optional[Literal["week", "month"]] = None
    limit: Optional[int] = None


class RecordStore(ABC):
    """Async access to the advisor's records."""

    # Lookups by id return None when the record does not exist

    @abstractmethod
    async def get_task(self, task_id: str) -> Optional[Task]:
        ...

    @abstractmethod
    async def get_client(self, client_id: str) -> Optional[Client]:
        ...

    @abstractmethod
    async def get_policy(self, policy_id: str) -> Optional[Policy]:
        ...

    @abstractmethod
    async def find_client_by_name(self, name: str) -> Optional[Client]:
        """First client whose first, last or full name contains name (case-insensitive)."""

    @abstractmethod
    async def find_task_by_title(self, title: str) -> Optional[Task]:
        ...

    @abstractmethod
    async def find_policy_by_number(self, policy_number: str) -> Optional[Policy]:
        ...

    @abstractmethod
    async def list_tasks(self, filters: Optional[TaskFilters] = None) -> List[Task]:
        ...

    @abstractmethod
    async def list_clients(self, filters: Optional[ClientFilters] = None) -> List[Client]:
        ...

    @abstractmethod
    async def list_policies(self, filters: Optional[PolicyFilters] = None) -> List[Policy]:
        ...

    @abstractmethod
    async def search_tasks(self, query: str) -> List[Task]:
        ...

    @abstractmethod
    async def search_clients(self, query: str) -> List[Client]:
        ...

    @abstractmethod
    async def search_policies(self, query: str) -> List[Policy]:
        ...

    # Transitions raise RecordNotFoundError or ActionNotAllowedError

    @abstractmethod
    async def approve_task(self, task_id: str) -> Task:
        ...

    @abstractmethod
    async def reject_task(self, task_id: str, reason: Optional[str] = None) -> Task:
        ...

    @abstractmethod
    async def complete_task(self, task_id: str) -> Task:
        ...
