"""
Data gathering - decides which record store lookups a turn needs and
assembles the data bundle rendered into the prompt.

Dispatch is table-driven: every intent has one row in DataGatherer._handlers.
Each lookup is isolated; a failing sub-query is logged and left out of the
bundle, it never aborts the turn.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from loguru import logger

from src.agents.assistant.analytics import Analytics
from src.agents.assistant.context import Focus, ResolvedContext
from src.agents.assistant.entities import ExtractedEntities
from src.agents.assistant.intents import Intent
from src.config.settings import settings
from src.models.records import Client, Policy, Task
from src.store.base import ClientFilters, PolicyFilters, RecordStore, TaskFilters


T = TypeVar("T")


@dataclass
class GatherRequest:
    intent: Intent
    entities: ExtractedEntities
    resolved: ResolvedContext


@dataclass
class DataBundle:
    """Records and metrics for one turn, plus the focus the turn produced."""
    focused_task: Optional[Dict[str, Any]] = None
    focused_client: Optional[Dict[str, Any]] = None
    focused_policy: Optional[Dict[str, Any]] = None
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    clients: List[Dict[str, Any]] = field(default_factory=list)
    policies: List[Dict[str, Any]] = field(default_factory=list)
    totals: Dict[str, int] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    action_result: Optional[Dict[str, Any]] = None
    focus: Focus = field(default_factory=Focus)

    def is_empty(self) -> bool:
        return not any([
            self.focused_task, self.focused_client, self.focused_policy,
            self.tasks, self.clients, self.policies, self.metrics, self.action_result,
        ])

    def set_tasks(self, tasks: List[Task]) -> None:
        self.tasks = [t.summary() for t in tasks[:settings.list_result_limit]]
        self.totals["tasks"] = len(tasks)

    def set_clients(self, clients: List[Client]) -> None:
        self.clients = [c.summary() for c in clients[:settings.list_result_limit]]
        self.totals["clients"] = len(clients)

    def set_policies(self, policies: List[Policy]) -> None:
        self.policies = [p.summary() for p in policies[:settings.list_result_limit]]
        self.totals["policies"] = len(policies)

    def focus_task(self, task: Task) -> None:
        self.focused_task = task.model_dump(mode="json", exclude_none=True)
        self.focus.task_id = task.task_id

    def focus_client(self, client: Client) -> None:
        self.focused_client = client.model_dump(mode="json", exclude_none=True)
        self.focus.client_id = client.client_id

    def focus_policy(self, policy: Policy) -> None:
        self.focused_policy = policy.model_dump(mode="json", exclude_none=True)
        self.focus.policy_id = policy.policy_id


async def _safe(label: str, awaitable: Awaitable[T], default: T) -> T:
    """Await a lookup; on failure log a warning and return default."""
    try:
        return await awaitable
    except Exception as e:
        logger.warning(f"Lookup '{label}' failed, omitting from bundle: {type(e).__name__}: {e}")
        return default


class DataGatherer:
    """Maps an intent to record store lookups and builds the DataBundle."""

    def __init__(self, store: RecordStore, now: Optional[Callable] = None):
        self.store = store
        self.analytics = Analytics(store, now=now or getattr(store, "now", None))

        self._handlers: Dict[Intent, Callable[[GatherRequest], Awaitable[DataBundle]]] = {
            # Task queries
            Intent.SHOW_TODAYS_TASKS: self._task_list(TaskFilters(due="today")),
            Intent.SHOW_OVERDUE_TASKS: self._task_list(TaskFilters(due="overdue")),
            Intent.SHOW_HIGH_PRIORITY_TASKS: self._task_list(TaskFilters(priority="high")),
            Intent.SHOW_TASKS_THIS_WEEK: self._task_list(TaskFilters(due="week")),
            Intent.SHOW_TASKS_THIS_MONTH: self._task_list(TaskFilters(due="month")),
            Intent.SHOW_IN_PROGRESS_TASKS: self._task_list(TaskFilters(status="in-progress")),
            Intent.SHOW_COMPLETED_TASKS: self._task_list(TaskFilters(status="completed")),
            Intent.SHOW_PENDING_REVIEWS: self._pending_reviews,
            Intent.SHOW_ALL_TASKS: self._task_list(TaskFilters()),
            Intent.SHOW_TASK_STATUS: self._task_subject,
            # Task actions
            Intent.APPROVE_TASK: self._action_subject,
            Intent.REJECT_TASK: self._action_subject,
            Intent.COMPLETE_TASK: self._action_subject,
            Intent.CREATE_TASK: self._client_subject,
            # Drafting
            Intent.DRAFT_EMAIL: self._client_profile,
            Intent.DRAFT_MEETING_NOTES: self._client_profile,
            Intent.DRAFT_BIRTHDAY_MESSAGE: self._client_subject,
            Intent.DRAFT_RENEWAL_NOTICE: self._policy_subject,
            # Document generation
            Intent.CREATE_COMPLIANCE_CHECK: self._client_profile,
            Intent.CREATE_PORTFOLIO_ANALYSIS: self._client_profile,
            Intent.CREATE_CLIENT_SUMMARY: self._client_profile,
            Intent.CREATE_MEETING_PREP: self._client_profile,
            Intent.CREATE_REPORT: self._report_subject,
            # Client queries
            Intent.SHOW_CLIENT_POLICIES: self._client_policies,
            Intent.SHOW_CLIENT_INFO: self._client_info,
            Intent.SHOW_CLIENT_LIST: self._client_list(ClientFilters()),
            Intent.SHOW_RECENT_CLIENTS: self._client_list(ClientFilters(order_by="recent", limit=10)),
            Intent.SHOW_HIGH_NET_WORTH_CLIENTS: self._client_list(
                ClientFilters(segment="High Net Worth", order_by="portfolio")
            ),
            Intent.SHOW_ACTIVE_CLIENTS: self._client_list(ClientFilters(statuses=["Active"])),
            Intent.SHOW_INACTIVE_CLIENTS: self._client_list(ClientFilters(statuses=["Inactive", "Dormant"])),
            Intent.SHOW_PROSPECT_CLIENTS: self._client_list(ClientFilters(statuses=["Prospect"])),
            Intent.SEARCH_CLIENTS: self._search_clients,
            Intent.SHOW_CLIENTS_BY_PORTFOLIO: self._client_list(ClientFilters(order_by="portfolio")),
            # Policy queries
            Intent.SHOW_POLICY_INFO: self._policy_subject,
            Intent.SHOW_EXPIRING_THIS_WEEK: self._policy_list(PolicyFilters(renewal_window="week")),
            Intent.SHOW_EXPIRING_THIS_MONTH: self._policy_list(PolicyFilters(renewal_window="month")),
            Intent.SHOW_EXPIRING_POLICIES: self._expiring_policies,
            Intent.SHOW_OVERDUE_POLICIES: self._policy_list(PolicyFilters(payment_status="Overdue")),
            Intent.SHOW_POLICIES_BY_TYPE: self._policies_by_type,
            Intent.SHOW_POLICIES_BY_STATUS: self._policies_by_status,
            # Analytics
            Intent.SHOW_TODAY_SUMMARY: self._today_summary,
            Intent.SHOW_WEEK_SUMMARY: self._metrics("week", self.analytics.weekly_summary),
            Intent.SHOW_TASK_SUMMARY: self._metrics("tasks", self.analytics.task_metrics),
            Intent.SHOW_CLIENT_SUMMARY: self._metrics("clients", self.analytics.client_metrics),
            Intent.SHOW_POLICY_SUMMARY: self._metrics("policies", self.analytics.policy_metrics),
            Intent.SHOW_PORTFOLIO_SUMMARY: self._metrics("portfolio", self.analytics.portfolio_metrics),
            Intent.SHOW_DASHBOARD: self._metrics("dashboard", self.analytics.dashboard),
            # Search
            Intent.GLOBAL_SEARCH: self._global_search,
            Intent.SEARCH_TASKS: self._search_tasks,
            Intent.SEARCH_POLICIES: self._search_policies,
            # General
            Intent.GREETING: self._cross_section,
            Intent.HELP: self._cross_section,
            Intent.GENERAL_QUESTION: self._general,
        }

    async def gather(
        self,
        intent: Intent,
        entities: ExtractedEntities,
        resolved: ResolvedContext,
    ) -> DataBundle:
        handler = self._handlers.get(intent, self._general)
        bundle = await handler(GatherRequest(intent=intent, entities=entities, resolved=resolved))
        logger.debug(
            f"Gathered for {intent.value}: {len(bundle.tasks)} tasks, {len(bundle.clients)} clients, "
            f"{len(bundle.policies)} policies, focus={bundle.focus.model_dump(exclude_none=True)}"
        )
        return bundle

    # ------------------------------------------------------------------
    # Subject resolution: explicit id > name/number lookup > context id
    # ------------------------------------------------------------------

    async def _resolve_task(self, req: GatherRequest) -> Optional[Task]:
        entities = req.entities
        if entities.task_id:
            return await _safe("get_task", self.store.get_task(entities.task_id), None)
        if entities.task_title:
            task = await _safe("find_task_by_title", self.store.find_task_by_title(entities.task_title), None)
            if task is None:
                logger.info(f"No task matching title '{entities.task_title}'")
            return task
        if req.resolved.task_id:
            return await _safe("get_task", self.store.get_task(req.resolved.task_id), None)
        return None

    async def _resolve_client(self, req: GatherRequest) -> Optional[Client]:
        entities = req.entities
        if entities.client_id:
            return await _safe("get_client", self.store.get_client(entities.client_id), None)
        if entities.client_name:
            client = await _safe("find_client_by_name", self.store.find_client_by_name(entities.client_name), None)
            if client is None:
                logger.info(f"No client matching name '{entities.client_name}'")
            return client
        if req.resolved.client_id:
            return await _safe("get_client", self.store.get_client(req.resolved.client_id), None)
        return None

    async def _resolve_policy(self, req: GatherRequest) -> Optional[Policy]:
        entities = req.entities
        if entities.policy_id:
            return await _safe("get_policy", self.store.get_policy(entities.policy_id), None)
        if entities.policy_number:
            policy = await _safe(
                "find_policy_by_number", self.store.find_policy_by_number(entities.policy_number), None
            )
            if policy is None:
                logger.info(f"No policy numbered '{entities.policy_number}'")
            return policy
        if req.resolved.policy_id:
            return await _safe("get_policy", self.store.get_policy(req.resolved.policy_id), None)
        return None

    # ------------------------------------------------------------------
    # Task handlers
    # ------------------------------------------------------------------

    def _task_list(self, filters: TaskFilters):
        async def handler(req: GatherRequest) -> DataBundle:
            bundle = DataBundle()
            bundle.set_tasks(await _safe("list_tasks", self.store.list_tasks(filters), []))
            return bundle
        return handler

    async def _pending_reviews(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        reviews = await _safe(
            "list_tasks", self.store.list_tasks(TaskFilters(status="needs-review", ai_completed=True)), []
        )
        bundle.set_tasks(reviews)
        if reviews:
            bundle.focus_task(reviews[0])
        return bundle

    async def _task_subject(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        task = await self._resolve_task(req)
        if task:
            bundle.focus_task(task)
        return bundle

    async def _action_subject(self, req: GatherRequest) -> DataBundle:
        # Actions never pick a task by title
        bundle = DataBundle()
        if not req.resolved.task_id:
            bundle.action_result = {
                "action": req.intent.value,
                "performed": False,
                "reason": "No task identified. Ask the advisor which task they mean.",
            }
            return bundle

        task = await _safe("get_task", self.store.get_task(req.resolved.task_id), None)
        if task:
            bundle.focus_task(task)
        return bundle

    # ------------------------------------------------------------------
    # Client handlers
    # ------------------------------------------------------------------

    async def _client_subject(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        client = await self._resolve_client(req)
        if client:
            bundle.focus_client(client)
        return bundle

    async def _client_info(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        client = await self._resolve_client(req)
        if client:
            bundle.focus_client(client)
            bundle.set_policies(await _safe(
                "list_policies", self.store.list_policies(PolicyFilters(client_id=client.client_id)), []
            ))
        return bundle

    async def _client_profile(self, req: GatherRequest) -> DataBundle:
        """Client plus their policies and tasks, for drafting and documents."""
        bundle = DataBundle()
        client = await self._resolve_client(req)
        if client is None:
            return bundle

        bundle.focus_client(client)
        policies, tasks = await asyncio.gather(
            _safe("list_policies", self.store.list_policies(PolicyFilters(client_id=client.client_id)), []),
            _safe("list_tasks", self.store.list_tasks(TaskFilters(client_id=client.client_id)), []),
        )
        bundle.set_policies(policies)
        bundle.set_tasks(tasks)
        return bundle

    async def _client_policies(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        client = await self._resolve_client(req)
        if client:
            bundle.focus_client(client)
            bundle.set_policies(await _safe(
                "list_policies", self.store.list_policies(PolicyFilters(client_id=client.client_id)), []
            ))
        return bundle

    async def _report_subject(self, req: GatherRequest) -> DataBundle:
        task = None
        if req.entities.task_id or req.resolved.task_id:
            task = await self._resolve_task(req)
        bundle = await self._client_profile(req)
        if task:
            bundle.focus_task(task)
        return bundle

    def _client_list(self, filters: ClientFilters):
        async def handler(req: GatherRequest) -> DataBundle:
            bundle = DataBundle()
            bundle.set_clients(await _safe("list_clients", self.store.list_clients(filters), []))
            return bundle
        return handler

    async def _search_clients(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        query = req.entities.search_query or req.entities.client_name
        if query:
            bundle.set_clients(await _safe("search_clients", self.store.search_clients(query), []))
        return bundle

    # ------------------------------------------------------------------
    # Policy handlers
    # ------------------------------------------------------------------

    async def _policy_subject(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        policy = await self._resolve_policy(req)
        if policy is None:
            return bundle

        bundle.focus_policy(policy)
        client = await _safe("get_client", self.store.get_client(policy.client_id), None)
        if client:
            bundle.focused_client = client.model_dump(mode="json", exclude_none=True)
        return bundle

    def _policy_list(self, filters: PolicyFilters):
        async def handler(req: GatherRequest) -> DataBundle:
            bundle = DataBundle()
            bundle.set_policies(await _safe("list_policies", self.store.list_policies(filters), []))
            return bundle
        return handler

    async def _expiring_policies(self, req: GatherRequest) -> DataBundle:
        filters = PolicyFilters(renewal_within_days=settings.expiring_window_days)
        return await self._policy_list(filters)(req)

    async def _policies_by_type(self, req: GatherRequest) -> DataBundle:
        return await self._policy_list(PolicyFilters(policy_type=req.entities.policy_type))(req)

    async def _policies_by_status(self, req: GatherRequest) -> DataBundle:
        return await self._policy_list(PolicyFilters(status=req.entities.policy_status))(req)

    # ------------------------------------------------------------------
    # Analytics handlers
    # ------------------------------------------------------------------

    def _metrics(self, name: str, compute: Callable[[], Awaitable[Any]]):
        async def handler(req: GatherRequest) -> DataBundle:
            bundle = DataBundle()
            metrics = await _safe(f"analytics.{name}", compute(), None)
            if metrics is not None:
                bundle.metrics[name] = metrics.model_dump()
            return bundle
        return handler

    async def _today_summary(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        summary, tasks = await asyncio.gather(
            _safe("analytics.today", self.analytics.today_summary(), None),
            _safe("list_tasks", self.store.list_tasks(TaskFilters(due="today")), []),
        )
        if summary is not None:
            bundle.metrics["today"] = summary.model_dump()
        bundle.set_tasks(tasks)
        return bundle

    # ------------------------------------------------------------------
    # Search handlers
    # ------------------------------------------------------------------

    async def _global_search(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        query = req.entities.search_query
        if not query:
            return bundle
        tasks, clients, policies = await asyncio.gather(
            _safe("search_tasks", self.store.search_tasks(query), []),
            _safe("search_clients", self.store.search_clients(query), []),
            _safe("search_policies", self.store.search_policies(query), []),
        )
        bundle.set_tasks(tasks)
        bundle.set_clients(clients)
        bundle.set_policies(policies)
        return bundle

    async def _search_tasks(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        if req.entities.search_query:
            bundle.set_tasks(await _safe("search_tasks", self.store.search_tasks(req.entities.search_query), []))
        return bundle

    async def _search_policies(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        if req.entities.search_query:
            bundle.set_policies(await _safe(
                "search_policies", self.store.search_policies(req.entities.search_query), []
            ))
        return bundle

    # ------------------------------------------------------------------
    # General
    # ------------------------------------------------------------------

    async def _cross_section(self, req: GatherRequest) -> DataBundle:
        """A few of today's tasks plus a few pending reviews for grounding."""
        bundle = DataBundle()
        today, reviews = await asyncio.gather(
            _safe("list_tasks", self.store.list_tasks(TaskFilters(due="today")), []),
            _safe("list_tasks", self.store.list_tasks(TaskFilters(status="needs-review", ai_completed=True)), []),
        )
        bundle.set_tasks(today[:settings.greeting_task_limit] + reviews[:settings.greeting_review_limit])
        return bundle

    async def _general(self, req: GatherRequest) -> DataBundle:
        bundle = DataBundle()
        today = await _safe("list_tasks", self.store.list_tasks(TaskFilters(due="today")), [])
        bundle.set_tasks(today[:settings.general_task_limit])
        return bundle
