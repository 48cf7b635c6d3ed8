"""
Intent classification over free text.

INTENT_CATALOG is an ordered priority chain: patterns are tested top to
bottom across the whole catalog and the first match wins. Reordering entries
changes behaviour; tests/test_intents.py pins the order-sensitive cases.
"""

import enum
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from pydantic import BaseModel

from src.agents.assistant.entities import ExtractedEntities, extract_entities


class Intent(str, enum.Enum):
    """Closed catalog of what a user message can ask for."""
    # Task queries
    SHOW_TODAYS_TASKS = "show_todays_tasks"
    SHOW_OVERDUE_TASKS = "show_overdue_tasks"
    SHOW_HIGH_PRIORITY_TASKS = "show_high_priority_tasks"
    SHOW_TASKS_THIS_WEEK = "show_tasks_this_week"
    SHOW_TASKS_THIS_MONTH = "show_tasks_this_month"
    SHOW_IN_PROGRESS_TASKS = "show_in_progress_tasks"
    SHOW_COMPLETED_TASKS = "show_completed_tasks"
    SHOW_PENDING_REVIEWS = "show_pending_reviews"
    SHOW_ALL_TASKS = "show_all_tasks"
    SHOW_TASK_STATUS = "show_task_status"
    # Task actions
    REJECT_TASK = "reject_task"
    APPROVE_TASK = "approve_task"
    COMPLETE_TASK = "complete_task"
    CREATE_TASK = "create_task"
    # Drafting
    DRAFT_EMAIL = "draft_email"
    DRAFT_MEETING_NOTES = "draft_meeting_notes"
    DRAFT_BIRTHDAY_MESSAGE = "draft_birthday_message"
    DRAFT_RENEWAL_NOTICE = "draft_renewal_notice"
    # Document generation
    CREATE_COMPLIANCE_CHECK = "create_compliance_check"
    CREATE_PORTFOLIO_ANALYSIS = "create_portfolio_analysis"
    CREATE_CLIENT_SUMMARY = "create_client_summary"
    CREATE_MEETING_PREP = "create_meeting_prep"
    CREATE_REPORT = "create_report"
    # Client queries
    SHOW_CLIENT_POLICIES = "show_client_policies"
    SHOW_CLIENT_INFO = "show_client_info"
    SHOW_CLIENT_LIST = "show_client_list"
    SHOW_RECENT_CLIENTS = "show_recent_clients"
    SHOW_HIGH_NET_WORTH_CLIENTS = "show_high_net_worth_clients"
    SHOW_ACTIVE_CLIENTS = "show_active_clients"
    SHOW_INACTIVE_CLIENTS = "show_inactive_clients"
    SHOW_PROSPECT_CLIENTS = "show_prospect_clients"
    SEARCH_CLIENTS = "search_clients"
    SHOW_CLIENTS_BY_PORTFOLIO = "show_clients_by_portfolio"
    # Policy queries
    SHOW_POLICY_INFO = "show_policy_info"
    SHOW_EXPIRING_THIS_WEEK = "show_expiring_this_week"
    SHOW_EXPIRING_THIS_MONTH = "show_expiring_this_month"
    SHOW_EXPIRING_POLICIES = "show_expiring_policies"
    SHOW_OVERDUE_POLICIES = "show_overdue_policies"
    SHOW_POLICIES_BY_TYPE = "show_policies_by_type"
    SHOW_POLICIES_BY_STATUS = "show_policies_by_status"
    # Analytics
    SHOW_TODAY_SUMMARY = "show_today_summary"
    SHOW_WEEK_SUMMARY = "show_week_summary"
    SHOW_TASK_SUMMARY = "show_task_summary"
    SHOW_CLIENT_SUMMARY = "show_client_summary"
    SHOW_POLICY_SUMMARY = "show_policy_summary"
    SHOW_PORTFOLIO_SUMMARY = "show_portfolio_summary"
    SHOW_DASHBOARD = "show_dashboard"
    # Search
    GLOBAL_SEARCH = "global_search"
    SEARCH_TASKS = "search_tasks"
    SEARCH_POLICIES = "search_policies"
    # General
    GREETING = "greeting"
    HELP = "help"
    GENERAL_QUESTION = "general_question"


ACTION_INTENTS = frozenset({Intent.APPROVE_TASK, Intent.REJECT_TASK, Intent.COMPLETE_TASK})

DRAFTING_INTENTS = frozenset({
    Intent.DRAFT_EMAIL,
    Intent.DRAFT_MEETING_NOTES,
    Intent.DRAFT_BIRTHDAY_MESSAGE,
    Intent.DRAFT_RENEWAL_NOTICE,
})

DOCUMENT_INTENTS = frozenset({
    Intent.CREATE_COMPLIANCE_CHECK,
    Intent.CREATE_PORTFOLIO_ANALYSIS,
    Intent.CREATE_CLIENT_SUMMARY,
    Intent.CREATE_MEETING_PREP,
    Intent.CREATE_REPORT,
})

MATCH_CONFIDENCE = 0.9
FALLBACK_CONFIDENCE = 0.5


@dataclass(frozen=True)
class IntentPattern:
    intent: Intent
    patterns: Tuple[Pattern, ...]


def _entry(intent: Intent, *patterns: str) -> IntentPattern:
    return IntentPattern(intent, tuple(re.compile(p, re.IGNORECASE) for p in patterns))


INTENT_CATALOG: List[IntentPattern] = [
    # Task queries: time- and status-filtered lists before the catch-all list
    _entry(
        Intent.SHOW_TODAYS_TASKS,
        r"what.*(?:do i have|tasks?).*today",
        r"today'?s?\s*tasks?",
        r"tasks?\s*(?:for|due)\s*today",
        r"what'?s?\s*on\s*(?:my|the)?\s*(?:agenda|schedule|plate)",
        r"what\s*(?:do\s*)?i\s*need\s*to\s*do\s*today",
    ),
    _entry(
        Intent.SHOW_OVERDUE_TASKS,
        r"overdue\s*tasks?",
        r"past\s*due\s*tasks?",
        r"\blate\s*tasks?",
        r"what'?s?\s*(?:past\s*due|overdue)\s*[?.!]*$",
    ),
    _entry(
        Intent.SHOW_HIGH_PRIORITY_TASKS,
        r"(?:high|urgent)\s*priority",
        r"critical\s*tasks?",
        r"important\s*tasks?",
        r"urgent\s*(?:items?|things?|tasks?)",
    ),
    _entry(
        Intent.SHOW_TASKS_THIS_WEEK,
        r"tasks?\s*(?:for\s*|due\s*)?this\s*week",
        r"this\s*week'?s?\s*tasks?",
        r"weekly\s*tasks?",
    ),
    _entry(
        Intent.SHOW_TASKS_THIS_MONTH,
        r"tasks?\s*(?:for\s*|due\s*)?this\s*month",
        r"this\s*month'?s?\s*tasks?",
        r"monthly\s*tasks?",
    ),
    _entry(
        Intent.SHOW_IN_PROGRESS_TASKS,
        r"\bin\s*progress\b",
        r"what\s*am\s*i\s*working\s*on",
        r"current\s*tasks?",
    ),
    _entry(
        Intent.SHOW_COMPLETED_TASKS,
        r"completed\s*tasks?",
        r"finished\s*tasks?",
        r"\bdone\s*tasks?",
        r"what\s*(?:did\s*i|have\s*i)\s*(?:finish|complete)",
    ),
    _entry(
        Intent.SHOW_PENDING_REVIEWS,
        r"what\s*(?:needs?|requires?)\s*(?:my\s*)?(?:approval|review)",
        r"pending\s*(?:reviews?|approvals?)",
        r"(?:show|list)\s*(?:me\s*)?(?:pending\s*)?reviews?",
        r"anything\s*(?:to|for\s*me\s*to)\s*(?:review|approve)",
        r"\bai\s*(?:completed|generated)\s*(?:work|tasks?)",
    ),
    _entry(
        Intent.SHOW_ALL_TASKS,
        r"show\s*(?:me\s*)?(?:all\s*)?(?:my\s*)?tasks?\b",
        r"list\s*(?:all\s*)?(?:my\s*)?tasks?\b",
        r"what\s*tasks?\s*(?:do\s*)?i\s*have",
        r"\ball\s*(?:my\s*)?tasks?\b",
    ),
    _entry(
        Intent.SHOW_TASK_STATUS,
        r"status\s*(?:of|on)\b",
        r"update\s*(?:me\s*)?on\b",
        r"\bhow'?s?\s+(?:the|that)\b.*\btask\b",
        r"where\s*(?:are\s*we|do\s*we\s*stand)\s*(?:on|with)",
    ),
    # Task actions: reject before approve so "don't send it" is not an approval
    _entry(
        Intent.REJECT_TASK,
        r"(?:don'?t|do\s*not)\s*(?:send|approve|submit)",
        r"\breject\b",
        r"needs?\s*(?:changes?|work|revision)",
        r"\bnot\s*(?:quite|ready|good)",
        r"\b(?:revise|redo)\b",
        r"\bchange\s+(?:it|this|that)\b",
        r"^no[.!]?$",
    ),
    _entry(
        Intent.APPROVE_TASK,
        r"^approve(?:\s+(?:it|that|this))?[.!]?$",
        r"\blooks?\s*good",
        r"\b(?:go\s*ahead|send\s*it|ship\s*it)\b",
        r"\bapprove\b",
        r"^(?:yes|yep|yeah|lgtm|ok|okay)[.!]?$",
        r"\bthat'?s?\s*(?:good|great|perfect|fine)",
    ),
    _entry(
        Intent.COMPLETE_TASK,
        r"mark\s*(?:(?:it|that|this)\s*)?(?:as\s*)?(?:done|complete|finished)",
        r"complete\s*(?:the|that|this)?\s*task",
        r"(?:\bi'?ve|\bi\s*have)\s*(?:done|finished|completed)",
        r"task\s*(?:is\s*)?(?:done|complete)\b",
    ),
    _entry(
        Intent.CREATE_TASK,
        r"(?:create|add|make)\s*(?:a\s*)?(?:new\s*)?(?:task|reminder|to-?do)\b",
        r"remind\s*me\s*to\b",
    ),
    # Drafting
    _entry(
        Intent.DRAFT_EMAIL,
        r"(?:draft|write|compose|create)\s*(?:an?\s*)?(?:follow-?up\s*)?email",
        r"email\s*(?:to|for)\s+",
        r"send\s*(?:an?\s*)?(?:email|message)\s*to",
    ),
    _entry(
        Intent.DRAFT_MEETING_NOTES,
        r"(?:draft|write|create)\s*meeting\s*notes?",
        r"summarize\s*(?:the|our)\s*meeting",
        r"meeting\s*summary",
    ),
    _entry(
        Intent.DRAFT_BIRTHDAY_MESSAGE,
        r"birthday\s*(?:message|wish|wishes|greeting|card)",
        r"(?:send|draft)\s*birthday\b",
    ),
    _entry(
        Intent.DRAFT_RENEWAL_NOTICE,
        r"(?:draft|write|create)\s*(?:a\s*)?renewal\s*(?:notice|reminder|letter)",
        r"policy\s*(?:expiry|expiration)\s*(?:reminder|notice)",
    ),
    # Document generation
    _entry(
        Intent.CREATE_COMPLIANCE_CHECK,
        r"(?:create|generate|run|do|make|prepare)\s*(?:a\s*)?compliance\s*(?:check|report|review|audit)",
        r"compliance\s*(?:check|report|review|audit)",
        r"check\s*(?:his|her|their|the)?\s*compliance",
        r"\bkyc\s*(?:check|review|report)",
        r"suitability\s*(?:check|review|assessment)",
    ),
    _entry(
        Intent.CREATE_PORTFOLIO_ANALYSIS,
        r"(?:create|generate|do|make|prepare)\s*(?:a\s*|an\s*)?(?:portfolio|investment)\s*(?:analysis|review|breakdown)",
        r"(?:portfolio|investment)\s*(?:analysis|review|breakdown)",
        r"analy[sz]e\s*(?:his|her|their|the)?\s*portfolio",
        r"(?:detailed|full)\s*portfolio\b",
    ),
    _entry(
        Intent.CREATE_CLIENT_SUMMARY,
        r"(?:create|generate|make|prepare)\s*(?:a\s*)?(?:client|customer)\s*(?:summary|overview|brief)",
        r"summarize\s*(?:the\s*)?(?:client|customer)",
        r"(?:client|customer)\s*(?:summary|overview|brief)",
    ),
    _entry(
        Intent.CREATE_MEETING_PREP,
        r"(?:prepare|create|generate|make)\s*(?:for\s*)?(?:the\s*|my\s*)?meeting",
        r"meeting\s*(?:prep|preparation|materials?)",
        r"(?:get|make)\s*(?:me\s*)?ready\s*for\s*(?:the\s*|my\s*)?meeting",
        r"(?:prepare|create)\s*(?:a\s*)?(?:meeting\s*)?agenda",
    ),
    _entry(
        Intent.CREATE_REPORT,
        r"(?:create|generate|make|write|prepare|draft)\s*(?:a\s*)?(?:report|document|draft)\b",
        r"(?:prepare|create)\s*(?:a\s*)?draft\s*(?:based\s*on|from|using)",
        r"(?:generate|create)\s*(?:it|this|that)\b",
    ),
    # Client queries: policies-of-a-client before client info
    _entry(
        Intent.SHOW_CLIENT_POLICIES,
        r"\b(?:what|show)\b.*\bpolic(?:y|ies)\s*(?:does|do|for)\b",
        r"\bpolic(?:y|ies)\s*for\s+",
        r"\b(?:his|her|their)\s*polic(?:y|ies)",
        r"'s\s*polic(?:y|ies)",
    ),
    _entry(
        Intent.SHOW_CLIENT_INFO,
        r"tell\s*me\s*about\s+(?!(?:the\s+|this\s+|that\s+)?polic)",
        r"(?:show|get)\s*(?:me\s*)?info(?:rmation)?\s*(?:on|about|for)",
        r"(?:show|get|pull\s*up)\s*(?:me\s*)?.*'s\s*(?:info(?:rmation)?|details?|profile)",
        r"\bwho\s*is\b",
        r"(?:client|customer)\s*(?:details?|info(?:rmation)?|profile)",
        r"\blook\s*up\s+(?!(?:clients?|customers?|tasks?|polic))",
    ),
    _entry(
        Intent.SHOW_CLIENT_LIST,
        r"(?:show|list)\s*(?:me\s*)?(?:all\s*)?(?:my\s*)?(?:clients?|customers?)\b",
        r"who\s*are\s*my\s*(?:clients?|customers?)",
        r"(?:client|customer)\s*list",
    ),
    _entry(
        Intent.SHOW_RECENT_CLIENTS,
        r"recent\s*(?:clients?|customers?)",
        r"(?:new|latest)\s*(?:clients?|customers?)",
        r"(?:clients?|customers?)\s*(?:added|created)\s*recently",
    ),
    _entry(
        Intent.SHOW_HIGH_NET_WORTH_CLIENTS,
        r"(?:high\s*net\s*worth|\bhnw|\bvip)\s*(?:clients?|customers?)",
        r"wealthy\s*(?:clients?|customers?)",
        r"top\s*(?:clients?|customers?)",
    ),
    _entry(
        Intent.SHOW_ACTIVE_CLIENTS,
        r"\bactive\s*(?:clients?|customers?)",
        r"(?:clients?|customers?)\s*i'?m?\s*(?:am\s*)?working\s*with",
    ),
    _entry(
        Intent.SHOW_INACTIVE_CLIENTS,
        r"inactive\s*(?:clients?|customers?)",
        r"dormant\s*(?:clients?|customers?)",
    ),
    _entry(
        Intent.SHOW_PROSPECT_CLIENTS,
        r"\bprospects?\b",
        r"potential\s*(?:clients?|customers?)",
        r"\bleads?\b",
    ),
    _entry(
        Intent.SEARCH_CLIENTS,
        r"(?:find|search(?:\s*for)?|look\s*up)\s*(?:clients?|customers?)",
        r"(?:clients?|customers?)\s*(?:named|called)\s*",
    ),
    _entry(
        Intent.SHOW_CLIENTS_BY_PORTFOLIO,
        r"clients?\s*with\s*(?:a\s*)?portfolios?\s*(?:over|above|greater)",
        r"largest\s*portfolios?",
        r"top\s*portfolios?",
    ),
    # Policy queries
    _entry(
        Intent.SHOW_POLICY_INFO,
        r"(?:show|get)\s*(?:me\s*)?(?:the\s*)?policy\s*(?:details?|info(?:rmation)?)",
        r"\bpolicy\s*(?:number|#|num)\s*[\w-]+",
        r"tell\s*me\s*about\s*(?:the\s*|this\s*|that\s*)?policy\b",
        r"\bpolicy\s+[a-z]{2,}-\d{4}-\d+",
        r"\bpol\d{3,}\b",
    ),
    _entry(
        Intent.SHOW_EXPIRING_THIS_WEEK,
        r"(?:policies?|coverage)\s*expiring\s*this\s*week",
        r"expiring\s*this\s*week",
        r"urgent\s*renewals?",
        r"this\s*week'?s?\s*(?:expir|renewal)",
    ),
    _entry(
        Intent.SHOW_EXPIRING_THIS_MONTH,
        r"(?:policies?|coverage)\s*expiring\s*this\s*month",
        r"expiring\s*this\s*month",
        r"monthly\s*renewals?",
        r"renewals?\s*(?:due\s*)?this\s*month",
    ),
    _entry(
        Intent.SHOW_EXPIRING_POLICIES,
        r"(?:expiring|renewing)\s*(?:soon\s*)?polic(?:y|ies)",
        r"polic(?:y|ies)\s*(?:that\s*)?(?:are\s*)?(?:expiring|due\s*for\s*renewal)",
        r"upcoming\s*renewals?",
    ),
    _entry(
        Intent.SHOW_OVERDUE_POLICIES,
        r"overdue\s*(?:polic(?:y|ies)|payments?)",
        r"(?:overdue|late|missed)\s*payments?",
        r"lapsed\s*polic(?:y|ies)",
    ),
    _entry(
        Intent.SHOW_POLICIES_BY_TYPE,
        r"(?:life|auto|home|health|critical\s*illness|disability)\s*(?:insurance\s*)?polic(?:y|ies)",
        r"(?:rrsp|tfsa|segregated\s*fund)\s*(?:polic(?:y|ies)|accounts?)?",
        r"show\s*(?:me\s*)?(?:all\s*)?(?:life|auto|home)\s*insurance",
    ),
    _entry(
        Intent.SHOW_POLICIES_BY_STATUS,
        r"(?:active|pending|expired|cancelled|suspended)\s*polic(?:y|ies)",
        r"polic(?:y|ies)\s*(?:that\s*are\s*)?(?:active|pending|expired)",
    ),
    # Analytics: specific summaries before the generic dashboard
    _entry(
        Intent.SHOW_TODAY_SUMMARY,
        r"what'?s?\s*(?:happening|going\s*on)\s*today",
        r"today'?s?\s*(?:overview|summary)",
    ),
    _entry(
        Intent.SHOW_WEEK_SUMMARY,
        r"weekly\s*(?:summary|overview)",
        r"this\s*week'?s?\s*(?:overview|summary)",
    ),
    _entry(
        Intent.SHOW_TASK_SUMMARY,
        r"how\s*many\s*tasks?",
        r"task\s*(?:count|summary|breakdown|stats|statistics)",
        r"tasks?\s*(?:overview|statistics|stats)",
    ),
    _entry(
        Intent.SHOW_CLIENT_SUMMARY,
        r"how\s*many\s*(?:clients?|customers?)",
        r"(?:client|customer)\s*(?:count|breakdown|statistics|stats|metrics)",
    ),
    _entry(
        Intent.SHOW_POLICY_SUMMARY,
        r"how\s*many\s*polic(?:y|ies)",
        r"policy\s*(?:count|summary|breakdown|stats)",
        r"(?:insurance|coverage)\s*(?:overview|summary)",
    ),
    _entry(
        Intent.SHOW_PORTFOLIO_SUMMARY,
        r"portfolio\s*(?:overview|summary)",
        r"\baum\b",
        r"assets?\s*under\s*management",
        r"total\s*assets?",
    ),
    _entry(
        Intent.SHOW_DASHBOARD,
        r"\b(?:overview|summary|dashboard)\b",
        r"\bwhat'?s?\s*(?:the\s*)?(?:status|situation)\b",
        r"how\s*(?:am\s*i|are\s*things)\s*doing",
    ),
    # Search: the global pattern excludes the typed searches that follow it
    _entry(
        Intent.GLOBAL_SEARCH,
        r"^(?:search|find|look\s*(?:up|for))\s+(?!(?:for\s+)?(?:clients?|customers?|tasks?|polic))",
    ),
    _entry(
        Intent.SEARCH_TASKS,
        r"(?:find|search)\s*(?:for\s*)?tasks?\b",
    ),
    _entry(
        Intent.SEARCH_POLICIES,
        r"(?:find|search)\s*(?:for\s*)?polic(?:y|ies)",
    ),
    # General
    _entry(
        Intent.GREETING,
        r"^(?:hi|hello|hey|good\s*(?:morning|afternoon|evening)|howdy)(?:\s|!|,|\.|$)",
        r"^what'?s?\s*up\b",
        r"^how\s*(?:are\s*you|do\s*you\s*do)",
    ),
    _entry(
        Intent.HELP,
        r"what\s*can\s*you\s*do",
        r"\bhelp\s*me\b",
        r"how\s*does\s*this\s*work",
        r"^help[.!?]?$",
        r"your\s*(?:capabilities|features)",
        r"what\s*can\s*you\s*help\s*(?:me\s*)?with",
    ),
]


class CatalogMatch(BaseModel):
    """A catalog hit: the intent, its catalog position and the pattern that fired."""
    intent: Intent
    position: int
    pattern: str


class IntentClassification(BaseModel):
    intent: Intent
    confidence: float
    entities: ExtractedEntities
    raw_message: str
    match: Optional[CatalogMatch] = None


def match_intent(message: str, catalog: Sequence[IntentPattern] = INTENT_CATALOG) -> Optional[CatalogMatch]:
    """Return the first catalog hit in order, or None when nothing matches."""
    text = message.strip()
    for position, entry in enumerate(catalog):
        for pattern in entry.patterns:
            if pattern.search(text):
                return CatalogMatch(intent=entry.intent, position=position, pattern=pattern.pattern)
    return None


def classify_intent(message: str) -> IntentClassification:
    """
    Classify a user message into exactly one intent.

    Confidence is fixed: 0.9 for any catalog hit, 0.5 for the
    general_question fallback.
    """
    entities = extract_entities(message)
    match = match_intent(message)

    if match is None:
        return IntentClassification(
            intent=Intent.GENERAL_QUESTION,
            confidence=FALLBACK_CONFIDENCE,
            entities=entities,
            raw_message=message,
        )

    return IntentClassification(
        intent=match.intent,
        confidence=MATCH_CONFIDENCE,
        entities=entities,
        raw_message=message,
        match=match,
    )


# Entity kind an intent operates on when the message names no subject
# Task actions are left out: they act only on a task named by id or by a referring word
_REQUIRED_ENTITY: Dict[Intent, str] = {
    Intent.SHOW_TASK_STATUS: "task",
    Intent.SHOW_CLIENT_INFO: "client",
    Intent.SHOW_CLIENT_POLICIES: "client",
    Intent.SHOW_POLICY_INFO: "policy",
    Intent.DRAFT_EMAIL: "client",
    Intent.DRAFT_MEETING_NOTES: "client",
    Intent.DRAFT_BIRTHDAY_MESSAGE: "client",
    Intent.DRAFT_RENEWAL_NOTICE: "policy",
    Intent.CREATE_COMPLIANCE_CHECK: "client",
    Intent.CREATE_PORTFOLIO_ANALYSIS: "client",
    Intent.CREATE_CLIENT_SUMMARY: "client",
    Intent.CREATE_MEETING_PREP: "client",
    Intent.CREATE_REPORT: "client",
}


def intent_requires_entity(intent: Intent) -> Optional[str]:
    """Entity kind ("task", "client", "policy") the intent needs, if any."""
    return _REQUIRED_ENTITY.get(intent)
