"""
Entity extraction from raw user text.

Each field has an ordered list of rules; the first rule that matches wins for
that field, independently of every other field. Name extraction relies on
Title-Case and is best effort: lowercase names are not found.
"""

import re
from typing import List, Literal, Optional, Pattern

from pydantic import BaseModel


TimeRange = Literal["today", "week", "month", "overdue"]


class ExtractedEntities(BaseModel):
    """Sparse record of typed fragments found in one message."""
    client_name: Optional[str] = None
    client_id: Optional[str] = None
    task_title: Optional[str] = None
    task_id: Optional[str] = None
    policy_number: Optional[str] = None
    policy_id: Optional[str] = None
    policy_type: Optional[str] = None
    policy_status: Optional[str] = None
    time_range: Optional[TimeRange] = None
    search_query: Optional[str] = None


# Title-Case name: "Dylan", "Dylan Jackson". Deliberately case-sensitive.
_NAME = r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"

# Title-Case words that are never client names
_NOT_NAMES = {
    "Today", "Tomorrow", "Yesterday", "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday", "This", "That", "The", "Me", "Him", "Her", "Them",
    "Client", "Clients", "Task", "Tasks", "Policy", "Policies",
    # Sentence-initial verbs and question words
    "Show", "Tell", "Email", "Draft", "Write", "Send", "Find", "Search", "Look", "Get",
    "Pull", "List", "Give", "Create", "Prepare", "What", "Who", "How", "Please", "Can",
}

CLIENT_NAME_RULES: List[Pattern] = [
    re.compile(r"(?i:tell\s*me\s*about)\s+" + _NAME),
    re.compile(r"(?i:client|customer)\s+" + _NAME),
    re.compile(r"(?i:who\s*is)\s+" + _NAME),
    re.compile(r"(?i:look\s*up)\s+" + _NAME),
    re.compile(_NAME + r"'s\s*(?i:polic(?:y|ies)|portfolio|info(?:rmation)?|details?|profile)"),
    re.compile(r"(?i:polic(?:y|ies)\s*for)\s+" + _NAME),
    re.compile(r"(?i:info(?:rmation)?\s*(?:on|about|for))\s+" + _NAME),
    re.compile(r"(?i:email|message|note|wishes)\s+(?i:to|for)\s+" + _NAME),
    re.compile(r"\b(?i:for|with)\s+" + _NAME),
]

TASK_TITLE_RULES: List[Pattern] = [
    re.compile(r"task\s+(?:called|named|titled)\s+[\"']?([^\"'?]+?)[\"']?\s*(?:\?|$)", re.IGNORECASE),
    re.compile(r"task\s+[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"status\s*(?:of|on)\s*(?:the\s+)?(.+?)(?:\s+task)?\s*(?:\?|$)", re.IGNORECASE),
    re.compile(r"\bthe\s+((?:(?!\bthe\b).)+?)\s+task\b", re.IGNORECASE),
]

POLICY_NUMBER_RULES: List[Pattern] = [
    re.compile(r"policy\s*(?:number|#|num)?\s*([A-Z]{2,}-\d{4}-\d+|\d{3,})", re.IGNORECASE),
    re.compile(r"\b([A-Z]{2,}-\d{4}-\d+)\b"),
]

TASK_ID_RULE = re.compile(r"\b(T\d{3,})\b")
CLIENT_ID_RULE = re.compile(r"\b(C\d{3,})\b")
POLICY_ID_RULE = re.compile(r"\b(POL\d{3,})\b")

POLICY_TYPE_RULES = [
    (re.compile(r"\blife\b", re.IGNORECASE), "Life Insurance"),
    (re.compile(r"\bhealth\b", re.IGNORECASE), "Health Insurance"),
    (re.compile(r"\bauto\b|\bcar\s*insurance", re.IGNORECASE), "Auto Insurance"),
    (re.compile(r"\bhome\b", re.IGNORECASE), "Home Insurance"),
    (re.compile(r"\bcritical\s*illness\b", re.IGNORECASE), "Critical Illness"),
    (re.compile(r"\bdisability\b", re.IGNORECASE), "Disability"),
    (re.compile(r"\b(?:rrsp|retirement)\b", re.IGNORECASE), "Retirement"),
    (re.compile(r"\b(?:tfsa|segregated\s*fund|investment)\b", re.IGNORECASE), "Investment"),
]

POLICY_STATUS_RULE = re.compile(
    r"\b(active|pending|expired|cancelled|lapsed|suspended)\s*polic", re.IGNORECASE
)

# Priority order: overdue > week > month > today
TIME_RANGE_RULES = [
    (re.compile(r"\b(?:overdue|past\s*due|late)\b", re.IGNORECASE), "overdue"),
    (re.compile(r"\b(?:this\s*week|weekly|week)\b", re.IGNORECASE), "week"),
    (re.compile(r"\b(?:this\s*month|monthly|month)\b", re.IGNORECASE), "month"),
    (re.compile(r"\btoday\b", re.IGNORECASE), "today"),
]

SEARCH_QUERY_RULES: List[Pattern] = [
    re.compile(r"(?:named|called)\s+[\"']?([^\"'?]+?)[\"']?\s*[?.!]*$", re.IGNORECASE),
    re.compile(
        r"^(?:search|find|look\s*(?:up|for))\s+(?:for\s+)?"
        r"(?:(?:clients?|customers?|tasks?|polic(?:y|ies))\s+(?:about|for|with|matching)\s+)?"
        r"(.+?)\s*[?.!]*$",
        re.IGNORECASE,
    ),
]


def _first_group(rules: List[Pattern], text: str) -> Optional[str]:
    for rule in rules:
        match = rule.search(text)
        if match and match.group(1) and match.group(1).strip():
            return match.group(1).strip()
    return None


def extract_client_name(message: str) -> Optional[str]:
    for rule in CLIENT_NAME_RULES:
        for match in rule.finditer(message):
            name = match.group(1).strip()
            words = [w for w in name.split() if w not in _NOT_NAMES]
            if words:
                return " ".join(words)
    return None


def extract_policy_type(message: str) -> Optional[str]:
    for rule, policy_type in POLICY_TYPE_RULES:
        if rule.search(message):
            return policy_type
    return None


def extract_time_range(message: str) -> Optional[TimeRange]:
    for rule, time_range in TIME_RANGE_RULES:
        if rule.search(message):
            return time_range
    return None


def extract_entities(message: str) -> ExtractedEntities:
    """
    Pull typed fragments out of a user message.

    Never raises; fields that no rule matched stay None.
    """
    text = message.strip()

    policy_status = None
    status_match = POLICY_STATUS_RULE.search(text)
    if status_match:
        policy_status = status_match.group(1).capitalize()

    return ExtractedEntities(
        client_name=extract_client_name(text),
        client_id=_first_group([CLIENT_ID_RULE], text),
        task_title=_first_group(TASK_TITLE_RULES, text),
        task_id=_first_group([TASK_ID_RULE], text),
        policy_number=_first_group(POLICY_NUMBER_RULES, text),
        policy_id=_first_group([POLICY_ID_RULE], text),
        policy_type=extract_policy_type(text),
        policy_status=policy_status,
        time_range=extract_time_range(text),
        search_query=_first_group(SEARCH_QUERY_RULES, text),
    )
