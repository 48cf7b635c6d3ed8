"""
Record models for the advisor's book of business.

Tasks, clients and policies as held by the record store. Each record has a
compact summary form used when lists are rendered into the prompt.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


TaskStatus = Literal["pending", "in-progress", "completed", "needs-review"]
TaskPriority = Literal["low", "medium", "high"]

ClientStatus = Literal["Active", "Inactive", "Prospect", "Dormant"]
ClientSegment = Literal["Retail", "Mass Affluent", "High Net Worth"]
RiskProfile = Literal["conservative", "moderate", "aggressive"]

PolicyStatus = Literal["Active", "Pending", "Expired", "Cancelled", "Lapsed", "Suspended"]
PaymentStatus = Literal["Current", "Overdue", "Paid", "Pending"]
PremiumFrequency = Literal["Monthly", "Quarterly", "Semi-Annual", "Annual"]

POLICY_TYPES = [
    "Life Insurance",
    "Health Insurance",
    "Auto Insurance",
    "Home Insurance",
    "Investment",
    "Retirement",
    "Disability",
    "Critical Illness",
    "Other",
]


class AICompletion(BaseModel):
    """Details about work an AI completed on a task."""
    completed_at: datetime
    summary: str
    action_type: str
    confidence: int = Field(default=0, ge=0, le=100)
    details: Optional[str] = None
    generated_content: Optional[str] = None


class Task(BaseModel):
    """Advisor task, manually managed or AI-completed."""
    task_id: str
    title: str
    description: str = ""
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    due_date: datetime
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None

    client_id: Optional[str] = None
    client_name: Optional[str] = None
    policy_id: Optional[str] = None
    assigned_to: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    ai_completed: bool = False
    ai_action_type: Optional[str] = None
    ai_completion_data: Optional[AICompletion] = None

    def summary(self) -> Dict[str, Any]:
        """Compact form for list views."""
        return self.model_dump(
            mode="json",
            include={"task_id", "title", "status", "due_date", "priority",
                     "client_name", "ai_completed", "ai_action_type"},
            exclude_none=True,
        )


class Client(BaseModel):
    """Client profile."""
    client_id: str
    first_name: str
    last_name: str
    preferred_name: Optional[str] = None
    client_type: Optional[str] = None
    client_status: Optional[ClientStatus] = None
    client_segment: Optional[ClientSegment] = None
    date_of_birth: Optional[str] = None
    occupation: Optional[str] = None

    primary_email: Optional[str] = None
    primary_phone: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None

    portfolio_value: Optional[float] = None
    risk_profile: Optional[RiskProfile] = None
    kyc_status: Optional[str] = None
    next_meeting: Optional[datetime] = None
    last_contact: Optional[datetime] = None
    last_interaction_summary: Optional[str] = None
    client_tags: List[str] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def summary(self) -> Dict[str, Any]:
        """Compact form for list views."""
        return self.model_dump(
            mode="json",
            include={"client_id", "first_name", "last_name", "primary_email",
                     "client_status", "client_segment", "portfolio_value",
                     "risk_profile", "next_meeting"},
            exclude_none=True,
        )


class Policy(BaseModel):
    """Insurance or investment policy held by a client."""
    policy_id: str
    client_id: str
    policy_number: str
    policy_type: str
    policy_status: PolicyStatus
    coverage_amount: float
    premium_amount: float
    premium_frequency: PremiumFrequency

    issue_date: Optional[datetime] = None
    effective_date: Optional[datetime] = None
    renewal_date: Optional[datetime] = None
    next_payment_due_date: Optional[datetime] = None
    payment_status: Optional[PaymentStatus] = None

    beneficiaries: List[Dict[str, Any]] = Field(default_factory=list)
    claims_count: int = 0
    agent_notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime

    def summary(self) -> Dict[str, Any]:
        """Compact form for list views."""
        return self.model_dump(
            mode="json",
            include={"policy_id", "client_id", "policy_number", "policy_type",
                     "policy_status", "coverage_amount", "premium_amount",
                     "premium_frequency", "renewal_date", "payment_status"},
            exclude_none=True,
        )
