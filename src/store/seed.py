"""
Demo data generator for the advisor assistant.
Creates clients, policies and tasks (including AI-completed work awaiting
review) with dates relative to the generation time.
"""

import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from faker import Faker
from loguru import logger

from src.models.records import AICompletion, Client, Policy, Task, POLICY_TYPES


CLIENT_STATUSES = ["Active"] * 6 + ["Prospect", "Inactive", "Dormant"]
CLIENT_SEGMENTS = ["Retail", "Mass Affluent", "High Net Worth"]
RISK_PROFILES = ["conservative", "moderate", "aggressive"]
PREMIUM_FREQUENCIES = ["Monthly", "Quarterly", "Semi-Annual", "Annual"]

POLICY_PREFIXES = {
    "Life Insurance": "LI",
    "Health Insurance": "HI",
    "Auto Insurance": "AI",
    "Home Insurance": "HO",
    "Investment": "IN",
    "Retirement": "RT",
    "Disability": "DI",
    "Critical Illness": "CI",
    "Other": "OT",
}

TASK_TEMPLATES = [
    ("Annual portfolio review", "Review allocation and rebalance against risk profile", ["review"]),
    ("Follow-up call", "Call to follow up on last meeting", ["call"]),
    ("Update beneficiary forms", "Collect signed beneficiary change forms", ["paperwork"]),
    ("KYC refresh", "Refresh know-your-client documentation", ["compliance"]),
    ("Renewal discussion", "Discuss upcoming policy renewal options", ["renewal"]),
    ("Tax-loss harvesting check", "Check for harvesting opportunities before year end", ["tax"]),
]

# (title, action_type, summary)
AI_TEMPLATES = [
    ("Draft follow-up email", "email_draft", "Follow-up email drafted after the portfolio review"),
    ("Prepare meeting notes", "meeting_notes", "Meeting notes summarized from the advisor's call log"),
    ("Renewal notice", "renewal_notice", "Renewal reminder drafted for the upcoming policy renewal"),
    ("Compliance check", "compliance_check", "Compliance check completed; two items need attention"),
]


def generate_clients(fake: Faker, now: datetime, count: int = 12) -> List[Client]:
    """Generate client profiles; the first client is always Dylan Jackson."""
    clients = []
    for i in range(count):
        first, last = ("Dylan", "Jackson") if i == 0 else (fake.first_name(), fake.last_name())
        segment = random.choice(CLIENT_SEGMENTS)
        portfolio = {
            "Retail": random.randint(20_000, 250_000),
            "Mass Affluent": random.randint(250_000, 1_000_000),
            "High Net Worth": random.randint(1_000_000, 8_000_000),
        }[segment]
        created = now - timedelta(days=random.randint(3, 900))

        clients.append(Client(
            client_id=f"C{i + 1:03d}",
            first_name=first,
            last_name=last,
            client_type="Individual",
            client_status="Active" if i == 0 else random.choice(CLIENT_STATUSES),
            client_segment=segment,
            date_of_birth=fake.date_of_birth(minimum_age=25, maximum_age=80).isoformat(),
            occupation=fake.job(),
            primary_email=f"{first.lower()}.{last.lower()}@{fake.free_email_domain()}",
            primary_phone=fake.phone_number(),
            city=fake.city(),
            portfolio_value=float(portfolio),
            risk_profile=random.choice(RISK_PROFILES),
            kyc_status=random.choice(["Complete", "Complete", "Needs Update"]),
            next_meeting=now + timedelta(days=random.randint(1, 45)) if random.random() < 0.5 else None,
            last_contact=now - timedelta(days=random.randint(1, 120)),
            client_tags=random.sample(["retirement", "family", "business-owner", "estate"], 2),
            created_at=created,
            updated_at=created,
        ))
    return clients


def generate_policies(fake: Faker, now: datetime, clients: List[Client], per_client: int = 2) -> List[Policy]:
    """Generate policies with renewals spread over the next few months."""
    policies = []
    for client in clients:
        for _ in range(random.randint(1, per_client + 1)):
            policy_type = random.choice(POLICY_TYPES)
            issued = now - timedelta(days=random.randint(200, 2000))
            policies.append(Policy(
                policy_id=f"POL{len(policies) + 1:03d}",
                client_id=client.client_id,
                policy_number=f"{POLICY_PREFIXES[policy_type]}-{issued.year}-{len(policies) + 1:03d}",
                policy_type=policy_type,
                policy_status=random.choice(["Active"] * 5 + ["Pending", "Lapsed"]),
                coverage_amount=float(random.randrange(50_000, 2_000_000, 10_000)),
                premium_amount=float(random.randrange(50, 900, 5)),
                premium_frequency=random.choice(PREMIUM_FREQUENCIES),
                issue_date=issued,
                effective_date=issued,
                renewal_date=now + timedelta(days=random.randint(1, 120)),
                payment_status=random.choice(["Current"] * 4 + ["Overdue"]),
                beneficiaries=[{"name": fake.name(), "relationship": "Spouse", "percentage": 100}],
                claims_count=random.randint(0, 2),
                created_at=issued,
                updated_at=issued,
            ))
    return policies


def generate_tasks(fake: Faker, now: datetime, clients: List[Client], count: int = 20) -> List[Task]:
    """Generate manual tasks plus a few AI-completed tasks awaiting review."""
    tasks = []
    for i in range(count):
        client = random.choice(clients)
        title, description, tags = random.choice(TASK_TEMPLATES)
        due = now + timedelta(days=random.randint(-5, 25), hours=random.randint(0, 6))
        status = random.choice(["pending", "pending", "in-progress", "completed"])
        created = now - timedelta(days=random.randint(1, 30))
        tasks.append(Task(
            task_id=f"T{i + 1:03d}",
            title=f"{title} - {client.full_name}",
            description=description,
            status=status,
            priority=random.choice(["low", "medium", "high"]),
            due_date=due,
            created_at=created,
            updated_at=created,
            completed_at=due if status == "completed" else None,
            client_id=client.client_id,
            client_name=client.full_name,
            tags=tags,
        ))

    for title, action_type, summary in AI_TEMPLATES:
        client = random.choice(clients)
        completed = now - timedelta(hours=random.randint(1, 20))
        tasks.append(Task(
            task_id=f"T{len(tasks) + 1:03d}",
            title=f"{title} - {client.full_name}",
            description=summary,
            status="needs-review",
            priority="medium",
            due_date=now + timedelta(days=1),
            created_at=completed - timedelta(days=1),
            updated_at=completed,
            client_id=client.client_id,
            client_name=client.full_name,
            tags=["ai"],
            ai_completed=True,
            ai_action_type=action_type,
            ai_completion_data=AICompletion(
                completed_at=completed,
                summary=summary,
                action_type=action_type,
                confidence=random.randint(75, 95),
                generated_content=fake.paragraph(nb_sentences=4),
            ),
        ))
    return tasks


def generate_seed_data(seed: Optional[int] = 42, now: Optional[datetime] = None) -> Dict[str, list]:
    """Generate a full data set as JSON-ready dicts."""
    now = now or datetime.now(timezone.utc)
    fake = Faker()
    if seed is not None:
        Faker.seed(seed)
        random.seed(seed)

    clients = generate_clients(fake, now)
    policies = generate_policies(fake, now, clients)
    tasks = generate_tasks(fake, now, clients)

    return {
        "clients": [c.model_dump(mode="json") for c in clients],
        "policies": [p.model_dump(mode="json") for p in policies],
        "tasks": [t.model_dump(mode="json") for t in tasks],
    }


def write_seed_file(path: Path, seed: Optional[int] = 42) -> Dict[str, int]:
    """Generate data and write it where InMemoryRecordStore.from_seed_file reads it."""
    data = generate_seed_data(seed=seed)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    counts = {kind: len(records) for kind, records in data.items()}
    logger.info(f"Wrote seed data to {path}: {counts}")
    return counts
