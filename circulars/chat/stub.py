"""Synthetic completion returned when DEV_STUB_ON_ERROR is enabled.

Every text field carries a "stub on error" / "Dev stub" marker so the
analysis client always rejects it.
"""

import json
import re
import time
from datetime import datetime, timezone

from circulars.chat.models import ChatCompletion, ChatMessage

_CIRCULAR_ID = re.compile(r"Circular ID:\s*([^,\n]+)", re.IGNORECASE)

_STUB_ACTIONS: list[dict[str, object]] = [
    {
        "title": "Review circular and prepare compliance note",
        "description": "Create a short note summarizing obligations and proposed steps.",
        "priority": "Medium",
        "department": "Compliance",
        "due_in_days": 7,
        "owner_role": "Maker",
        "confidence": 0.5,
        "citation": "N/A",
    },
    {
        "title": "Identify applicable sections for the default bank",
        "description": "Map clauses to bank products/processes; mark not applicable items.",
        "priority": "High",
        "department": "Compliance",
        "due_in_days": 5,
        "owner_role": "Maker",
        "confidence": 0.6,
        "citation": "N/A",
    },
    {
        "title": "Set up compliance monitoring",
        "description": "Define checks/alerts to monitor adherence and capture evidence.",
        "priority": "High",
        "department": "Compliance Monitoring",
        "due_in_days": 12,
        "owner_role": "Checker",
        "confidence": 0.5,
        "citation": "N/A",
    },
]


def build_stub_completion(messages: list[ChatMessage], details: str) -> ChatCompletion:
    user_content = next((m.content for m in messages if m.role == "user"), "")
    match = _CIRCULAR_ID.search(user_content)
    circular_id = match.group(1).strip() if match else "unknown"
    today = datetime.now(timezone.utc).date().isoformat()
    content = {
        "meta": {
            "regulator": "RBI",
            "circular_id": circular_id,
            "reference_no": "DEV-STUB-ON-ERROR",
            "date": today,
            "subject": f"Dev stub (OpenAI error): {details}",
            "bank_context": {
                "bank_id": "",
                "bank_name": "",
                "bank_type": "",
                "applicable": True,
                "applicable_reason": "Dev stub returned due to OpenAI error.",
            },
        },
        "summary": "Development fallback summary (stub on error).",
        "key_points": ["Stubbed point, replace with real analysis once OpenAI is configured."],
        "actions": _STUB_ACTIONS,
        "risks": ["Potential non-compliance if ignored (dev-stub)."],
        "notes": "This payload is returned by the server when OpenAI fails in dev.",
    }
    return ChatCompletion(
        message=ChatMessage(role="assistant", content=json.dumps(content)),
        id=f"stub-{int(time.time() * 1000)}",
        usage=None,
    )
