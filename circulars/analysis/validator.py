"""Builds a structured AnalysisResult from parsed model JSON.

Lenient: missing optional fields become
None/empty, but types are never coerced across kinds, so applicability stays
exactly True, False or None.
"""

from typing import Any

from circulars.analysis.models import Action, AnalysisMeta, AnalysisResult, BankContext
from circulars.logging.logger import Log

_MAX_ACTIONS = 50


def validate_and_build(data: dict[str, Any]) -> AnalysisResult:
    return AnalysisResult(
        meta=_build_meta(data.get("meta")),
        summary=_optional_str(data.get("summary")) or "",
        key_points=_string_list(data.get("key_points")),
        actions=_build_actions(data.get("actions")),
        risks=_string_list(data.get("risks")),
    )


def _build_meta(raw: Any) -> AnalysisMeta:
    if not isinstance(raw, dict):
        return AnalysisMeta()
    return AnalysisMeta(
        regulator=_optional_str(raw.get("regulator")),
        circular_id=_optional_str(raw.get("circular_id")),
        reference_no=_optional_str(raw.get("reference_no")),
        date=_optional_str(raw.get("date")),
        subject=_optional_str(raw.get("subject")),
        bank_context=_build_bank_context(raw.get("bank_context")),
    )


def _build_bank_context(raw: Any) -> BankContext:
    if not isinstance(raw, dict):
        return BankContext()
    applicable = raw.get("applicable")
    return BankContext(
        bank_id=_optional_str(raw.get("bank_id")) or "",
        bank_name=_optional_str(raw.get("bank_name")) or "",
        bank_type=_optional_str(raw.get("bank_type")) or "",
        applicable=applicable if isinstance(applicable, bool) else None,
        applicable_reason=_optional_str(raw.get("applicable_reason")) or "",
    )


def _build_actions(raw: Any) -> list[Action]:
    if not isinstance(raw, list):
        return []
    actions: list[Action] = []
    for index, item in enumerate(raw[:_MAX_ACTIONS]):
        action = _build_action(item)
        if action is None:
            Log.warning(f"Dropping action at index {index}: missing title")
            continue
        actions.append(action)
    return actions


def _build_action(raw: Any) -> Action | None:
    if not isinstance(raw, dict):
        return None
    title = _optional_str(raw.get("title"))
    if not title:
        return None
    return Action(
        title=title,
        description=_optional_str(raw.get("description")),
        priority=_optional_str(raw.get("priority")),
        department=_optional_str(raw.get("department")),
        due_in_days=_optional_int(raw.get("due_in_days")),
        owner_role=_optional_str(raw.get("owner_role")),
        confidence=_optional_float(raw.get("confidence")),
        citation=_optional_str(raw.get("citation")),
    )


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _optional_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]
