"""Display-only section split for model answers that are not valid JSON."""

import re

from circulars.analysis.models import UnstructuredAnalysis

KEY_POINTS_LABEL = "Key Points:"
ACTION_POINTS_LABEL = "Action Points:"
MAX_BULLETS = 8

_BULLET_PREFIX = re.compile(r"^(?:[•\-*]|\d+[.)])\s*")
_APPLICABLE_ANSWER = re.compile(r"is applicable\s*[:\-]?\s*(yes|no)\b", re.IGNORECASE)
_NOT_APPLICABLE = re.compile(r"\bnot applicable\b", re.IGNORECASE)


def _section(text: str, label: str, stop_labels: tuple[str, ...] = ()) -> str:
    start = text.find(label)
    if start == -1:
        return ""
    body = text[start + len(label):]
    for stop in stop_labels:
        end = body.find(stop)
        if end != -1:
            body = body[:end]
    return body.strip()


def to_bullets(section: str) -> list[str]:
    bullets = []
    for line in re.split(r"\n+", section):
        cleaned = _BULLET_PREFIX.sub("", line.strip())
        if len(cleaned) > 2:
            bullets.append(cleaned)
    return bullets[:MAX_BULLETS]


def guess_applicability(text: str) -> bool | None:
    match = _APPLICABLE_ANSWER.search(text)
    if match:
        return match.group(1).lower() == "yes"
    if _NOT_APPLICABLE.search(text):
        return False
    return None


def parse_unstructured(text: str) -> UnstructuredAnalysis:
    key_part = _section(text, KEY_POINTS_LABEL, stop_labels=(ACTION_POINTS_LABEL,))
    action_part = _section(text, ACTION_POINTS_LABEL, stop_labels=(KEY_POINTS_LABEL,))
    return UnstructuredAnalysis(
        raw_text=text,
        applicable=guess_applicability(text),
        key_points=to_bullets(key_part),
        action_points=to_bullets(action_part),
    )
