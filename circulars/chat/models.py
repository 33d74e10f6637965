from dataclasses import dataclass, field
from typing import Any

ROLES = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatCompletion:
    """Provider answer, shaped as the proxy returns it to callers."""

    message: ChatMessage
    id: str
    usage: dict[str, Any] | None = field(default=None)

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message.to_dict(), "usage": self.usage, "id": self.id}
