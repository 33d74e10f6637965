from dataclasses import dataclass


@dataclass(frozen=True)
class Notification:
    id: str
    title: str
    message: str
    created_at: int  # epoch ms
    read: bool = False
    type: str = "info"
