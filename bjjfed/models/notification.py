from __future__ import annotations

from dataclasses import asdict, dataclass

TYPE_ANNOUNCEMENT = 'announcement'
TYPE_SYSTEM = 'system'
TYPE_ALERT = 'alert'


@dataclass
class Notification:
    id: str
    title: str
    message: str
    type: str
    created_at: float

    def to_dict(self) -> dict:
        return asdict(self)
