from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Optional


@dataclass(frozen=True)
class Announcement:
    id: str
    content: str
    timestamp: str
    author_id: Optional[str] = None
    author_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Announcement':
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
