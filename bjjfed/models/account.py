from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Account:
    id: int
    username: str
    role: str
    member_id: str
