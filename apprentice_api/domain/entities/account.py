from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Account:
    user_id: int
    email: str
    roles: list[str]
