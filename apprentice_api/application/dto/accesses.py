from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from apprentice_api.domain.entities.access import AccessEvent, CurrentAccessState


UserLookupStatus = Literal["found", "not_found"]


@dataclass(frozen=True)
class GetAccessesByUsersInput:
    user_ids: Any


@dataclass(frozen=True)
class UserAccessesOutput:
    user_id: int
    status: UserLookupStatus
    email: str | None = None
    roles: list[str] = field(default_factory=list)
    current_access: CurrentAccessState | None = None
    accesses: list[AccessEvent] = field(default_factory=list)


@dataclass(frozen=True)
class GetAccessesByTimeInput:
    since: Any
    until: Any = None
    has_until: bool = False


@dataclass(frozen=True)
class GetAccessesByTimeOutput:
    since: datetime
    until: datetime
    events: list[AccessEvent]
    mode: str = "delta"
