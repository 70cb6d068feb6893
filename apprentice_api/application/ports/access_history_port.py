from __future__ import annotations

from datetime import datetime
from typing import Protocol

from apprentice_api.domain.entities.access import AccessHistoryRow
from apprentice_api.domain.entities.product import CoursePair


class AccessHistoryPort(Protocol):
    def list_history_for_users(self, *, user_ids: list[int]) -> list[AccessHistoryRow]:
        ...

    def list_history_between(self, *, since: datetime, until: datetime) -> list[AccessHistoryRow]:
        ...

    def list_distinct_course_pairs(self) -> list[CoursePair]:
        ...
