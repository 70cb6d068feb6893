from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from apprentice_api.domain.entities.expiry import ExpiryPolicy


ACTIVE_STATUS = 1

AccessStatus = Literal["active", "expired", "revoked"]


@dataclass(frozen=True)
class AccessHistoryRow:
    user_id: int
    product_id: int
    course_id: int | None
    status: int
    source: str
    created: datetime


@dataclass(frozen=True)
class AccessEvent:
    user_id: int | None
    product_id: int
    course_id: int | None
    created_at: datetime
    status: int
    source: str
    expires_at: str | None
    expiry: ExpiryPolicy
    validation_error: str | None = None


@dataclass(frozen=True)
class OrderItemRow:
    user_id: int
    order_id: int
    order_status: int
    item_id: int
    item_status: int
    product_id: int
    order_created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.order_status == ACTIVE_STATUS and self.item_status == ACTIVE_STATUS


@dataclass(frozen=True)
class CurrentAccessRecord:
    order_id: int
    product_id: int
    product_name: str
    course_id: int
    course_name: str
    order_created_at: datetime
    status: AccessStatus
    expires_at: str | None
    expiry: ExpiryPolicy
    validation_error: str | None = None


@dataclass(frozen=True)
class CurrentAccessState:
    active: list[CurrentAccessRecord]
    outdated: list[CurrentAccessRecord]
