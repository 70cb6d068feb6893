from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, tzinfo

from apprentice_api.domain.entities.access import (
    AccessStatus,
    CurrentAccessRecord,
    CurrentAccessState,
    OrderItemRow,
)
from apprentice_api.domain.entities.expiry import ExpiryPolicy, ResolvedExpiry
from apprentice_api.domain.entities.product import ProductCourseMapping
from apprentice_api.domain.services.access_events import policy_for_product
from apprentice_api.domain.services.expiry_resolver import resolve_expiry
from apprentice_api.shared.datetimes import parse_datetime


logger = logging.getLogger(__name__)


def is_expired(expires_at: str | None, *, now: datetime, timezone: tzinfo | None = None) -> bool:
    if not expires_at:
        return False
    try:
        return parse_datetime(expires_at, timezone=timezone) < now
    except ValueError:
        logger.warning("current_access: unparseable_expires_at value=%r", expires_at)
        return False


def classify_order_item(
    item: OrderItemRow,
    resolved: ResolvedExpiry,
    *,
    now: datetime,
    timezone: tzinfo | None = None,
) -> AccessStatus:
    if not item.is_active:
        return "revoked"
    if is_expired(resolved.expires_at, now=now, timezone=timezone):
        return "expired"
    return "active"


def evaluate_current_access(
    *,
    user_id: int,
    order_items: Iterable[OrderItemRow],
    mappings_by_product: Mapping[int, ProductCourseMapping],
    policies_by_product: Mapping[int, ExpiryPolicy],
    cached_expiry_by_product: Mapping[int, str | None],
    now: datetime,
    timezone: tzinfo | None = None,
) -> CurrentAccessState:
    active: list[CurrentAccessRecord] = []
    outdated: list[CurrentAccessRecord] = []

    # Each order item is a distinct grant; the same product bought twice
    # yields two record sets.
    for item in order_items:
        mapping = mappings_by_product.get(item.product_id)
        if mapping is None or not mapping.courses:
            logger.debug(
                "current_access: product_without_courses user_id=%s order_id=%s product_id=%s",
                user_id,
                item.order_id,
                item.product_id,
            )
            continue

        resolved = resolve_expiry(
            product_id=item.product_id,
            policy=policy_for_product(policies_by_product, item.product_id),
            cached_user_expiry=cached_expiry_by_product.get(item.product_id),
            user_id=user_id,
        )
        status = classify_order_item(item, resolved, now=now, timezone=timezone)
        target = active if status == "active" else outdated

        for course in mapping.courses:
            target.append(
                CurrentAccessRecord(
                    order_id=item.order_id,
                    product_id=item.product_id,
                    product_name=mapping.product_name,
                    course_id=course.course_id,
                    course_name=course.course_name,
                    order_created_at=item.order_created_at,
                    status=status,
                    expires_at=resolved.expires_at,
                    expiry=resolved.policy,
                    validation_error=resolved.validation_error,
                )
            )

    return CurrentAccessState(active=active, outdated=outdated)
