from __future__ import annotations

from collections.abc import Iterable, Mapping

from apprentice_api.domain.entities.access import AccessEvent, AccessHistoryRow
from apprentice_api.domain.entities.expiry import ExpiryPolicy
from apprentice_api.domain.services.expiry_resolver import resolve_expiry


def expiry_cache_key(*, user_id: int, product_id: int, include_user_id: bool) -> int | str:
    if include_user_id:
        return f"{user_id}_{product_id}"
    return product_id


def policy_for_product(policies_by_product: Mapping[int, ExpiryPolicy], product_id: int) -> ExpiryPolicy:
    policy = policies_by_product.get(product_id)
    if policy is None:
        return ExpiryPolicy.not_configured(f"No access restriction stored for product {product_id}.")
    return policy


def transform_access_history(
    *,
    history_rows: Iterable[AccessHistoryRow],
    policies_by_product: Mapping[int, ExpiryPolicy],
    cached_expiry_by_key: Mapping[int | str, str | None],
    include_user_id: bool,
) -> list[AccessEvent]:
    events: list[AccessEvent] = []
    for row in history_rows:
        key = expiry_cache_key(
            user_id=row.user_id,
            product_id=row.product_id,
            include_user_id=include_user_id,
        )
        resolved = resolve_expiry(
            product_id=row.product_id,
            policy=policy_for_product(policies_by_product, row.product_id),
            cached_user_expiry=cached_expiry_by_key.get(key),
            user_id=row.user_id,
        )
        events.append(
            AccessEvent(
                user_id=row.user_id if include_user_id else None,
                product_id=row.product_id,
                course_id=row.course_id,
                created_at=row.created,
                status=row.status,
                source=row.source,
                expires_at=resolved.expires_at,
                expiry=resolved.policy,
                validation_error=resolved.validation_error,
            )
        )
    return events
