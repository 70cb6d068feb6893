from __future__ import annotations

from apprentice_api.domain.entities.expiry import ExpiryPolicy, ResolvedExpiry


def expiry_meta_key(product_id: int) -> str:
    return f"tva_product_{product_id}_access_expiry"


def resolve_expiry(
    *,
    product_id: int,
    policy: ExpiryPolicy,
    cached_user_expiry: str | None,
    user_id: int | None = None,
) -> ResolvedExpiry:
    if policy.mode == "specific_time":
        return ResolvedExpiry(expires_at=policy.date, policy=policy)

    if policy.mode == "after_purchase":
        if cached_user_expiry:
            return ResolvedExpiry(expires_at=cached_user_expiry, policy=policy)
        owner = f" and user {user_id}" if user_id is not None else ""
        return ResolvedExpiry(
            expires_at=None,
            policy=policy,
            validation_error=(
                f"User meta '{expiry_meta_key(product_id)}' is required by the after_purchase "
                f"expiry policy but missing for product {product_id}{owner}."
            ),
        )

    return ResolvedExpiry(expires_at=None, policy=policy)
