from __future__ import annotations

from typing import Protocol


class ExpiryCachePort(Protocol):
    def get_cached_expiries(
        self,
        *,
        user_ids: list[int],
        product_ids: list[int] | None = None,
    ) -> dict[int, dict[int, str | None]]:
        """Return ``{user_id: {product_id: expiry}}`` for the requested users."""
        ...
