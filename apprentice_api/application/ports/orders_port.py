from __future__ import annotations

from typing import Protocol

from apprentice_api.domain.entities.access import OrderItemRow


class OrdersPort(Protocol):
    def list_order_items_for_users(self, *, user_ids: list[int]) -> list[OrderItemRow]:
        ...
