from __future__ import annotations

import logging

from sqlalchemy import bindparam, text

from apprentice_api.application.ports.orders_port import OrdersPort
from apprentice_api.domain.entities.access import OrderItemRow
from apprentice_api.infrastructure.db.mappers.access_mapper import map_row_to_order_item
from apprentice_api.infrastructure.db.wp_tables import WpTables, chunked


logger = logging.getLogger(__name__)


class SqlOrdersRepository(OrdersPort):
    def __init__(self, engine, tables: WpTables):
        self._engine = engine
        self._tables = tables

    def list_order_items_for_users(self, *, user_ids: list[int]) -> list[OrderItemRow]:
        if not user_ids:
            return []
        sql = text(
            f"""
            SELECT
                o.user_id,
                o.ID         AS order_id,
                o.status     AS order_status,
                o.created_at AS order_created_at,
                i.ID         AS item_id,
                i.status     AS item_status,
                i.product_id
            FROM {self._tables.orders} o
            JOIN {self._tables.order_items} i
              ON i.order_id = o.ID
            WHERE o.user_id IN :user_ids
            ORDER BY o.created_at ASC, o.ID ASC, i.ID ASC
            """
        ).bindparams(bindparam("user_ids", expanding=True))

        items: list[OrderItemRow] = []
        with self._engine.connect() as conn:
            for batch in chunked(user_ids):
                rows = conn.execute(sql, {"user_ids": batch}).mappings().all()
                items.extend(map_row_to_order_item(row) for row in rows)
        logger.debug(
            "orders_repo: list_order_items_for_users users=%s rows=%s",
            len(user_ids),
            len(items),
        )
        return items
