from __future__ import annotations

import logging

from sqlalchemy import bindparam, text

from apprentice_api.application.ports.expiry_cache_port import ExpiryCachePort
from apprentice_api.domain.services.expiry_resolver import expiry_meta_key
from apprentice_api.infrastructure.db.mappers.catalog_mapper import (
    map_expiry_meta_value,
    product_id_from_expiry_meta_key,
)
from apprentice_api.infrastructure.db.wp_tables import WpTables, chunked


logger = logging.getLogger(__name__)


class SqlExpiryCacheRepository(ExpiryCachePort):
    def __init__(self, engine, tables: WpTables):
        self._engine = engine
        self._tables = tables

    def get_cached_expiries(
        self,
        *,
        user_ids: list[int],
        product_ids: list[int] | None = None,
    ) -> dict[int, dict[int, str | None]]:
        if not user_ids:
            return {}

        if product_ids is None:
            sql = text(
                f"""
                SELECT user_id, meta_key, meta_value
                FROM {self._tables.usermeta}
                WHERE user_id IN :user_ids
                  AND meta_key LIKE 'tva\\_product\\_%\\_access\\_expiry'
                """
            ).bindparams(bindparam("user_ids", expanding=True))
            params: dict = {}
        else:
            if not product_ids:
                return {}
            sql = text(
                f"""
                SELECT user_id, meta_key, meta_value
                FROM {self._tables.usermeta}
                WHERE user_id IN :user_ids
                  AND meta_key IN :meta_keys
                """
            ).bindparams(
                bindparam("user_ids", expanding=True),
                bindparam("meta_keys", expanding=True),
            )
            params = {"meta_keys": [expiry_meta_key(product_id) for product_id in product_ids]}

        expiries: dict[int, dict[int, str | None]] = {}
        with self._engine.connect() as conn:
            for batch in chunked(user_ids):
                rows = conn.execute(sql, {**params, "user_ids": batch}).mappings().all()
                for row in rows:
                    product_id = product_id_from_expiry_meta_key(str(row["meta_key"]))
                    if product_id is None:
                        continue
                    expiries.setdefault(int(row["user_id"]), {})[product_id] = map_expiry_meta_value(
                        row["meta_value"]
                    )
        logger.debug(
            "expiry_cache_repo: get_cached_expiries users=%s users_with_expiry=%s",
            len(user_ids),
            len(expiries),
        )
        return expiries
