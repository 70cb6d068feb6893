from __future__ import annotations

import logging

from sqlalchemy import bindparam, text

from apprentice_api.application.ports.accounts_port import AccountsPort
from apprentice_api.domain.entities.account import Account
from apprentice_api.infrastructure.db.mappers.accounts_mapper import map_row_to_account
from apprentice_api.infrastructure.db.wp_tables import WpTables, chunked


logger = logging.getLogger(__name__)


class SqlAccountsRepository(AccountsPort):
    def __init__(self, engine, tables: WpTables):
        self._engine = engine
        self._tables = tables

    def list_accounts_by_ids(self, *, user_ids: list[int]) -> list[Account]:
        if not user_ids:
            return []
        sql = text(
            f"""
            SELECT
                u.ID         AS user_id,
                u.user_email AS email,
                m.meta_value AS capabilities
            FROM {self._tables.users} u
            LEFT JOIN {self._tables.usermeta} m
              ON m.user_id = u.ID
             AND m.meta_key = :capabilities_key
            WHERE u.ID IN :user_ids
            """
        ).bindparams(bindparam("user_ids", expanding=True))

        accounts: list[Account] = []
        with self._engine.connect() as conn:
            for batch in chunked(user_ids):
                rows = conn.execute(
                    sql,
                    {
                        "capabilities_key": self._tables.capabilities_meta_key,
                        "user_ids": batch,
                    },
                ).mappings().all()
                accounts.extend(map_row_to_account(row) for row in rows)
        logger.debug(
            "accounts_repo: list_accounts_by_ids requested=%s found=%s",
            len(user_ids),
            len(accounts),
        )
        return accounts
