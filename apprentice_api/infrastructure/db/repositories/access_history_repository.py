from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import bindparam, text

from apprentice_api.application.ports.access_history_port import AccessHistoryPort
from apprentice_api.domain.entities.access import AccessHistoryRow
from apprentice_api.domain.entities.product import CoursePair
from apprentice_api.infrastructure.db.mappers.access_mapper import (
    map_row_to_access_history_row,
    map_row_to_course_pair,
)
from apprentice_api.infrastructure.db.wp_tables import WpTables, chunked


logger = logging.getLogger(__name__)


class SqlAccessHistoryRepository(AccessHistoryPort):
    def __init__(self, engine, tables: WpTables):
        self._engine = engine
        self._tables = tables

    def list_history_for_users(self, *, user_ids: list[int]) -> list[AccessHistoryRow]:
        if not user_ids:
            return []
        sql = text(
            f"""
            SELECT
                user_id,
                product_id,
                course_id,
                source,
                status,
                created
            FROM {self._tables.access_history}
            WHERE user_id IN :user_ids
              AND product_id IS NOT NULL
            ORDER BY created ASC
            """
        ).bindparams(bindparam("user_ids", expanding=True))

        history: list[AccessHistoryRow] = []
        with self._engine.connect() as conn:
            for batch in chunked(user_ids):
                rows = conn.execute(sql, {"user_ids": batch}).mappings().all()
                history.extend(map_row_to_access_history_row(row) for row in rows)
        logger.debug(
            "access_history_repo: list_history_for_users users=%s rows=%s",
            len(user_ids),
            len(history),
        )
        return history

    def list_history_between(self, *, since: datetime, until: datetime) -> list[AccessHistoryRow]:
        sql = f"""
            SELECT
                user_id,
                product_id,
                course_id,
                status,
                source,
                created
            FROM {self._tables.access_history}
            WHERE created >= :since
              AND created <= :until
              AND product_id IS NOT NULL
            ORDER BY created ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"since": since, "until": until}).mappings().all()
        logger.debug(
            "access_history_repo: list_history_between since=%s until=%s rows=%s",
            since,
            until,
            len(rows),
        )
        return [map_row_to_access_history_row(row) for row in rows]

    def list_distinct_course_pairs(self) -> list[CoursePair]:
        sql = f"""
            SELECT DISTINCT product_id, course_id
            FROM {self._tables.access_history}
            WHERE product_id IS NOT NULL
              AND course_id IS NOT NULL
            ORDER BY product_id, course_id
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql)).mappings().all()
        return [map_row_to_course_pair(row) for row in rows]
