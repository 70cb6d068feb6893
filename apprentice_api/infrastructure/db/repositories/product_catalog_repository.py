from __future__ import annotations

import logging

from sqlalchemy import bindparam, text

from apprentice_api.application.ports.product_catalog_port import ProductCatalogPort
from apprentice_api.domain.entities.product import ContentSetDefinition
from apprentice_api.infrastructure.db.mappers.catalog_mapper import map_row_to_content_set
from apprentice_api.infrastructure.db.wp_tables import WpTables, chunked


logger = logging.getLogger(__name__)


class SqlProductCatalogRepository(ProductCatalogPort):
    def __init__(
        self,
        engine,
        tables: WpTables,
        *,
        restriction_meta_key: str,
        content_set_post_type: str,
    ):
        self._engine = engine
        self._tables = tables
        self._restriction_meta_key = restriction_meta_key
        self._content_set_post_type = content_set_post_type

    def get_policy_blobs(self, *, product_ids: list[int]) -> dict[int, str | None]:
        if not product_ids:
            return {}
        sql = text(
            f"""
            SELECT term_id, meta_value
            FROM {self._tables.termmeta}
            WHERE meta_key = :meta_key
              AND term_id IN :product_ids
            """
        ).bindparams(bindparam("product_ids", expanding=True))

        blobs: dict[int, str | None] = {}
        with self._engine.connect() as conn:
            for batch in chunked(product_ids):
                rows = conn.execute(
                    sql,
                    {
                        "meta_key": self._restriction_meta_key,
                        "product_ids": batch,
                    },
                ).mappings().all()
                for row in rows:
                    blobs[int(row["term_id"])] = row["meta_value"]
        logger.debug(
            "product_catalog_repo: get_policy_blobs products=%s found=%s",
            len(product_ids),
            len(blobs),
        )
        return blobs

    def list_content_sets(self, *, product_ids: list[int] | None = None) -> list[ContentSetDefinition]:
        sql = f"""
            SELECT
                p.ID           AS post_id,
                p.post_content,
                t.term_id      AS product_id,
                t.name         AS product_name
            FROM {self._tables.posts} p
            JOIN {self._tables.term_relationships} tr
              ON tr.object_id = p.ID
            JOIN {self._tables.terms} t
              ON t.term_id = tr.term_taxonomy_id
            WHERE p.post_type = :post_type
        """
        if product_ids is None:
            statement = text(sql + " ORDER BY p.ID")
            batches: list[dict] = [{}]
        else:
            if not product_ids:
                return []
            statement = text(sql + " AND t.term_id IN :product_ids ORDER BY p.ID").bindparams(
                bindparam("product_ids", expanding=True)
            )
            batches = [{"product_ids": batch} for batch in chunked(product_ids)]

        definitions: list[ContentSetDefinition] = []
        with self._engine.connect() as conn:
            for params in batches:
                rows = conn.execute(
                    statement,
                    {"post_type": self._content_set_post_type, **params},
                ).mappings().all()
                definitions.extend(map_row_to_content_set(row) for row in rows)
        logger.debug("product_catalog_repo: list_content_sets rows=%s", len(definitions))
        return definitions

    def get_term_names(self, *, term_ids: list[int]) -> dict[int, str]:
        if not term_ids:
            return {}
        sql = text(
            f"""
            SELECT term_id, name
            FROM {self._tables.terms}
            WHERE term_id IN :term_ids
            """
        ).bindparams(bindparam("term_ids", expanding=True))

        names: dict[int, str] = {}
        with self._engine.connect() as conn:
            for batch in chunked(term_ids):
                rows = conn.execute(sql, {"term_ids": batch}).mappings().all()
                for row in rows:
                    names[int(row["term_id"])] = str(row["name"])
        return names
