from __future__ import annotations

from functools import partial
from zoneinfo import ZoneInfo

from fastapi import HTTPException

from apprentice_api.application.use_cases.get_accesses_by_time import GetAccessesByTimeUseCase
from apprentice_api.application.use_cases.get_accesses_by_users import GetAccessesByUsersUseCase
from apprentice_api.application.use_cases.get_product_course_map import GetProductCourseMapUseCase
from apprentice_api.application.use_cases.product_catalog_loader import ProductCatalogLoader
from apprentice_api.infrastructure.db.engine import get_engine
from apprentice_api.infrastructure.db.repositories.access_history_repository import (
    SqlAccessHistoryRepository,
)
from apprentice_api.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from apprentice_api.infrastructure.db.repositories.expiry_cache_repository import (
    SqlExpiryCacheRepository,
)
from apprentice_api.infrastructure.db.repositories.orders_repository import SqlOrdersRepository
from apprentice_api.infrastructure.db.repositories.product_catalog_repository import (
    SqlProductCatalogRepository,
)
from apprentice_api.infrastructure.db.wp_tables import WpTables
from apprentice_api.shared.config import get_settings
from apprentice_api.shared.datetimes import site_now


def _get_db_engine():
    settings = get_settings()
    if not settings.database_dsn:
        raise HTTPException(status_code=500, detail="DATABASE_DSN is required.")
    return get_engine(settings.database_dsn)


def _get_tables() -> WpTables:
    return WpTables(get_settings().wp_table_prefix)


def _get_clock():
    return partial(site_now, get_settings().site_timezone)


def _get_catalog_loader(engine, tables: WpTables) -> ProductCatalogLoader:
    settings = get_settings()
    return ProductCatalogLoader(
        product_catalog_port=SqlProductCatalogRepository(
            engine,
            tables,
            restriction_meta_key=settings.product_restriction_meta_key,
            content_set_post_type=settings.content_set_post_type,
        )
    )


def get_accesses_by_users_use_case() -> GetAccessesByUsersUseCase:
    settings = get_settings()
    engine = _get_db_engine()
    tables = _get_tables()
    return GetAccessesByUsersUseCase(
        accounts_port=SqlAccountsRepository(engine, tables),
        access_history_port=SqlAccessHistoryRepository(engine, tables),
        orders_port=SqlOrdersRepository(engine, tables),
        expiry_cache_port=SqlExpiryCacheRepository(engine, tables),
        catalog_loader=_get_catalog_loader(engine, tables),
        clock=_get_clock(),
        max_user_ids=settings.max_user_ids,
        timezone=ZoneInfo(settings.site_timezone),
    )


def get_accesses_by_time_use_case() -> GetAccessesByTimeUseCase:
    settings = get_settings()
    engine = _get_db_engine()
    tables = _get_tables()
    return GetAccessesByTimeUseCase(
        access_history_port=SqlAccessHistoryRepository(engine, tables),
        expiry_cache_port=SqlExpiryCacheRepository(engine, tables),
        catalog_loader=_get_catalog_loader(engine, tables),
        clock=_get_clock(),
        timezone=ZoneInfo(settings.site_timezone),
    )


def get_product_course_map_use_case() -> GetProductCourseMapUseCase:
    engine = _get_db_engine()
    tables = _get_tables()
    return GetProductCourseMapUseCase(
        access_history_port=SqlAccessHistoryRepository(engine, tables),
        catalog_loader=_get_catalog_loader(engine, tables),
        clock=_get_clock(),
    )
