from __future__ import annotations

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

_TABLE_PREFIX = re.compile(r"^[A-Za-z0-9_]+$")


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    database_dsn: str
    wp_table_prefix: str
    site_timezone: str
    max_user_ids: int
    product_restriction_meta_key: str
    content_set_post_type: str
    log_level: str


def get_settings() -> Settings:
    table_prefix = _env("WP_TABLE_PREFIX", "wp_")
    if not _TABLE_PREFIX.match(table_prefix):
        raise ValueError("WP_TABLE_PREFIX may only contain letters, digits and underscores.")
    return Settings(
        database_dsn=_env("DATABASE_DSN", ""),
        wp_table_prefix=table_prefix,
        site_timezone=_env("SITE_TIMEZONE", "UTC"),
        max_user_ids=int(_env("MAX_USER_IDS", "100")),
        product_restriction_meta_key=_env("PRODUCT_RESTRICTION_META_KEY", "tva_access_restriction"),
        content_set_post_type=_env("CONTENT_SET_POST_TYPE", "tvd_content_set"),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
