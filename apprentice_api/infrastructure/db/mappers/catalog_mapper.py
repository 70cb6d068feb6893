from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from apprentice_api.domain.entities.product import ContentSetDefinition


EXPIRY_META_KEY_PATTERN = re.compile(r"^tva_product_(\d+)_access_expiry$")


def map_row_to_content_set(row: Mapping[str, Any]) -> ContentSetDefinition:
    return ContentSetDefinition(
        post_id=int(row["post_id"]),
        product_id=int(row["product_id"]),
        product_name=str(row["product_name"]),
        post_content=row.get("post_content"),
    )


def product_id_from_expiry_meta_key(meta_key: str) -> int | None:
    match = EXPIRY_META_KEY_PATTERN.match(meta_key)
    if match is None:
        return None
    return int(match.group(1))


def map_expiry_meta_value(value: Any) -> str | None:
    if value is None:
        return None
    text_value = value.decode("utf-8") if isinstance(value, bytes) else str(value)
    return text_value if text_value != "" else None
