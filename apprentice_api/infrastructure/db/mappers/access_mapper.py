from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from apprentice_api.domain.entities.access import AccessHistoryRow, OrderItemRow
from apprentice_api.domain.entities.product import CoursePair
from apprentice_api.shared.datetimes import parse_datetime


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return parse_datetime(str(value))


def _as_optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


def map_row_to_access_history_row(row: Mapping[str, Any]) -> AccessHistoryRow:
    return AccessHistoryRow(
        user_id=int(row["user_id"]),
        product_id=int(row["product_id"]),
        course_id=_as_optional_int(row.get("course_id")),
        status=int(row["status"]),
        source=str(row["source"]) if row.get("source") is not None else "",
        created=_as_datetime(row["created"]),
    )


def map_row_to_order_item(row: Mapping[str, Any]) -> OrderItemRow:
    return OrderItemRow(
        user_id=int(row["user_id"]),
        order_id=int(row["order_id"]),
        order_status=int(row["order_status"]),
        item_id=int(row["item_id"]),
        item_status=int(row["item_status"]),
        product_id=int(row["product_id"]),
        order_created_at=_as_datetime(row["order_created_at"]),
    )


def map_row_to_course_pair(row: Mapping[str, Any]) -> CoursePair:
    return CoursePair(product_id=int(row["product_id"]), course_id=int(row["course_id"]))
