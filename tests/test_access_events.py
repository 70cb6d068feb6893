from __future__ import annotations

from datetime import datetime

from apprentice_api.domain.entities.access import AccessHistoryRow
from apprentice_api.domain.entities.expiry import ExpiryDuration, ExpiryPolicy
from apprentice_api.domain.services.access_events import expiry_cache_key, transform_access_history


AFTER_PURCHASE = ExpiryPolicy.after_purchase(ExpiryDuration(number=1, unit="years"))


def _row(user_id: int, product_id: int, created: datetime) -> AccessHistoryRow:
    return AccessHistoryRow(
        user_id=user_id,
        product_id=product_id,
        course_id=11,
        status=1,
        source="order",
        created=created,
    )


def test_single_user_context_keys_cache_by_product_and_drops_user_id():
    rows = [_row(1, 9, datetime(2024, 1, 5, 10, 0, 0))]

    events = transform_access_history(
        history_rows=rows,
        policies_by_product={9: AFTER_PURCHASE},
        cached_expiry_by_key={9: "2025-01-05 10:00:00"},
        include_user_id=False,
    )

    assert len(events) == 1
    assert events[0].user_id is None
    assert events[0].expires_at == "2025-01-05 10:00:00"
    assert events[0].validation_error is None
    assert events[0].created_at == datetime(2024, 1, 5, 10, 0, 0)


def test_multi_user_context_keys_cache_by_user_and_product():
    rows = [
        _row(1, 9, datetime(2024, 1, 5, 10, 0, 0)),
        _row(2, 9, datetime(2024, 1, 6, 10, 0, 0)),
    ]

    events = transform_access_history(
        history_rows=rows,
        policies_by_product={9: AFTER_PURCHASE},
        cached_expiry_by_key={"1_9": "2025-01-05 10:00:00"},
        include_user_id=True,
    )

    assert [event.user_id for event in events] == [1, 2]
    assert events[0].expires_at == "2025-01-05 10:00:00"
    assert events[1].expires_at is None
    assert events[1].validation_error is not None


def test_unknown_product_falls_back_to_not_configured():
    events = transform_access_history(
        history_rows=[_row(1, 5, datetime(2024, 1, 1))],
        policies_by_product={},
        cached_expiry_by_key={},
        include_user_id=False,
    )

    assert events[0].expiry.mode == "not_configured"
    assert events[0].expires_at is None


def test_expiry_cache_key():
    assert expiry_cache_key(user_id=3, product_id=9, include_user_id=True) == "3_9"
    assert expiry_cache_key(user_id=3, product_id=9, include_user_id=False) == 9
