from __future__ import annotations

from datetime import datetime

import pytest

from apprentice_api.application.dto.accesses import GetAccessesByUsersInput
from apprentice_api.application.use_cases.get_accesses_by_users import (
    GetAccessesByUsersUseCase,
    normalize_user_ids,
)
from apprentice_api.application.use_cases.product_catalog_loader import ProductCatalogLoader
from apprentice_api.domain.entities.access import AccessHistoryRow, OrderItemRow
from apprentice_api.domain.entities.account import Account
from apprentice_api.domain.entities.product import ContentSetDefinition
from apprentice_api.domain.exceptions import InvalidUserIdsError, TooManyUserIdsError


NOW = datetime(2024, 7, 1, 12, 0, 0)

SPECIFIC_TIME_BLOB = (
    'a:1:{s:6:"expiry";a:3:{s:7:"enabled";i:1;s:4:"cond";s:13:"specific_time";'
    's:8:"datetime";s:19:"2099-01-01 00:00:00";}}'
)
AFTER_PURCHASE_BLOB = (
    'a:1:{s:6:"expiry";a:3:{s:7:"enabled";i:1;s:4:"cond";s:14:"after_purchase";'
    's:17:"purchase_duration";a:2:{s:6:"number";i:30;s:4:"unit";s:4:"days";}}}'
)
COURSES_11_12 = (
    'a:1:{i:0;a:3:{s:12:"content_type";s:4:"term";s:7:"content";s:11:"tva_courses";'
    's:5:"value";a:2:{i:0;i:11;i:1;i:12;}}}'
)
COURSES_20 = (
    'a:1:{i:0;a:3:{s:12:"content_type";s:4:"term";s:7:"content";s:11:"tva_courses";'
    's:5:"value";a:1:{i:0;i:20;}}}'
)


class FakeAccountsPort:
    def __init__(self, accounts: list[Account]):
        self._accounts = accounts
        self.calls: list[list[int]] = []

    def list_accounts_by_ids(self, *, user_ids: list[int]) -> list[Account]:
        self.calls.append(list(user_ids))
        return [account for account in self._accounts if account.user_id in user_ids]


class FakeAccessHistoryPort:
    def __init__(self, rows: list[AccessHistoryRow]):
        self._rows = rows
        self.calls = 0

    def list_history_for_users(self, *, user_ids: list[int]) -> list[AccessHistoryRow]:
        self.calls += 1
        return [row for row in self._rows if row.user_id in user_ids]


class FakeOrdersPort:
    def __init__(self, items: list[OrderItemRow]):
        self._items = items
        self.calls = 0

    def list_order_items_for_users(self, *, user_ids: list[int]) -> list[OrderItemRow]:
        self.calls += 1
        return [item for item in self._items if item.user_id in user_ids]


class FakeExpiryCachePort:
    def __init__(self, expiries: dict[int, dict[int, str | None]]):
        self._expiries = expiries
        self.calls = 0

    def get_cached_expiries(self, *, user_ids, product_ids=None):
        self.calls += 1
        return {
            user_id: {
                product_id: value
                for product_id, value in self._expiries.get(user_id, {}).items()
                if product_ids is None or product_id in product_ids
            }
            for user_id in user_ids
            if user_id in self._expiries
        }


class FakeProductCatalogPort:
    def __init__(self):
        self.blobs = {7: SPECIFIC_TIME_BLOB, 9: AFTER_PURCHASE_BLOB}
        self.content_sets = [
            ContentSetDefinition(post_id=70, product_id=7, product_name="Bundle", post_content=COURSES_11_12),
            ContentSetDefinition(post_id=90, product_id=9, product_name="Mentoring", post_content=COURSES_20),
        ]
        self.names = {11: "Intro", 12: "Advanced", 20: "Mentoring Calls"}
        self.policy_calls = 0

    def get_policy_blobs(self, *, product_ids):
        self.policy_calls += 1
        return {product_id: self.blobs[product_id] for product_id in product_ids if product_id in self.blobs}

    def list_content_sets(self, *, product_ids=None):
        return [
            definition
            for definition in self.content_sets
            if product_ids is None or definition.product_id in product_ids
        ]

    def get_term_names(self, *, term_ids):
        return {term_id: self.names[term_id] for term_id in term_ids if term_id in self.names}


def _order_item(order_id: int, product_id: int, *, order_status: int = 1) -> OrderItemRow:
    return OrderItemRow(
        user_id=1,
        order_id=order_id,
        order_status=order_status,
        item_id=order_id * 10,
        item_status=1,
        product_id=product_id,
        order_created_at=datetime(2024, 1, 1, 9, 0, 0),
    )


def _build_use_case(*, order_items=None, history=None, expiries=None):
    accounts = FakeAccountsPort([Account(user_id=1, email="ana@example.com", roles=["subscriber"])])
    history_port = FakeAccessHistoryPort(
        history
        if history is not None
        else [
            AccessHistoryRow(
                user_id=1,
                product_id=7,
                course_id=11,
                status=1,
                source="order",
                created=datetime(2024, 1, 1, 9, 0, 5),
            )
        ]
    )
    orders = FakeOrdersPort(order_items if order_items is not None else [])
    cache = FakeExpiryCachePort(expiries or {})
    catalog = FakeProductCatalogPort()
    use_case = GetAccessesByUsersUseCase(
        accounts_port=accounts,
        access_history_port=history_port,
        orders_port=orders,
        expiry_cache_port=cache,
        catalog_loader=ProductCatalogLoader(product_catalog_port=catalog),
        clock=lambda: NOW,
    )
    return use_case, accounts, history_port, orders, cache, catalog


def test_duplicate_ids_return_one_item_per_distinct_user():
    use_case, accounts, *_ = _build_use_case()

    results = use_case.execute(GetAccessesByUsersInput(user_ids=[1, 1, 2]))

    assert [(result.user_id, result.status) for result in results] == [(1, "found"), (2, "not_found")]
    assert results[0].email == "ana@example.com"
    assert results[0].roles == ["subscriber"]
    assert results[1].current_access is None
    assert accounts.calls == [[1, 2]]


def test_active_and_revoked_orders_of_same_product():
    use_case, *_ = _build_use_case(order_items=[_order_item(100, 7), _order_item(101, 7, order_status=4)])

    result = use_case.execute(GetAccessesByUsersInput(user_ids=[1]))[0]

    active = result.current_access.active
    outdated = result.current_access.outdated
    assert [(record.order_id, record.course_id) for record in active] == [(100, 11), (100, 12)]
    assert all(record.expires_at == "2099-01-01 00:00:00" for record in active)
    assert [(record.order_id, record.status) for record in outdated] == [(101, "revoked"), (101, "revoked")]
    assert active[0].product_name == "Bundle"
    assert active[1].course_name == "Advanced"


def test_history_events_resolve_expiry_without_user_id():
    use_case, *_ = _build_use_case()

    result = use_case.execute(GetAccessesByUsersInput(user_ids=[1]))[0]

    assert len(result.accesses) == 1
    event = result.accesses[0]
    assert event.user_id is None
    assert event.expires_at == "2099-01-01 00:00:00"
    assert event.expiry.mode == "specific_time"


def test_after_purchase_uses_cached_expiry_or_reports_it_missing():
    history = [
        AccessHistoryRow(
            user_id=1,
            product_id=9,
            course_id=20,
            status=1,
            source="order",
            created=datetime(2024, 5, 1, 9, 0, 0),
        )
    ]
    use_case, *_ = _build_use_case(order_items=[_order_item(200, 9)], history=history)

    missing = use_case.execute(GetAccessesByUsersInput(user_ids=[1]))[0]

    assert missing.accesses[0].validation_error is not None
    assert missing.current_access.active[0].validation_error is not None

    use_case, *_ = _build_use_case(
        order_items=[_order_item(200, 9)],
        history=history,
        expiries={1: {9: "2024-06-01 00:00:00"}},
    )

    cached = use_case.execute(GetAccessesByUsersInput(user_ids=[1]))[0]

    assert cached.accesses[0].expires_at == "2024-06-01 00:00:00"
    assert cached.accesses[0].validation_error is None
    assert cached.current_access.active == []
    assert cached.current_access.outdated[0].status == "expired"


def test_lookups_are_batched_once_per_request():
    use_case, accounts, history_port, orders, cache, catalog = _build_use_case(
        order_items=[_order_item(100, 7), _order_item(200, 9)]
    )

    use_case.execute(GetAccessesByUsersInput(user_ids=[1, 2, 3]))

    assert len(accounts.calls) == 1
    assert history_port.calls == 1
    assert orders.calls == 1
    assert cache.calls == 1
    assert catalog.policy_calls == 1


def test_unknown_users_skip_data_lookups():
    use_case, _, history_port, orders, cache, _ = _build_use_case()

    results = use_case.execute(GetAccessesByUsersInput(user_ids=[5, 6]))

    assert [result.status for result in results] == ["not_found", "not_found"]
    assert history_port.calls == 0
    assert orders.calls == 0
    assert cache.calls == 0


def test_normalize_user_ids_coerces_and_dedups():
    assert normalize_user_ids([3, "2", " 3 ", 1]) == [3, 2, 1]


@pytest.mark.parametrize("raw", [None, [], "1,2", [1, "x"], [True], [1.5], ["--5"]])
def test_normalize_user_ids_rejects_invalid_input(raw):
    with pytest.raises(InvalidUserIdsError):
        normalize_user_ids(raw)


def test_normalize_user_ids_limits_distinct_ids():
    assert len(normalize_user_ids(list(range(100)) + [0, 1])) == 100
    with pytest.raises(TooManyUserIdsError):
        normalize_user_ids(list(range(101)))
