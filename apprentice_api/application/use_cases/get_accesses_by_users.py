from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Any

from apprentice_api.application.dto.accesses import GetAccessesByUsersInput, UserAccessesOutput
from apprentice_api.application.ports.access_history_port import AccessHistoryPort
from apprentice_api.application.ports.accounts_port import AccountsPort
from apprentice_api.application.ports.expiry_cache_port import ExpiryCachePort
from apprentice_api.application.ports.orders_port import OrdersPort
from apprentice_api.application.use_cases.product_catalog_loader import ProductCatalogLoader
from apprentice_api.domain.entities.access import AccessHistoryRow, OrderItemRow
from apprentice_api.domain.entities.expiry import ExpiryPolicy
from apprentice_api.domain.entities.product import ProductCourseMapping
from apprentice_api.domain.exceptions import InvalidUserIdsError, TooManyUserIdsError
from apprentice_api.domain.services.access_events import transform_access_history
from apprentice_api.domain.services.current_access import evaluate_current_access


logger = logging.getLogger(__name__)

DEFAULT_MAX_USER_IDS = 100
_INTEGER = re.compile(r"^-?\d+$")


def _coerce_user_id(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidUserIdsError("user_ids must contain only integers.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER.match(value.strip()):
        return int(value.strip())
    raise InvalidUserIdsError("user_ids must contain only integers.")


def normalize_user_ids(raw: Any, *, max_user_ids: int = DEFAULT_MAX_USER_IDS) -> list[int]:
    if not isinstance(raw, list) or not raw:
        raise InvalidUserIdsError("user_ids must be a non-empty array.")
    user_ids = list(dict.fromkeys(_coerce_user_id(value) for value in raw))
    if len(user_ids) > max_user_ids:
        raise TooManyUserIdsError(f"Maximum of {max_user_ids} user_ids allowed per request.")
    return user_ids


class GetAccessesByUsersUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        access_history_port: AccessHistoryPort,
        orders_port: OrdersPort,
        expiry_cache_port: ExpiryCachePort,
        catalog_loader: ProductCatalogLoader,
        clock: Callable[[], datetime],
        max_user_ids: int = DEFAULT_MAX_USER_IDS,
        timezone: tzinfo | None = None,
    ):
        self._accounts_port = accounts_port
        self._access_history_port = access_history_port
        self._orders_port = orders_port
        self._expiry_cache_port = expiry_cache_port
        self._catalog_loader = catalog_loader
        self._clock = clock
        self._max_user_ids = max_user_ids
        self._timezone = timezone

    def execute(self, command: GetAccessesByUsersInput) -> list[UserAccessesOutput]:
        user_ids = normalize_user_ids(command.user_ids, max_user_ids=self._max_user_ids)

        accounts = {
            account.user_id: account
            for account in self._accounts_port.list_accounts_by_ids(user_ids=user_ids)
        }
        found_ids = [user_id for user_id in user_ids if user_id in accounts]

        history_by_user: dict[int, list[AccessHistoryRow]] = defaultdict(list)
        items_by_user: dict[int, list[OrderItemRow]] = defaultdict(list)
        policies: dict[int, ExpiryPolicy] = {}
        mappings: dict[int, ProductCourseMapping] = {}
        cached: dict[int, dict[int, str | None]] = {}

        if found_ids:
            history = self._access_history_port.list_history_for_users(user_ids=found_ids)
            order_items = self._orders_port.list_order_items_for_users(user_ids=found_ids)
            for row in history:
                history_by_user[row.user_id].append(row)
            for item in order_items:
                items_by_user[item.user_id].append(item)

            ordered_product_ids = {item.product_id for item in order_items}
            product_ids = sorted({row.product_id for row in history} | ordered_product_ids)
            policies = self._catalog_loader.load_policies(product_ids=product_ids)
            mappings = {
                mapping.product_id: mapping
                for mapping in self._catalog_loader.load_mappings(
                    product_ids=ordered_product_ids,
                    policies_by_product=policies,
                )
            }
            if product_ids:
                cached = self._expiry_cache_port.get_cached_expiries(
                    user_ids=found_ids,
                    product_ids=product_ids,
                )

        now = self._clock()
        results: list[UserAccessesOutput] = []
        integrity_issues = 0
        for user_id in user_ids:
            account = accounts.get(user_id)
            if account is None:
                results.append(UserAccessesOutput(user_id=user_id, status="not_found"))
                continue

            user_cache = cached.get(user_id, {})
            events = transform_access_history(
                history_rows=history_by_user.get(user_id, []),
                policies_by_product=policies,
                cached_expiry_by_key=user_cache,
                include_user_id=False,
            )
            current = evaluate_current_access(
                user_id=user_id,
                order_items=items_by_user.get(user_id, []),
                mappings_by_product=mappings,
                policies_by_product=policies,
                cached_expiry_by_product=user_cache,
                now=now,
                timezone=self._timezone,
            )
            integrity_issues += sum(1 for event in events if event.validation_error)
            integrity_issues += sum(
                1 for record in current.active + current.outdated if record.validation_error
            )
            results.append(
                UserAccessesOutput(
                    user_id=user_id,
                    status="found",
                    email=account.email,
                    roles=account.roles,
                    current_access=current,
                    accesses=events,
                )
            )

        logger.info(
            "get_accesses_by_users: requested=%s found=%s",
            len(user_ids),
            len(found_ids),
        )
        if integrity_issues:
            logger.warning(
                "get_accesses_by_users: missing_cached_expiry count=%s",
                integrity_issues,
            )
        return results
