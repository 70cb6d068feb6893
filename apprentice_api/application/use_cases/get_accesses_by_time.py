from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Any

from apprentice_api.application.dto.accesses import GetAccessesByTimeInput, GetAccessesByTimeOutput
from apprentice_api.application.ports.access_history_port import AccessHistoryPort
from apprentice_api.application.ports.expiry_cache_port import ExpiryCachePort
from apprentice_api.application.use_cases.product_catalog_loader import ProductCatalogLoader
from apprentice_api.domain.exceptions import (
    InvalidAccessWindowError,
    InvalidSinceError,
    InvalidUntilError,
    MissingSinceError,
)
from apprentice_api.domain.services.access_events import expiry_cache_key, transform_access_history
from apprentice_api.shared.datetimes import end_of_day, is_date_only, parse_datetime


logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class GetAccessesByTimeUseCase:
    def __init__(
        self,
        *,
        access_history_port: AccessHistoryPort,
        expiry_cache_port: ExpiryCachePort,
        catalog_loader: ProductCatalogLoader,
        clock: Callable[[], datetime],
        timezone: tzinfo | None = None,
    ):
        self._access_history_port = access_history_port
        self._expiry_cache_port = expiry_cache_port
        self._catalog_loader = catalog_loader
        self._clock = clock
        self._timezone = timezone

    def _resolve_window(self, command: GetAccessesByTimeInput) -> tuple[datetime, datetime]:
        if _is_blank(command.since):
            raise MissingSinceError('The "since" parameter is required.')
        if not isinstance(command.since, str):
            raise InvalidSinceError('The "since" parameter must be a valid date or datetime string.')
        try:
            since = parse_datetime(command.since, timezone=self._timezone)
        except ValueError as exc:
            raise InvalidSinceError('The "since" parameter must be a valid date or datetime string.') from exc

        if command.has_until:
            if _is_blank(command.until):
                raise InvalidUntilError('The "until" parameter cannot be empty when provided.')
            if not isinstance(command.until, str):
                raise InvalidUntilError('The "until" parameter must be a valid date or datetime string.')
            try:
                until = parse_datetime(command.until, timezone=self._timezone)
            except ValueError as exc:
                raise InvalidUntilError(
                    'The "until" parameter must be a valid date or datetime string.'
                ) from exc
            if is_date_only(command.until):
                until = end_of_day(until)
        else:
            until = self._clock()

        if until <= since:
            raise InvalidAccessWindowError('The "until" parameter must be later than "since".')
        return since, until

    def execute(self, command: GetAccessesByTimeInput) -> GetAccessesByTimeOutput:
        since, until = self._resolve_window(command)

        rows = self._access_history_port.list_history_between(since=since, until=until)
        user_ids = sorted({row.user_id for row in rows})
        product_ids = sorted({row.product_id for row in rows})

        policies = self._catalog_loader.load_policies(product_ids=product_ids)
        cached_expiry_by_key: dict[int | str, str | None] = {}
        if rows:
            cached = self._expiry_cache_port.get_cached_expiries(
                user_ids=user_ids,
                product_ids=product_ids,
            )
            for user_id, expiries in cached.items():
                for product_id, expiry in expiries.items():
                    key = expiry_cache_key(user_id=user_id, product_id=product_id, include_user_id=True)
                    cached_expiry_by_key[key] = expiry

        events = transform_access_history(
            history_rows=rows,
            policies_by_product=policies,
            cached_expiry_by_key=cached_expiry_by_key,
            include_user_id=True,
        )

        integrity_issues = sum(1 for event in events if event.validation_error)
        logger.info(
            "get_accesses_by_time: since=%s until=%s events=%s users=%s",
            since,
            until,
            len(events),
            len(user_ids),
        )
        if integrity_issues:
            logger.warning("get_accesses_by_time: missing_cached_expiry count=%s", integrity_issues)
        return GetAccessesByTimeOutput(since=since, until=until, events=events)
