from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from apprentice_api.application.dto.product_course_map import ProductCourseMapOutput
from apprentice_api.application.ports.access_history_port import AccessHistoryPort
from apprentice_api.application.use_cases.product_catalog_loader import ProductCatalogLoader
from apprentice_api.domain.services.definition_validation import (
    cross_validate,
    definition_pairs_from_mappings,
)


logger = logging.getLogger(__name__)


class GetProductCourseMapUseCase:
    def __init__(
        self,
        *,
        access_history_port: AccessHistoryPort,
        catalog_loader: ProductCatalogLoader,
        clock: Callable[[], datetime],
    ):
        self._access_history_port = access_history_port
        self._catalog_loader = catalog_loader
        self._clock = clock

    def execute(self) -> ProductCourseMapOutput:
        mappings = self._catalog_loader.load_mappings()
        report = cross_validate(
            definition_pairs=definition_pairs_from_mappings(mappings),
            history_pairs=self._access_history_port.list_distinct_course_pairs(),
        )
        logger.info(
            "get_product_course_map: products=%s missing_in_definition=%s missing_in_history=%s",
            len(mappings),
            len(report.missing_in_definition),
            len(report.missing_in_history),
        )
        return ProductCourseMapOutput(
            generated_at=self._clock(),
            products=mappings,
            validation=report,
        )
