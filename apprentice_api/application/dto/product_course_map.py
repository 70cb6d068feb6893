from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from apprentice_api.domain.entities.product import DefinitionValidationReport, ProductCourseMapping


@dataclass(frozen=True)
class ProductCourseMapOutput:
    generated_at: datetime
    products: list[ProductCourseMapping]
    validation: DefinitionValidationReport
