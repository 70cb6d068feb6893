from __future__ import annotations

from collections.abc import Iterable

from apprentice_api.domain.entities.product import (
    CoursePair,
    DefinitionValidationReport,
    ProductCourseMapping,
)


def definition_pairs_from_mappings(mappings: Iterable[ProductCourseMapping]) -> list[CoursePair]:
    pairs: dict[CoursePair, None] = {}
    for mapping in mappings:
        for course in mapping.courses:
            pairs[CoursePair(product_id=mapping.product_id, course_id=course.course_id)] = None
    return list(pairs)


def cross_validate(
    *,
    definition_pairs: Iterable[CoursePair],
    history_pairs: Iterable[CoursePair],
) -> DefinitionValidationReport:
    # dict keys keep insertion order, which is the order reported back.
    definition = dict.fromkeys(definition_pairs)
    history = dict.fromkeys(history_pairs)
    return DefinitionValidationReport(
        missing_in_definition=[pair for pair in history if pair not in definition],
        missing_in_history=[pair for pair in definition if pair not in history],
    )
