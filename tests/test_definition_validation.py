from __future__ import annotations

from apprentice_api.domain.entities.expiry import ExpiryPolicy
from apprentice_api.domain.entities.product import Course, CoursePair, ProductCourseMapping
from apprentice_api.domain.services.definition_validation import (
    cross_validate,
    definition_pairs_from_mappings,
)


def test_cross_validate_reports_both_directions_in_input_order():
    definition = [CoursePair(7, 11), CoursePair(7, 12), CoursePair(8, 20)]
    history = [CoursePair(9, 30), CoursePair(7, 11), CoursePair(5, 1)]

    report = cross_validate(definition_pairs=definition, history_pairs=history)

    assert report.missing_in_definition == [CoursePair(9, 30), CoursePair(5, 1)]
    assert report.missing_in_history == [CoursePair(7, 12), CoursePair(8, 20)]


def test_cross_validate_is_idempotent():
    definition = [CoursePair(7, 11), CoursePair(7, 12)]
    history = [CoursePair(7, 12), CoursePair(7, 13)]

    first = cross_validate(definition_pairs=definition, history_pairs=history)
    second = cross_validate(definition_pairs=definition, history_pairs=history)

    assert first == second


def test_matching_sets_produce_empty_report():
    pairs = [CoursePair(7, 11)]

    report = cross_validate(definition_pairs=pairs, history_pairs=list(pairs))

    assert report.missing_in_definition == []
    assert report.missing_in_history == []


def test_definition_pairs_from_mappings_dedups():
    mappings = [
        ProductCourseMapping(
            product_id=7,
            product_name="Bundle",
            courses=[Course(11, "Intro"), Course(12, "Advanced")],
            expiry=ExpiryPolicy.unlimited(),
        ),
        ProductCourseMapping(
            product_id=8,
            product_name="Solo",
            courses=[Course(11, "Intro")],
            expiry=ExpiryPolicy.unlimited(),
        ),
    ]

    assert definition_pairs_from_mappings(mappings) == [
        CoursePair(7, 11),
        CoursePair(7, 12),
        CoursePair(8, 11),
    ]
