from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from apprentice_api.domain.entities.expiry import ExpiryPolicy
from apprentice_api.domain.entities.product import ContentSetDefinition, Course, ProductCourseMapping
from apprentice_api.domain.services.access_events import policy_for_product
from apprentice_api.shared.php_serialization import maybe_unserialize, php_array_values


COURSE_TAXONOMY = "tva_courses"


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def extract_course_ids(post_content: Any) -> list[int]:
    rules = php_array_values(maybe_unserialize(post_content))
    if rules is None:
        return []

    course_ids: list[int] = []
    for rule in rules:
        if not isinstance(rule, Mapping):
            continue
        if rule.get("content_type") != "term" or rule.get("content") != COURSE_TAXONOMY:
            continue
        values = php_array_values(rule.get("value"))
        if values is None:
            continue
        for raw_id in values:
            course_id = _as_int(raw_id)
            if course_id is not None and course_id not in course_ids:
                course_ids.append(course_id)
    return course_ids


def build_product_course_mappings(
    *,
    definitions: Iterable[ContentSetDefinition],
    course_ids_by_post: Mapping[int, list[int]],
    course_names: Mapping[int, str],
    policies_by_product: Mapping[int, ExpiryPolicy],
) -> list[ProductCourseMapping]:
    names: dict[int, str] = {}
    courses: dict[int, list[Course]] = {}

    for definition in definitions:
        post_course_ids = course_ids_by_post.get(definition.post_id, [])
        if not post_course_ids:
            continue
        # Ids without a terms row are dropped, but the product stays listed
        # so a broken definition is visible with an empty course list.
        resolved = [
            Course(course_id=course_id, course_name=course_names[course_id])
            for course_id in post_course_ids
            if course_id in course_names
        ]
        names.setdefault(definition.product_id, definition.product_name)
        merged = courses.setdefault(definition.product_id, [])
        known = {course.course_id for course in merged}
        merged.extend(course for course in resolved if course.course_id not in known)

    return [
        ProductCourseMapping(
            product_id=product_id,
            product_name=names[product_id],
            courses=product_courses,
            expiry=policy_for_product(policies_by_product, product_id),
        )
        for product_id, product_courses in courses.items()
    ]
