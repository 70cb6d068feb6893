from __future__ import annotations

from dataclasses import dataclass

from apprentice_api.domain.entities.expiry import ExpiryPolicy


@dataclass(frozen=True)
class Course:
    course_id: int
    course_name: str


@dataclass(frozen=True)
class ContentSetDefinition:
    post_id: int
    product_id: int
    product_name: str
    post_content: str | None


@dataclass(frozen=True)
class ProductCourseMapping:
    product_id: int
    product_name: str
    courses: list[Course]
    expiry: ExpiryPolicy


@dataclass(frozen=True)
class CoursePair:
    product_id: int
    course_id: int


@dataclass(frozen=True)
class DefinitionValidationReport:
    missing_in_definition: list[CoursePair]
    missing_in_history: list[CoursePair]
