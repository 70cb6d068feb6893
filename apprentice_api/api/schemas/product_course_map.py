from __future__ import annotations

from pydantic import BaseModel

from apprentice_api.api.schemas.expiry import ExpiryPolicyResponse


class CourseResponse(BaseModel):
    course_id: int
    course_name: str


class ProductCoursesResponse(BaseModel):
    product_id: int
    product_name: str
    courses: list[CourseResponse]
    expiry: ExpiryPolicyResponse


class CoursePairResponse(BaseModel):
    product_id: int
    course_id: int


class DefinitionValidationResponse(BaseModel):
    missing_in_definition: list[CoursePairResponse]
    missing_in_history: list[CoursePairResponse]


class ProductCourseMapResponse(BaseModel):
    generated_at: str
    products: list[ProductCoursesResponse]
    validation: DefinitionValidationResponse
