from __future__ import annotations

from fastapi import APIRouter, Depends

from apprentice_api.api.auth import require_bearer_token
from apprentice_api.api.deps import get_product_course_map_use_case
from apprentice_api.api.schemas.expiry import expiry_policy_response
from apprentice_api.api.schemas.product_course_map import (
    CoursePairResponse,
    CourseResponse,
    DefinitionValidationResponse,
    ProductCourseMapResponse,
    ProductCoursesResponse,
)
from apprentice_api.application.use_cases.get_product_course_map import GetProductCourseMapUseCase
from apprentice_api.shared.datetimes import format_mysql_datetime

router = APIRouter()


@router.get("/apprentice/v1/product-course-map", response_model=ProductCourseMapResponse)
def get_product_course_map(
    _token: str = Depends(require_bearer_token),
    use_case: GetProductCourseMapUseCase = Depends(get_product_course_map_use_case),
):
    result = use_case.execute()
    return ProductCourseMapResponse(
        generated_at=format_mysql_datetime(result.generated_at),
        products=[
            ProductCoursesResponse(
                product_id=mapping.product_id,
                product_name=mapping.product_name,
                courses=[
                    CourseResponse(course_id=course.course_id, course_name=course.course_name)
                    for course in mapping.courses
                ],
                expiry=expiry_policy_response(mapping.expiry),
            )
            for mapping in result.products
        ],
        validation=DefinitionValidationResponse(
            missing_in_definition=[
                CoursePairResponse(product_id=pair.product_id, course_id=pair.course_id)
                for pair in result.validation.missing_in_definition
            ],
            missing_in_history=[
                CoursePairResponse(product_id=pair.product_id, course_id=pair.course_id)
                for pair in result.validation.missing_in_history
            ],
        ),
    )
