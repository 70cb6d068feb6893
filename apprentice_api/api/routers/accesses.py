from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from apprentice_api.api.auth import require_bearer_token
from apprentice_api.api.deps import get_accesses_by_time_use_case, get_accesses_by_users_use_case
from apprentice_api.api.schemas.accesses import (
    AccessesByUsersRequest,
    AccessesSinceRequest,
    AccessesSinceResponse,
    AccessEventResponse,
    CurrentAccessRecordResponse,
    CurrentAccessResponse,
    UserAccessesResponse,
)
from apprentice_api.api.schemas.expiry import expiry_policy_response
from apprentice_api.application.dto.accesses import GetAccessesByTimeInput, GetAccessesByUsersInput
from apprentice_api.application.use_cases.get_accesses_by_time import GetAccessesByTimeUseCase
from apprentice_api.application.use_cases.get_accesses_by_users import GetAccessesByUsersUseCase
from apprentice_api.domain.entities.access import AccessEvent, CurrentAccessRecord
from apprentice_api.domain.exceptions import AccessInputError
from apprentice_api.shared.datetimes import format_mysql_datetime

router = APIRouter()


def _event_response(event: AccessEvent) -> AccessEventResponse:
    fields = {
        "product_id": event.product_id,
        "course_id": event.course_id,
        "created_at": format_mysql_datetime(event.created_at),
        "status": event.status,
        "source": event.source,
        "expires_at": event.expires_at,
        "expiry": expiry_policy_response(event.expiry),
    }
    if event.user_id is not None:
        fields["user_id"] = event.user_id
    if event.validation_error is not None:
        fields["validation_error"] = event.validation_error
    return AccessEventResponse(**fields)


def _record_response(record: CurrentAccessRecord) -> CurrentAccessRecordResponse:
    fields = {
        "order_id": record.order_id,
        "product_id": record.product_id,
        "product_name": record.product_name,
        "course_id": record.course_id,
        "course_name": record.course_name,
        "order_created_at": format_mysql_datetime(record.order_created_at),
        "status": record.status,
        "expires_at": record.expires_at,
        "expiry": expiry_policy_response(record.expiry),
    }
    if record.validation_error is not None:
        fields["validation_error"] = record.validation_error
    return CurrentAccessRecordResponse(**fields)


def _input_error(exc: AccessInputError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": exc.code, "message": str(exc)})


@router.post(
    "/apprentice/v1/accesses",
    response_model=list[UserAccessesResponse],
    response_model_exclude_unset=True,
)
def get_accesses_by_users(
    req: AccessesByUsersRequest,
    _token: str = Depends(require_bearer_token),
    use_case: GetAccessesByUsersUseCase = Depends(get_accesses_by_users_use_case),
):
    try:
        results = use_case.execute(GetAccessesByUsersInput(user_ids=req.user_ids))
    except AccessInputError as exc:
        raise _input_error(exc) from exc

    items: list[UserAccessesResponse] = []
    for result in results:
        if result.status == "not_found":
            items.append(UserAccessesResponse(user_id=result.user_id, status=result.status))
            continue
        current = result.current_access
        items.append(
            UserAccessesResponse(
                user_id=result.user_id,
                status=result.status,
                email=result.email,
                roles=result.roles,
                current_access=CurrentAccessResponse(
                    active=[_record_response(record) for record in current.active],
                    outdated=[_record_response(record) for record in current.outdated],
                ),
                accesses=[_event_response(event) for event in result.accesses],
            )
        )
    return items


@router.post(
    "/apprentice/v1/accesses/since",
    response_model=AccessesSinceResponse,
    response_model_exclude_unset=True,
)
def get_accesses_since(
    req: AccessesSinceRequest,
    _token: str = Depends(require_bearer_token),
    use_case: GetAccessesByTimeUseCase = Depends(get_accesses_by_time_use_case),
):
    try:
        result = use_case.execute(
            GetAccessesByTimeInput(
                since=req.since,
                until=req.until,
                has_until="until" in req.model_fields_set,
            )
        )
    except AccessInputError as exc:
        raise _input_error(exc) from exc

    return AccessesSinceResponse(
        mode=result.mode,
        since=format_mysql_datetime(result.since),
        until=format_mysql_datetime(result.until),
        events=[_event_response(event) for event in result.events],
    )
