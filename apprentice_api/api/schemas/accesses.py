from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from apprentice_api.api.schemas.expiry import ExpiryPolicyResponse


class AccessesByUsersRequest(BaseModel):
    user_ids: Any = Field(None, description="Lista de ids de usuarios WordPress (max. 100 distintos).")


class AccessesSinceRequest(BaseModel):
    since: Any = Field(None, description="Inicio da janela (data ou data/hora).")
    until: Any = Field(None, description="Fim da janela; padrao e o horario atual do site.")


class AccessEventResponse(BaseModel):
    user_id: int | None = None
    product_id: int
    course_id: int | None = None
    created_at: str
    status: int
    source: str
    expires_at: str | None = None
    expiry: ExpiryPolicyResponse
    validation_error: str | None = None


class CurrentAccessRecordResponse(BaseModel):
    order_id: int
    product_id: int
    product_name: str
    course_id: int
    course_name: str
    order_created_at: str
    status: str
    expires_at: str | None = None
    expiry: ExpiryPolicyResponse
    validation_error: str | None = None


class CurrentAccessResponse(BaseModel):
    active: list[CurrentAccessRecordResponse]
    outdated: list[CurrentAccessRecordResponse]


class UserAccessesResponse(BaseModel):
    user_id: int
    status: str
    email: str | None = None
    roles: list[str] | None = None
    current_access: CurrentAccessResponse | None = None
    accesses: list[AccessEventResponse] | None = None


class AccessesSinceResponse(BaseModel):
    mode: str
    since: str
    until: str
    events: list[AccessEventResponse]
