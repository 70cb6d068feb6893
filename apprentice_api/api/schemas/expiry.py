from __future__ import annotations

from pydantic import BaseModel, Field

from apprentice_api.domain.entities.expiry import ExpiryPolicy


class ExpiryDurationResponse(BaseModel):
    number: int
    unit: str


class ExpiryPolicyResponse(BaseModel):
    mode: str = Field(..., description="not_configured|unlimited|specific_time|after_purchase|other.")
    date: str | None = Field(None, description="Fixed expiry date for specific_time policies.")
    duration: ExpiryDurationResponse | None = Field(None, description="Duration for after_purchase policies.")
    message: str | None = Field(None, description="Diagnostic for not_configured and other policies.")


def expiry_policy_response(policy: ExpiryPolicy) -> ExpiryPolicyResponse:
    duration = None
    if policy.duration is not None:
        duration = ExpiryDurationResponse(number=policy.duration.number, unit=policy.duration.unit)
    return ExpiryPolicyResponse(
        mode=policy.mode,
        date=policy.date,
        duration=duration,
        message=policy.message,
    )
