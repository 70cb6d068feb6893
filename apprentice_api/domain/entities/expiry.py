from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ExpiryMode = Literal[
    "not_configured",
    "unlimited",
    "specific_time",
    "after_purchase",
    "other",
]


@dataclass(frozen=True)
class ExpiryDuration:
    number: int
    unit: str


@dataclass(frozen=True)
class ExpiryPolicy:
    mode: ExpiryMode
    date: str | None = None
    duration: ExpiryDuration | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if self.mode == "specific_time":
            if not self.date or self.duration is not None:
                raise ValueError("specific_time policy requires a date and no duration.")
        elif self.mode == "after_purchase":
            if self.duration is None or self.date is not None:
                raise ValueError("after_purchase policy requires a duration and no date.")
        elif self.date is not None or self.duration is not None:
            raise ValueError(f"{self.mode} policy cannot carry a date or a duration.")

    @classmethod
    def not_configured(cls, message: str) -> ExpiryPolicy:
        return cls(mode="not_configured", message=message)

    @classmethod
    def unlimited(cls) -> ExpiryPolicy:
        return cls(mode="unlimited")

    @classmethod
    def specific_time(cls, date: str) -> ExpiryPolicy:
        return cls(mode="specific_time", date=date)

    @classmethod
    def after_purchase(cls, duration: ExpiryDuration) -> ExpiryPolicy:
        return cls(mode="after_purchase", duration=duration)

    @classmethod
    def other(cls, message: str) -> ExpiryPolicy:
        return cls(mode="other", message=message)


@dataclass(frozen=True)
class ResolvedExpiry:
    expires_at: str | None
    policy: ExpiryPolicy
    validation_error: str | None = None
