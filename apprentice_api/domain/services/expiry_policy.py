from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from apprentice_api.domain.entities.expiry import ExpiryDuration, ExpiryPolicy
from apprentice_api.shared.php_serialization import maybe_unserialize


# "2025-01-01 10:30" has minute precision; "2025-01-01 10:30:15" does not.
_MINUTE_PRECISION = re.compile(r"(?<![\d:])\d{1,2}:\d{2}$")


def _is_disabled(flag: Any) -> bool:
    return flag in (None, 0, "0", "", False)


def normalize_expiry_datetime(value: str) -> str:
    value = value.strip()
    if _MINUTE_PRECISION.search(value):
        return f"{value}:59"
    return value


def _parse_duration(raw: Any) -> ExpiryDuration | None:
    if not isinstance(raw, Mapping):
        return None
    number = raw.get("number")
    unit = raw.get("unit")
    if number in (None, "") or unit in (None, ""):
        return None
    try:
        return ExpiryDuration(number=int(number), unit=str(unit))
    except (TypeError, ValueError):
        return None


def parse_expiry_policy(product_id: int, raw_policy: Any) -> ExpiryPolicy:
    if raw_policy is None or raw_policy == "" or raw_policy == b"":
        return ExpiryPolicy.not_configured(f"No access restriction stored for product {product_id}.")

    decoded = raw_policy if isinstance(raw_policy, Mapping) else maybe_unserialize(raw_policy)
    expiry = decoded.get("expiry") if isinstance(decoded, Mapping) else None
    if not isinstance(expiry, Mapping):
        return ExpiryPolicy.not_configured("Access restriction could not be decoded or has no expiry settings.")

    if _is_disabled(expiry.get("enabled")):
        return ExpiryPolicy.unlimited()

    cond = expiry.get("cond")
    if cond == "specific_time":
        raw_datetime = expiry.get("datetime")
        if isinstance(raw_datetime, str) and raw_datetime.strip():
            return ExpiryPolicy.specific_time(normalize_expiry_datetime(raw_datetime))
        return ExpiryPolicy.other("Expiry condition 'specific_time' has no datetime.")

    if cond == "after_purchase":
        duration = _parse_duration(expiry.get("purchase_duration"))
        if duration is not None:
            return ExpiryPolicy.after_purchase(duration)
        return ExpiryPolicy.other("Expiry condition 'after_purchase' has no purchase duration.")

    return ExpiryPolicy.other(f"Unsupported expiry condition '{cond}'.")
