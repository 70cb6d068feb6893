from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from apprentice_api.domain.entities.account import Account
from apprentice_api.shared.php_serialization import maybe_unserialize


def parse_roles(raw_capabilities: Any) -> list[str]:
    capabilities = maybe_unserialize(raw_capabilities)
    if not isinstance(capabilities, Mapping):
        return []
    return [str(role) for role, granted in capabilities.items() if granted]


def map_row_to_account(row: Mapping[str, Any]) -> Account:
    return Account(
        user_id=int(row["user_id"]),
        email=str(row["email"]),
        roles=parse_roles(row.get("capabilities")),
    )
