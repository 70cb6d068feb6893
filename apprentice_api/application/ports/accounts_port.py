from __future__ import annotations

from typing import Protocol

from apprentice_api.domain.entities.account import Account


class AccountsPort(Protocol):
    def list_accounts_by_ids(self, *, user_ids: list[int]) -> list[Account]:
        ...
