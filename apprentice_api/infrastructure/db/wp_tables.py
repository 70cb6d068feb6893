from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TypeVar


T = TypeVar("T")

# Keeps IN (...) lists well below MySQL packet limits on bulk requests.
IN_CLAUSE_CHUNK_SIZE = 500


def chunked(values: Sequence[T], size: int = IN_CLAUSE_CHUNK_SIZE) -> Iterator[list[T]]:
    for start in range(0, len(values), size):
        yield list(values[start : start + size])


@dataclass(frozen=True)
class WpTables:
    prefix: str

    @property
    def users(self) -> str:
        return f"{self.prefix}users"

    @property
    def usermeta(self) -> str:
        return f"{self.prefix}usermeta"

    @property
    def posts(self) -> str:
        return f"{self.prefix}posts"

    @property
    def terms(self) -> str:
        return f"{self.prefix}terms"

    @property
    def termmeta(self) -> str:
        return f"{self.prefix}termmeta"

    @property
    def term_relationships(self) -> str:
        return f"{self.prefix}term_relationships"

    @property
    def access_history(self) -> str:
        return f"{self.prefix}tva_access_history"

    @property
    def orders(self) -> str:
        return f"{self.prefix}tva_orders"

    @property
    def order_items(self) -> str:
        return f"{self.prefix}tva_order_items"

    @property
    def capabilities_meta_key(self) -> str:
        return f"{self.prefix}capabilities"
