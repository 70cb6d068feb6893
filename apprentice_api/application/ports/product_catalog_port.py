from __future__ import annotations

from typing import Protocol

from apprentice_api.domain.entities.product import ContentSetDefinition


class ProductCatalogPort(Protocol):
    def get_policy_blobs(self, *, product_ids: list[int]) -> dict[int, str | None]:
        ...

    def list_content_sets(self, *, product_ids: list[int] | None = None) -> list[ContentSetDefinition]:
        ...

    def get_term_names(self, *, term_ids: list[int]) -> dict[int, str]:
        ...
