from __future__ import annotations

from collections.abc import Iterable, Mapping

from apprentice_api.application.ports.product_catalog_port import ProductCatalogPort
from apprentice_api.domain.entities.expiry import ExpiryPolicy
from apprentice_api.domain.entities.product import ProductCourseMapping
from apprentice_api.domain.services.content_sets import build_product_course_mappings, extract_course_ids
from apprentice_api.domain.services.expiry_policy import parse_expiry_policy


class ProductCatalogLoader:
    """Batched lookups of product policies and content-set course mappings."""

    def __init__(self, *, product_catalog_port: ProductCatalogPort):
        self._product_catalog_port = product_catalog_port

    def load_policies(self, *, product_ids: Iterable[int]) -> dict[int, ExpiryPolicy]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        blobs = self._product_catalog_port.get_policy_blobs(product_ids=ids)
        return {product_id: parse_expiry_policy(product_id, blobs.get(product_id)) for product_id in ids}

    def load_mappings(
        self,
        *,
        product_ids: Iterable[int] | None = None,
        policies_by_product: Mapping[int, ExpiryPolicy] | None = None,
    ) -> list[ProductCourseMapping]:
        if product_ids is None:
            definitions = self._product_catalog_port.list_content_sets()
        else:
            ids = sorted(set(product_ids))
            if not ids:
                return []
            definitions = self._product_catalog_port.list_content_sets(product_ids=ids)

        course_ids_by_post = {
            definition.post_id: extract_course_ids(definition.post_content) for definition in definitions
        }
        term_ids = sorted(
            {course_id for post_course_ids in course_ids_by_post.values() for course_id in post_course_ids}
        )
        course_names = self._product_catalog_port.get_term_names(term_ids=term_ids) if term_ids else {}

        if policies_by_product is None:
            policies_by_product = self.load_policies(
                product_ids=[definition.product_id for definition in definitions]
            )

        return build_product_course_mappings(
            definitions=definitions,
            course_ids_by_post=course_ids_by_post,
            course_names=course_names,
            policies_by_product=policies_by_product,
        )
