"""
Flat lookup indexes over a taxonomy tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .models import CategoryId, TaxonomyCategory, TaxonomyTree, TopLevelCategory
from .slugs import join_slug, normalize_slug

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlatIndex:
    """Composite-slug and id lookups for one taxonomy tree (read-only)."""
    by_slug: Mapping[str, TaxonomyCategory]  # lower-cased composite slug -> category, tree order
    by_id: Mapping[CategoryId, TaxonomyCategory]

    def get(self, slug: str) -> Optional[TaxonomyCategory]:
        return self.by_slug.get(normalize_slug(slug))

    def __len__(self) -> int:
        return len(self.by_slug)


def build_flat_index(tree: TaxonomyTree) -> FlatIndex:
    """
    Walk the tree once and index every category.

    Top-level categories are keyed by their slug, children by
    `parentSlug/childSlug`. Keys are lower-cased so lookups are
    case-insensitive.

    Raises:
        ValueError: If two categories share a composite slug or an id
    """
    by_slug: Dict[str, TaxonomyCategory] = {}
    by_id: Dict[CategoryId, TaxonomyCategory] = {}

    def add(category: TaxonomyCategory, parent: Optional[TopLevelCategory]) -> None:
        composite = normalize_slug(join_slug(parent.slug, category.slug) if parent else category.slug)

        existing = by_slug.get(composite)
        if existing is not None:
            raise ValueError(
                f"Duplicate {tree.type.value} slug '{composite}': "
                f"'{existing.name}' (id {existing.id}) and '{category.name}' (id {category.id})"
            )
        existing = by_id.get(category.id)
        if existing is not None:
            raise ValueError(
                f"Duplicate {tree.type.value} id {category.id}: "
                f"'{existing.name}' and '{category.name}'"
            )

        by_slug[composite] = category
        by_id[category.id] = category

        for child in category.children:
            add(child, category)

    for category in tree.categories:
        add(category, None)

    logger.debug(f"Indexed {tree.type.value} taxonomy v{tree.version}: {len(by_slug)} categories")
    return FlatIndex(by_slug=MappingProxyType(by_slug), by_id=MappingProxyType(by_id))
