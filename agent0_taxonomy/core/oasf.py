"""
OASF (Open Agentic Schema Framework) taxonomy utilities bound to the
default, packaged taxonomy.

Use a `Taxonomy` instance directly when a different tree is needed.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .models import ResolvedTaxonomyItem, Slug, TaxonomyCategory, TaxonomyType, TopLevelCategory
from .taxonomy import TaxonomyTypeLike, get_default_taxonomy


def resolve_skill_slug(slug: str) -> Optional[ResolvedTaxonomyItem]:
    """
    Resolve a skill slug to its full taxonomy information.

    Args:
        slug: The skill slug (e.g., "natural_language_processing/natural_language_understanding")

    Returns:
        Resolved item with full path, or None if not found
    """
    return get_default_taxonomy().resolve(slug, TaxonomyType.SKILL)


def resolve_domain_slug(slug: str) -> Optional[ResolvedTaxonomyItem]:
    """
    Resolve a domain slug to its full taxonomy information.

    Args:
        slug: The domain slug (e.g., "technology/blockchain")

    Returns:
        Resolved item with full path, or None if not found
    """
    return get_default_taxonomy().resolve(slug, TaxonomyType.DOMAIN)


def resolve_slug(slug: str, taxonomy_type: TaxonomyTypeLike) -> Optional[ResolvedTaxonomyItem]:
    """Resolve a slug of either type."""
    return get_default_taxonomy().resolve(slug, taxonomy_type)


def get_skill_tree() -> Tuple[TopLevelCategory, ...]:
    return get_default_taxonomy().get_tree(TaxonomyType.SKILL)


def get_domain_tree() -> Tuple[TopLevelCategory, ...]:
    return get_default_taxonomy().get_tree(TaxonomyType.DOMAIN)


def get_taxonomy_tree(taxonomy_type: TaxonomyTypeLike) -> Tuple[TopLevelCategory, ...]:
    return get_default_taxonomy().get_tree(taxonomy_type)


def search_taxonomy(query: str, taxonomy_type: TaxonomyTypeLike) -> List[TaxonomyCategory]:
    """
    Search taxonomy categories by query string.

    Returns:
        Matching categories (flattened, includes children)
    """
    return get_default_taxonomy().search(query, taxonomy_type)


def get_child_slugs(parent_slug: str, taxonomy_type: TaxonomyTypeLike) -> List[Slug]:
    """
    Get all child slugs for a parent category (including the parent itself).

    Useful for filter logic where selecting a parent should match all children.
    """
    return get_default_taxonomy().expand(parent_slug, taxonomy_type)


def slug_matches_selection(slug: str, selected_slugs: Iterable[str], taxonomy_type: TaxonomyTypeLike) -> bool:
    """Check if a slug matches any of the selected slugs, including parent/child relationships."""
    return get_default_taxonomy().matches(slug, selected_slugs, taxonomy_type)


def get_oasf_version() -> str:
    return get_default_taxonomy().version


def validate_skill(slug: str) -> bool:
    """Check that `slug` is a known OASF skill ("category" or "category/child")."""
    return get_default_taxonomy().validate(slug, TaxonomyType.SKILL)


def validate_domain(slug: str) -> bool:
    """Check that `slug` is a known OASF domain ("category" or "category/child")."""
    return get_default_taxonomy().validate(slug, TaxonomyType.DOMAIN)
