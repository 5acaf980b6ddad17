"""
Taxonomy service: resolution, search, descendant expansion and selection
matching over the OASF skill and domain trees.

A `Taxonomy` is immutable once built, so a single instance can be shared
across threads. `get_default_taxonomy()` returns the process-wide instance
built from the packaged data.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .flat_index import FlatIndex, build_flat_index
from .loader import load_taxonomy_tree
from .models import (
    CategoryGroup, CategoryGroupItem, CategoryId, ResolvedTaxonomyItem,
    Slug, TaxonomyCategory, TaxonomyTree, TaxonomyType, TopLevelCategory,
)
from .slugs import (
    format_slug_fallback, is_descendant_slug, is_top_level_slug,
    join_slug, normalize_slug, split_slug,
)

logger = logging.getLogger(__name__)

TaxonomyTypeLike = Union[TaxonomyType, str]


class Taxonomy:
    """Read-only handle over one skill tree and one domain tree."""

    def __init__(self, skills: TaxonomyTree, domains: TaxonomyTree):
        """Initialize with both trees; builds the flat indexes once."""
        if skills.type is not TaxonomyType.SKILL:
            raise ValueError(f"Expected a skill tree, got a {skills.type.value} tree")
        if domains.type is not TaxonomyType.DOMAIN:
            raise ValueError(f"Expected a domain tree, got a {domains.type.value} tree")
        if skills.version != domains.version:
            raise ValueError(
                f"Taxonomy version mismatch: skills v{skills.version}, domains v{domains.version}"
            )

        self._trees: Dict[TaxonomyType, TaxonomyTree] = {
            TaxonomyType.SKILL: skills,
            TaxonomyType.DOMAIN: domains,
        }
        self._indexes: Dict[TaxonomyType, FlatIndex] = {
            taxonomy_type: build_flat_index(tree) for taxonomy_type, tree in self._trees.items()
        }

    def __repr__(self) -> str:
        return (
            f"Taxonomy(version={self.version}, "
            f"skills={len(self._indexes[TaxonomyType.SKILL])}, "
            f"domains={len(self._indexes[TaxonomyType.DOMAIN])})"
        )

    @classmethod
    def from_trees(cls, skills: TaxonomyTree, domains: TaxonomyTree) -> Taxonomy:
        """Build from already-parsed trees, e.g. a fixture tree in tests."""
        return cls(skills=skills, domains=domains)

    @classmethod
    def load(cls, taxonomy_dir: Optional[Union[str, Path]] = None) -> Taxonomy:
        """Load both trees from JSON (see `loader.get_taxonomy_dir` for the lookup order)."""
        return cls.from_trees(
            skills=load_taxonomy_tree(TaxonomyType.SKILL, taxonomy_dir),
            domains=load_taxonomy_tree(TaxonomyType.DOMAIN, taxonomy_dir),
        )

    # Tree access
    @property
    def version(self) -> str:
        """OASF edition in effect; record it alongside any persisted selection."""
        return self._trees[TaxonomyType.SKILL].version

    def get_version(self) -> str:
        return self.version

    def get_tree(self, taxonomy_type: TaxonomyTypeLike) -> Tuple[TopLevelCategory, ...]:
        """Top-level categories of one taxonomy, in tree order."""
        return self._trees[TaxonomyType.parse(taxonomy_type)].categories

    def get_index(self, taxonomy_type: TaxonomyTypeLike) -> FlatIndex:
        return self._indexes[TaxonomyType.parse(taxonomy_type)]

    def get_category(self, category_id: CategoryId, taxonomy_type: TaxonomyTypeLike) -> Optional[TaxonomyCategory]:
        return self.get_index(taxonomy_type).by_id.get(category_id)

    # Resolution
    def resolve(self, slug: str, taxonomy_type: TaxonomyTypeLike) -> Optional[ResolvedTaxonomyItem]:
        """
        Resolve a composite slug to its display information.

        Lookup is case-insensitive and ignores surrounding whitespace. The
        returned `slug` is the trimmed input with its original casing.

        Returns:
            The resolved item, or None if the slug is not part of the taxonomy
        """
        index = self.get_index(taxonomy_type)
        category = index.get(slug)
        if category is None:
            logger.debug(f"Unknown {TaxonomyType.parse(taxonomy_type).value} slug: {slug!r}")
            return None

        trimmed = slug.strip()
        if category.parentId is None:
            return ResolvedTaxonomyItem(
                slug=trimmed,
                name=category.name,
                fullPath=category.name,
                category=category,
            )

        parent = index.by_id.get(category.parentId)
        if parent is None:
            # parentId not present in this tree
            return ResolvedTaxonomyItem(slug=trimmed, name=category.name, fullPath=category.name, category=category)

        return ResolvedTaxonomyItem(
            slug=trimmed,
            name=category.name,
            fullPath=f"{parent.name} > {category.name}",
            category=category,
            parentName=parent.name,
            parent=parent,
        )

    def resolve_skill(self, slug: str) -> Optional[ResolvedTaxonomyItem]:
        return self.resolve(slug, TaxonomyType.SKILL)

    def resolve_domain(self, slug: str) -> Optional[ResolvedTaxonomyItem]:
        return self.resolve(slug, TaxonomyType.DOMAIN)

    def validate(self, slug: str, taxonomy_type: TaxonomyTypeLike) -> bool:
        """Whether `slug` names a category of the given taxonomy."""
        return self.get_index(taxonomy_type).get(slug) is not None

    def display_name(self, slug: str, taxonomy_type: TaxonomyTypeLike) -> str:
        """Category name, or a title-cased fallback built from the slug itself."""
        resolved = self.resolve(slug, taxonomy_type)
        return resolved.name if resolved else format_slug_fallback(slug)

    # Search
    def search(self, query: str, taxonomy_type: TaxonomyTypeLike) -> List[TaxonomyCategory]:
        """
        Find categories whose name or slug contains `query`, case-insensitively.

        Both tree levels are searched independently, in tree order. An empty or
        whitespace-only query returns no results.
        """
        normalized_query = query.strip().lower()
        if not normalized_query:
            return []

        tree = self._trees[TaxonomyType.parse(taxonomy_type)]
        return [
            category
            for category, _parent in tree.iter_categories()
            if normalized_query in category.name.lower() or normalized_query in category.slug.lower()
        ]

    # Hierarchy
    def expand(self, slug: str, taxonomy_type: TaxonomyTypeLike) -> List[Slug]:
        """
        Return `slug` followed by the composite slugs of all its descendants.

        A leaf expands to itself; an unknown slug expands to nothing.
        """
        category = self.get_index(taxonomy_type).get(slug)
        if category is None:
            return []

        composite = normalize_slug(slug)
        return [composite] + [
            normalize_slug(join_slug(category.slug, child.slug)) for child in category.children
        ]

    def matches(self, slug: str, selected_slugs: Iterable[str], taxonomy_type: TaxonomyTypeLike) -> bool:
        """
        Check if a slug is covered by a selection, in either direction.

        True when:
        - the slug is selected itself,
        - its top-level parent is selected (a parent stands for all its children),
        - the slug is top-level and one of its children is selected.
        """
        TaxonomyType.parse(taxonomy_type)
        candidate = normalize_slug(slug)
        candidate_is_top_level = is_top_level_slug(candidate)

        for selected in selected_slugs:
            normalized_selected = normalize_slug(selected)

            # Direct match
            if candidate == normalized_selected:
                return True

            # Selected parent covers the candidate child
            if is_top_level_slug(normalized_selected) and is_descendant_slug(candidate, normalized_selected):
                return True

            # Candidate parent has a selected child
            if candidate_is_top_level and is_descendant_slug(normalized_selected, candidate):
                return True

        return False

    # Display grouping
    def group_by_parent(
        self,
        slugs: Iterable[str],
        taxonomy_type: TaxonomyTypeLike,
        confidence_map: Optional[Mapping[str, float]] = None,
    ) -> List[CategoryGroup]:
        """
        Group slugs under their top-level category, sorted by category name.

        Unknown slugs are grouped by their first path segment with fallback names.
        When `confidence_map` is given, each item carries the confidence recorded
        for its slug (see `AgentSummary.confidence_map`).
        """
        confidence_map = confidence_map or {}
        groups: Dict[str, CategoryGroup] = {}

        for slug in slugs:
            resolved = self.resolve(slug, taxonomy_type)
            if resolved is None:
                parent_slug, child_slug = split_slug(slug)
                group = groups.setdefault(
                    parent_slug,
                    CategoryGroup(parentSlug=parent_slug, parentName=format_slug_fallback(parent_slug)),
                )
                group.items.append(CategoryGroupItem(
                    slug=slug,
                    name=format_slug_fallback(slug),
                    isChild=child_slug is not None,
                    confidence=confidence_map.get(slug),
                ))
                continue

            parent_slug = resolved.parent.slug if resolved.parent else resolved.category.slug
            group = groups.setdefault(
                parent_slug,
                CategoryGroup(parentSlug=parent_slug, parentName=resolved.parentName or resolved.name),
            )
            group.items.append(CategoryGroupItem(
                slug=slug,
                name=resolved.name,
                isChild=resolved.is_child,
                confidence=confidence_map.get(slug),
            ))

        return sorted(groups.values(), key=lambda g: g.parentName.casefold())


_default_taxonomy: Optional[Taxonomy] = None
_default_lock = threading.Lock()


def get_default_taxonomy() -> Taxonomy:
    """Process-wide taxonomy, loaded on first use."""
    global _default_taxonomy
    if _default_taxonomy is None:
        with _default_lock:
            if _default_taxonomy is None:
                _default_taxonomy = Taxonomy.load()
                logger.debug(f"Loaded default taxonomy: {_default_taxonomy!r}")
    return _default_taxonomy


def reset_default_taxonomy() -> None:
    """Drop the cached default taxonomy so the next call reloads it."""
    global _default_taxonomy
    with _default_lock:
        _default_taxonomy = None
