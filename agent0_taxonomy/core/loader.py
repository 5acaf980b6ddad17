"""
Loading of the static OASF taxonomy data.

The skill and domain trees ship as JSON package data under
`agent0_taxonomy/taxonomies/`. The directory can be overridden per call or
through the OASF_TAXONOMY_DIR environment variable.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import ChildCategory, TaxonomyTree, TaxonomyType, TopLevelCategory
from .slugs import SLUG_SEPARATOR

logger = logging.getLogger(__name__)

TAXONOMY_DIR_ENV = "OASF_TAXONOMY_DIR"
DEFAULT_TAXONOMY_DIR = Path(__file__).resolve().parent.parent / "taxonomies"

TAXONOMY_FILES = {
    TaxonomyType.SKILL: "all_skills.json",
    TaxonomyType.DOMAIN: "all_domains.json",
}


def get_taxonomy_dir(taxonomy_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    Get the directory holding the taxonomy JSON files.

    Priority order:
    1. Explicit `taxonomy_dir` argument
    2. Environment variable OASF_TAXONOMY_DIR
    3. Packaged taxonomies directory
    """
    if taxonomy_dir is not None:
        return Path(taxonomy_dir)

    env_dir = os.environ.get(TAXONOMY_DIR_ENV)
    if env_dir:
        logger.info(f"Using taxonomy directory from environment: {TAXONOMY_DIR_ENV}={env_dir}")
        return Path(env_dir)

    return DEFAULT_TAXONOMY_DIR


def load_taxonomy_tree(
    taxonomy_type: Union[TaxonomyType, str],
    taxonomy_dir: Optional[Union[str, Path]] = None,
) -> TaxonomyTree:
    """
    Load and validate one taxonomy tree from its JSON file.

    Raises:
        FileNotFoundError: If the data file does not exist
        ValueError: If the file is not valid JSON or not a well-formed tree
    """
    taxonomy_type = TaxonomyType.parse(taxonomy_type)
    path = get_taxonomy_dir(taxonomy_dir) / TAXONOMY_FILES[taxonomy_type]
    if not path.is_file():
        raise FileNotFoundError(f"Taxonomy file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in taxonomy file {path}: {e}") from e

    tree = tree_from_dict(taxonomy_type, data)
    logger.debug(
        f"Loaded {taxonomy_type.value} taxonomy v{tree.version} from {path}: "
        f"{len(tree.categories)} top-level categories"
    )
    return tree


def tree_from_dict(taxonomy_type: Union[TaxonomyType, str], data: Dict[str, Any]) -> TaxonomyTree:
    """Build a typed tree from parsed data of the shape {"version": ..., "categories": [...]}."""
    taxonomy_type = TaxonomyType.parse(taxonomy_type)
    if not isinstance(data, dict):
        raise ValueError(f"{taxonomy_type.value} taxonomy must be an object, got {type(data).__name__}")

    version = data.get("version")
    if not isinstance(version, str) or not version:
        raise ValueError(f"{taxonomy_type.value} taxonomy is missing a version")

    raw_categories = data.get("categories")
    if not isinstance(raw_categories, list):
        raise ValueError(f"{taxonomy_type.value} taxonomy is missing its categories list")

    categories = tuple(_parse_top_level(raw, taxonomy_type) for raw in raw_categories)
    return TaxonomyTree(type=taxonomy_type, version=version, categories=categories)


def _parse_top_level(raw: Any, taxonomy_type: TaxonomyType) -> TopLevelCategory:
    category_id, slug, name, description = _parse_common(raw, taxonomy_type)
    if raw.get("parentId") is not None:
        raise ValueError(f"Top-level {taxonomy_type.value} category '{slug}' must not declare a parentId")

    children: List[ChildCategory] = []
    for raw_child in raw.get("children") or []:
        child_id, child_slug, child_name, child_description = _parse_common(raw_child, taxonomy_type)
        if raw_child.get("children"):
            raise ValueError(
                f"{taxonomy_type.value} category '{slug}/{child_slug}' has children; "
                "taxonomy depth is limited to one level"
            )
        declared_parent = raw_child.get("parentId", category_id)
        if declared_parent != category_id:
            raise ValueError(
                f"{taxonomy_type.value} category '{slug}/{child_slug}' declares parentId "
                f"{declared_parent} but is nested under id {category_id}"
            )
        children.append(ChildCategory(
            id=child_id,
            slug=child_slug,
            name=child_name,
            parentId=category_id,
            description=child_description,
        ))

    return TopLevelCategory(
        id=category_id,
        slug=slug,
        name=name,
        description=description,
        children=tuple(children),
    )


def _parse_common(raw: Any, taxonomy_type: TaxonomyType):
    if not isinstance(raw, dict):
        raise ValueError(f"{taxonomy_type.value} category must be an object, got {type(raw).__name__}")

    missing = [key for key in ("id", "slug", "name") if key not in raw]
    if missing:
        raise ValueError(f"{taxonomy_type.value} category {raw!r} is missing {', '.join(missing)}")

    category_id = raw["id"]
    if isinstance(category_id, bool) or not isinstance(category_id, int):
        raise ValueError(f"{taxonomy_type.value} category id must be an integer, got {category_id!r}")

    slug = raw["slug"]
    if not isinstance(slug, str) or not slug.strip():
        raise ValueError(f"{taxonomy_type.value} category {category_id} has an empty slug")
    if SLUG_SEPARATOR in slug:
        raise ValueError(f"{taxonomy_type.value} category slug '{slug}' must not contain '{SLUG_SEPARATOR}'")

    name = raw["name"]
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"{taxonomy_type.value} category '{slug}' must have a non-empty name, got {name!r}")

    return category_id, slug, name, raw.get("description")
