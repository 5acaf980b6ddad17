"""
Agent0 Taxonomy - OASF skill and domain taxonomy for agent discovery.

Resolves composite slugs ("category" or "category/child") against the OASF
skill and domain trees, searches them, and matches agent tags against filter
selections with parent/child semantics.
"""

from .core.models import (
    AgentId,
    ChainId,
    Address,
    Slug,
    TaxonomyType,
    EndpointType,
    OASFSource,
    TopLevelCategory,
    ChildCategory,
    TaxonomyCategory,
    TaxonomyTree,
    ResolvedTaxonomyItem,
    CategoryGroup,
    CategoryGroupItem,
    Endpoint,
    OASFItem,
    AgentSummary,
    TaxonomyFilter,
)
from .core.slugs import (
    normalize_slug,
    split_slug,
    join_slug,
    format_slug_fallback,
    parse_slug_list,
    serialize_slug_list,
)
from .core.loader import load_taxonomy_tree, tree_from_dict
from .core.flat_index import FlatIndex, build_flat_index
from .core.taxonomy import Taxonomy, get_default_taxonomy, reset_default_taxonomy
from .core.oasf import (
    resolve_skill_slug,
    resolve_domain_slug,
    resolve_slug,
    get_skill_tree,
    get_domain_tree,
    get_taxonomy_tree,
    search_taxonomy,
    get_child_slugs,
    slug_matches_selection,
    get_oasf_version,
    validate_skill,
    validate_domain,
)
from .core.selection import OASFSelection
from .core.filtering import agent_matches_filter, filter_agents, count_by_category

__version__ = "0.1.0"
__all__ = [
    "AgentId",
    "ChainId",
    "Address",
    "Slug",
    "TaxonomyType",
    "EndpointType",
    "OASFSource",
    "TopLevelCategory",
    "ChildCategory",
    "TaxonomyCategory",
    "TaxonomyTree",
    "ResolvedTaxonomyItem",
    "CategoryGroup",
    "CategoryGroupItem",
    "Endpoint",
    "OASFItem",
    "AgentSummary",
    "TaxonomyFilter",
    "normalize_slug",
    "split_slug",
    "join_slug",
    "format_slug_fallback",
    "parse_slug_list",
    "serialize_slug_list",
    "load_taxonomy_tree",
    "tree_from_dict",
    "FlatIndex",
    "build_flat_index",
    "Taxonomy",
    "get_default_taxonomy",
    "reset_default_taxonomy",
    "resolve_skill_slug",
    "resolve_domain_slug",
    "resolve_slug",
    "get_skill_tree",
    "get_domain_tree",
    "get_taxonomy_tree",
    "search_taxonomy",
    "get_child_slugs",
    "slug_matches_selection",
    "get_oasf_version",
    "validate_skill",
    "validate_domain",
    "OASFSelection",
    "agent_matches_filter",
    "filter_agents",
    "count_by_category",
]
