"""
Client-side filtering of agent listings by OASF skills and domains.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from eth_utils import to_checksum_address

from .models import Address, AgentSummary, TaxonomyFilter, TaxonomyType
from .slugs import split_slug
from .taxonomy import Taxonomy, TaxonomyTypeLike, get_default_taxonomy

logger = logging.getLogger(__name__)


def _normalize_address(address: Address) -> str:
    try:
        return to_checksum_address(address)
    except (ValueError, TypeError):
        # Not a valid hex address; compare case-insensitively
        return str(address).lower()


def _taxonomy_criterion(
    agent: AgentSummary,
    selected: List[str],
    taxonomy_type: TaxonomyType,
    taxonomy: Taxonomy,
) -> bool:
    return any(taxonomy.matches(slug, selected, taxonomy_type) for slug in agent.slugs_for(taxonomy_type))


def agent_matches_filter(
    agent: AgentSummary,
    taxonomy_filter: TaxonomyFilter,
    taxonomy: Optional[Taxonomy] = None,
) -> bool:
    """
    Check whether an agent satisfies a filter selection.

    Each non-empty taxonomy selection (skills, domains) is one criterion; an
    agent meets it when any of its tags matches the selection, parent and child
    relationships included. The criteria are combined with the filter mode.
    Chain, owner and active filters always apply.
    """
    taxonomy = taxonomy or get_default_taxonomy()

    if taxonomy_filter.chains and agent.chainId not in taxonomy_filter.chains:
        return False

    if taxonomy_filter.owners:
        wanted = {_normalize_address(owner) for owner in taxonomy_filter.owners}
        if not any(_normalize_address(owner) in wanted for owner in agent.owners):
            return False

    if taxonomy_filter.active is not None and agent.active != taxonomy_filter.active:
        return False

    results = []
    if taxonomy_filter.skills:
        results.append(_taxonomy_criterion(agent, taxonomy_filter.skills, TaxonomyType.SKILL, taxonomy))
    if taxonomy_filter.domains:
        results.append(_taxonomy_criterion(agent, taxonomy_filter.domains, TaxonomyType.DOMAIN, taxonomy))

    if not results:
        return True
    if taxonomy_filter.filterMode == "OR":
        return any(results)
    return all(results)


def filter_agents(
    agents: Iterable[AgentSummary],
    taxonomy_filter: TaxonomyFilter,
    taxonomy: Optional[Taxonomy] = None,
) -> List[AgentSummary]:
    """Apply a filter selection to agents, preserving order."""
    taxonomy = taxonomy or get_default_taxonomy()
    agents = list(agents)
    filtered = [a for a in agents if agent_matches_filter(a, taxonomy_filter, taxonomy)]
    logger.debug(f"Taxonomy filter kept {len(filtered)} of {len(agents)} agents ({taxonomy_filter.filterMode})")
    return filtered


def count_by_category(
    agents: Iterable[AgentSummary],
    taxonomy_type: TaxonomyTypeLike,
    taxonomy: Optional[Taxonomy] = None,
) -> Dict[str, int]:
    """
    Count agents per top-level category, for filter-tree facets.

    Every top-level category appears in tree order, with 0 when no agent is
    tagged under it. An agent counts once per category however many of its
    tags fall there. Unknown tags are ignored.
    """
    taxonomy = taxonomy or get_default_taxonomy()
    taxonomy_type = TaxonomyType.parse(taxonomy_type)
    counts = {category.slug.lower(): 0 for category in taxonomy.get_tree(taxonomy_type)}

    for agent in agents:
        seen = set()
        for slug in agent.slugs_for(taxonomy_type):
            if not taxonomy.validate(slug, taxonomy_type):
                continue
            seen.add(split_slug(slug)[0])
        for parent_slug in seen:
            counts[parent_slug] += 1

    return counts
