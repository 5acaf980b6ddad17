"""
OASF skills and domains declared by an agent, stored as the OASF endpoint of
its registration file.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from .models import Endpoint, EndpointType, ResolvedTaxonomyItem, Slug, Timestamp, TaxonomyType
from .taxonomy import Taxonomy, TaxonomyTypeLike, get_default_taxonomy

logger = logging.getLogger(__name__)

OASF_ENDPOINT_URL = "https://github.com/agntcy/oasf/"


def _format_version(version: str) -> str:
    return version if version.startswith("v") else f"v{version}"


class OASFSelection:
    """Skills and domains an agent declares, tagged with the taxonomy version they were picked from."""

    def __init__(
        self,
        skills: Optional[List[Slug]] = None,
        domains: Optional[List[Slug]] = None,
        version: Optional[str] = None,
        taxonomy: Optional[Taxonomy] = None,
    ):
        self._taxonomy = taxonomy
        self.skills: List[Slug] = list(skills or [])
        self.domains: List[Slug] = list(domains or [])
        self.version = _format_version(version or self.taxonomy.version)
        self.updatedAt: Timestamp = int(time.time())

    def __repr__(self) -> str:
        return f"OASFSelection(version={self.version}, skills={self.skills}, domains={self.domains})"

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy or get_default_taxonomy()

    def _slugs(self, taxonomy_type: TaxonomyType) -> List[Slug]:
        return self.skills if taxonomy_type is TaxonomyType.SKILL else self.domains

    def _add(self, slug: str, taxonomy_type: TaxonomyType, validate_oasf: bool) -> OASFSelection:
        if validate_oasf and not self.taxonomy.validate(slug, taxonomy_type):
            raise ValueError(
                f"Invalid OASF {taxonomy_type.value} slug: {slug}. "
                "Use validate_oasf=False to skip validation."
            )

        # Add slug if not already present (avoid duplicates)
        slugs = self._slugs(taxonomy_type)
        if slug not in slugs:
            slugs.append(slug)

        self.updatedAt = int(time.time())
        return self

    def _remove(self, slug: str, taxonomy_type: TaxonomyType) -> OASFSelection:
        slugs = self._slugs(taxonomy_type)
        if slug in slugs:
            slugs.remove(slug)
            self.updatedAt = int(time.time())
        return self

    def add_skill(self, slug: str, validate_oasf: bool = False) -> OASFSelection:
        """
        Add a skill to the selection.

        Args:
            slug: The skill slug to add (e.g., "natural_language_processing/natural_language_generation")
            validate_oasf: If True, validate the slug against the OASF taxonomy (default: False)

        Returns:
            self for method chaining

        Raises:
            ValueError: If validate_oasf=True and the slug is not valid
        """
        return self._add(slug, TaxonomyType.SKILL, validate_oasf)

    def remove_skill(self, slug: str) -> OASFSelection:
        return self._remove(slug, TaxonomyType.SKILL)

    def add_domain(self, slug: str, validate_oasf: bool = False) -> OASFSelection:
        """
        Add a domain to the selection.

        Args:
            slug: The domain slug to add (e.g., "finance_and_business/investment_services")
            validate_oasf: If True, validate the slug against the OASF taxonomy (default: False)

        Returns:
            self for method chaining

        Raises:
            ValueError: If validate_oasf=True and the slug is not valid
        """
        return self._add(slug, TaxonomyType.DOMAIN, validate_oasf)

    def remove_domain(self, slug: str) -> OASFSelection:
        return self._remove(slug, TaxonomyType.DOMAIN)

    def resolved(self, taxonomy_type: TaxonomyTypeLike) -> List[ResolvedTaxonomyItem]:
        """Resolved items for the selected slugs; unknown slugs are skipped."""
        taxonomy_type = TaxonomyType.parse(taxonomy_type)
        result = []
        for slug in self._slugs(taxonomy_type):
            item = self.taxonomy.resolve(slug, taxonomy_type)
            if item is None:
                logger.debug(f"Skipping unknown OASF {taxonomy_type.value} slug: {slug}")
                continue
            result.append(item)
        return result

    def resolved_skills(self) -> List[ResolvedTaxonomyItem]:
        return self.resolved(TaxonomyType.SKILL)

    def resolved_domains(self) -> List[ResolvedTaxonomyItem]:
        return self.resolved(TaxonomyType.DOMAIN)

    def is_current(self) -> bool:
        """Whether the selection was made against the taxonomy version now in effect."""
        return self.version.lstrip("v") == self.taxonomy.version.lstrip("v")

    def to_endpoint(self) -> Endpoint:
        """OASF endpoint entry for a registration file."""
        return Endpoint(
            type=EndpointType.OASF,
            value=OASF_ENDPOINT_URL,
            meta={"version": self.version, "skills": list(self.skills), "domains": list(self.domains)},
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_endpoint().to_dict()

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint, taxonomy: Optional[Taxonomy] = None) -> OASFSelection:
        """
        Read the selection back from an OASF endpoint.

        Raises:
            ValueError: If the endpoint is not an OASF endpoint
        """
        if endpoint.type != EndpointType.OASF:
            raise ValueError(f"Expected an OASF endpoint, got {endpoint.type.value}")

        skills = endpoint.meta.get("skills")
        domains = endpoint.meta.get("domains")
        return cls(
            skills=[s for s in skills if isinstance(s, str)] if isinstance(skills, list) else [],
            domains=[d for d in domains if isinstance(d, str)] if isinstance(domains, list) else [],
            version=endpoint.meta.get("version"),
            taxonomy=taxonomy,
        )

    @classmethod
    def from_endpoints(cls, endpoints: List[Endpoint], taxonomy: Optional[Taxonomy] = None) -> Optional[OASFSelection]:
        """Find the OASF endpoint among a registration's endpoints, if any."""
        for ep in endpoints:
            if ep.type == EndpointType.OASF:
                return cls.from_endpoint(ep, taxonomy)
        return None
