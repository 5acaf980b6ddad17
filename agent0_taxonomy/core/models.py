"""
Core data models for the Agent0 taxonomy package.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union, Literal

from .slugs import parse_slug_list, serialize_slug_list


# Type aliases
AgentId = str  # "chainId:tokenId" (e.g., "8453:1234")
ChainId = int
Address = str  # 0x-hex
Slug = str  # "category" or "category/child"
CategoryId = int
Timestamp = int  # unix seconds
FilterMode = Literal["AND", "OR"]

FILTER_MODES = ("AND", "OR")


class TaxonomyType(Enum):
    """The two independent OASF classification axes."""
    SKILL = "skill"
    DOMAIN = "domain"

    @classmethod
    def parse(cls, value: Union["TaxonomyType", str]) -> "TaxonomyType":
        """Accept either the enum member or its string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown taxonomy type: {value!r} (expected 'skill' or 'domain')")


class EndpointType(Enum):
    """Types of endpoints that agents can advertise."""
    MCP = "MCP"
    A2A = "A2A"
    ENS = "ENS"
    DID = "DID"
    OASF = "OASF"
    WALLET = "wallet"


class OASFSource(Enum):
    """How an agent's OASF tags were obtained."""
    DECLARED = "declared"  # from the agent's own registration file
    CLASSIFIED = "classified"  # assigned by the backend classifier
    NONE = "none"


@dataclass(frozen=True)
class ChildCategory:
    """Second-level category; always owned by exactly one top-level category."""
    id: CategoryId
    slug: str
    name: str
    parentId: CategoryId
    description: Optional[str] = None

    @property
    def is_top_level(self) -> bool:
        return False

    @property
    def has_children(self) -> bool:
        return False

    @property
    def children(self) -> Tuple[ChildCategory, ...]:
        return ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "slug": self.slug, "name": self.name}
        if self.description is not None:
            data["description"] = self.description
        data["parentId"] = self.parentId
        return data


@dataclass(frozen=True)
class TopLevelCategory:
    """Root-level category, optionally owning an ordered list of children."""
    id: CategoryId
    slug: str
    name: str
    description: Optional[str] = None
    children: Tuple[ChildCategory, ...] = ()

    @property
    def parentId(self) -> None:
        return None

    @property
    def is_top_level(self) -> bool:
        return True

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "slug": self.slug, "name": self.name}
        if self.description is not None:
            data["description"] = self.description
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


TaxonomyCategory = Union[TopLevelCategory, ChildCategory]


@dataclass(frozen=True)
class TaxonomyTree:
    """Versioned two-level category tree for one taxonomy type."""
    type: TaxonomyType
    version: str
    categories: Tuple[TopLevelCategory, ...]

    def iter_categories(self) -> Iterable[Tuple[TaxonomyCategory, Optional[TopLevelCategory]]]:
        """Yield (category, parent) pairs in tree order, parents before their children."""
        for category in self.categories:
            yield category, None
            for child in category.children:
                yield child, category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "categories": [category.to_dict() for category in self.categories],
        }


@dataclass(frozen=True)
class ResolvedTaxonomyItem:
    """Display-ready result of resolving a slug against a taxonomy."""
    slug: Slug  # as given, trimmed
    name: str
    fullPath: str  # "Parent > Child" for children, name alone otherwise
    category: TaxonomyCategory
    parentName: Optional[str] = None
    parent: Optional[TopLevelCategory] = None

    @property
    def is_child(self) -> bool:
        return self.parent is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {
            "slug": self.slug,
            "name": self.name,
            "fullPath": self.fullPath,
            "categoryId": self.category.id,
        }
        if self.parent is not None:
            data["parentName"] = self.parentName
            data["parentId"] = self.parent.id
        return data


@dataclass(frozen=True)
class CategoryGroupItem:
    slug: Slug
    name: str
    isChild: bool
    confidence: Optional[float] = None  # classifier confidence, when the tag was classified


@dataclass
class CategoryGroup:
    """Tags of one agent gathered under their top-level category."""
    parentSlug: Slug
    parentName: str
    items: List[CategoryGroupItem] = field(default_factory=list)


@dataclass
class Endpoint:
    """Represents an agent endpoint."""
    type: EndpointType
    value: str  # endpoint value (URL, name, DID, ENS)
    meta: Dict[str, Any] = field(default_factory=dict)  # optional metadata

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.type.value, "endpoint": self.value, **self.meta}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Endpoint:
        meta = {k: v for k, v in data.items() if k not in ["name", "endpoint"]}
        return cls(type=EndpointType(data["name"]), value=data["endpoint"], meta=meta)


@dataclass
class OASFItem:
    """A single OASF tag attached to an agent by the classifier."""
    slug: Slug
    confidence: Optional[float] = None  # 0.0 - 1.0
    reasoning: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], str]) -> OASFItem:
        """Create from a backend classification entry (or a bare slug string)."""
        if isinstance(data, str):
            return cls(slug=data)
        confidence = data.get("confidence")
        return cls(
            slug=data["slug"],
            confidence=float(confidence) if confidence is not None else None,
            reasoning=data.get("reasoning"),
        )


def _unique(slugs: Iterable[str]) -> List[str]:
    # Remove duplicates while preserving order
    seen = set()
    result = []
    for slug in slugs:
        if slug not in seen:
            seen.add(slug)
            result.append(slug)
    return result


@dataclass
class AgentSummary:
    """Listing-level agent record used for client-side filtering."""
    chainId: ChainId
    agentId: AgentId
    name: str
    description: str = ""
    owners: List[Address] = field(default_factory=list)
    active: bool = True
    oasfSkills: List[OASFItem] = field(default_factory=list)
    oasfDomains: List[OASFItem] = field(default_factory=list)
    declaredOasfSkills: List[Slug] = field(default_factory=list)
    declaredOasfDomains: List[Slug] = field(default_factory=list)
    oasfSource: OASFSource = OASFSource.NONE
    extras: Dict[str, Any] = field(default_factory=dict)

    def skill_slugs(self) -> List[Slug]:
        """Declared skills first, then classified ones, without duplicates."""
        return _unique(list(self.declaredOasfSkills) + [item.slug for item in self.oasfSkills])

    def domain_slugs(self) -> List[Slug]:
        """Declared domains first, then classified ones, without duplicates."""
        return _unique(list(self.declaredOasfDomains) + [item.slug for item in self.oasfDomains])

    def slugs_for(self, taxonomy_type: Union[TaxonomyType, str]) -> List[Slug]:
        if TaxonomyType.parse(taxonomy_type) is TaxonomyType.SKILL:
            return self.skill_slugs()
        return self.domain_slugs()

    def confidence_map(self, taxonomy_type: Union[TaxonomyType, str]) -> Dict[Slug, float]:
        """Classifier confidence per slug, for classified tags that carry one."""
        items = self.oasfSkills if TaxonomyType.parse(taxonomy_type) is TaxonomyType.SKILL else self.oasfDomains
        return {item.slug: item.confidence for item in items if item.confidence is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSummary:
        """Create from a listing payload (camelCase keys)."""
        oasf = data.get("oasf") or {}
        source = data.get("oasfSource")
        try:
            oasf_source = OASFSource(source) if source else OASFSource.NONE
        except ValueError:
            oasf_source = OASFSource.NONE

        chain_id = data.get("chainId")
        agent_id = str(data.get("id") or data.get("agentId") or "")
        if chain_id is None and ":" in agent_id:
            chain_id = agent_id.split(":", 1)[0]

        return cls(
            chainId=int(chain_id) if chain_id is not None else 0,
            agentId=agent_id,
            name=data.get("name", ""),
            description=data.get("description", ""),
            owners=list(data.get("owners", [])),
            active=data.get("active", True),
            oasfSkills=[OASFItem.from_dict(item) for item in oasf.get("skills", [])],
            oasfDomains=[OASFItem.from_dict(item) for item in oasf.get("domains", [])],
            declaredOasfSkills=list(data.get("declaredOasfSkills") or []),
            declaredOasfDomains=list(data.get("declaredOasfDomains") or []),
            oasfSource=oasf_source,
            extras={k: v for k, v in data.items() if k not in _AGENT_SUMMARY_KEYS},
        )


_AGENT_SUMMARY_KEYS = {
    "id", "agentId", "chainId", "name", "description", "owners", "active",
    "oasf", "oasfSource", "declaredOasfSkills", "declaredOasfDomains",
}


@dataclass
class TaxonomyFilter:
    """Active filter selection for agent browsing."""
    skills: List[Slug] = field(default_factory=list)
    domains: List[Slug] = field(default_factory=list)
    filterMode: FilterMode = "AND"  # how the skills and domains criteria combine
    chains: Optional[List[ChainId]] = None
    owners: Optional[List[Address]] = None
    active: Optional[bool] = None

    def __post_init__(self):
        """Validate filter mode after initialization."""
        mode = str(self.filterMode).upper()
        if mode not in FILTER_MODES:
            raise ValueError(f"Invalid filter mode: {self.filterMode!r} (expected 'AND' or 'OR')")
        self.filterMode = mode  # type: ignore[assignment]

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    @property
    def has_taxonomy_criteria(self) -> bool:
        return bool(self.skills) or bool(self.domains)

    def selected(self, taxonomy_type: Union[TaxonomyType, str]) -> List[Slug]:
        if TaxonomyType.parse(taxonomy_type) is TaxonomyType.SKILL:
            return self.skills
        return self.domains

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, filtering out None values."""
        return {k: v for k, v in self.__dict__.items() if v is not None}

    def to_query_params(self) -> Dict[str, str]:
        """
        Build query parameters for the registry search API.

        Skills, domains, chains and owners are comma-joined. AND is the backend
        default, so filterMode is only sent for OR.
        """
        params: Dict[str, str] = {}
        if self.skills:
            params["skills"] = serialize_slug_list(self.skills)
        if self.domains:
            params["domains"] = serialize_slug_list(self.domains)
        if self.filterMode == "OR":
            params["filterMode"] = "OR"
        if self.chains:
            params["chains"] = ",".join(str(chain_id) for chain_id in self.chains)
        if self.owners:
            params["owners"] = ",".join(self.owners)
        if self.active is not None:
            params["active"] = "true" if self.active else "false"
        return params

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> TaxonomyFilter:
        """
        Parse query parameters back into a filter.

        Values may be comma-separated strings or lists (repeated parameters).
        Unknown filter modes fall back to AND.
        """
        mode = str(params.get("filterMode") or "AND").upper()
        if mode not in FILTER_MODES:
            mode = "AND"

        chains = None
        if params.get("chains"):
            chains = []
            for value in parse_slug_list(params["chains"]):
                try:
                    chains.append(int(value))
                except ValueError:
                    continue

        owners = parse_slug_list(params["owners"]) if params.get("owners") else None

        active = None
        active_param = params.get("active")
        if active_param == "true" or active_param is True:
            active = True
        elif active_param == "false" or active_param is False:
            active = False

        return cls(
            skills=parse_slug_list(params.get("skills")),
            domains=parse_slug_list(params.get("domains")),
            filterMode=mode,  # type: ignore[arg-type]
            chains=chains,
            owners=owners,
            active=active,
        )
