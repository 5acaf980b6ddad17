"""
Shared fixtures: a small fixture taxonomy and a clean default taxonomy.
"""

import pytest

from agent0_taxonomy.core.loader import tree_from_dict
from agent0_taxonomy.core.models import TaxonomyType
from agent0_taxonomy.core.taxonomy import Taxonomy, reset_default_taxonomy


SKILLS_FIXTURE = {
    "version": "0.8.0",
    "categories": [
        {
            "id": 1,
            "slug": "natural_language_processing",
            "name": "Natural Language Processing",
            "children": [
                {"id": 101, "slug": "summarization", "name": "Summarization", "parentId": 1},
                {"id": 102, "slug": "translation", "name": "Translation", "parentId": 1},
            ],
        },
        {"id": 2, "slug": "audio", "name": "Audio"},
    ],
}

DOMAINS_FIXTURE = {
    "version": "0.8.0",
    "categories": [
        {
            "id": 1,
            "slug": "technology",
            "name": "Technology",
            "description": "Computing and engineering",
            "children": [
                {"id": 101, "slug": "blockchain", "name": "Blockchain", "parentId": 1},
                {"id": 102, "slug": "iot", "name": "Internet of Things (IoT)", "parentId": 1},
            ],
        },
        {
            "id": 2,
            "slug": "healthcare",
            "name": "Healthcare",
            "children": [
                {"id": 201, "slug": "telemedicine", "name": "Telemedicine", "parentId": 2},
                # Same bare slug as technology/blockchain, different branch
                {"id": 202, "slug": "blockchain", "name": "Health Records on Chain", "parentId": 2},
            ],
        },
        {"id": 3, "slug": "legal", "name": "Legal"},
    ],
}


@pytest.fixture
def skills_tree():
    return tree_from_dict(TaxonomyType.SKILL, SKILLS_FIXTURE)


@pytest.fixture
def domains_tree():
    return tree_from_dict(TaxonomyType.DOMAIN, DOMAINS_FIXTURE)


@pytest.fixture
def small_taxonomy(skills_tree, domains_tree):
    """Fixture taxonomy: technology -> [blockchain, iot], healthcare -> [telemedicine, blockchain], legal."""
    return Taxonomy(skills=skills_tree, domains=domains_tree)


@pytest.fixture(autouse=True)
def fresh_default_taxonomy(monkeypatch):
    """Every test starts from the packaged data, whatever the environment says."""
    monkeypatch.delenv("OASF_TAXONOMY_DIR", raising=False)
    reset_default_taxonomy()
    yield
    reset_default_taxonomy()
