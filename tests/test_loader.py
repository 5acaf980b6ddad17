"""
Tests for taxonomy loading, validation and flat index construction.
"""

import json

import pytest

from agent0_taxonomy.core.flat_index import build_flat_index
from agent0_taxonomy.core.loader import (
    DEFAULT_TAXONOMY_DIR,
    get_taxonomy_dir,
    load_taxonomy_tree,
    tree_from_dict,
)
from agent0_taxonomy.core.models import ChildCategory, TaxonomyType, TopLevelCategory

from conftest import DOMAINS_FIXTURE


def _tree(categories, version="0.8.0"):
    return {"version": version, "categories": categories}


class TestGetTaxonomyDir:
    def test_default(self):
        assert get_taxonomy_dir() == DEFAULT_TAXONOMY_DIR
        assert (DEFAULT_TAXONOMY_DIR / "all_skills.json").is_file()

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OASF_TAXONOMY_DIR", str(tmp_path))
        assert get_taxonomy_dir() == tmp_path

    def test_argument_wins_over_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OASF_TAXONOMY_DIR", "/does/not/exist")
        assert get_taxonomy_dir(tmp_path) == tmp_path


class TestLoadTaxonomyTree:
    def test_packaged_domains(self):
        tree = load_taxonomy_tree("domain")
        assert tree.type is TaxonomyType.DOMAIN
        assert tree.version == "0.8.0"
        assert tree.categories[0].children[8].slug == "blockchain"

    def test_custom_directory(self, tmp_path):
        (tmp_path / "all_domains.json").write_text(json.dumps(DOMAINS_FIXTURE))
        tree = load_taxonomy_tree(TaxonomyType.DOMAIN, tmp_path)
        assert [c.slug for c in tree.categories] == ["technology", "healthcare", "legal"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_taxonomy_tree("skill", tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / "all_skills.json").write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_taxonomy_tree("skill", tmp_path)


class TestTreeFromDict:
    def test_builds_typed_categories(self):
        tree = tree_from_dict("domain", DOMAINS_FIXTURE)
        technology = tree.categories[0]
        assert isinstance(technology, TopLevelCategory)
        assert isinstance(technology.children[0], ChildCategory)
        assert technology.children[0].parentId == 1
        assert tree.categories[2].children == ()

    def test_child_parent_id_inferred(self):
        tree = tree_from_dict("skill", _tree([
            {"id": 1, "slug": "audio", "name": "Audio", "children": [
                {"id": 101, "slug": "speech_recognition", "name": "Speech Recognition"},
            ]},
        ]))
        assert tree.categories[0].children[0].parentId == 1

    def test_to_dict_round_trip(self):
        assert tree_from_dict("domain", DOMAINS_FIXTURE).to_dict() == DOMAINS_FIXTURE

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"categories": []}, "missing a version"),
            ({"version": "0.8.0"}, "missing its categories"),
            (_tree([{"id": 1, "name": "Audio"}]), "missing slug"),
            (_tree([{"id": "1", "slug": "audio", "name": "Audio"}]), "must be an integer"),
            (_tree([{"id": 1, "slug": "audio/speech", "name": "Audio"}]), "must not contain"),
            (_tree([{"id": 1, "slug": "audio", "name": 5}]), "non-empty name"),
            (_tree([{"id": 1, "slug": "audio", "name": "  "}]), "non-empty name"),
            (_tree([{"id": 1, "slug": "audio", "name": "Audio", "parentId": 3}]), "must not declare a parentId"),
            (
                _tree([{"id": 1, "slug": "audio", "name": "Audio", "children": [
                    {"id": 101, "slug": "speech", "name": "Speech", "parentId": 2},
                ]}]),
                "declares parentId 2",
            ),
            (
                _tree([{"id": 1, "slug": "audio", "name": "Audio", "children": [
                    {"id": 101, "slug": "speech", "name": "Speech", "children": [
                        {"id": 10101, "slug": "asr", "name": "ASR"},
                    ]},
                ]}]),
                "limited to one level",
            ),
        ],
    )
    def test_rejects_malformed_data(self, data, message):
        with pytest.raises(ValueError, match=message):
            tree_from_dict("skill", data)


class TestBuildFlatIndex:
    def test_composite_keys(self, domains_tree):
        index = build_flat_index(domains_tree)
        assert list(index.by_slug) == [
            "technology",
            "technology/blockchain",
            "technology/iot",
            "healthcare",
            "healthcare/telemedicine",
            "healthcare/blockchain",
            "legal",
        ]
        assert "blockchain" not in index.by_slug
        assert index.by_id[202] is index.by_slug["healthcare/blockchain"]

    def test_case_insensitive_keys(self):
        tree = tree_from_dict("domain", _tree([{"id": 1, "slug": "Finance", "name": "Finance"}]))
        index = build_flat_index(tree)
        assert index.get(" FINANCE ").name == "Finance"

    def test_read_only(self, domains_tree):
        index = build_flat_index(domains_tree)
        with pytest.raises(TypeError):
            index.by_slug["legal"] = None

    def test_duplicate_composite_slug(self):
        tree = tree_from_dict("domain", _tree([
            {"id": 1, "slug": "energy", "name": "Energy"},
            {"id": 2, "slug": "energy", "name": "Energy (again)"},
        ]))
        with pytest.raises(ValueError, match="Duplicate domain slug 'energy'"):
            build_flat_index(tree)

    def test_duplicate_child_slug_in_same_branch(self):
        tree = tree_from_dict("skill", _tree([
            {"id": 1, "slug": "audio", "name": "Audio", "children": [
                {"id": 101, "slug": "tts", "name": "Text to Speech"},
                {"id": 102, "slug": "TTS", "name": "Text to Speech 2"},
            ]},
        ]))
        with pytest.raises(ValueError, match="audio/tts"):
            build_flat_index(tree)

    def test_duplicate_id(self):
        tree = tree_from_dict("domain", _tree([
            {"id": 1, "slug": "energy", "name": "Energy", "children": [
                {"id": 1, "slug": "solar", "name": "Solar"},
            ]},
        ]))
        with pytest.raises(ValueError, match="Duplicate domain id 1"):
            build_flat_index(tree)
