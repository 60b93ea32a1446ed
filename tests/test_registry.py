"""Tests for roux.registry module.

Tests RecipeRegistry loading, caching, versioning and content hashing.
"""

import json
from pathlib import Path

import pytest
import yaml

from roux.registry import RecipeNotFoundError, RecipeRegistry, RecipeValidationError


def _write_yaml(path: Path, data: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f)


def _recipe(recipe_id: str, **extra) -> dict:
    return {
        "recipe_id": recipe_id,
        "version": "1.0",
        "operations": [{"op": "Fork", "args": [",", ";", False]}, {"op": "Merge"}],
        **extra,
    }


@pytest.fixture
def recipes_dir(tmp_path):
    return tmp_path / "recipes"


class TestLoad:
    """Tests for RecipeRegistry.load."""

    def test_load_yaml(self, recipes_dir):
        _write_yaml(recipes_dir / "split.yaml", _recipe("split"))
        recipe_def = RecipeRegistry(recipes_dir).load("split")
        assert recipe_def.recipe_id == "split"
        assert len(recipe_def.operations) == 2

    def test_load_json_in_subdirectory(self, recipes_dir):
        path = recipes_dir / "network" / "hosts.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps(_recipe("hosts")))
        assert RecipeRegistry(recipes_dir).load("hosts").recipe_id == "hosts"

    def test_yaml_preferred_over_json(self, recipes_dir):
        _write_yaml(recipes_dir / "r.yaml", _recipe("r", description="yaml"))
        (recipes_dir / "r.json").write_text(json.dumps(_recipe("r", description="json")))
        assert RecipeRegistry(recipes_dir).load("r").description == "yaml"

    def test_not_found(self, recipes_dir):
        with pytest.raises(RecipeNotFoundError, match="not found: missing"):
            RecipeRegistry(recipes_dir).load("missing")

    def test_id_mismatch(self, recipes_dir):
        _write_yaml(recipes_dir / "a.yaml", _recipe("b"))
        with pytest.raises(RecipeValidationError, match="Recipe ID mismatch"):
            RecipeRegistry(recipes_dir).load("a")

    def test_invalid_definition(self, recipes_dir):
        _write_yaml(recipes_dir / "bad.yaml", {"recipe_id": "bad", "operations": [{"args": []}]})
        with pytest.raises(RecipeValidationError, match="Invalid RecipeDef"):
            RecipeRegistry(recipes_dir).load("bad")

    def test_unparseable_file(self, recipes_dir):
        recipes_dir.mkdir()
        (recipes_dir / "broken.json").write_text("{not json")
        with pytest.raises(RecipeValidationError, match="Failed to load"):
            RecipeRegistry(recipes_dir).load("broken")

    def test_version_match(self, recipes_dir):
        _write_yaml(recipes_dir / "r.yaml", _recipe("r"))
        assert RecipeRegistry(recipes_dir).load("r", version="1.0").version == "1.0"

    def test_version_mismatch(self, recipes_dir):
        _write_yaml(recipes_dir / "r.yaml", _recipe("r"))
        with pytest.raises(RecipeNotFoundError, match="Version mismatch"):
            RecipeRegistry(recipes_dir).load("r", version="2.0")

    def test_cached(self, recipes_dir):
        _write_yaml(recipes_dir / "r.yaml", _recipe("r"))
        registry = RecipeRegistry(recipes_dir)
        first = registry.load("r")
        (recipes_dir / "r.yaml").unlink()
        assert registry.load("r") is first


class TestListing:
    """Tests for list_recipes."""

    def test_missing_directory(self, recipes_dir):
        assert RecipeRegistry(recipes_dir).list_recipes() == []

    def test_lists_sorted_ids(self, recipes_dir):
        _write_yaml(recipes_dir / "b.yaml", _recipe("b"))
        _write_yaml(recipes_dir / "sub" / "a.yml", _recipe("a"))
        assert RecipeRegistry(recipes_dir).list_recipes() == ["a", "b"]

    def test_deprecated_skipped(self, recipes_dir):
        _write_yaml(recipes_dir / "_deprecated" / "old.yaml", _recipe("old"))
        assert RecipeRegistry(recipes_dir).list_recipes() == []


class TestHashing:
    """Tests for content addressing."""

    def test_hash_is_stable(self, recipes_dir):
        _write_yaml(recipes_dir / "r.yaml", _recipe("r"))
        registry = RecipeRegistry(recipes_dir)
        recipe_def = registry.load("r")
        assert registry.compute_hash(recipe_def) == registry.compute_hash(recipe_def)
        assert len(registry.compute_hash(recipe_def)) == 64
