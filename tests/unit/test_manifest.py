"""Tests for intent.toml loading."""

import tomllib
from pathlib import Path

import pytest

from intentc.core.manifest import (
    DEFAULT_ENTRY,
    MANIFEST_NAME,
    find_manifest,
    load_manifest,
)


def write_manifest(directory: Path, content: str) -> Path:
    path = directory / MANIFEST_NAME
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadManifest:
    def test_full_manifest(self, tmp_path):
        path = write_manifest(
            tmp_path,
            '[project]\nname = "shop"\nentry = "src/shop.intent"\n\n'
            "[validation]\nwarnings_as_errors = true\n",
        )
        manifest = load_manifest(path)

        assert manifest.name == "shop"
        assert manifest.entry == "src/shop.intent"
        assert manifest.validation.warnings_as_errors is True
        assert manifest.entry_path == tmp_path / "src" / "shop.intent"

    def test_defaults(self, tmp_path):
        manifest = load_manifest(write_manifest(tmp_path, ""))

        assert manifest.name == tmp_path.name
        assert manifest.entry == DEFAULT_ENTRY
        assert manifest.validation.warnings_as_errors is False

    def test_invalid_toml(self, tmp_path):
        with pytest.raises(tomllib.TOMLDecodeError):
            load_manifest(write_manifest(tmp_path, "[project\n"))


class TestFindManifest:
    def test_finds_in_parent(self, tmp_path):
        path = write_manifest(tmp_path, "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_manifest(nested) == path.resolve()

    def test_start_may_be_a_file(self, tmp_path):
        path = write_manifest(tmp_path, "")
        source = tmp_path / "app.intent"
        source.write_text("", encoding="utf-8")

        assert find_manifest(source) == path.resolve()

    def test_nearest_manifest_wins(self, tmp_path):
        write_manifest(tmp_path, "")
        inner_dir = tmp_path / "inner"
        inner_dir.mkdir()
        inner = write_manifest(inner_dir, "")

        assert find_manifest(inner_dir) == inner.resolve()

    def test_not_found(self, tmp_path):
        # tmp_path lives under the system temp dir, which holds no intent.toml
        assert find_manifest(tmp_path) is None
