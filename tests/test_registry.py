"""Tests for PackageManagerRegistry."""

from __future__ import annotations

import pytest

from dependency_analyzer.exceptions import PackageManagerNotFoundError
from dependency_analyzer.managers.cocoapods import CocoaPods
from dependency_analyzer.managers.registry import (
    PackageManagerDescriptor,
    PackageManagerRegistry,
    create_default_registry,
)


class TestPackageManagerRegistry:
    def test_register_and_get(self):
        registry = PackageManagerRegistry()
        desc = PackageManagerDescriptor(
            name="Test",
            homepage_url="",
            primary_language="None",
            definition_files=("test.lock",),
            factory=CocoaPods,
        )
        registry.register(desc)
        assert registry.get("Test") is desc
        assert registry.get("nonexistent") is None

    def test_get_is_case_insensitive(self):
        registry = create_default_registry()
        assert registry.get("cocoapods").name == "CocoaPods"
        assert registry.get("pip").name == "PIP"

    def test_require_unknown_raises(self):
        with pytest.raises(PackageManagerNotFoundError) as exc_info:
            create_default_registry().require("maven")
        assert "CocoaPods" in exc_info.value.known

    def test_default_managers(self):
        names = {d.name for d in create_default_registry().list_all()}
        assert names == {"Cargo", "CocoaPods", "PIP"}

    def test_find_by_definition_file(self):
        registry = create_default_registry()
        assert [d.name for d in registry.find_by_definition_file("Podfile.lock")] == ["CocoaPods"]
        assert registry.find_by_definition_file("pom.xml") == []

    def test_create_passes_config(self, config):
        manager = create_default_registry().require("CocoaPods").create(config)
        assert isinstance(manager, CocoaPods)
        assert manager.config is config
        assert str(manager) == "CocoaPods"
