"""Tests for definition file discovery."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dependency_analyzer.discovery import discover, find_managed_files
from dependency_analyzer.exceptions import DiscoveryError
from dependency_analyzer.managers.registry import (
    PackageManagerDescriptor,
    create_default_registry,
)
from dependency_analyzer.managers.unmanaged import Unmanaged


@pytest.fixture
def managers() -> list[PackageManagerDescriptor]:
    return create_default_registry().list_all()


def _by_name(mapping) -> dict[str, list[Path]]:
    return {m.name: files for m, files in mapping.items()}


class TestFindManagedFiles:
    def test_podfile_only(self, tmp_path, managers):
        (tmp_path / "Podfile").write_text("pod 'Alamofire'\n")
        found = _by_name(find_managed_files(tmp_path, managers))
        assert found == {"CocoaPods": [tmp_path / "Podfile"]}

    def test_empty_directory(self, tmp_path, managers):
        assert find_managed_files(tmp_path, managers) == {}

    def test_nested_and_sorted(self, tmp_path, managers):
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "b" / "requirements.txt").write_text("")
        (tmp_path / "a" / "requirements.txt").write_text("")
        (tmp_path / "requirements.txt").write_text("")
        found = _by_name(find_managed_files(tmp_path, managers))
        assert found["PIP"] == [
            tmp_path / "requirements.txt",
            tmp_path / "a" / "requirements.txt",
            tmp_path / "b" / "requirements.txt",
        ]

    def test_exact_name_match_only(self, tmp_path, managers):
        (tmp_path / "Podfile.bak").write_text("")
        (tmp_path / "my-requirements.txt").write_text("")
        assert find_managed_files(tmp_path, managers) == {}

    def test_file_claimed_by_several_managers(self, tmp_path):
        (tmp_path / "Podfile").write_text("")
        first = PackageManagerDescriptor("First", "", "", ("Podfile",), factory=lambda c: None)
        second = PackageManagerDescriptor("Second", "", "", ("Podfile",), factory=lambda c: None)
        found = find_managed_files(tmp_path, [first, second])
        assert found == {first: [tmp_path / "Podfile"], second: [tmp_path / "Podfile"]}

    def test_vcs_directories_skipped(self, tmp_path, managers):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "requirements.txt").write_text("")
        assert find_managed_files(tmp_path, managers) == {}

    def test_missing_root_raises(self, tmp_path, managers):
        with pytest.raises(DiscoveryError):
            find_managed_files(tmp_path / "missing", managers)

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can read everything"
    )
    def test_unreadable_directory_raises(self, tmp_path, managers):
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0)
        try:
            with pytest.raises(DiscoveryError):
                find_managed_files(tmp_path, managers)
        finally:
            locked.chmod(0o755)


class TestDiscover:
    def test_podfile_only_no_fallback(self, tmp_path, managers):
        (tmp_path / "Podfile").write_text("")
        found = _by_name(discover(tmp_path, managers))
        assert found == {"CocoaPods": [tmp_path / "Podfile"]}

    def test_empty_directory_falls_back_to_unmanaged(self, tmp_path, managers):
        found = discover(tmp_path, managers)
        assert found == {Unmanaged: [tmp_path]}

    def test_fallback_when_only_subdirectories_have_files(self, tmp_path, managers):
        (tmp_path / "ios").mkdir()
        (tmp_path / "ios" / "Podfile").write_text("")
        found = _by_name(discover(tmp_path, managers))
        assert found == {
            "CocoaPods": [tmp_path / "ios" / "Podfile"],
            "Unmanaged": [tmp_path],
        }

    def test_single_manager_with_file_path(self, tmp_path):
        manifest = tmp_path / "deps.txt"
        manifest.write_text("flask==2.0\n")
        pip = create_default_registry().require("pip")
        assert discover(manifest, [pip]) == {pip: [manifest]}

    def test_several_managers_with_file_path_raises(self, tmp_path, managers):
        manifest = tmp_path / "deps.txt"
        manifest.write_text("")
        with pytest.raises(DiscoveryError):
            discover(manifest, managers)
