"""Tests for error collection over dependency trees."""

from __future__ import annotations

from dependency_analyzer.aggregator import AnalyzerResultBuilder
from dependency_analyzer.collector import collect_errors, has_errors, merge_errors
from dependency_analyzer.models import (
    CuratedPackage,
    Identifier,
    Package,
    PackageReference,
    Project,
    ProjectAnalyzerResult,
    Scope,
)
from dependency_analyzer.models.dependency import iter_references

X = Identifier("Gradle", "com.example", "x", "1.0")
Y = Identifier("Gradle", "com.example", "y", "1.0")
Z = Identifier("Gradle", "com.example", "z", "1.0")
PROJECT_ID = Identifier("Gradle", "com.example", "app", "1.0")


def _project(*scopes: Scope) -> Project:
    return Project(id=PROJECT_ID, scopes=scopes)


def _result(config, project: Project, errors=()) -> ProjectAnalyzerResult:
    packages = tuple(CuratedPackage(Package(id=i)) for i in project.collect_dependency_ids())
    return ProjectAnalyzerResult(config=config, project=project, packages=packages, errors=errors)


class TestIterReferences:
    def test_preorder_keeps_child_order(self):
        tree = PackageReference(
            X,
            dependencies=(
                PackageReference(Y, dependencies=(PackageReference(Z),)),
                PackageReference(Z),
            ),
        )
        assert [r.id for r in iter_references([tree, PackageReference(Y)])] == [X, Y, Z, Z, Y]


class TestHasErrors:
    def test_clean_tree(self, config):
        tree = PackageReference(X, dependencies=(PackageReference(Y),))
        result = _result(config, _project(Scope("compile", (tree,))))
        assert not result.has_errors()

    def test_error_deep_in_tree(self, config):
        tree = PackageReference(
            X,
            dependencies=(
                PackageReference(Y, dependencies=(PackageReference(Z, errors=("boom",)),)),
            ),
        )
        result = _result(config, _project(Scope("compile"), Scope("runtime", (tree,))))
        assert result.has_errors()

    def test_top_level_error_only(self, config):
        result = _result(config, _project(), errors=("tool crashed",))
        assert result.has_errors()

    def test_function_form(self):
        assert not has_errors(_project())
        assert has_errors(_project(), ["x"])


class TestCollectErrors:
    def test_deduplicates_per_identifier(self, config):
        tree = PackageReference(
            Y, dependencies=(PackageReference(X, errors=("e1", "e1", "e2")),)
        )
        result = _result(config, _project(Scope("compile", (tree,))))
        assert result.collect_errors() == {X: ["e1", "e2"]}

    def test_errors_filed_under_own_identifier(self, config):
        tree = PackageReference(
            X,
            errors=("x failed",),
            dependencies=(PackageReference(Y, errors=("x failed",)),),
        )
        result = _result(config, _project(Scope("compile", (tree,))), errors=("top",))
        assert result.collect_errors() == {
            PROJECT_ID: ["top"],
            X: ["x failed"],
            Y: ["x failed"],
        }

    def test_same_identifier_in_several_places(self, config):
        project = _project(
            Scope("compile", (PackageReference(X, errors=("e1",)),)),
            Scope("test", (PackageReference(Y, dependencies=(PackageReference(X, errors=("e2", "e1")),)),)),
        )
        assert collect_errors(project) == {X: ["e1", "e2"]}

    def test_clean_tree_is_empty(self, config):
        result = _result(config, _project(Scope("compile", (PackageReference(X),))))
        assert result.collect_errors() == {}

    def test_merge_errors(self):
        merged = merge_errors({X: ["a", "b"]}, {X: ["b", "c"], Y: []}, {Z: ["a"]})
        assert merged == {X: ["a", "b", "c"], Z: ["a"]}


class TestAggregateErrors:
    def test_aggregate_collects_from_all_projects(self, config):
        other = Identifier("Gradle", "com.example", "lib", "1.0")
        builder = AnalyzerResultBuilder(config)
        builder.add_result(
            _result(config, _project(Scope("compile", (PackageReference(X, errors=("e1",)),))))
        )
        builder.add_result(
            _result(
                config,
                Project(id=other, scopes=(Scope("compile", (PackageReference(X, errors=("e2",)),)),)),
                errors=("lib failed",),
            )
        )
        result = builder.build()

        assert result.has_errors()
        assert result.collect_errors() == {other: ["lib failed"], X: ["e1", "e2"]}

    def test_aggregate_without_errors(self, config):
        builder = AnalyzerResultBuilder(config)
        builder.add_result(_result(config, _project(Scope("compile", (PackageReference(X),)))))
        result = builder.build()
        assert not result.has_errors()
        assert result.collect_errors() == {}
