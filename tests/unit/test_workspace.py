"""Unit tests for projects, documents and cancellation."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from autoargs.core.errors import DocumentNotFoundError, OperationCancelledError
from autoargs.syntax.parser import parse_compilation_unit
from autoargs.workspace.cancellation import CancellationToken
from autoargs.workspace.project import Project, references_from_project_file


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_not_cancelled_by_default(self) -> None:
        token = CancellationToken()
        assert not token.is_cancellation_requested
        token.throw_if_cancellation_requested()

    def test_cancel(self) -> None:
        token = CancellationToken()
        token.cancel()
        assert token.is_cancellation_requested
        with pytest.raises(OperationCancelledError):
            token.throw_if_cancellation_requested()


class TestDocument:
    """Tests for Document."""

    def test_syntax_root_is_cached(self) -> None:
        document = Project.from_sources({"A.cs": "class A {}"}).get_document("A.cs")
        first = asyncio.run(document.get_syntax_root())
        assert asyncio.run(document.get_syntax_root()) is first
        assert first.full_text == "class A {}"

    def test_semantic_model_is_cached(self) -> None:
        document = Project.from_sources({"A.cs": "class A {}"}, ["NSubstitute"]).get_document(
            "A.cs"
        )
        model = asyncio.run(document.get_semantic_model())
        assert asyncio.run(document.get_semantic_model()) is model
        assert model.external_dependency_names() == ["NSubstitute"]
        assert "A" in model.symbol_table.types

    def test_cancelled_requests(self) -> None:
        document = Project.from_sources({"A.cs": "class A {}"}).get_document("A.cs")
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            asyncio.run(document.get_syntax_root(token))
        with pytest.raises(OperationCancelledError):
            asyncio.run(document.get_semantic_model(token))

    def test_with_syntax_root_creates_new_snapshot(self) -> None:
        project = Project.from_sources({"A.cs": "class A {}", "B.cs": "class B {}"})
        document = project.get_document("A.cs")
        other_root = project.get_document("B.cs").parse()

        changed = document.with_syntax_root(parse_compilation_unit("class C {}"))

        assert changed.text == "class C {}"
        assert changed.project is not project
        assert document.text == "class A {}"
        # unchanged documents keep their trees
        assert changed.project.get_document("B.cs").parse() is other_root
        assert "C" in changed.project.get_symbol_table().types
        assert "A" in project.get_symbol_table().types


class TestProject:
    """Tests for Project."""

    def test_unknown_document(self) -> None:
        project = Project.from_sources({"A.cs": "class A {}"})
        with pytest.raises(DocumentNotFoundError):
            project.get_document("Missing.cs")

    def test_from_directory(self, csharp_sample_path: Path) -> None:
        project = Project.from_directory(csharp_sample_path)
        names = sorted(Path(p).name for p in project.document_paths)
        assert names == ["IOrderService.cs", "Order.cs", "OrderProcessor.cs", "OrderTests.cs"]
        assert "NSubstitute" in project.references
        assert "xunit" in project.references
        assert "Shop.Services.IOrderService" in project.get_symbol_table().types

    def test_from_directory_extra_references(self, tmp_path: Path) -> None:
        (tmp_path / "A.cs").write_text("class A {}")
        project = Project.from_directory(tmp_path, ["NSubstitute"])
        assert project.references == ("NSubstitute",)
        assert project.get_document(str((tmp_path / "A.cs").resolve())).text == "class A {}"

    def test_skips_build_output(self, tmp_path: Path) -> None:
        (tmp_path / "A.cs").write_text("class A {}")
        (tmp_path / "obj").mkdir()
        (tmp_path / "obj" / "Generated.cs").write_text("class G {}")
        project = Project.from_directory(tmp_path)
        assert [Path(p).name for p in project.document_paths] == ["A.cs"]


class TestReferencesFromProjectFile:
    """Tests for reading csproj references."""

    def test_sdk_style(self, tmp_path: Path) -> None:
        project_file = tmp_path / "Tests.csproj"
        project_file.write_text(
            '<Project Sdk="Microsoft.NET.Sdk">'
            "<ItemGroup>"
            '<PackageReference Include="NSubstitute" Version="5.1.0" />'
            '<PackageReference Include="xunit" Version="2.6.6" />'
            "</ItemGroup>"
            "</Project>"
        )
        assert references_from_project_file(project_file) == ["NSubstitute", "xunit"]

    def test_legacy_namespaced(self, tmp_path: Path) -> None:
        project_file = tmp_path / "Tests.csproj"
        project_file.write_text(
            '<Project xmlns="http://schemas.microsoft.com/developer/msbuild/2003">'
            "<ItemGroup>"
            '<Reference Include="NSubstitute, Version=4.0.0.0, Culture=neutral" />'
            "</ItemGroup>"
            "</Project>"
        )
        assert references_from_project_file(project_file) == [
            "NSubstitute, Version=4.0.0.0, Culture=neutral"
        ]

    def test_malformed_file(self, tmp_path: Path) -> None:
        project_file = tmp_path / "Broken.csproj"
        project_file.write_text("<Project>")
        assert references_from_project_file(project_file) == []
