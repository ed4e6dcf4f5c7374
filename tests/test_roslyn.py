"""Tests for Roslyn analyzer tagging and assembly definition scoping."""

from __future__ import annotations

import asyncio
import hashlib
import json

from unitypost.identifiers import AssetScope
from unitypost.meta import MetaFileGenerator, MetaTemplates
from unitypost.roslyn import AnalyzerScopingGenerator, build_descriptor, descriptor_name, to_namespace

DESCRIPTOR_KEYS = {
    "name",
    "rootNamespace",
    "references",
    "includePlatforms",
    "excludePlatforms",
    "allowUnsafeCode",
    "overrideReferences",
    "precompiledReferences",
    "autoReferenced",
    "defineConstraints",
    "versionDefines",
    "noEngineReferences",
}


def _generator(**kwargs) -> AnalyzerScopingGenerator:
    return AnalyzerScopingGenerator(MetaFileGenerator(), MetaTemplates(), **kwargs)


def _scope(package_tree, package: str = "foo", version: str = "1.0.0") -> AssetScope:
    return AssetScope(package=package, package_dir=package_tree.path(package), version=version)


def test_descriptor_name_only_includes_version_when_disambiguating() -> None:
    assert descriptor_name("Foo", "1.0.0", disambiguate=False) == "NuGet.Analyzers.Foo"
    assert descriptor_name("Foo", "1.0.0", disambiguate=True) == "NuGet.Analyzers.Foo.1.0.0"


def test_to_namespace_produces_valid_identifiers() -> None:
    assert to_namespace("NuGet.Analyzers.my-pkg.1.0.0-beta") == "NuGet.Analyzers.my_pkg._1._0._0_beta"


def test_build_descriptor_has_fixed_keys() -> None:
    descriptor = build_descriptor("NuGet.Analyzers.foo")
    assert set(descriptor) == DESCRIPTOR_KEYS
    assert descriptor["name"] == "NuGet.Analyzers.foo"
    assert descriptor["allowUnsafeCode"] is False


def test_tags_analyzers(package_tree) -> None:
    package_tree.libraries("foo/1.0.0/analyzers/dotnet/cs/Foo.Analyzers.dll")
    version_folder = package_tree.path("foo/1.0.0")

    outcome = asyncio.run(_generator().process(version_folder, _scope(package_tree)))

    meta = version_folder / "analyzers" / "dotnet" / "cs" / "Foo.Analyzers.dll.meta"
    content = meta.read_text(encoding="utf-8")
    assert [path.name for path in outcome.tagged] == ["Foo.Analyzers.dll"]
    assert outcome.descriptor is None
    assert "- RoslynAnalyzer" in content
    assert "Exclude Editor: 1" in content


def test_disabled_tagging_writes_nothing(package_tree) -> None:
    package_tree.libraries("foo/1.0.0/analyzers/dotnet/cs/Foo.Analyzers.dll")
    version_folder = package_tree.path("foo/1.0.0")
    generator = _generator(tag_analyzers=False, generate_assembly_definitions=True)

    outcome = asyncio.run(generator.process(version_folder, _scope(package_tree)))

    assert outcome.tagged == []
    assert [path.name for path in outcome.skipped] == ["Foo.Analyzers.dll"]
    assert not list((version_folder / "analyzers").rglob("*.meta"))
    assert not list((version_folder / "analyzers").rglob("*.asmdef"))


def test_no_analyzers_folder_is_a_no_op(package_tree) -> None:
    package_tree.libraries("foo/1.0.0/lib/netstandard2.0/Foo.dll")
    outcome = asyncio.run(
        _generator(generate_assembly_definitions=True).process(
            package_tree.path("foo/1.0.0"), _scope(package_tree)
        )
    )
    assert outcome.tagged == []
    assert outcome.descriptor is None


def test_generates_descriptor_with_seeded_meta(package_tree) -> None:
    package_tree.libraries("foo/1.0.0/analyzers/dotnet/cs/Foo.Analyzers.dll")
    version_folder = package_tree.path("foo/1.0.0")
    generator = _generator(generate_assembly_definitions=True)

    outcome = asyncio.run(generator.process(version_folder, _scope(package_tree)))

    analyzers = version_folder / "analyzers"
    assert outcome.descriptor == analyzers / "NuGet.Analyzers.foo.asmdef"
    descriptor = json.loads(outcome.descriptor.read_text(encoding="utf-8"))
    assert descriptor["name"] == "NuGet.Analyzers.foo"
    assert set(descriptor) == DESCRIPTOR_KEYS

    meta_lines = (analyzers / "NuGet.Analyzers.foo.asmdef.meta").read_text(encoding="utf-8").splitlines()
    assert meta_lines[1] == f"guid: {hashlib.md5(b'NuGet.Analyzers.foo').hexdigest()}"
    assert meta_lines[2] == "AssemblyDefinitionImporter:"

    placeholder = analyzers / "NuGet.Analyzers.foo.Placeholder.cs"
    assert "namespace NuGet.Analyzers.foo" in placeholder.read_text(encoding="utf-8")
    assert (analyzers / "NuGet.Analyzers.foo.Placeholder.cs.meta").exists()


def test_descriptor_meta_is_stable_even_with_unstable_guids(package_tree) -> None:
    package_tree.libraries("foo/1.0.0/analyzers/dotnet/cs/Foo.Analyzers.dll")
    version_folder = package_tree.path("foo/1.0.0")
    scope = AssetScope(package="foo", package_dir=package_tree.path("foo"), version="1.0.0", stable=False)
    generator = _generator(generate_assembly_definitions=True)
    meta = version_folder / "analyzers" / "NuGet.Analyzers.foo.asmdef.meta"

    asyncio.run(generator.process(version_folder, scope))
    first = meta.read_bytes()
    asyncio.run(generator.process(version_folder, scope))

    assert meta.read_bytes() == first


def test_disambiguated_descriptor_embeds_version(package_tree) -> None:
    package_tree.libraries("foo/2.0.0/analyzers/dotnet/cs/Foo.Analyzers.dll")
    version_folder = package_tree.path("foo/2.0.0")

    outcome = asyncio.run(
        _generator(generate_assembly_definitions=True).process(
            version_folder, _scope(package_tree, version="2.0.0"), disambiguate=True
        )
    )

    assert outcome.descriptor is not None
    assert outcome.descriptor.name == "NuGet.Analyzers.foo.2.0.0.asmdef"
