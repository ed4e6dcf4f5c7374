"""Tests for unitypost.identifiers."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

from unitypost import identifiers
from unitypost.identifiers import AssetScope, GuidGenerator

_HEX32 = re.compile(r"^[0-9a-f]{32}$")


def test_seeded_guid_is_md5_of_seed() -> None:
    guid = GuidGenerator().generate("NuGet.Analyzers.foo")
    assert guid == hashlib.md5(b"NuGet.Analyzers.foo").hexdigest()
    assert guid == GuidGenerator().generate("NuGet.Analyzers.foo")


def test_unseeded_guid_uses_clock(monkeypatch) -> None:
    ticks = iter([1_000, 2_000])
    monkeypatch.setattr(identifiers.time, "time_ns", lambda: next(ticks))
    generator = GuidGenerator()

    first = generator.generate()
    second = generator.generate()

    assert _HEX32.match(first)
    assert _HEX32.match(second)
    assert first != second


def test_unseeded_guids_differ_within_one_clock_tick(monkeypatch) -> None:
    monkeypatch.setattr(identifiers.time, "time_ns", lambda: 42)
    generator = GuidGenerator()

    guids = {generator.generate() for _ in range(100)}

    assert len(guids) == 100


def test_for_asset_normalises_separators_and_case() -> None:
    generator = GuidGenerator()
    a = generator.for_asset("Foo", "1.0.0", "lib\\netstandard2.0\\Foo.dll")
    b = generator.for_asset("foo", "1.0.0", "/lib/netstandard2.0/Foo.dll")
    c = generator.for_asset("foo", "2.0.0", "lib/netstandard2.0/Foo.dll")
    assert a == b
    assert a != c


def test_asset_scope_guid_is_relative_to_version_folder(tmp_path: Path) -> None:
    package_dir = tmp_path / "foo"
    scope = AssetScope(package="foo", package_dir=package_dir, version="1.0.0")
    library = package_dir / "1.0.0" / "lib" / "netstandard2.0" / "Foo.dll"

    assert scope.root == package_dir / "1.0.0"
    assert scope.guid_for(library) == GuidGenerator().for_asset(
        "foo", "1.0.0", "lib/netstandard2.0/Foo.dll"
    )


def test_asset_scope_without_stability_defers_to_writer(tmp_path: Path) -> None:
    scope = AssetScope(package="foo", package_dir=tmp_path, stable=False)
    assert scope.guid_for(tmp_path / "Foo.dll") is None
