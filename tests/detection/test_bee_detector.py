"""Tests for the build-artifact detector."""

from __future__ import annotations

import asyncio
import json

import pytest

from unitypost.detection import BeeArtifactDetector
from unitypost.errors import DetectionError


def test_collects_shim_references_from_bee_json(package_tree) -> None:
    bee = package_tree.project_root / "Library" / "Bee"
    bee.mkdir(parents=True)
    payload = {
        "References": [
            "/opt/Unity/Editor/Data/NetStandard/compat/2.1.0/shims/netstandard/System.Buffers.dll",
            "C:\\Unity\\Editor\\Data\\NetStandard\\compat\\2.1.0\\shims\\netstandard\\System.Memory.dll",
            "/opt/Unity/Editor/Data/Managed/UnityEngine.dll",
        ]
    }
    (bee / "backend1.json").write_text(json.dumps(payload), encoding="utf-8")
    (bee / "notes.txt").write_text("/shims/netstandard/Ignored.dll", encoding="utf-8")

    names = asyncio.run(
        BeeArtifactDetector().detect(package_tree.installation_base, package_tree.project_root)
    )

    assert sorted(names) == ["System.Buffers", "System.Memory"]


def test_missing_bee_folder_is_detection_error(package_tree) -> None:
    with pytest.raises(DetectionError, match="Library"):
        asyncio.run(
            BeeArtifactDetector().detect(package_tree.installation_base, package_tree.project_root)
        )
