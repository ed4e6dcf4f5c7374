"""Builtin assembly detectors and the factory used by the pipeline."""

from __future__ import annotations

from .base import BuiltinAssemblyDetector
from .bee import BeeArtifactDetector
from .memo import MemoizingDetector
from .shims import ShimFolderDetector, read_editor_version
from ..constants import DEFAULT_SHIM_PATH_TEMPLATE

DETECTORS = ("shims", "bee")


def create_detector(
    kind: str = "shims", *, shim_path_template: str = DEFAULT_SHIM_PATH_TEMPLATE
) -> BuiltinAssemblyDetector:
    """Return a memoising detector of the requested kind."""
    key = kind.lower()
    if key == "shims":
        return MemoizingDetector(ShimFolderDetector(shim_path_template))
    if key == "bee":
        return MemoizingDetector(BeeArtifactDetector())
    raise ValueError(f"Unknown detector '{kind}', expected one of: {', '.join(DETECTORS)}")


__all__ = [
    "BeeArtifactDetector",
    "BuiltinAssemblyDetector",
    "DETECTORS",
    "MemoizingDetector",
    "ShimFolderDetector",
    "create_detector",
    "read_editor_version",
]
