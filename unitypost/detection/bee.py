"""Detect builtin assemblies from the build artifacts in the project's Library folder."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import List

from ..errors import DetectionError
from ..models import AssemblySet
from .base import BuiltinAssemblyDetector

_SHIM_REFERENCE_RE = re.compile(r"(?<=/shims/netstandard/)[^\"/]+(?=\.dll)", re.IGNORECASE)


class BeeArtifactDetector(BuiltinAssemblyDetector):
    """Reads the shim references Unity's build system recorded in `Library/Bee/*.json`.

    Only works once Unity has compiled the project, and ignores the installation
    path entirely.
    """

    async def detect(self, installation_base: Path, project_root: Path) -> AssemblySet:
        bee_folder = project_root / "Library" / "Bee"
        if not bee_folder.is_dir():
            raise DetectionError(
                f"'{bee_folder}' does not exist. Open the project in Unity once so it is generated."
            )
        names = await asyncio.to_thread(_scan_bee_folder, bee_folder)
        return AssemblySet(names)


def _scan_bee_folder(folder: Path) -> List[str]:
    names: List[str] = []
    for artifact in sorted(folder.glob("*.json")):
        try:
            text = artifact.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DetectionError(f"Could not read build artifact '{artifact}': {exc}") from exc
        names.extend(_SHIM_REFERENCE_RE.findall(text.replace("\\\\", "/").replace("\\", "/")))
    return names


__all__ = ["BeeArtifactDetector"]
