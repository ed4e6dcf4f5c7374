"""Detect builtin assemblies from the .NET Standard shims of the installed editor."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from ..constants import (
    DEFAULT_SHIM_PATH_TEMPLATE,
    EDITOR_VERSION_PATTERN,
    LIBRARY_SUFFIX,
    PROJECT_VERSION_FILE,
    VERSION_SCAN_TIMEOUT,
)
from ..errors import DetectionError, VersionNotFoundError
from ..logging import get_logger
from ..models import AssemblySet
from .base import BuiltinAssemblyDetector

_VERSION_RE = re.compile(EDITOR_VERSION_PATTERN)


async def read_editor_version(project_root: Path, *, timeout: float = VERSION_SCAN_TIMEOUT) -> str:
    """Return the editor version recorded in `ProjectSettings/ProjectVersion.txt`."""
    version_file = project_root.joinpath(*PROJECT_VERSION_FILE)
    try:
        text = await asyncio.to_thread(version_file.read_text, encoding="utf-8")
    except FileNotFoundError as exc:
        raise DetectionError(
            f"Could not find '{version_file}'. Has the project been opened in Unity at least once?"
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DetectionError(f"Could not read '{version_file}': {exc}") from exc

    try:
        match = await asyncio.wait_for(asyncio.to_thread(_VERSION_RE.search, text), timeout)
    except asyncio.TimeoutError as exc:
        raise DetectionError(f"Timed out scanning '{version_file}' for the editor version") from exc
    if match is None:
        raise DetectionError(f"'{version_file}' does not record an m_EditorVersion")
    return match.group(1)


class ShimFolderDetector(BuiltinAssemblyDetector):
    """Lists the shim assemblies inside the editor install the project was last opened with."""

    def __init__(
        self,
        shim_path_template: str = DEFAULT_SHIM_PATH_TEMPLATE,
        *,
        timeout: float = VERSION_SCAN_TIMEOUT,
    ) -> None:
        self.shim_path_template = shim_path_template
        self.timeout = timeout
        self.logger = get_logger("detection.shims")

    async def detect(self, installation_base: Path, project_root: Path) -> AssemblySet:
        version = await read_editor_version(project_root, timeout=self.timeout)
        version_root = installation_base / version
        if not version_root.is_dir():
            raise VersionNotFoundError(version, str(version_root))

        shim_folder = installation_base / self.shim_path_template.format(version=version)
        if not shim_folder.is_dir():
            raise DetectionError(
                f"Unity {version} is installed but its shim folder '{shim_folder}' is missing"
            )

        names = await asyncio.to_thread(_list_library_stems, shim_folder)
        self.logger.debug("Found %d shim assemblies for Unity %s", len(names), version)
        return AssemblySet(names)


def _list_library_stems(folder: Path) -> list[str]:
    return sorted(
        entry.name[: -len(LIBRARY_SUFFIX)]
        for entry in folder.iterdir()
        if entry.is_file() and entry.name.lower().endswith(LIBRARY_SUFFIX)
    )


__all__ = ["ShimFolderDetector", "read_editor_version"]
