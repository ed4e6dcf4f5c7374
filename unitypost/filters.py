"""Removal of reference and native runtime libraries Unity cannot consume."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from .fs import delete_file, find_libraries
from .logging import get_logger


class NativeLibraryFilter:
    """Drops libraries under `ref/` and `runtimes/` of a package version folder.

    Reference assemblies clash with Unity's own reference set, and Unity cannot
    pick the right native binary per platform, so both are removed outright.
    Deletion errors propagate.
    """

    def __init__(self) -> None:
        self.logger = get_logger("filters")

    async def apply(self, version_folder: Path) -> List[Path]:
        dropped = await self.drop_reference_assemblies(version_folder)
        dropped.extend(await self.drop_runtime_libraries(version_folder))
        return dropped

    async def drop_reference_assemblies(self, version_folder: Path) -> List[Path]:
        return await self._drop(version_folder, "ref", "unsupported ref assembly")

    async def drop_runtime_libraries(self, version_folder: Path) -> List[Path]:
        return await self._drop(version_folder, "runtimes", "currently unsupported native library")

    async def _drop(self, version_folder: Path, subtree: str, label: str) -> List[Path]:
        libraries = await find_libraries(version_folder / subtree)
        for library in libraries:
            self.logger.warning(
                "    - Dropping %s '%s'.", label, library.relative_to(version_folder).as_posix()
            )
        await asyncio.gather(*(delete_file(library) for library in libraries))
        return libraries


__all__ = ["NativeLibraryFilter"]
