"""Compatibility folder selection for `lib` folders."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Sequence

from .constants import COMPATIBILITY_LEVELS
from .fs import find_libraries, list_directories
from .identifiers import AssetScope
from .logging import get_logger
from .meta import MetaFileGenerator, MetaTemplates, meta_path_for
from .models import FolderSelection


class FrameworkFolderSelector:
    """Keeps the best compatibility folder of a `lib` folder and hides the rest from Unity.

    Siblings of the selected folder are not deleted. Their libraries get a meta
    file disabling them on every platform so that XML docs and other assets stay
    available to IDE tooling.
    """

    def __init__(
        self,
        meta_generator: MetaFileGenerator,
        templates: MetaTemplates,
        levels: Sequence[str] = COMPATIBILITY_LEVELS,
    ) -> None:
        self.meta_generator = meta_generator
        self.templates = templates
        self.levels = tuple(levels)
        self.logger = get_logger("frameworks")

    def best_level(self, lib_folder: Path) -> str | None:
        for level in self.levels:
            if (lib_folder / level).is_dir():
                return level
        return None

    async def select(self, lib_folder: Path, scope: AssetScope) -> FolderSelection:
        rel_lib = lib_folder.relative_to(scope.root).as_posix()
        selected = await asyncio.to_thread(self.best_level, lib_folder)
        if selected is None:
            return FolderSelection(lib_folder=rel_lib, selected=None)

        self.logger.info(
            "      - Best compatible version in '%s' is '%s', marking assemblies in other folders so Unity ignores them.",
            rel_lib,
            selected,
        )
        others = [folder for folder in await list_directories(lib_folder) if folder.name != selected]
        batches = await asyncio.gather(*(self.mark_ignored(folder, scope) for folder in others))
        ignored = [library.relative_to(scope.root).as_posix() for batch in batches for library in batch]
        return FolderSelection(lib_folder=rel_lib, selected=selected, ignored=ignored)

    async def mark_ignored(self, folder: Path, scope: AssetScope) -> List[Path]:
        """Write a disable-everywhere meta file for every library below `folder`."""
        libraries = await find_libraries(folder)
        body = self.templates.ignored_plugin()
        await asyncio.gather(
            *(
                self.meta_generator.write(meta_path_for(library), body, scope.guid_for(library))
                for library in libraries
            )
        )
        for library in libraries:
            self.logger.debug("Marked '%s' as ignored", library)
        return libraries


__all__ = ["FrameworkFolderSelector"]
