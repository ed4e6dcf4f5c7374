"""Filesystem helpers shared by the pipeline stages.

Directory walks run in worker threads so that a large package tree does not
stall the event loop while other packages are being processed.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import List

from .constants import LIBRARY_SUFFIX


async def find_libraries(folder: Path) -> List[Path]:
    """Return every library file below `folder`, or nothing when it does not exist."""
    return await asyncio.to_thread(_find_libraries, folder)


async def list_directories(folder: Path) -> List[Path]:
    """Return the immediate subdirectories of `folder` in name order."""
    return await asyncio.to_thread(_list_directories, folder)


async def find_directories_named(folder: Path, name: str) -> List[Path]:
    """Return every directory called `name` anywhere below `folder`."""
    return await asyncio.to_thread(_find_directories_named, folder, name)


async def delete_file(path: Path) -> None:
    await asyncio.to_thread(path.unlink)


async def write_text(path: Path, content: str) -> None:
    await asyncio.to_thread(_write_text, path, content)


def _find_libraries(folder: Path) -> List[Path]:
    if not folder.is_dir():
        return []
    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(folder):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.lower().endswith(LIBRARY_SUFFIX):
                found.append(Path(dirpath) / filename)
    return found


def _list_directories(folder: Path) -> List[Path]:
    if not folder.is_dir():
        return []
    return sorted((entry for entry in folder.iterdir() if entry.is_dir()), key=lambda p: p.name)


def _find_directories_named(folder: Path, name: str) -> List[Path]:
    if not folder.is_dir():
        return []
    matches: List[Path] = []
    for dirpath, dirnames, _ in os.walk(folder):
        dirnames.sort()
        if name in dirnames:
            matches.append(Path(dirpath) / name)
    return matches


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Unity expects LF line endings in meta files regardless of platform.
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)


__all__ = [
    "delete_file",
    "find_directories_named",
    "find_libraries",
    "list_directories",
    "write_text",
]
