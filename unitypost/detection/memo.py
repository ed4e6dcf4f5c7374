"""Per-run memoisation for builtin assembly detection."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Dict

from ..logging import get_logger
from ..models import AssemblySet
from .base import BuiltinAssemblyDetector


class MemoizingDetector(BuiltinAssemblyDetector):
    """Caches a delegate detector's results keyed by both input paths.

    Concurrent lookups for the same key share one in-flight scan. A failed
    scan is not cached, so the next lookup tries again.
    """

    def __init__(self, delegate: BuiltinAssemblyDetector) -> None:
        self.delegate = delegate
        self._cache: Dict[str, AssemblySet] = {}
        self._pending: Dict[str, asyncio.Task[AssemblySet]] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("detection.memo")

    async def detect(self, installation_base: Path, project_root: Path) -> AssemblySet:
        key = f"{installation_base}{project_root}"
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            task = self._pending.get(key)
            if task is None:
                task = asyncio.ensure_future(self._scan(key, installation_base, project_root))
                self._pending[key] = task
        return await task

    async def _scan(self, key: str, installation_base: Path, project_root: Path) -> AssemblySet:
        self.logger.debug("Detecting builtin assemblies for %s", project_root)
        try:
            result = await self.delegate.detect(installation_base, project_root)
            with self._lock:
                return self._cache.setdefault(key, result)
        finally:
            with self._lock:
                self._pending.pop(key, None)


__all__ = ["MemoizingDetector"]
