"""Deterministic identifier generation for Unity meta files."""

from __future__ import annotations

import hashlib
import itertools
import time
from dataclasses import dataclass, field
from pathlib import Path

_UNSEEDED_COUNTER = itertools.count()


def md5_hex(value: str) -> str:
    """Return the lowercase hex MD5 digest of a UTF-8 string."""
    return hashlib.md5(value.encode("utf-8")).hexdigest()


class GuidGenerator:
    """Produces 32 character hex identifiers in the shape Unity expects.

    A seeded identifier is a pure function of its seed, so re-running the
    pipeline over unchanged inputs yields the same guid. Without a seed the
    current wall-clock time is hashed together with a process-wide counter, so
    two calls within the same clock tick still differ.
    """

    def generate(self, seed: str | None = None) -> str:
        if seed is None:
            return md5_hex(f"{time.time_ns()}:{next(_UNSEEDED_COUNTER)}")
        return md5_hex(seed)

    def for_asset(self, package: str, version: str, relative_path: str) -> str:
        """Return the stable guid for a file identified by its place in the package tree."""
        normalised = relative_path.replace("\\", "/").strip("/")
        return self.generate(f"{package.lower()}/{version}/{normalised}")


@dataclass(frozen=True)
class AssetScope:
    """Logical identity of the package (and version) whose files are being processed."""

    package: str
    package_dir: Path
    version: str = ""
    stable: bool = True
    generator: GuidGenerator = field(default_factory=GuidGenerator, compare=False)

    @property
    def root(self) -> Path:
        return self.package_dir / self.version if self.version else self.package_dir

    def guid_for(self, path: Path) -> str | None:
        """Return a seeded guid for `path`, or None to let the writer pick a random one."""
        if not self.stable:
            return None
        return self.generator.for_asset(self.package, self.version, path.relative_to(self.root).as_posix())


__all__ = ["AssetScope", "GuidGenerator", "md5_hex"]
