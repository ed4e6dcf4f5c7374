"""Base contract for builtin assembly detectors."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import AssemblySet


class BuiltinAssemblyDetector(ABC):
    """Reports which assemblies the project's Unity installation already ships."""

    @abstractmethod
    async def detect(self, installation_base: Path, project_root: Path) -> AssemblySet:
        """Return the builtin assembly names.

        Raises `DetectionError`, or `VersionNotFoundError` when the project's
        Unity version is not installed under `installation_base`.
        """
