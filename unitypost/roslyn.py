"""Tagging of Roslyn analyzers and generation of their assembly definition scope."""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from .constants import ANALYZER_DESCRIPTOR_PREFIX, ANALYZER_EXCLUDED_PLATFORMS
from .fs import find_libraries, write_text
from .identifiers import AssetScope
from .logging import get_logger
from .meta import MetaFileGenerator, MetaTemplates, meta_path_for

_IDENTIFIER_INVALID = re.compile(r"[^0-9A-Za-z_]")


@dataclass
class AnalyzerOutcome:
    """Files touched while processing the analyzers of one package version."""

    tagged: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    descriptor: Path | None = None


def descriptor_name(package: str, version: str, *, disambiguate: bool) -> str:
    """Return the assembly definition name for a package's analyzers.

    The version is only appended when several versions of the package are
    installed side by side, so routine upgrades keep the same name.
    """
    name = f"{ANALYZER_DESCRIPTOR_PREFIX}{package}"
    if disambiguate:
        name = f"{name}.{version}"
    return name


def to_namespace(name: str) -> str:
    """Turn a dotted assembly name into a valid C# namespace."""
    parts = []
    for part in name.split("."):
        cleaned = _IDENTIFIER_INVALID.sub("_", part) or "_"
        if cleaned[0].isdigit():
            cleaned = f"_{cleaned}"
        parts.append(cleaned)
    return ".".join(parts)


def build_descriptor(name: str) -> Dict[str, object]:
    return {
        "name": name,
        "rootNamespace": "",
        "references": [],
        "includePlatforms": [],
        "excludePlatforms": [],
        "allowUnsafeCode": False,
        "overrideReferences": False,
        "precompiledReferences": [],
        "autoReferenced": True,
        "defineConstraints": [],
        "versionDefines": [],
        "noEngineReferences": True,
    }


class AnalyzerScopingGenerator:
    """Marks analyzer assemblies so Unity runs them at compile time only."""

    def __init__(
        self,
        meta_generator: MetaFileGenerator,
        templates: MetaTemplates,
        *,
        tag_analyzers: bool = True,
        generate_assembly_definitions: bool = False,
        excluded_platforms: Sequence[str] = ANALYZER_EXCLUDED_PLATFORMS,
    ) -> None:
        self.meta_generator = meta_generator
        self.templates = templates
        self.tag_analyzers = tag_analyzers
        self.generate_assembly_definitions = generate_assembly_definitions
        self.excluded_platforms = tuple(excluded_platforms)
        self.logger = get_logger("roslyn")

    async def process(
        self, version_folder: Path, scope: AssetScope, *, disambiguate: bool = False
    ) -> AnalyzerOutcome:
        analyzers_folder = version_folder / "analyzers"
        libraries = await find_libraries(analyzers_folder)
        outcome = AnalyzerOutcome()
        if not libraries:
            return outcome

        if not self.tag_analyzers:
            for library in libraries:
                self.logger.info(
                    "    - Tagging Roslyn analyzers is disabled, ignoring assembly '%s'.",
                    library.relative_to(version_folder).as_posix(),
                )
            outcome.skipped.extend(libraries)
            return outcome

        if self.generate_assembly_definitions:
            name = descriptor_name(scope.package, scope.version, disambiguate=disambiguate)
            outcome.descriptor = await self.write_descriptor(analyzers_folder, name)

        body = self.templates.roslyn_analyzer(self.excluded_platforms)
        for library in libraries:
            self.logger.info(
                "    - Processing Roslyn analyzer assembly '%s'.",
                library.relative_to(version_folder).as_posix(),
            )
        await asyncio.gather(
            *(
                self.meta_generator.write(meta_path_for(library), body, scope.guid_for(library))
                for library in libraries
            )
        )
        outcome.tagged.extend(libraries)
        return outcome

    async def write_descriptor(self, analyzers_folder: Path, name: str) -> Path:
        """Write the assembly definition, its placeholder script, and both meta files.

        Both guids are seeded from the descriptor name so they survive re-runs.
        """
        descriptor_path = analyzers_folder / f"{name}.asmdef"
        placeholder_path = analyzers_folder / f"{name}.Placeholder.cs"
        guids = self.meta_generator.guid_generator
        self.logger.info("    - Generating assembly definition '%s' for analyzers.", name)

        await asyncio.gather(
            write_text(descriptor_path, json.dumps(build_descriptor(name), indent=4) + "\n"),
            self.meta_generator.write(
                meta_path_for(descriptor_path),
                self.templates.assembly_definition(),
                guids.generate(name),
            ),
            write_text(placeholder_path, self.templates.placeholder_source(name, to_namespace(name))),
            self.meta_generator.write(
                meta_path_for(placeholder_path),
                self.templates.mono_script(),
                guids.generate(f"{name}.Placeholder"),
            ),
        )
        return descriptor_path


__all__ = [
    "AnalyzerOutcome",
    "AnalyzerScopingGenerator",
    "build_descriptor",
    "descriptor_name",
    "to_namespace",
]
