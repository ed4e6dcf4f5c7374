"""Package post-processing pipeline."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from .config import PostProcessConfig
from .detection import BuiltinAssemblyDetector, create_detector
from .errors import EmptyDetectionResultError, PostProcessError
from .filters import NativeLibraryFilter
from .frameworks import FrameworkFolderSelector
from .fs import delete_file, find_directories_named, find_libraries, list_directories
from .identifiers import AssetScope, GuidGenerator
from .logging import get_logger
from .meta import MetaFileGenerator, MetaTemplates
from .models import AssemblySet, PackageKind, PackageOutcome, RunReport
from .roslyn import AnalyzerScopingGenerator


class PackagePostProcessor:
    """Rewrites an installed NuGet package tree so Unity can import it.

    Every package directory is classified as provided by Unity, as this tool's
    own package, or as an ordinary package. Ordinary packages have each version
    folder filtered, narrowed to one compatibility folder per `lib` folder, and
    their analyzers tagged, in that order.
    """

    def __init__(
        self,
        config: PostProcessConfig,
        *,
        detector: BuiltinAssemblyDetector | None = None,
        guid_generator: GuidGenerator | None = None,
        meta_generator: MetaFileGenerator | None = None,
        templates: MetaTemplates | None = None,
    ) -> None:
        self.config = config
        self.detector = detector or create_detector(
            config.detector, shim_path_template=config.shim_path_template
        )
        self.guid_generator = guid_generator or GuidGenerator()
        self.meta_generator = meta_generator or MetaFileGenerator(self.guid_generator)
        self.templates = templates or MetaTemplates(config.templates_dir)
        self.native_filter = NativeLibraryFilter()
        self.selector = FrameworkFolderSelector(
            self.meta_generator, self.templates, config.compatibility_levels
        )
        self.analyzers = AnalyzerScopingGenerator(
            self.meta_generator,
            self.templates,
            tag_analyzers=config.tag_analyzers,
            generate_assembly_definitions=config.generate_assembly_definitions,
            excluded_platforms=config.analyzer_excluded_platforms,
        )
        self.logger = get_logger("pipeline")
        self.last_report: RunReport | None = None

    def execute(self) -> bool:
        """Run the pipeline to completion and report success.

        This is the only place errors are caught; they are logged with their
        traceback and turned into a False result.
        """
        try:
            report = asyncio.run(self.process())
        except Exception:
            self.logger.exception("Post-processing NuGet packages for Unity failed")
            return False
        self.last_report = report
        self.logger.info("Done: %s", report.summary())
        return True

    async def process(self) -> RunReport:
        missing = self.config.missing_inputs()
        if missing:
            raise PostProcessError(f"Missing required inputs: {', '.join(missing)}")
        package_root = self._package_root()
        if not package_root.is_dir():
            raise FileNotFoundError(f"Package root not found: {package_root}")

        self.logger.info("Post-processing NuGet packages in %s", package_root)
        package_dirs = await list_directories(package_root)
        outcomes = await asyncio.gather(*(self.process_package(package_dir) for package_dir in package_dirs))
        return RunReport(package_root=str(package_root), packages=list(outcomes))

    async def builtin_assemblies(self) -> AssemblySet:
        installation_base = self.config.installation_base_path
        if installation_base is None:
            raise PostProcessError("An installation base path is required to detect builtin assemblies")
        builtins = await self.detector.detect(installation_base, self.config.project_root)
        if not builtins:
            raise EmptyDetectionResultError(
                "Could not detect the assemblies Unity ships for this project. "
                "Has the project been opened in Unity at least once?"
            )
        return builtins

    async def classify(self, package_name: str) -> PackageKind:
        if package_name in await self.builtin_assemblies():
            return PackageKind.HOST_PROVIDED
        if package_name.lower() == self.config.self_package.lower():
            return PackageKind.SELF
        return PackageKind.ORDINARY

    async def process_package(self, package_dir: Path) -> PackageOutcome:
        name = package_dir.relative_to(self._package_root()).as_posix()
        self.logger.info("  - %s", name)
        kind = await self.classify(name)
        outcome = PackageOutcome(name=name, kind=kind)

        if kind is PackageKind.HOST_PROVIDED:
            # Unity still feeds excluded plugins to its UWP reference rewriter, so
            # the libraries must go. Other files stay for IDE tooling.
            self.logger.info(
                "    - Dropping all libraries because Unity already ships its own version of these."
            )
            libraries = await find_libraries(package_dir)
            await asyncio.gather(*(delete_file(library) for library in libraries))
            outcome.deleted.extend(_relative(libraries, package_dir))
        elif kind is PackageKind.SELF:
            # The running build may hold a lock on these files, so they cannot be deleted.
            self.logger.info(
                "    - Marking assemblies as ignored so Unity doesn't pick them up (it's this tool)."
            )
            ignored = await self.selector.mark_ignored(package_dir, self._scope(name, package_dir))
            outcome.ignored.extend(_relative(ignored, package_dir))
        else:
            versions = await list_directories(package_dir)
            disambiguate = len(versions) > 1
            await asyncio.gather(
                *(
                    self.process_version(version_dir, outcome, disambiguate=disambiguate)
                    for version_dir in versions
                )
            )
        return outcome

    async def process_version(
        self, version_dir: Path, outcome: PackageOutcome, *, disambiguate: bool = False
    ) -> None:
        package_dir = version_dir.parent
        scope = self._scope(outcome.name, package_dir, version_dir.name)

        dropped = await self.native_filter.apply(version_dir)
        outcome.deleted.extend(_relative(dropped, package_dir))

        lib_folders = await find_directories_named(version_dir, "lib")
        for lib_folder in lib_folders:
            self.logger.info(
                "    - Detected library folder with assemblies '%s'.",
                lib_folder.relative_to(version_dir).as_posix(),
            )
        selections = await asyncio.gather(
            *(self.selector.select(lib_folder, scope) for lib_folder in lib_folders)
        )
        for selection in selections:
            key = f"{version_dir.name}/{selection.lib_folder}"
            outcome.frameworks[key] = selection.selected
            if not selection.found:
                self.logger.warning(
                    "      - No compatible assemblies found in '%s', none will be usable by Unity.", key
                )
                continue
            outcome.ignored.extend(f"{version_dir.name}/{path}" for path in selection.ignored)

        analyzers = await self.analyzers.process(version_dir, scope, disambiguate=disambiguate)
        outcome.analyzers.extend(_relative(analyzers.tagged, package_dir))
        if analyzers.descriptor is not None:
            outcome.descriptors.extend(_relative([analyzers.descriptor], package_dir))

    def _package_root(self) -> Path:
        if self.config.package_root is None:
            raise PostProcessError("A package root is required")
        return self.config.package_root

    def _scope(self, name: str, package_dir: Path, version: str = "") -> AssetScope:
        return AssetScope(
            package=name,
            package_dir=package_dir,
            version=version,
            stable=self.config.stable_guids,
            generator=self.guid_generator,
        )


def _relative(paths: List[Path], root: Path) -> List[str]:
    return [path.relative_to(root).as_posix() for path in paths]


__all__ = ["PackagePostProcessor", "RunReport"]
