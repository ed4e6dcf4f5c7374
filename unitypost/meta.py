"""Unity meta file generation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader

from .constants import META_SUFFIX
from .fs import write_text
from .identifiers import GuidGenerator

FILE_FORMAT_VERSION = 2

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def meta_path_for(target: Path) -> Path:
    """Return the sidecar path Unity looks for next to `target`."""
    return target.with_name(target.name + META_SUFFIX)


class MetaFileGenerator:
    """Writes `.meta` sidecars: a fixed header, a guid, then the importer body.

    Existing files are overwritten. When no guid is supplied a fresh unseeded
    one is generated, so callers that need identical output across runs must
    pass a seeded guid.
    """

    def __init__(self, guid_generator: GuidGenerator | None = None) -> None:
        self.guid_generator = guid_generator or GuidGenerator()

    def render(self, body: str, guid: str | None = None) -> str:
        resolved = guid if guid is not None else self.guid_generator.generate()
        return f"fileFormatVersion: {FILE_FORMAT_VERSION}\nguid: {resolved}\n{body.rstrip()}\n"

    async def write(self, path: Path, body: str, guid: str | None = None) -> None:
        await write_text(path, self.render(body, guid))


class MetaTemplates:
    """Renders importer bodies and generated sources from the bundled Jinja templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = [str(_TEMPLATES_DIR)]
        if templates_dir is not None and templates_dir != _TEMPLATES_DIR:
            directories.insert(0, str(templates_dir))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, name: str, **context: Any) -> str:
        return self._env.get_template(name).render(**context).rstrip() + "\n"

    def ignored_plugin(self) -> str:
        return self.render("plugin_ignored.meta.j2")

    def roslyn_analyzer(self, excluded_platforms: Sequence[str]) -> str:
        return self.render("roslyn_analyzer.meta.j2", excluded_platforms=list(excluded_platforms))

    def assembly_definition(self) -> str:
        return self.render("assembly_definition.meta.j2")

    def mono_script(self) -> str:
        return self.render("mono_script.meta.j2")

    def placeholder_source(self, assembly_name: str, namespace: str) -> str:
        return self.render("placeholder.cs.j2", assembly_name=assembly_name, namespace=namespace)


__all__ = ["FILE_FORMAT_VERSION", "MetaFileGenerator", "MetaTemplates", "meta_path_for"]
