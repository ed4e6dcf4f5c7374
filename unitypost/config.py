"""Configuration loading for unitypost (.unitypost.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .constants import (
    ANALYZER_EXCLUDED_PLATFORMS,
    COMPATIBILITY_LEVELS,
    DEFAULT_SHIM_PATH_TEMPLATE,
    SELF_PACKAGE_NAME,
)

CONFIG_FILENAME = ".unitypost.yml"

ENV_INSTALLATION_BASE_PATH = "UNITYPOST_INSTALLATION_BASE_PATH"
ENV_PACKAGE_ROOT = "UNITYPOST_PACKAGE_ROOT"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PostProcessConfig:
    """Effective settings for one post-processing run."""

    project_root: Path
    package_root: Optional[Path] = None
    installation_base_path: Optional[Path] = None
    tag_analyzers: bool = True
    generate_assembly_definitions: bool = False
    stable_guids: bool = True
    self_package: str = SELF_PACKAGE_NAME
    detector: str = "shims"
    shim_path_template: str = DEFAULT_SHIM_PATH_TEMPLATE
    templates_dir: Optional[Path] = None
    compatibility_levels: List[str] = field(default_factory=lambda: list(COMPATIBILITY_LEVELS))
    analyzer_excluded_platforms: List[str] = field(
        default_factory=lambda: list(ANALYZER_EXCLUDED_PLATFORMS)
    )

    def missing_inputs(self) -> List[str]:
        """Return the names of required inputs that are not set."""
        missing = []
        if not str(self.project_root).strip():
            missing.append("project root")
        if self.package_root is None or not str(self.package_root).strip():
            missing.append("package root")
        if self.installation_base_path is None or not str(self.installation_base_path).strip():
            missing.append("installation base path")
        return missing


def load_config(
    project_root: Path,
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> PostProcessConfig:
    """Load settings from `.unitypost.yml` (if present) and environment overrides."""
    root = project_root.expanduser().resolve()
    config_file = (config_path.expanduser() if config_path else root / CONFIG_FILENAME).resolve()
    environ = os.environ if environ is None else environ

    config = PostProcessConfig(project_root=root)
    if config_file.exists():
        data = _read_config(config_file)
        _apply_file_settings(config, data, base=root)
    elif config_path is not None:
        raise ConfigError(f"Configuration file not found: {config_file}")

    package_root = environ.get(ENV_PACKAGE_ROOT)
    if package_root:
        config.package_root = _resolve_path(package_root, root)
    installation_base = environ.get(ENV_INSTALLATION_BASE_PATH)
    if installation_base:
        config.installation_base_path = _resolve_path(installation_base, root)

    return config


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _apply_file_settings(config: PostProcessConfig, data: Dict[str, Any], *, base: Path) -> None:
    package_root = _as_str(data.get("package_root"))
    if package_root:
        config.package_root = _resolve_path(package_root, base)

    installation_base = _as_str(data.get("installation_base_path"))
    if installation_base:
        config.installation_base_path = _resolve_path(installation_base, base)

    for key in ("tag_analyzers", "generate_assembly_definitions", "stable_guids"):
        value = _as_bool(data.get(key))
        if value is not None:
            setattr(config, key, value)

    self_package = _as_str(data.get("self_package"))
    if self_package:
        config.self_package = self_package

    detector = _as_str(data.get("detector"))
    if detector:
        config.detector = detector.lower()

    template = _as_str(data.get("shim_path_template"))
    if template:
        if "{version}" not in template:
            raise ConfigError("shim_path_template must contain a {version} placeholder")
        config.shim_path_template = template

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        config.templates_dir = _resolve_path(templates_dir, base)

    levels = _as_str_list(data.get("compatibility_levels"))
    if levels:
        config.compatibility_levels = levels

    if "analyzer_excluded_platforms" in data:
        config.analyzer_excluded_platforms = _as_str_list(data.get("analyzer_excluded_platforms"))


def _resolve_path(value: str, base: Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "PostProcessConfig", "load_config"]
