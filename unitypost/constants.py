"""Shared constants for package post-processing."""

from __future__ import annotations

LIBRARY_SUFFIX = ".dll"
META_SUFFIX = ".meta"

# Most preferred first.
COMPATIBILITY_LEVELS: tuple[str, ...] = (
    "netstandard2.1",
    "netstandard2.0",
    "netstandard1.6",
    "netstandard1.5",
    "netstandard1.4",
    "netstandard1.3",
    "netstandard1.2",
    "netstandard1.1",
    "netstandard1.0",
)

SELF_PACKAGE_NAME = "mrwatts.msbuild.unitypostprocessor"

PROJECT_VERSION_FILE = ("ProjectSettings", "ProjectVersion.txt")
EDITOR_VERSION_PATTERN = r"m_EditorVersion:\s*(\S+)"
VERSION_SCAN_TIMEOUT = 60.0

DEFAULT_SHIM_PATH_TEMPLATE = "{version}/Editor/Data/NetStandard/compat/2.1.0/shims/netstandard"

ANALYZER_DESCRIPTOR_PREFIX = "NuGet.Analyzers."
ANALYZER_EXCLUDED_PLATFORMS: tuple[str, ...] = (
    "Editor",
    "Linux64",
    "OSXUniversal",
    "Win",
    "Win64",
)


__all__ = [
    "ANALYZER_DESCRIPTOR_PREFIX",
    "ANALYZER_EXCLUDED_PLATFORMS",
    "COMPATIBILITY_LEVELS",
    "DEFAULT_SHIM_PATH_TEMPLATE",
    "EDITOR_VERSION_PATTERN",
    "LIBRARY_SUFFIX",
    "META_SUFFIX",
    "PROJECT_VERSION_FILE",
    "SELF_PACKAGE_NAME",
    "VERSION_SCAN_TIMEOUT",
]
