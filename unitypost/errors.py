"""Exception taxonomy for package post-processing."""

from __future__ import annotations


class PostProcessError(RuntimeError):
    """Base class for failures that abort a post-processing run."""


class DetectionError(PostProcessError):
    """Raised when Unity's builtin assemblies cannot be detected."""


class VersionNotFoundError(DetectionError):
    """Raised when the Unity version used by the project is not installed."""

    def __init__(self, version: str, expected_path: str) -> None:
        self.version = version
        self.expected_path = expected_path
        super().__init__(
            f"Unity {version} is used by the project but was not found at '{expected_path}'. "
            "Install that editor version or point the installation base path at the folder "
            "that contains it."
        )


class EmptyDetectionResultError(DetectionError):
    """Raised when detection succeeded but reported no builtin assemblies."""


__all__ = [
    "DetectionError",
    "EmptyDetectionResultError",
    "PostProcessError",
    "VersionNotFoundError",
]
