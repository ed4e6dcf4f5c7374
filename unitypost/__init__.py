"""Post-process installed NuGet packages so Unity can import them."""

from .pipeline import PackagePostProcessor, RunReport

__all__ = ["PackagePostProcessor", "RunReport"]
