from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.package_builder import PackageTreeBuilder


@pytest.fixture
def package_tree(tmp_path: Path) -> PackageTreeBuilder:
    """Provide a project, editor install and package root rooted at the pytest tmp_path."""
    return PackageTreeBuilder(tmp_path)
