"""Core data models shared across unitypost components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional


class PackageKind(str, Enum):
    """How the pipeline classified a package directory."""

    HOST_PROVIDED = "host-provided"
    SELF = "self"
    ORDINARY = "ordinary"


@dataclass(frozen=True)
class FolderSelection:
    """Outcome of picking the best compatibility folder inside a `lib` folder.

    `selected` is None when the folder holds none of the known candidates.
    """

    lib_folder: str
    selected: Optional[str]
    ignored: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.selected is not None


@dataclass
class PackageOutcome:
    """What happened to one package directory during a run."""

    name: str
    kind: PackageKind
    deleted: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    analyzers: List[str] = field(default_factory=list)
    frameworks: Dict[str, Optional[str]] = field(default_factory=dict)
    descriptors: List[str] = field(default_factory=list)


@dataclass
class RunReport:
    """Aggregated outcomes for a single pipeline run."""

    package_root: str
    packages: List[PackageOutcome] = field(default_factory=list)

    def get(self, name: str) -> Optional[PackageOutcome]:
        lowered = name.lower()
        for outcome in self.packages:
            if outcome.name.lower() == lowered:
                return outcome
        return None

    def summary(self) -> str:
        deleted = sum(len(outcome.deleted) for outcome in self.packages)
        ignored = sum(len(outcome.ignored) for outcome in self.packages)
        analyzers = sum(len(outcome.analyzers) for outcome in self.packages)
        return (
            f"{len(self.packages)} packages processed, {deleted} libraries dropped, "
            f"{ignored} marked ignored, {analyzers} analyzers tagged"
        )


class AssemblySet(AbstractSet[str]):
    """Immutable set of assembly names compared case-insensitively."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: Dict[str, str] = {}
        for name in names:
            self._names.setdefault(name.lower(), name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"AssemblySet({sorted(self._names.values())!r})"
