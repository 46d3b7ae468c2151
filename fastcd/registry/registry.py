# fastcd/registry/registry.py
"""
In-memory project registry.

The registry is a plain value: it is loaded by a store, handed to a
command, and handed back for the store to persist. Nothing here touches
the filesystem.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional


@dataclass(frozen=True)
class Entry:
    """
    A saved project.

    Attributes:
        name: Unique, case-sensitive project name
        path: Absolute directory the project was saved from
    """
    name: str
    path: Path


class Registry:
    """
    Mapping of project names to directories.

    Listing order is always sorted by name, regardless of insertion order.
    """

    def __init__(self, projects: Dict[str, Path | str] = None):
        self._projects: Dict[str, Path] = {}
        for name, path in (projects or {}).items():
            self.set(name, path)

    def get(self, name: str) -> Optional[Path]:
        """Get the directory saved under a name."""
        return self._projects.get(name)

    def set(self, name: str, path: Path | str):
        """Save a directory under a name, replacing any previous value."""
        if not name:
            raise ValueError("Project name cannot be empty")
        path = Path(path)
        if not path.is_absolute():
            raise ValueError(f"Project path must be absolute: {path}")
        self._projects[name] = path

    def delete(self, name: str) -> bool:
        """Remove a project. Returns False if it was not saved."""
        if name not in self._projects:
            return False
        del self._projects[name]
        return True

    def clear(self):
        self._projects.clear()

    def count(self) -> int:
        return len(self._projects)

    def entry(self, name: str) -> Optional[Entry]:
        path = self._projects.get(name)
        if path is None:
            return None
        return Entry(name, path)

    def entries(self) -> List[Entry]:
        """All projects, sorted by name."""
        return [Entry(name, self._projects[name]) for name in sorted(self._projects)]

    def names(self) -> List[str]:
        return sorted(self._projects)

    def subset(self, names) -> "Registry":
        """A new registry holding only the given names."""
        return Registry({name: self._projects[name] for name in names if name in self._projects})

    def to_dict(self) -> Dict[str, str]:
        return {name: str(self._projects[name]) for name in sorted(self._projects)}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "Registry":
        return cls(data)

    def __contains__(self, name: str) -> bool:
        return name in self._projects

    def __len__(self) -> int:
        return len(self._projects)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return self._projects == other._projects

    def __repr__(self) -> str:
        return f"Registry({self.to_dict()!r})"
