# fastcd/registry/store.py
"""
Persistence for the project registry.

The backing file is a single JSON object mapping project names to absolute
directory paths. A missing file is an empty registry. Writes go to a
temporary file in the same directory which then replaces the target, so a
failed write leaves the previous contents intact.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..errors import StoreError
from .registry import Registry

logger = logging.getLogger(__name__)


def serialize(registry: Registry) -> str:
    return json.dumps(registry.to_dict(), indent=2, sort_keys=True) + "\n"


def deserialize(text: str, source: str = "store") -> Registry:
    """
    Parse store contents into a Registry.

    Raises StoreError if the text is not a JSON object of name -> absolute path.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StoreError(f"Failed to read projects from {source}: {e}")

    if not isinstance(data, dict):
        raise StoreError(f"Failed to read projects from {source}: expected a JSON object")

    for name, path in data.items():
        if not isinstance(path, str):
            raise StoreError(f"Failed to read projects from {source}: path for \"{name}\" is not a string")

    try:
        return Registry.from_dict(data)
    except ValueError as e:
        raise StoreError(f"Failed to read projects from {source}: {e}")


class RegistryStore(ABC):
    """Loads and saves a Registry."""

    @abstractmethod
    def load(self) -> Registry:
        """Load the registry, returning an empty one if nothing is stored."""
        pass

    @abstractmethod
    def save(self, registry: Registry):
        """Replace the stored registry with this one."""
        pass

    @abstractmethod
    def delete(self) -> bool:
        """Remove everything stored. Returns False if nothing was stored."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        pass


class FileStore(RegistryStore):
    """
    Registry stored as a JSON file.

    Structure:
        ~/.fstore        # {"name": "/absolute/path", ...}
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Registry:
        if not self.path.exists():
            logger.debug(f"No store at {self.path}, starting empty")
            return Registry()

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read projects from {self.path}: {e}")

        registry = deserialize(text, source=str(self.path))
        logger.debug(f"Loaded {len(registry)} projects from {self.path}")
        return registry

    def save(self, registry: Registry):
        text = serialize(registry)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"Failed to write projects to {self.path}: {e}")

        logger.debug(f"Saved {len(registry)} projects to {self.path}")

    def delete(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreError(f"Failed to remove {self.path}: {e}")
        logger.debug(f"Removed store {self.path}")
        return True


class MemoryStore(RegistryStore):
    """
    Registry held in memory as serialized text.

    Useful for testing commands without touching the filesystem.
    """

    def __init__(self, registry: Registry = None):
        self.text: Optional[str] = serialize(registry) if registry is not None else None
        self.saves = 0

    def exists(self) -> bool:
        return self.text is not None

    def load(self) -> Registry:
        if self.text is None:
            return Registry()
        return deserialize(self.text, source="memory")

    def save(self, registry: Registry):
        self.text = serialize(registry)
        self.saves += 1

    def delete(self) -> bool:
        existed = self.text is not None
        self.text = None
        return existed
