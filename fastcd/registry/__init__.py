# fastcd/registry/__init__.py
"""
fastcd Registry.

The registry is the foundational data structure that maps project names
to the directories they were saved from.

Example:
    store = FileStore(Path.home() / ".fstore")
    registry = store.load()
    registry.set("site", Path("/home/me/code/site"))
    store.save(registry)
"""

from .registry import Registry, Entry
from .store import RegistryStore, FileStore, MemoryStore

__all__ = ["Registry", "Entry", "RegistryStore", "FileStore", "MemoryStore"]
