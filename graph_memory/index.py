"""
Index providers for Graph Memory MCP Server.

Contains the IndexProvider protocol and its two implementations:
- LocalIndex: index over the authored entity directory
- ExternalIndex: read-only index over an external vault

Both are built by an async factory that scans their source exactly once.
"""

import time
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from .models import Entity, Relation
from .storage import EntityRecord, StorageReadError, scan_directory
from .utils import IndexConstructionError

logger = structlog.get_logger(__name__)

DEFAULT_QUERY_LIMIT = 100


@runtime_checkable
class IndexProvider(Protocol):
    """Lookup and search capabilities shared by every index."""

    def lookup(self, name: str) -> Entity | None: ...

    def relations_of(self, name: str) -> list[Relation]: ...

    def search(self, text: str) -> list[Entity]: ...

    def entities(self, limit: int = DEFAULT_QUERY_LIMIT) -> list[Entity]: ...

    def close(self) -> None: ...


def entity_matches(entity: Entity, text_lower: str) -> bool:
    """Case-insensitive substring check on name, type, and the joined observations."""
    return (
        text_lower in entity.name.lower()
        or text_lower in entity.entity_type.lower()
        or text_lower in "".join(entity.observations).lower()
    )


async def _scan_source(kind: str, path: Path, default_type: str) -> list[EntityRecord]:
    """Scan an index source, turning listing failures into construction errors."""
    if not path.exists():
        logger.info("index_source_missing", kind=kind, path=str(path))
        return []

    try:
        return await scan_directory(path, default_type=default_type)
    except StorageReadError as e:
        raise IndexConstructionError(f"{kind} index cannot read {path}: {e}") from e


class LocalIndex:
    """In-memory index over the authored entity store.

    Entities and their outgoing relations are loaded once by ``create``
    and never re-scanned.
    """

    def __init__(self, memory_path: Path):
        self.memory_path = memory_path
        self._entities: dict[str, Entity] = {}
        self._relations: dict[str, list[Relation]] = {}
        self._closed = False

    @classmethod
    async def create(cls, memory_path: Path) -> "LocalIndex":
        """Build a LocalIndex by scanning the memory directory.

        Raises:
            IndexConstructionError: If the directory exists but cannot be read
        """
        index = cls(memory_path)
        await index._build()
        return index

    async def _build(self) -> None:
        start_time = time.time()
        records = await _scan_source("local", self.memory_path, default_type="unknown")

        for record in records:
            self._entities[record.entity.name] = record.entity
            self._relations[record.entity.name] = list(record.relations)

        logger.info(
            "index_built",
            kind="local",
            path=str(self.memory_path),
            entity_count=len(self._entities),
            relation_count=sum(len(r) for r in self._relations.values()),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

    def lookup(self, name: str) -> Entity | None:
        return self._entities.get(name)

    def relations_of(self, name: str) -> list[Relation]:
        return list(self._relations.get(name, []))

    def search(self, text: str) -> list[Entity]:
        text_lower = text.lower()
        return [e for e in self._entities.values() if entity_matches(e, text_lower)]

    def entities(self, limit: int = DEFAULT_QUERY_LIMIT) -> list[Entity]:
        if limit <= 0:
            return []
        return list(self._entities.values())[:limit]

    def close(self) -> None:
        if self._closed:
            return
        self._entities.clear()
        self._relations.clear()
        self._closed = True
        logger.debug("index_closed", kind="local", path=str(self.memory_path))


class ExternalIndex:
    """Read-only index over an external vault.

    Vault notes become entities typed by their ``entityType`` front-matter
    (``note`` by default). Observations are not collected and the vault
    contributes no relations.
    """

    def __init__(self, vault_path: Path):
        self.vault_path = vault_path
        self._entities: dict[str, Entity] = {}
        self._closed = False

    @classmethod
    async def create(cls, vault_path: Path) -> "ExternalIndex":
        """Build an ExternalIndex by scanning the vault root.

        Raises:
            IndexConstructionError: If the vault exists but cannot be read
        """
        index = cls(vault_path)
        await index._build()
        return index

    async def _build(self) -> None:
        start_time = time.time()
        records = await _scan_source("external", self.vault_path, default_type="note")

        for record in records:
            entity = record.entity
            self._entities[entity.name] = Entity(name=entity.name, entity_type=entity.entity_type)

        logger.info(
            "index_built",
            kind="external",
            path=str(self.vault_path),
            entity_count=len(self._entities),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

    def lookup(self, name: str) -> Entity | None:
        return self._entities.get(name)

    def relations_of(self, name: str) -> list[Relation]:
        return []

    def search(self, text: str) -> list[Entity]:
        text_lower = text.lower()
        return [e for e in self._entities.values() if entity_matches(e, text_lower)]

    def entities(self, limit: int = DEFAULT_QUERY_LIMIT) -> list[Entity]:
        if limit <= 0:
            return []
        return list(self._entities.values())[:limit]

    def close(self) -> None:
        if self._closed:
            return
        self._entities.clear()
        self._closed = True
        logger.debug("index_closed", kind="external", path=str(self.vault_path))
