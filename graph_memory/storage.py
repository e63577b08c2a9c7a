"""
Markdown storage module for Graph Memory MCP Server.

Reads entity files from a directory (non-recursively) and turns them into
entity records or full KnowledgeGraph snapshots.
"""

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles
import structlog

from .models import Entity, KnowledgeGraph, Relation
from .utils import parse_entity_markdown

logger = structlog.get_logger(__name__)


class StorageReadError(Exception):
    """Raised when an existing directory cannot be listed."""
    pass


@dataclass
class EntityRecord:
    """An entity together with the relations its file declares."""

    entity: Entity
    relations: list[Relation] = field(default_factory=list)


def list_entity_files(directory: Path) -> list[Path]:
    """List the Markdown files directly under a directory, sorted by name.

    Hidden files are skipped. A missing directory yields an empty list.

    Raises:
        StorageReadError: If the path exists but cannot be listed
    """
    if not directory.exists():
        return []

    try:
        return sorted(
            (
                path for path in directory.iterdir()
                if path.suffix == ".md" and not path.name.startswith(".") and path.is_file()
            ),
            key=lambda path: path.name,
        )
    except OSError as e:
        raise StorageReadError(f"Cannot list {directory}: {e}") from e


async def load_entity_record(path: Path, default_type: str = "unknown") -> EntityRecord | None:
    """Load one entity file and return an EntityRecord or None on error."""
    try:
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("entity_read_failed", path=str(path), error=str(e))
        return None

    name = path.stem
    parsed = parse_entity_markdown(content)
    entity_type = parsed.frontmatter.get("entityType") or default_type

    return EntityRecord(
        entity=Entity(
            name=name,
            entity_type=str(entity_type),
            observations=parsed.observations,
        ),
        relations=[
            Relation(
                from_=name,
                to=link.to,
                relation_type=link.relation_type,
                qualification=link.qualification,
            )
            for link in parsed.links
        ],
    )


async def scan_directory(directory: Path, default_type: str = "unknown") -> list[EntityRecord]:
    """Load every entity file of a directory in parallel.

    Args:
        directory: Directory holding one Markdown file per entity
        default_type: Entity type used when the front-matter has none

    Returns:
        Records in file-name order (unreadable files are skipped)
    """
    files = list_entity_files(directory)
    results = await asyncio.gather(*(load_entity_record(path, default_type) for path in files))
    return [record for record in results if record is not None]


class MemoryStore:
    """Read-only access to the authored entity directory.

    Every read scans the directory again so callers always get a snapshot
    of the current files.
    """

    def __init__(self, memory_path: Path):
        self.memory_path = memory_path

    async def read_records(self) -> list[EntityRecord]:
        """Read all entity records."""
        return await scan_directory(self.memory_path)

    async def read_graph(self) -> KnowledgeGraph:
        """Read the full knowledge graph snapshot."""
        start_time = time.time()
        records = await self.read_records()

        graph = KnowledgeGraph(
            entities=[record.entity for record in records],
            relations=[relation for record in records for relation in record.relations],
        )

        logger.debug(
            "graph_read",
            path=str(self.memory_path),
            entity_count=len(graph.entities),
            relation_count=len(graph.relations),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return graph
