"""
Pytest configuration and fixtures for graph-memory tests.
"""

import pytest
from pathlib import Path


@pytest.fixture
def temp_memory(tmp_path: Path):
    """Create a temporary memory directory with entity files."""
    memory_path = tmp_path / "memory"
    memory_path.mkdir()

    # Entity 1: person with observations and typed relations
    (memory_path / "Alice.md").write_text("""---
entityType: person
created: 2024-01-15
---
# Alice

## Observations
- Works on graph tooling
- Lives in Berlin

## Relations
- [[works_with.collaborates::Bob]]
- [[Carol]]
""", encoding="utf-8")

    # Entity 2: single relation without qualification
    (memory_path / "Bob.md").write_text("""---
entityType: person
---
# Bob

## Relations
- [[knows::Carol]]
""", encoding="utf-8")

    # Entity 3: inline link inside an observation (dangling target)
    (memory_path / "Carol.md").write_text("""---
entityType: person
---
# Carol

## Observations
- Writes about [[Python]]
""", encoding="utf-8")

    # Entity 4: only points at Carol
    (memory_path / "Dana.md").write_text("""---
entityType: person
---
# Dana

## Relations
- [[knows::Carol]]
""", encoding="utf-8")

    # Entity 5: name shared with a vault note
    (memory_path / "Shared.md").write_text("""---
entityType: local
---
# Shared

## Observations
- Only in memory
""", encoding="utf-8")

    # Ignored: hidden file, non-markdown file, nested directory
    (memory_path / ".hidden.md").write_text("---\nentityType: hidden\n---\n", encoding="utf-8")
    (memory_path / "notes.txt").write_text("not an entity", encoding="utf-8")
    (memory_path / "archive").mkdir()
    (memory_path / "archive" / "Nested.md").write_text("---\nentityType: nested\n---\n", encoding="utf-8")

    yield memory_path


@pytest.fixture
def temp_vault(tmp_path: Path):
    """Create a temporary Obsidian vault used as external index."""
    vault_path = tmp_path / "vault"
    vault_path.mkdir()
    (vault_path / ".obsidian").mkdir()

    (vault_path / "Shared.md").write_text("""---
entityType: external
---
# Shared

Vault version of the shared note.
""", encoding="utf-8")

    (vault_path / "Python.md").write_text("""---
entityType: language
tags:
  - programming
---
# Python

Links to [[Zettelkasten]].
""", encoding="utf-8")

    (vault_path / "Zettelkasten.md").write_text("""# Zettelkasten

A note without front-matter.
""", encoding="utf-8")

    yield vault_path


@pytest.fixture
async def local_index(temp_memory):
    """Build a LocalIndex over the temp memory directory."""
    from graph_memory.index import LocalIndex

    index = await LocalIndex.create(temp_memory)
    yield index
    index.close()


@pytest.fixture
async def external_index(temp_vault):
    """Build an ExternalIndex over the temp vault."""
    from graph_memory.index import ExternalIndex

    index = await ExternalIndex.create(temp_vault)
    yield index
    index.close()


@pytest.fixture
def test_settings(temp_memory, temp_vault):
    """Settings pointing at the temp directories."""
    from graph_memory.config import Settings

    return Settings(memory_path=temp_memory, vault_path=temp_vault)


@pytest.fixture
def graph_operations(local_index, external_index, test_settings):
    """GraphOperations over the temp memory directory and vault."""
    from graph_memory.operations import GraphOperations
    from graph_memory.storage import MemoryStore
    from graph_memory.unified import UnifiedIndex

    return GraphOperations(
        MemoryStore(test_settings.memory_path),
        UnifiedIndex(local_index, external_index),
        test_settings,
    )
