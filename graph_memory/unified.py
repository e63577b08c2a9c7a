"""
Unified index for Graph Memory MCP Server.

Merges the local index with an optional external index. The local index is
the source of truth: on a name collision the local entity is returned and the
external one is discarded. Relations are additive and get concatenated.
"""

import structlog

from .index import DEFAULT_QUERY_LIMIT, IndexProvider
from .models import Entity, Relation

logger = structlog.get_logger(__name__)


def _merge_by_name(local: list[Entity], external: list[Entity]) -> list[Entity]:
    """Local entities first, then external ones whose name is not taken."""
    local_names = {entity.name for entity in local}
    return local + [entity for entity in external if entity.name not in local_names]


class UnifiedIndex:
    """Single view over a local and an optional external index provider."""

    def __init__(self, local: IndexProvider, external: IndexProvider | None = None):
        self.local = local
        self.external = external

    @property
    def has_external(self) -> bool:
        return self.external is not None

    def lookup(self, name: str) -> Entity | None:
        """Find an entity by exact name, local index first."""
        entity = self.local.lookup(name)
        if entity is not None:
            return entity

        if self.external is not None:
            return self.external.lookup(name)

        return None

    def relations_of(self, name: str) -> list[Relation]:
        """All outgoing relations of an entity from both indexes, local first."""
        relations = self.local.relations_of(name)

        if self.external is None:
            return relations

        return relations + self.external.relations_of(name)

    def search(self, text: str) -> list[Entity]:
        """Substring search over both indexes, local matches take precedence."""
        local_results = self.local.search(text)

        if self.external is None:
            return local_results

        results = _merge_by_name(local_results, self.external.search(text))
        logger.debug("unified_search", text=text, local=len(local_results), total=len(results))
        return results

    def query_all(self, limit: int = DEFAULT_QUERY_LIMIT) -> list[Entity]:
        """List entities from both indexes with the same precedence as search."""
        local_results = self.local.entities(limit)

        if self.external is None:
            return local_results

        return _merge_by_name(local_results, self.external.entities(limit))

    def close(self) -> None:
        """Close both indexes. Safe to call more than once."""
        try:
            self.local.close()
        finally:
            if self.external is not None:
                self.external.close()
