"""
Graph operations for Graph Memory MCP Server.

Reads knowledge graph snapshots from storage, runs the analytics engine or
the unified index, and shapes the results into plain JSON-ready dicts.
"""

import time

import structlog

from .analytics import GraphAnalytics
from .config import Settings
from .index import DEFAULT_QUERY_LIMIT
from .storage import MemoryStore
from .unified import UnifiedIndex
from .utils import OperationError

logger = structlog.get_logger(__name__)


def _require(value: str | None, message: str) -> str:
    if not value:
        raise OperationError(message)
    return value


class GraphOperations:
    """Operations exposed to the MCP tools.

    Analytics run on a fresh snapshot of the memory directory for every
    call; lookups and searches go through the long-lived unified index.
    """

    def __init__(self, store: MemoryStore, index: UnifiedIndex, settings: Settings):
        self.store = store
        self.index = index
        self.settings = settings
        self.analytics = GraphAnalytics(
            damping_factor=settings.damping_factor,
            max_iterations=settings.max_iterations,
            tolerance=settings.tolerance,
            top_entities=settings.top_entities,
        )

    # ============== Analytics ==============

    async def centrality(self) -> dict:
        """Top entities by ArticleRank plus graph-wide degree average."""
        start_time = time.time()
        graph = await self.store.read_graph()
        report = self.analytics.compute_centrality(graph.entities, graph.relations)

        total_entities = len(graph.entities)
        total_degree = sum(m.total_degree for m in report.metrics.values())

        logger.info(
            "analytics_completed",
            operation="centrality",
            entity_count=total_entities,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

        return {
            "topEntities": [e.model_dump(by_alias=True) for e in report.top_entities],
            "totalEntities": total_entities,
            "avgDegree": total_degree / total_entities if total_entities else 0.0,
        }

    async def paths(self, entity_name: str | None, target_entity: str | None, max_hops: int | None = None) -> dict:
        """Shortest directed path between two entities."""
        if not entity_name or not target_entity:
            raise OperationError("entityName and targetEntity required for path analysis")

        graph = await self.store.read_graph()
        hops = self.settings.max_hops if max_hops is None else max_hops
        path = self.analytics.find_path(entity_name, target_entity, graph.relations, hops)

        logger.info("analytics_completed", operation="paths", found=path is not None, max_hops=hops)

        return {
            "path": {
                "entities": path.entities,
                "length": path.length,
                "relations": [relation.label for relation in path.relations],
            } if path else None,
            "found": path is not None,
        }

    async def predictions(self, entity_name: str | None, top_k: int | None = None) -> dict:
        """Adamic-Adar link predictions for one entity."""
        entity_name = _require(entity_name, "entityName required for link prediction")

        graph = await self.store.read_graph()
        k = self.settings.top_k if top_k is None else top_k
        predictions = self.analytics.predict_links(entity_name, graph.entities, graph.relations, k)

        logger.info("analytics_completed", operation="predictions", entity=entity_name, count=len(predictions))

        return {
            "predictions": [p.model_dump(by_alias=True) for p in predictions],
            "totalPredictions": len(predictions),
        }

    async def communities(self, max_iterations: int | None = None) -> dict:
        """Label-propagation communities of the whole graph."""
        graph = await self.store.read_graph()
        iterations = self.settings.max_iterations if max_iterations is None else max_iterations
        community_map = self.analytics.detect_communities(graph.entities, graph.relations, iterations)

        logger.info(
            "analytics_completed",
            operation="communities",
            community_count=community_map.community_count,
            iterations=community_map.iterations,
        )

        return community_map.model_dump(by_alias=True)

    # ============== Index queries ==============

    def lookup(self, name: str | None) -> dict | None:
        """Entity by exact name, local index first."""
        name = _require(name, "name required for lookup")
        entity = self.index.lookup(name)
        return entity.model_dump(by_alias=True) if entity else None

    def search(self, query: str | None) -> dict:
        """Substring search over both indexes."""
        query = _require(query, "query required for search")
        results = self.index.search(query)
        return {
            "results": [e.model_dump(by_alias=True) for e in results],
            "total": len(results),
        }

    def list_entities(self, limit: int | None = None) -> dict:
        """Entities of both indexes, local first, up to limit per index."""
        entities = self.index.query_all(DEFAULT_QUERY_LIMIT if limit is None else limit)
        return {
            "entities": [e.model_dump(by_alias=True) for e in entities],
            "total": len(entities),
        }

    def relations(self, name: str | None) -> dict:
        """Outgoing relations of an entity from both indexes."""
        name = _require(name, "name required for relations")
        relations = self.index.relations_of(name)
        return {
            "relations": [r.model_dump(by_alias=True) for r in relations],
            "total": len(relations),
        }
