"""
Graph analytics for Graph Memory MCP Server.

Contains centrality, shortest path, link prediction, and community detection
over a full (entities, relations) snapshot. Every method is a pure function
of its arguments: nothing is cached and the inputs are never modified.

Path search follows edges in their direction only. Link prediction and
community detection treat every relation as an undirected adjacency.
"""

import math
from collections import Counter, deque

import structlog

from .models import (
    CentralityMetrics,
    CentralityReport,
    CommunityMap,
    Entity,
    GraphPath,
    LinkPrediction,
    RankedEntity,
    Relation,
)
from .rank import ArticleRank

logger = structlog.get_logger(__name__)

# Neighbor sets are dicts used as insertion-ordered sets
NeighborMap = dict[str, dict[str, None]]


def build_undirected_neighbors(entities: list[Entity], relations: list[Relation]) -> NeighborMap:
    """Build bidirectional neighbor sets for the given entities.

    Only entities get a neighbor set, but a neighbor may be a dangling name.
    Neighbors are ordered by first appearance in the relation list.
    """
    neighbors: NeighborMap = {entity.name: {} for entity in entities}
    for relation in relations:
        if relation.from_ in neighbors:
            neighbors[relation.from_][relation.to] = None
        if relation.to in neighbors:
            neighbors[relation.to][relation.from_] = None
    return neighbors


def adamic_adar_weight(degree: int) -> float:
    """Contribution of one common neighbor with the given total degree.

    Degree-1 (and degenerate degree-0) neighbors contribute 1.0 since
    ln(1) = 0 would make the term infinite.
    """
    if degree > 1:
        return 1.0 / math.log(degree)
    return 1.0


def _color_classes(names: list[str], neighbors: NeighborMap) -> list[list[str]]:
    """Greedy coloring in name order; adjacent names never share a class."""
    colors: dict[str, int] = {}
    for name in names:
        taken = {colors[n] for n in neighbors[name] if n in colors and n != name}
        color = 0
        while color in taken:
            color += 1
        colors[name] = color

    classes: list[list[str]] = [[] for _ in range(max(colors.values(), default=-1) + 1)]
    for name in names:
        classes[colors[name]].append(name)
    return classes


def _majority_label(current: str, neighbor_labels: list[str]) -> str:
    """Most frequent neighbor label; ties go to the first encountered label."""
    counts = Counter(neighbor_labels)
    if not counts:
        return current

    best = max(counts.values())
    return next(label for label, count in counts.items() if count == best)


class GraphAnalytics:
    """Analytics engine over in-memory knowledge graph snapshots.

    Args:
        damping_factor: ArticleRank damping factor
        max_iterations: ArticleRank iteration cap
        tolerance: ArticleRank convergence threshold
        top_entities: Length of the centrality ranking
    """

    def __init__(
        self,
        damping_factor: float = 0.85,
        max_iterations: int = 100,
        tolerance: float = 1e-6,
        top_entities: int = 20,
    ):
        self.article_rank = ArticleRank(damping_factor, max_iterations, tolerance)
        self.top_entities = top_entities

    def compute_centrality(self, entities: list[Entity], relations: list[Relation]) -> CentralityReport:
        """Degree metrics and ArticleRank for every entity.

        ``top_entities`` is sorted by score descending; equal scores keep
        entity order.
        """
        in_degree = Counter(relation.to for relation in relations)
        out_degree = Counter(relation.from_ for relation in relations)
        scores = self.article_rank.compute(entities, relations)

        metrics: dict[str, CentralityMetrics] = {}
        for entity in entities:
            in_deg = in_degree[entity.name]
            out_deg = out_degree[entity.name]
            metrics[entity.name] = CentralityMetrics(
                in_degree=in_deg,
                out_degree=out_deg,
                total_degree=in_deg + out_deg,
                article_rank=scores.get(entity.name, 0.0),
            )

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        top_entities = [
            RankedEntity(name=name, score=score)
            for name, score in ranked[:max(self.top_entities, 0)]
        ]

        return CentralityReport(metrics=metrics, top_entities=top_entities)

    def find_path(
        self,
        from_entity: str,
        to_entity: str,
        relations: list[Relation],
        max_hops: int = 5,
    ) -> GraphPath | None:
        """Shortest directed path by breadth-first search.

        Args:
            from_entity: Start entity name
            to_entity: Target entity name
            relations: All relations of the graph
            max_hops: Longest path (in edges) to consider; negatives count as 0

        Returns:
            The path, or None if the target is unreachable within max_hops.
            A path from an entity to itself has length 0.
        """
        max_hops = max(max_hops, 0)

        adjacency: dict[str, list[Relation]] = {}
        for relation in relations:
            adjacency.setdefault(relation.from_, []).append(relation)

        queue: deque[tuple[str, list[str], list[Relation]]] = deque([(from_entity, [from_entity], [])])
        visited: set[str] = {from_entity}

        while queue:
            node, path, relation_path = queue.popleft()

            if node == to_entity:
                return GraphPath(
                    entities=path,
                    relations=relation_path,
                    length=len(path) - 1,
                    weight=float(len(relation_path)),
                )

            # Path already uses max_hops edges
            if len(path) > max_hops:
                continue

            for relation in adjacency.get(node, []):
                if relation.to not in visited:
                    visited.add(relation.to)
                    queue.append((relation.to, path + [relation.to], relation_path + [relation]))

        return None

    def predict_links(
        self,
        entity: str,
        entities: list[Entity],
        relations: list[Relation],
        top_k: int = 10,
    ) -> list[LinkPrediction]:
        """Predict missing links for an entity with the Adamic-Adar index.

        Candidates are entities not yet adjacent to ``entity`` in either
        direction that share at least one neighbor with it. Each shared
        neighbor adds ``1 / ln(degree)`` where degree counts every relation
        endpoint touching it.
        """
        if top_k <= 0:
            return []

        degree: Counter[str] = Counter()
        for relation in relations:
            degree[relation.from_] += 1
            degree[relation.to] += 1

        neighbors = build_undirected_neighbors(entities, relations)
        entity_neighbors = neighbors.get(entity, {})

        predictions: list[LinkPrediction] = []
        for other in entities:
            if other.name == entity or other.name in entity_neighbors:
                continue

            other_neighbors = neighbors.get(other.name, {})
            shared = [n for n in entity_neighbors if n in other_neighbors]
            if not shared:
                continue

            score = sum(adamic_adar_weight(degree[n]) for n in shared)
            predictions.append(LinkPrediction(
                from_=entity,
                to=other.name,
                confidence=score,
                shared_neighbors=shared,
                explanation=f"Adamic-Adar score: {score:.3f} via {len(shared)} common neighbors",
            ))

        predictions.sort(key=lambda p: p.confidence, reverse=True)
        return predictions[:top_k]

    def detect_communities(
        self,
        entities: list[Entity],
        relations: list[Relation],
        max_iterations: int = 100,
    ) -> CommunityMap:
        """Detect communities with label propagation.

        Every entity starts in its own community and repeatedly adopts the
        most frequent label among its neighbors. A pass updates one color
        class at a time: each class computes its labels from the current
        vector, then the new labels are swapped in. Stops after a pass
        without changes or after max_iterations passes.
        """
        names = list(dict.fromkeys(entity.name for entity in entities))
        labels: dict[str, str] = {name: name for name in names}
        neighbors = build_undirected_neighbors(entities, relations)
        classes = _color_classes(names, neighbors)

        iterations = 0
        changed = True
        while changed and iterations < max_iterations:
            changed = False
            iterations += 1

            for members in classes:
                updates: dict[str, str] = {}
                for name in members:
                    neighbor_labels = [labels[n] for n in neighbors[name] if n in labels]
                    label = _majority_label(labels[name], neighbor_labels)
                    if label != labels[name]:
                        updates[name] = label

                if updates:
                    labels = {**labels, **updates}
                    changed = True

        communities: dict[str, list[str]] = {}
        for name, label in labels.items():
            communities.setdefault(label, []).append(name)

        logger.debug(
            "communities_detected",
            entity_count=len(names),
            community_count=len(communities),
            iterations=iterations,
        )

        return CommunityMap(
            communities=communities,
            entity_community=labels,
            community_count=len(communities),
            iterations=iterations,
        )
