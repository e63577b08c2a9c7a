"""
ArticleRank for Graph Memory MCP Server.

ArticleRank is a PageRank variant: a node passes its score to its successors
divided by its own out-degree, and nodes without outgoing edges keep their
score instead of redistributing it over the graph.
"""

import structlog

from .models import Entity, Relation

logger = structlog.get_logger(__name__)


class ArticleRank:
    """ArticleRank scorer with configurable damping and convergence settings.

    Args:
        damping_factor: Probability of following an edge, clamped to [0, 1]
        max_iterations: Iteration cap; values <= 0 return the initial scores
        tolerance: Stop once the largest per-node change falls below this
    """

    def __init__(self, damping_factor: float = 0.85, max_iterations: int = 100, tolerance: float = 1e-6):
        self.damping_factor = min(max(damping_factor, 0.0), 1.0)
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def compute(self, entities: list[Entity], relations: list[Relation]) -> dict[str, float]:
        """Compute ArticleRank scores keyed by entity name.

        Relations whose source is not an entity contribute nothing; relations
        whose target is not an entity still count toward the source's
        out-degree.
        """
        n = len(entities)
        if n == 0:
            return {}

        initial_score = 1.0 / n
        scores: dict[str, float] = {entity.name: initial_score for entity in entities}

        incoming: dict[str, list[str]] = {name: [] for name in scores}
        out_degree: dict[str, int] = {name: 0 for name in scores}

        for relation in relations:
            if relation.from_ in out_degree:
                out_degree[relation.from_] += 1
            if relation.to in incoming:
                incoming[relation.to].append(relation.from_)

        teleport = (1 - self.damping_factor) / n
        iterations = 0

        for _ in range(self.max_iterations):
            iterations += 1
            new_scores: dict[str, float] = {}
            max_change = 0.0

            for name, sources in incoming.items():
                total = 0.0
                for source in sources:
                    total += scores.get(source, 0.0) / max(out_degree.get(source, 0), 1)

                new_score = teleport + self.damping_factor * total
                new_scores[name] = new_score
                max_change = max(max_change, abs(new_score - scores[name]))

            scores = new_scores

            if max_change < self.tolerance:
                break

        logger.debug("article_rank_computed", entity_count=n, iterations=iterations)
        return scores
