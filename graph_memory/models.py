"""
Pydantic models for Graph Memory MCP Server.

Contains the graph vocabulary (entities, relations, snapshots) and the plain
result records produced by the analytics engine. Fields are snake_case in
Python and serialize to camelCase with ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GraphModel(BaseModel):
    """Base config: camelCase aliases, population by field name allowed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Entity(GraphModel):
    """A named node of the knowledge graph."""

    name: str
    entity_type: str
    observations: list[str] = Field(default_factory=list)


class Relation(GraphModel):
    """A directed, typed edge between two entity names."""

    from_: str = Field(alias="from")
    to: str
    relation_type: str
    qualification: str = ""

    @property
    def label(self) -> str:
        """Relation type and qualification as ``type.qualification``."""
        return f"{self.relation_type}.{self.qualification}"


class KnowledgeGraph(GraphModel):
    """Snapshot of the whole graph handed to analytics."""

    entities: list[Entity] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)


class CentralityMetrics(GraphModel):
    """Degree and ArticleRank figures for one entity."""

    in_degree: int
    out_degree: int
    total_degree: int
    article_rank: float
    normalized: bool = True


class RankedEntity(GraphModel):
    """Entity name with its ranking score."""

    name: str
    score: float


class CentralityReport(GraphModel):
    """Per-entity metrics plus the top of the ArticleRank ranking."""

    metrics: dict[str, CentralityMetrics]
    top_entities: list[RankedEntity]


class GraphPath(GraphModel):
    """A directed path found by breadth-first search."""

    entities: list[str]
    relations: list[Relation]
    length: int
    weight: float


class LinkPrediction(GraphModel):
    """A predicted missing link with its Adamic-Adar confidence."""

    from_: str = Field(alias="from")
    to: str
    confidence: float
    method: str = "adamic_adar"
    shared_neighbors: list[str]
    explanation: str


class CommunityMap(GraphModel):
    """Result of label propagation."""

    communities: dict[str, list[str]]
    entity_community: dict[str, str]
    community_count: int
    iterations: int = 0
