# Graph Memory MCP Server
#
# Modular package structure:
# - config.py: Settings loaded from GRAPH_MEMORY_* environment variables
# - logging.py: structlog configuration
# - models.py: Entity, Relation, KnowledgeGraph and analytics result models
# - utils.py: Markdown entity parsing, regex patterns, and exceptions
# - storage.py: Async directory scans and KnowledgeGraph snapshots
# - index.py: LocalIndex and ExternalIndex providers
# - unified.py: UnifiedIndex merging local and external providers
# - rank.py: ArticleRank scoring
# - analytics.py: Centrality, paths, link prediction, communities
# - operations.py: Snapshot assembly and result shaping for the tools
# - tools.py: MCP tool definitions and dispatcher
# - main.py: Entry point and server initialization
