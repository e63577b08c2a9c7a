"""
Configuration module for Graph Memory MCP Server.

Uses pydantic-settings for configuration management with environment variable support.
Environment variables use GRAPH_MEMORY_ prefix (e.g., GRAPH_MEMORY_MEMORY_PATH).
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_memory_path() -> Path:
    """Get default memory directory (./memory in the working directory)."""
    return Path.cwd() / "memory"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Environment variables:
    - GRAPH_MEMORY_MEMORY_PATH: Directory holding the authored entity files
    - GRAPH_MEMORY_VAULT_PATH: Optional Obsidian vault used as external index
    - GRAPH_MEMORY_DAMPING_FACTOR: ArticleRank damping factor
    - GRAPH_MEMORY_MAX_ITERATIONS: Iteration cap for ArticleRank and label propagation
    - GRAPH_MEMORY_TOLERANCE: ArticleRank convergence threshold
    - GRAPH_MEMORY_MAX_HOPS: Maximum path length for path search
    - GRAPH_MEMORY_TOP_K: Number of link predictions returned
    - GRAPH_MEMORY_TOP_ENTITIES: Number of ranked entities in centrality reports
    - GRAPH_MEMORY_LOG_LEVEL: Logging level name
    """

    memory_path: Path = Field(default_factory=_get_default_memory_path)
    vault_path: Path | None = None
    damping_factor: float = Field(default=0.85, ge=0.0, le=1.0)
    max_iterations: int = 100
    tolerance: float = 1e-6
    max_hops: int = 5
    top_k: int = 10
    top_entities: int = 20
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="GRAPH_MEMORY_")


# Global settings instance
settings = Settings()
