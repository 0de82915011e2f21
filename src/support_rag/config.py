"""
Embedding and retrieval configuration.

Loaded from environment variables once at the edge (CLI, app startup) and
then passed into constructors. The retriever itself never reads the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ZHIPU_DEFAULT_BASE_URL = "https://open.bigmodel.cn/api/paas/v4/"


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class EmbeddingConfig:
    """Configuration for the remote embedding provider.

    Environment Variables:
        ZHIPU_API_KEY: API key for the Zhipu open platform
        ZHIPU_BASE_URL: OpenAI-compatible base URL (default: Zhipu v4 endpoint)
        EMBEDDING_MODEL: Embedding model name (default: embedding-3)
        EMBEDDING_DIMENSIONS: Requested vector length (default: 768)
        EMBEDDING_TIMEOUT_S: Per-request timeout in seconds (default: 30)
        EMBEDDING_BATCH_SIZE: Max texts per request (default: 64)
    """

    api_key: str | None = None
    base_url: str = ZHIPU_DEFAULT_BASE_URL
    model: str = "embedding-3"
    dimensions: int = 768
    timeout_s: float = 30.0
    batch_size: int = 64

    @classmethod
    def from_env(cls) -> "EmbeddingConfig":
        """Load config from environment variables."""
        return cls(
            api_key=os.environ.get("ZHIPU_API_KEY") or None,
            base_url=os.environ.get("ZHIPU_BASE_URL", ZHIPU_DEFAULT_BASE_URL),
            model=os.environ.get("EMBEDDING_MODEL", "embedding-3"),
            dimensions=int(os.environ.get("EMBEDDING_DIMENSIONS", "768")),
            timeout_s=float(os.environ.get("EMBEDDING_TIMEOUT_S", "30")),
            batch_size=int(os.environ.get("EMBEDDING_BATCH_SIZE", "64")),
        )


@dataclass
class RetrievalConfig:
    """Configuration for ranking.

    Environment Variables:
        RETRIEVAL_TOP_K: Max documents returned (default: 5, values above 5 are capped)
        RETRIEVAL_SIMILARITY_THRESHOLD: Cosine cut-off, exclusive (default: 0.3)
        RETRIEVAL_MAX_WORKERS: Concurrent embedding batches (default: 4)
        RETRIEVAL_CACHE_EMBEDDINGS: Reuse document vectors across calls (default: true)
        USE_MOCK_EMBEDDINGS: Use the offline mock provider (default: false)
    """

    top_k: int = 5
    similarity_threshold: float = 0.3
    max_workers: int = 4
    cache_embeddings: bool = True
    use_mock_embeddings: bool = False

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        """Load config from environment variables."""
        return cls(
            top_k=int(os.environ.get("RETRIEVAL_TOP_K", "5")),
            similarity_threshold=float(os.environ.get("RETRIEVAL_SIMILARITY_THRESHOLD", "0.3")),
            max_workers=int(os.environ.get("RETRIEVAL_MAX_WORKERS", "4")),
            cache_embeddings=_env_bool("RETRIEVAL_CACHE_EMBEDDINGS", "true"),
            use_mock_embeddings=_env_bool("USE_MOCK_EMBEDDINGS", "false"),
        )
