"""
Embeddings module - text embedding generation.

1. Protocol (EmbeddingProvider) defines the interface
2. Production implementation (ZhipuEmbeddings)
3. Test double (MockEmbeddings) for fast testing
4. Factory function (get_embedding_provider)
"""

from support_rag.core.protocols import EmbeddingProvider
from support_rag.embeddings.openai_embeddings import (
    ZhipuEmbeddings,
    MockEmbeddings,
    get_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "ZhipuEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]
