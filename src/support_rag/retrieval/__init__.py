"""
Retrieval module - pick the knowledge entries that go into a support prompt.

This module provides:
- Document / ScoredDocument: the document model
- LexicalScorer: keyword scoring, no I/O
- EmbeddingScorer: cosine similarity over provider embeddings
- EmbeddingCache: (id, content hash) -> vector
- KnowledgeRetriever: embedding first, lexical fallback
- create_retriever(): Factory function
- build_context() / build_prompt() / build_messages(): prompt assembly

ARCHITECTURE:
-------------
1. Protocols define the contracts (in core.protocols)
2. Two interchangeable scorers implement Scorer
3. KnowledgeRetriever owns the fallback policy
4. Factory function for instantiation
"""

from support_rag.retrieval.document import Document, ScoredDocument
from support_rag.retrieval.similarity import cosine_similarity, select_top
from support_rag.retrieval.lexical import LexicalScorer
from support_rag.retrieval.semantic import EmbeddingScorer
from support_rag.retrieval.cache import EmbeddingCache
from support_rag.retrieval.retriever import (
    KnowledgeRetriever,
    RankingResult,
    create_retriever,
)
from support_rag.retrieval.context import (
    build_context,
    build_prompt,
    build_messages,
)
from support_rag.retrieval.seeds import get_product_documents

__all__ = [
    # Model
    "Document",
    "ScoredDocument",
    # Utilities
    "cosine_similarity",
    "select_top",
    # Scorers
    "LexicalScorer",
    "EmbeddingScorer",
    "EmbeddingCache",
    # Orchestration
    "KnowledgeRetriever",
    "RankingResult",
    "create_retriever",
    # Prompt assembly
    "build_context",
    "build_prompt",
    "build_messages",
    # Seeds
    "get_product_documents",
]
