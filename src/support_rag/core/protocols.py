"""
Core protocols defining contracts for the retrieval system.

Every collaborator the retriever talks to is described here as a Protocol,
so concrete implementations are injected rather than imported.

PATTERN:
- Protocol defines the contract
- Multiple implementations possible (ZhipuEmbeddings, MockEmbeddings, ...)
- Factory functions for instantiation
- Test doubles for fast unit tests
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from support_rag.retrieval.document import Document, ScoredDocument


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    embed() accepts one text or a list of texts and always returns one
    vector per input, in input order. Failures are raised as ProviderError,
    never returned as a short list.

    Implementations:
    - ZhipuEmbeddings (production)
    - MockEmbeddings (testing)
    """

    @property
    def dimensions(self) -> int:
        """Length of every vector this provider returns."""
        ...

    def embed(self, texts: str | list[str]) -> list[np.ndarray]:
        """Generate embeddings for one or more texts."""
        ...


# ---------------------------------------------------------------------------
# SCORER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class Scorer(Protocol):
    """
    Contract for a single ranking strategy.

    Implementations:
    - LexicalScorer (substring / token overlap, no I/O)
    - EmbeddingScorer (cosine similarity over provider vectors)
    """

    def score_documents(
        self,
        query: str,
        documents: Sequence[Document],
    ) -> list[ScoredDocument]:
        """Return the ranked, filtered, truncated documents with scores."""
        ...

    def rank(self, query: str, documents: Sequence[Document]) -> list[Document]:
        """Return the ranked, filtered, truncated documents."""
        ...


# ---------------------------------------------------------------------------
# RETRIEVER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class Retriever(Protocol):
    """
    Contract consumed by prompt assembly.

    rank() must always return a list (possibly empty). Provider failures are
    the retriever's problem, not the caller's.
    """

    def rank(self, query: str, documents: Sequence[Document]) -> list[Document]:
        """Select the documents most relevant to the query."""
        ...
