"""
Embedding-based scorer - cosine similarity against provider vectors.

STEPS:
------
1. Embed the query (one provider call).
2. Embed every document that has no vector yet. Cached vectors are reused;
   misses are sent in batches, optionally on a thread pool. All batches must
   finish before step 3 (barrier).
3. Cosine similarity between query and each document.
4. Keep similarity > threshold, best first, at most top_k (never more than 5).

Any provider failure fails the WHOLE operation with ProviderError. There is no
per-document degradation here; KnowledgeRetriever decides what to do next.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import numpy as np

from support_rag.core.errors import DimensionMismatchError, ProviderError
from support_rag.core.protocols import EmbeddingProvider
from support_rag.retrieval.cache import EmbeddingCache
from support_rag.retrieval.document import Document, ScoredDocument
from support_rag.retrieval.similarity import (
    DEFAULT_TOP_K,
    clamp_top_k,
    cosine_similarity,
    select_top,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.3
DEFAULT_BATCH_SIZE = 64


class EmbeddingScorer:
    """
    Cosine-similarity scorer with an injected embedding provider.

    Dependencies are INJECTED, not created internally.
    This enables testing with mock embeddings.
    """

    name = "embedding"

    def __init__(
        self,
        provider: EmbeddingProvider,
        threshold: float = DEFAULT_THRESHOLD,
        top_k: int = DEFAULT_TOP_K,
        cache: EmbeddingCache | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = 1,
    ):
        """
        Args:
            provider: Embedding provider (injected, not created here)
            threshold: Similarity must be strictly greater than this
            top_k: Maximum number of documents returned (capped at 5)
            cache: Optional shared cache keyed by (id, content hash)
            batch_size: Maximum texts per provider call
            max_workers: Concurrent provider calls for document batches
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._provider = provider
        self.threshold = threshold
        self.top_k = clamp_top_k(top_k)
        self._cache = cache
        self.batch_size = batch_size
        self.max_workers = max(1, max_workers)

    @property
    def provider(self) -> EmbeddingProvider:
        return self._provider

    # ------------------------------------------------------------------
    # Provider calls
    # ------------------------------------------------------------------

    def _embed_texts(self, texts: list[str]) -> list[np.ndarray]:
        """Call the provider and verify the response shape."""
        try:
            vectors = self._provider.embed(texts)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Embedding provider call failed: {e}") from e

        if vectors is None or len(vectors) != len(texts):
            got = "None" if vectors is None else len(vectors)
            raise ProviderError(
                f"Embedding provider returned {got} vectors for {len(texts)} inputs"
            )

        result = []
        for vector in vectors:
            try:
                arr = np.asarray(vector, dtype=np.float32)
            except (TypeError, ValueError) as e:
                raise ProviderError(f"Embedding provider returned a non-numeric vector: {e}") from e
            if arr.ndim != 1 or arr.size == 0:
                raise ProviderError(
                    f"Embedding provider returned a malformed vector of shape {arr.shape}"
                )
            result.append(arr)
        return result

    def embed_query(self, query: str) -> np.ndarray:
        return self._embed_texts([query])[0]

    def embed_documents(self, documents: Sequence[Document]) -> list[Document]:
        """
        Return the documents with an embedding attached to each.

        Documents that already carry a vector are returned as-is; the others
        are returned as copies. Nothing is written to the cache unless every
        batch succeeded.
        """
        result: list[Document] = list(documents)
        missing: list[int] = []

        for i, doc in enumerate(result):
            if doc.embedding is not None:
                continue
            cached = self._cache.get(doc) if self._cache is not None else None
            if cached is not None:
                result[i] = doc.with_embedding(cached)
            else:
                missing.append(i)

        if self._cache is not None and len(missing) < len(result):
            logger.debug(
                "Embedding cache: %d hits, %d misses",
                len(result) - len(missing),
                len(missing),
            )

        if not missing:
            return result

        texts = [result[i].content for i in missing]
        vectors = self._embed_in_batches(texts)

        for i, vector in zip(missing, vectors):
            doc = result[i]
            result[i] = doc.with_embedding(vector)
            if self._cache is not None:
                self._cache.put(doc, vector)

        return result

    def _embed_in_batches(self, texts: list[str]) -> list[np.ndarray]:
        batches = [
            texts[start:start + self.batch_size]
            for start in range(0, len(texts), self.batch_size)
        ]

        if len(batches) == 1 or self.max_workers == 1:
            vectors: list[np.ndarray] = []
            for batch in batches:
                vectors.extend(self._embed_texts(batch))
            return vectors

        workers = min(self.max_workers, len(batches))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self._embed_texts, batch) for batch in batches]
            try:
                # Collect in submission order; result() re-raises the first failure
                per_batch = [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        return [vector for batch in per_batch for vector in batch]

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score_documents(
        self,
        query: str,
        documents: Sequence[Document],
    ) -> list[ScoredDocument]:
        """
        Rank documents by cosine similarity to the query.

        Raises:
            ProviderError: the provider failed or returned a malformed response
            DimensionMismatchError: a document vector has the wrong length
        """
        if not documents or not query or not query.strip():
            return []

        query_vector = self.embed_query(query)
        embedded = self.embed_documents(documents)

        scored = []
        for doc in embedded:
            vector = np.asarray(doc.embedding).ravel()
            if vector.shape[0] != query_vector.shape[0]:
                raise DimensionMismatchError(
                    expected=query_vector.shape[0],
                    actual=vector.shape[0],
                    document_id=doc.id,
                )
            scored.append(ScoredDocument(doc, cosine_similarity(query_vector, vector)))

        return select_top(scored, top_k=self.top_k, min_score=self.threshold)

    def rank(self, query: str, documents: Sequence[Document]) -> list[Document]:
        return [item.document for item in self.score_documents(query, documents)]
