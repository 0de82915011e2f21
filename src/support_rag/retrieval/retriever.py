"""
KnowledgeRetriever - picks a ranking strategy, with graceful degradation.

STATE MACHINE (linear, two states):
-----------------------------------
1. EMBEDDING: rank with EmbeddingScorer. Success -> return.
2. LEXICAL:   any failure in (1) -> rank with LexicalScorer -> return.

No retries on (1). Prompt assembly must not block on a flaky remote
dependency, and (2) is pure local computation that cannot fail on valid
Documents, so callers always get a list back (possibly empty).

Inputs are normalized BEFORE either strategy runs (see validation.py); an
InputError is a caller bug and propagates.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Sequence

from support_rag.config import RetrievalConfig
from support_rag.core.errors import ProviderError
from support_rag.core.protocols import EmbeddingProvider
from support_rag.observability.attributes import (
    GEN_AI_REQUEST_MODEL,
    GEN_AI_SYSTEM,
    RETRIEVAL_QUERY,
    RETRIEVAL_THRESHOLD,
    ranking_attributes,
)
from support_rag.observability.config import get_config as get_phoenix_config
from support_rag.observability.tracer import TracerProtocol, get_tracer
from support_rag.retrieval.cache import EmbeddingCache
from support_rag.retrieval.document import Document, ScoredDocument
from support_rag.retrieval.lexical import LexicalScorer
from support_rag.retrieval.semantic import DEFAULT_BATCH_SIZE, EmbeddingScorer
from support_rag.retrieval.validation import normalize_documents, normalize_query

logger = logging.getLogger(__name__)

STRATEGY_EMBEDDING = "embedding"
STRATEGY_LEXICAL = "lexical"


@dataclass
class RankingResult:
    """Outcome of one ranking call, for diagnostics and tests."""
    documents: list[ScoredDocument]
    strategy: str
    latency_ms: float = 0.0
    fallback_reason: str | None = None

    @property
    def fell_back(self) -> bool:
        return self.fallback_reason is not None

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.documents]

    @property
    def top_score(self) -> float | None:
        return self.documents[0].score if self.documents else None

    def to_documents(self) -> list[Document]:
        return [item.document for item in self.documents]

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "latency_ms": self.latency_ms,
            "fallback_reason": self.fallback_reason,
            "documents": [item.to_dict() for item in self.documents],
        }


class KnowledgeRetriever:
    """
    Select the knowledge-base entries to inject into a support prompt.

    Dependencies are INJECTED, not created internally. Pass embedding=None
    to run lexical-only (no provider configured).
    """

    def __init__(
        self,
        embedding: EmbeddingScorer | None = None,
        lexical: LexicalScorer | None = None,
        tracer: TracerProtocol | None = None,
        capture_content: bool | None = None,
    ):
        self._embedding = embedding
        self._lexical = lexical or LexicalScorer()
        self._tracer = tracer
        self._capture_content = capture_content

    @property
    def has_embedding_strategy(self) -> bool:
        return self._embedding is not None

    def _get_tracer(self) -> TracerProtocol:
        return self._tracer or get_tracer()

    def _should_capture(self) -> bool:
        if self._capture_content is not None:
            return self._capture_content
        return get_phoenix_config().capture_content

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def rank(self, query: Any, documents: Any) -> list[Document]:
        """Ranked subset of documents most relevant to the query (at most 5)."""
        return self.rank_with_scores(query, documents).to_documents()

    def rank_with_scores(self, query: Any, documents: Any) -> RankingResult:
        """Like rank(), but reports scores, strategy and any fallback reason."""
        query = normalize_query(query)
        docs = normalize_documents(documents)

        with self._get_tracer().start_span("retrieval.rank") as span:
            if self._should_capture():
                span.set_attribute(RETRIEVAL_QUERY, query)

            start = time.time()
            result = self._run(query, docs, span)
            result.latency_ms = (time.time() - start) * 1000

            if self._embedding is not None:
                self._set_provider_attributes(span)
            if result.strategy == STRATEGY_EMBEDDING:
                span.set_attribute(RETRIEVAL_THRESHOLD, self._embedding.threshold)
            for key, value in ranking_attributes(
                strategy=result.strategy,
                candidate_count=len(docs),
                result_ids=result.ids,
                latency_ms=result.latency_ms,
                top_score=result.top_score,
                fallback_reason=result.fallback_reason,
            ).items():
                span.set_attribute(key, value)
            span.set_status("ok")

        return result

    def _set_provider_attributes(self, span: Any) -> None:
        provider = getattr(self._embedding, "provider", None)
        system = getattr(provider, "system", None)
        model = getattr(provider, "model", None)
        if isinstance(system, str):
            span.set_attribute(GEN_AI_SYSTEM, system)
        if isinstance(model, str):
            span.set_attribute(GEN_AI_REQUEST_MODEL, model)

    # ------------------------------------------------------------------
    # Strategy selection
    # ------------------------------------------------------------------

    def _run(self, query: str, docs: Sequence[Document], span: Any) -> RankingResult:
        if self._embedding is None:
            logger.debug("No embedding provider configured, using lexical ranking")
            return self._rank_lexical(query, docs)

        try:
            scored = self._embedding.score_documents(query, docs)
        except ProviderError as e:
            logger.warning("Embedding ranking failed, falling back to lexical: %s", e)
            span.record_exception(e)
            return self._rank_lexical(query, docs, fallback_reason=str(e))
        except Exception as e:
            # Failure boundary of the embedding strategy: anything it raises,
            # including bugs in scoring, degrades to lexical
            logger.warning(
                "Unexpected error in embedding ranking, falling back to lexical: %s",
                e,
                exc_info=True,
            )
            span.record_exception(e)
            return self._rank_lexical(
                query, docs, fallback_reason=f"{type(e).__name__}: {e}"
            )

        return RankingResult(documents=scored, strategy=STRATEGY_EMBEDDING)

    def _rank_lexical(
        self,
        query: str,
        docs: Sequence[Document],
        fallback_reason: str | None = None,
    ) -> RankingResult:
        return RankingResult(
            documents=self._lexical.score_documents(query, docs),
            strategy=STRATEGY_LEXICAL,
            fallback_reason=fallback_reason,
        )


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def create_retriever(
    embeddings: EmbeddingProvider | None = None,
    config: RetrievalConfig | None = None,
    lexical_only: bool = False,
    cache: EmbeddingCache | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> KnowledgeRetriever:
    """
    Factory function to build a KnowledgeRetriever from configuration.

    Args:
        embeddings: Embedding provider (created from env if not provided)
        config: Ranking configuration (loaded from env if not provided)
        lexical_only: Skip the embedding strategy entirely
        cache: Shared embedding cache; a private one is created when
            config.cache_embeddings is set and none is given
        batch_size: Max texts per embedding request
    """
    config = config or RetrievalConfig.from_env()
    lexical = LexicalScorer(top_k=config.top_k)

    if lexical_only:
        return KnowledgeRetriever(embedding=None, lexical=lexical)

    if embeddings is None:
        from support_rag.embeddings import get_embedding_provider

        embeddings = get_embedding_provider(use_mock=config.use_mock_embeddings)

    if cache is None and config.cache_embeddings:
        cache = EmbeddingCache()

    embedding = EmbeddingScorer(
        embeddings,
        threshold=config.similarity_threshold,
        top_k=config.top_k,
        cache=cache,
        batch_size=batch_size,
        max_workers=config.max_workers,
    )
    return KnowledgeRetriever(embedding=embedding, lexical=lexical)
