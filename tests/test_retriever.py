"""
Unit Tests for KnowledgeRetriever

Tests the fallback policy through the public rank() API.

STAFF ENGINEER PATTERNS:
------------------------
1. Inject a failing provider to exercise the fallback boundary
2. Compare against LexicalScorer directly (fallback guarantee)
3. Record spans with a fake tracer instead of patching OTel
"""

from contextlib import contextmanager

import numpy as np
import pytest
from unittest.mock import MagicMock, patch

from support_rag.config import RetrievalConfig
from support_rag.core.errors import InputError, ProviderError
from support_rag.core.protocols import Retriever, Scorer
from support_rag.embeddings import MockEmbeddings
from support_rag.observability.attributes import (
    GEN_AI_SYSTEM,
    RETRIEVAL_FALLBACK,
    RETRIEVAL_QUERY,
    RETRIEVAL_STRATEGY,
)
from support_rag.observability.tracer import NoOpTracer
from support_rag.retrieval.cache import EmbeddingCache
from support_rag.retrieval.document import Document
from support_rag.retrieval.lexical import LexicalScorer
from support_rag.retrieval.retriever import KnowledgeRetriever, create_retriever
from support_rag.retrieval.seeds import get_product_documents
from support_rag.retrieval.semantic import EmbeddingScorer


class RecordingSpan:
    def __init__(self):
        self.attributes = {}
        self.status = None
        self.exceptions = []

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def set_status(self, status, description=None):
        self.status = status

    def record_exception(self, exception):
        self.exceptions.append(exception)


class RecordingTracer:
    def __init__(self):
        self.spans = []

    @contextmanager
    def start_span(self, name, attributes=None):
        span = RecordingSpan()
        self.spans.append((name, span))
        yield span


def _failing_provider(exc=None):
    provider = MagicMock()
    provider.embed.side_effect = exc or ConnectionError("embedding service unreachable")
    return provider


def _vector_provider(mapping):
    provider = MagicMock()
    provider.embed.side_effect = lambda texts: [
        np.array(mapping[text], dtype=np.float32) for text in texts
    ]
    return provider


def _retriever(provider, **kwargs):
    return KnowledgeRetriever(
        embedding=EmbeddingScorer(provider),
        tracer=NoOpTracer(),
        **kwargs,
    )


@pytest.fixture
def install_docs():
    return [
        Document(id="doc-install", title="Installation Guide", content="Steps to install the device"),
        Document(id="doc-warranty", title="Warranty", content="Coverage terms"),
    ]


# ---------------------------------------------------------------------------
# EMBEDDING PATH
# ---------------------------------------------------------------------------


class TestEmbeddingStrategy:
    """Test that the embedding path is used when it works."""

    def test_uses_embedding_result_on_success(self, install_docs):
        provider = _vector_provider({
            "warranty": [0.0, 1.0],
            "Steps to install the device": [1.0, 0.0],
            "Coverage terms": [0.0, 1.0],
        })
        result = _retriever(provider).rank_with_scores("warranty", install_docs)

        assert result.strategy == "embedding"
        assert not result.fell_back
        assert result.ids == ["doc-warranty"]
        assert result.top_score == pytest.approx(1.0)

    def test_rank_returns_documents_only(self, install_docs):
        provider = _vector_provider({
            "q": [1.0, 0.0],
            "Steps to install the device": [1.0, 0.0],
            "Coverage terms": [0.0, 1.0],
        })
        ranked = _retriever(provider).rank("q", install_docs)

        assert [d.id for d in ranked] == ["doc-install"]
        assert isinstance(ranked[0], Document)

    def test_returned_documents_carry_embeddings(self, install_docs):
        provider = _vector_provider({
            "q": [1.0, 0.0],
            "Steps to install the device": [1.0, 0.0],
            "Coverage terms": [0.0, 1.0],
        })
        ranked = _retriever(provider).rank("q", install_docs)

        np.testing.assert_allclose(ranked[0].embedding, [1.0, 0.0])
        assert install_docs[0].embedding is None

    def test_empty_result_is_not_a_failure(self, install_docs):
        provider = _vector_provider({
            "q": [1.0, 0.0],
            "Steps to install the device": [0.0, 1.0],
            "Coverage terms": [0.0, 1.0],
        })
        result = _retriever(provider).rank_with_scores("q", install_docs)

        assert result.strategy == "embedding"
        assert result.documents == []


# ---------------------------------------------------------------------------
# FALLBACK GUARANTEE
# ---------------------------------------------------------------------------


class TestFallback:
    """Provider failures must never reach the caller."""

    def test_always_failing_provider_equals_lexical(self, install_docs):
        result = _retriever(_failing_provider()).rank("install", install_docs)
        expected = LexicalScorer().rank("install", install_docs)

        assert [d.id for d in result] == [d.id for d in expected] == ["doc-install"]

    def test_fallback_over_seed_knowledge_base(self):
        docs = get_product_documents()
        retriever = _retriever(_failing_provider())

        for query in ["reset", "wifi", "refund policy", "firmware update", "nothing matches zz"]:
            fell_back = [d.id for d in retriever.rank(query, docs)]
            lexical = [d.id for d in LexicalScorer().rank(query, docs)]
            assert fell_back == lexical

    def test_fallback_reports_reason(self, install_docs):
        result = _retriever(_failing_provider()).rank_with_scores("install", install_docs)

        assert result.strategy == "lexical"
        assert result.fell_back
        assert "embedding service unreachable" in result.fallback_reason

    def test_provider_error_is_not_propagated(self, install_docs):
        provider = _failing_provider(ProviderError("429 rate limit", provider="zhipu"))

        assert [d.id for d in _retriever(provider).rank("install", install_docs)] == ["doc-install"]

    def test_dimension_mismatch_falls_back(self, install_docs):
        provider = _vector_provider({"install": [1.0, 0.0, 0.0]})
        docs = [
            Document(id=d.id, title=d.title, content=d.content, embedding=np.array([1.0, 0.0]))
            for d in install_docs
        ]
        result = _retriever(provider).rank_with_scores("install", docs)

        assert result.strategy == "lexical"
        assert "dimension mismatch" in result.fallback_reason.lower()

    def test_unexpected_error_falls_back(self, install_docs):
        scorer = MagicMock()
        scorer.score_documents.side_effect = ZeroDivisionError("bug")
        retriever = KnowledgeRetriever(embedding=scorer, tracer=NoOpTracer())

        result = retriever.rank_with_scores("install", install_docs)

        assert result.strategy == "lexical"
        assert result.fallback_reason.startswith("ZeroDivisionError")

    def test_no_retry_before_fallback(self, install_docs):
        provider = _failing_provider()
        _retriever(provider).rank("install", install_docs)

        assert provider.embed.call_count == 1

    def test_fallback_logs_warning(self, install_docs, caplog):
        with caplog.at_level("WARNING", logger="support_rag.retrieval.retriever"):
            _retriever(_failing_provider()).rank("install", install_docs)

        assert "falling back to lexical" in caplog.text

    def test_fallback_can_return_empty(self, install_docs):
        assert _retriever(_failing_provider()).rank("bluetooth", install_docs) == []


# ---------------------------------------------------------------------------
# LEXICAL-ONLY AND EDGE CASES
# ---------------------------------------------------------------------------


class TestEdgeCases:
    """Empty inputs, coercion and determinism."""

    def test_lexical_only_retriever(self, install_docs):
        result = KnowledgeRetriever(tracer=NoOpTracer()).rank_with_scores("install", install_docs)

        assert result.strategy == "lexical"
        assert not result.fell_back
        assert result.ids == ["doc-install"]

    def test_empty_query_and_documents_both_strategies(self):
        provider = _vector_provider({})

        assert KnowledgeRetriever(tracer=NoOpTracer()).rank("", []) == []
        assert _retriever(provider).rank("", []) == []
        provider.embed.assert_not_called()

    def test_document_without_tags_both_strategies(self):
        doc = Document(id="doc-install", title="Installation Guide", content="Steps", tags=None)

        assert KnowledgeRetriever(tracer=NoOpTracer()).rank("install", [doc]) == [doc]
        assert [d.id for d in _retriever(_failing_provider()).rank("install", [doc])] == ["doc-install"]

    def test_tags_set_to_none_after_construction(self):
        doc = Document(id="doc-install", title="Installation Guide", content="Steps")
        doc.tags = None

        result = _retriever(_failing_provider()).rank("install", [doc])
        assert [d.id for d in result] == ["doc-install"]

    def test_non_string_query_coerced_to_empty(self, install_docs):
        retriever = KnowledgeRetriever(tracer=NoOpTracer())

        assert retriever.rank(None, install_docs) == []
        assert retriever.rank(42, install_docs) == []

    def test_none_documents_treated_as_empty(self):
        assert KnowledgeRetriever(tracer=NoOpTracer()).rank("install", None) == []

    def test_mapping_documents_accepted(self):
        docs = [
            {"id": "k1", "title": "Installation Guide", "content": "Steps to install the device"},
            {"id": "k2", "title": "Warranty", "content": "Coverage terms"},
        ]
        ranked = KnowledgeRetriever(tracer=NoOpTracer()).rank("install", docs)

        assert [d.id for d in ranked] == ["k1"]

    def test_string_documents_rejected(self):
        with pytest.raises(InputError):
            KnowledgeRetriever(tracer=NoOpTracer()).rank("install", "not a list")

    def test_invalid_items_rejected(self):
        with pytest.raises(InputError):
            KnowledgeRetriever(tracer=NoOpTracer()).rank("install", [1, 2, 3])

    def test_input_error_not_swallowed_by_fallback(self):
        provider = _failing_provider()
        with pytest.raises(InputError):
            _retriever(provider).rank("install", 123)
        provider.embed.assert_not_called()

    def test_deterministic_with_mock_embeddings(self):
        docs = get_product_documents()
        retriever = KnowledgeRetriever(
            embedding=EmbeddingScorer(MockEmbeddings(dimensions=64), threshold=0.0),
            tracer=NoOpTracer(),
        )

        first = retriever.rank_with_scores("reset the hub", docs)
        second = retriever.rank_with_scores("reset the hub", docs)

        assert first.strategy == "embedding"
        assert [(s.id, s.score) for s in first.documents] == [(s.id, s.score) for s in second.documents]
        assert len(first.documents) <= 5


# ---------------------------------------------------------------------------
# TRACING
# ---------------------------------------------------------------------------


class TestTracing:
    """Test span attributes set on each ranking call."""

    def test_span_records_strategy_and_fallback(self, install_docs):
        tracer = RecordingTracer()
        retriever = KnowledgeRetriever(
            embedding=EmbeddingScorer(_failing_provider()),
            tracer=tracer,
            capture_content=False,
        )

        retriever.rank("install", install_docs)

        name, span = tracer.spans[0]
        assert name == "retrieval.rank"
        assert span.attributes[RETRIEVAL_STRATEGY] == "lexical"
        assert span.attributes[RETRIEVAL_FALLBACK] is True
        assert RETRIEVAL_QUERY not in span.attributes
        assert span.status == "ok"

    def test_span_records_provider_system(self, install_docs):
        tracer = RecordingTracer()
        retriever = KnowledgeRetriever(
            embedding=EmbeddingScorer(MockEmbeddings(dimensions=32)),
            tracer=tracer,
            capture_content=False,
        )

        retriever.rank("install", install_docs)

        _, span = tracer.spans[0]
        assert span.attributes[GEN_AI_SYSTEM] == "mock"
        assert span.attributes[RETRIEVAL_STRATEGY] == "embedding"

    def test_fallback_records_exception_on_span(self, install_docs):
        tracer = RecordingTracer()
        retriever = KnowledgeRetriever(
            embedding=EmbeddingScorer(_failing_provider()),
            tracer=tracer,
        )

        retriever.rank("install", install_docs)

        _, span = tracer.spans[0]
        assert len(span.exceptions) == 1
        assert isinstance(span.exceptions[0], ProviderError)

    def test_unexpected_error_recorded_on_span(self, install_docs):
        embedding = MagicMock()
        embedding.score_documents.side_effect = KeyError("boom")
        tracer = RecordingTracer()

        KnowledgeRetriever(embedding=embedding, tracer=tracer).rank("install", install_docs)

        _, span = tracer.spans[0]
        assert isinstance(span.exceptions[0], KeyError)

    def test_success_records_no_exception(self, install_docs):
        tracer = RecordingTracer()
        KnowledgeRetriever(tracer=tracer).rank("install", install_docs)

        _, span = tracer.spans[0]
        assert span.exceptions == []

    def test_query_captured_only_when_enabled(self, install_docs):
        tracer = RecordingTracer()
        KnowledgeRetriever(tracer=tracer, capture_content=True).rank("install", install_docs)

        _, span = tracer.spans[0]
        assert span.attributes[RETRIEVAL_QUERY] == "install"


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


class TestCreateRetriever:
    """Test the factory function."""

    def test_lexical_only(self):
        retriever = create_retriever(config=RetrievalConfig(), lexical_only=True)
        assert not retriever.has_embedding_strategy

    def test_with_injected_provider(self):
        retriever = create_retriever(
            embeddings=MockEmbeddings(dimensions=32),
            config=RetrievalConfig(cache_embeddings=False),
        )
        assert retriever.has_embedding_strategy

    def test_mock_from_config(self):
        retriever = create_retriever(config=RetrievalConfig(use_mock_embeddings=True))
        assert retriever.has_embedding_strategy

    def test_shared_cache_is_used(self):
        cache = EmbeddingCache()
        retriever = create_retriever(
            embeddings=MockEmbeddings(dimensions=32),
            config=RetrievalConfig(),
            cache=cache,
        )
        retriever.rank("reset", get_product_documents())

        assert len(cache) == len(get_product_documents())

    def test_top_k_from_config(self):
        retriever = create_retriever(config=RetrievalConfig(top_k=1), lexical_only=True)
        docs = [Document(id=f"d{i}", title="Reset", content="") for i in range(3)]

        assert len(retriever.rank("reset", docs)) == 1

    def test_top_k_from_env_is_capped_at_five(self):
        docs = [Document(id=f"d{i}", title=f"Install step {i}", content="install") for i in range(10)]

        with patch.dict("os.environ", {"RETRIEVAL_TOP_K": "8"}):
            retriever = create_retriever(config=RetrievalConfig.from_env(), lexical_only=True)

        assert len(retriever.rank("install", docs)) == 5

    def test_top_k_above_five_capped_for_embedding_strategy(self):
        retriever = create_retriever(
            embeddings=MockEmbeddings(dimensions=32),
            config=RetrievalConfig(top_k=8, similarity_threshold=-1.0),
        )
        docs = [Document(id=f"d{i}", title="Reset", content=f"reset {i}") for i in range(10)]

        assert len(retriever.rank("reset", docs)) == 5


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class TestProtocolConformance:
    """Concrete classes satisfy the runtime-checkable contracts."""

    def test_retriever_protocol(self):
        assert isinstance(KnowledgeRetriever(tracer=NoOpTracer()), Retriever)

    def test_lexical_scorer_protocol(self):
        assert isinstance(LexicalScorer(), Scorer)

    def test_embedding_scorer_protocol(self):
        assert isinstance(EmbeddingScorer(MockEmbeddings(dimensions=8)), Scorer)
