"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to vector embeddings.

The production provider talks to Zhipu's embedding-3 model through its
OpenAI-compatible endpoint, so the plain openai SDK is all we need.

SOLID PRINCIPLE: Single Responsibility
- This module ONLY handles embedding generation
- No ranking logic, no document handling
- Easy to swap for different embedding providers
"""

from __future__ import annotations

import hashlib
import logging
import re

import numpy as np
import openai
from openai import OpenAI

from support_rag.config import EmbeddingConfig
from support_rag.core.errors import ProviderError
from support_rag.core.protocols import EmbeddingProvider

logger = logging.getLogger(__name__)


def _as_list(texts: str | list[str]) -> list[str]:
    return [texts] if isinstance(texts, str) else list(texts)


class ZhipuEmbeddings:
    """
    Zhipu embedding provider over the OpenAI-compatible API.

    Uses embedding-3 at 768 dimensions by default. The SDK client is built
    with max_retries=0: a failed call should reach the retriever's lexical
    fallback immediately instead of being retried behind its back.
    """

    system = "zhipu"

    def __init__(
        self,
        config: EmbeddingConfig | None = None,
        client: OpenAI | None = None,
    ):
        self.config = config or EmbeddingConfig.from_env()
        self.model = self.config.model
        # "" instead of None: the SDK would otherwise raise at construction,
        # and a missing key must surface as a failed call (-> lexical fallback)
        self._client = client or OpenAI(
            api_key=self.config.api_key or "",
            base_url=self.config.base_url,
            timeout=self.config.timeout_s,
            max_retries=0,
        )

    @property
    def dimensions(self) -> int:
        return self.config.dimensions

    def embed(self, texts: str | list[str]) -> list[np.ndarray]:
        """Generate one embedding per input text, in input order."""
        inputs = _as_list(texts)
        if not inputs:
            return []

        try:
            response = self._client.embeddings.create(
                input=inputs,
                model=self.model,
                dimensions=self.dimensions,
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"Embedding request failed: {e}", provider=self.system) from e

        data = getattr(response, "data", None)
        if not data or len(data) != len(inputs):
            raise ProviderError(
                f"Expected {len(inputs)} embeddings, got {len(data) if data else 0}",
                provider=self.system,
            )

        # The API reports each vector's input position; do not trust list order
        ordered = sorted(data, key=lambda item: getattr(item, "index", 0))
        vectors = []
        for item in ordered:
            vector = np.array(item.embedding, dtype=np.float32)
            if vector.shape != (self.dimensions,):
                raise ProviderError(
                    f"Expected {self.dimensions}-dim embedding, got shape {vector.shape}",
                    provider=self.system,
                )
            vectors.append(vector)
        return vectors


class MockEmbeddings:
    """
    Mock embedding provider for testing without API calls.

    Hashing-trick bag of words: each lowercase token is hashed to a bucket and
    a sign. Texts sharing words get positively correlated vectors, so ranking
    against the mock still behaves sensibly. Deterministic across runs.
    NOT for production use - only for testing/development.
    """

    system = "mock"
    _token = re.compile(r"\w+", re.UNICODE)

    def __init__(self, dimensions: int = 768):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _embed_one(self, text: str) -> np.ndarray:
        vector = np.zeros(self._dimensions, dtype=np.float32)
        for token in self._token.findall(text.lower()):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "little") % self._dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign
        norm = np.linalg.norm(vector)
        return vector / norm if norm else vector

    def embed(self, texts: str | list[str]) -> list[np.ndarray]:
        """Generate deterministic pseudo-embeddings."""
        return [self._embed_one(text) for text in _as_list(texts)]


def get_embedding_provider(
    use_mock: bool = False,
    config: EmbeddingConfig | None = None,
) -> EmbeddingProvider:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        use_mock: If True, return MockEmbeddings (for testing)
        config: Provider configuration (loaded from env if not provided)
    """
    config = config or EmbeddingConfig.from_env()
    if use_mock:
        return MockEmbeddings(dimensions=config.dimensions)
    if not config.api_key:
        logger.warning("ZHIPU_API_KEY is not set; embedding calls will fail and fall back to lexical ranking")
    return ZhipuEmbeddings(config)
