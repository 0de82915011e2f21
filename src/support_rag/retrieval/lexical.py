"""
Lexical scorer - keyword relevance without any external service.

SCORING (additive, everything lowercased):
------------------------------------------
+3.0  query is a substring of the title
+2.0  query is a substring of the body
+1.5  query is a substring of any tag
+0.5  per query token (len > 1) found in "title body"

Only documents scoring above zero are returned, best first, at most top_k (never more than 5).
This is also the fallback path for KnowledgeRetriever, so it must never raise
on well-formed Documents.
"""

from __future__ import annotations

from typing import Sequence

from support_rag.retrieval.document import Document, ScoredDocument
from support_rag.retrieval.similarity import DEFAULT_TOP_K, clamp_top_k, select_top

TITLE_WEIGHT = 3.0
BODY_WEIGHT = 2.0
TAG_WEIGHT = 1.5
TOKEN_WEIGHT = 0.5
MIN_TOKEN_LENGTH = 2


class LexicalScorer:
    """Substring and token-overlap scorer."""

    name = "lexical"

    def __init__(self, top_k: int = DEFAULT_TOP_K):
        self.top_k = clamp_top_k(top_k)

    def score(self, query: str, document: Document) -> float:
        """Relevance of a single document. An empty query scores 0."""
        if not query or not query.strip():
            return 0.0

        q = query.lower()
        title = document.title.lower()
        body = document.content.lower()
        score = 0.0

        if q in title:
            score += TITLE_WEIGHT
        if q in body:
            score += BODY_WEIGHT
        if any(q in tag.lower() for tag in document.tags or ()):
            score += TAG_WEIGHT

        haystack = f"{title} {body}"
        for token in q.split():
            if len(token) >= MIN_TOKEN_LENGTH and token in haystack:
                score += TOKEN_WEIGHT

        return score

    def score_documents(
        self,
        query: str,
        documents: Sequence[Document],
    ) -> list[ScoredDocument]:
        """Score, filter (> 0), sort and truncate."""
        scored = [ScoredDocument(doc, self.score(query, doc)) for doc in documents]
        return select_top(scored, top_k=self.top_k, min_score=0.0)

    def rank(self, query: str, documents: Sequence[Document]) -> list[Document]:
        return [item.document for item in self.score_documents(query, documents)]
