"""
Document model for the retrieval system.

Single responsibility: Define the structure of knowledge entries
and their per-query scores.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

import numpy as np


@dataclass
class Document:
    """
    A knowledge-base entry, optionally carrying its embedding.

    Documents belong to the caller's knowledge base. The retriever never
    mutates them in place; when it computes an embedding it hands back a
    copy via with_embedding().
    """
    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    embedding: np.ndarray | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str = "text"  # text | pdf | link | video, informational only

    def __post_init__(self) -> None:
        # Tags are optional; None and tuples become a list
        self.tags = list(self.tags) if self.tags else []

    def content_hash(self) -> str:
        """SHA-256 of the body text, used to key cached embeddings."""
        return hashlib.sha256(self.content.encode("utf-8")).hexdigest()

    def with_embedding(self, embedding: np.ndarray) -> Document:
        """Return a copy of this document carrying the given vector."""
        return replace(self, tags=list(self.tags), embedding=embedding)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (vector omitted)."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "kind": self.kind,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        """Build a Document from a raw mapping, validating it first."""
        from support_rag.schemas.knowledge import KnowledgeItem

        return KnowledgeItem.model_validate(data).to_document()


@dataclass(frozen=True)
class ScoredDocument:
    """A document paired with its relevance score for one ranking call."""
    document: Document
    score: float

    @property
    def id(self) -> str:
        return self.document.id

    def to_dict(self) -> dict:
        return {**self.document.to_dict(), "score": self.score}
