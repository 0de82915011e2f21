"""
In-process embedding cache.

Holds at most one vector per document id, tagged with the content hash it
was computed from. Editing a document's body makes the stored vector a miss,
and the next put() replaces it, so stale vectors do not pile up. Shared
between concurrent ranking calls, hence the lock.
"""

from __future__ import annotations

import threading

import numpy as np

from support_rag.retrieval.document import Document


class EmbeddingCache:
    """Thread-safe map from document id to (content hash, embedding vector)."""

    def __init__(self) -> None:
        self._vectors: dict[str, tuple[str, np.ndarray]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key_for(doc: Document) -> tuple[str, str]:
        return (doc.id, doc.content_hash())

    def get(self, doc: Document) -> np.ndarray | None:
        doc_id, content_hash = self.key_for(doc)
        with self._lock:
            entry = self._vectors.get(doc_id)
        if entry is None or entry[0] != content_hash:
            return None
        return entry[1]

    def put(self, doc: Document, vector: np.ndarray) -> None:
        doc_id, content_hash = self.key_for(doc)
        with self._lock:
            self._vectors[doc_id] = (content_hash, vector)

    def clear(self) -> None:
        with self._lock:
            self._vectors.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._vectors)
