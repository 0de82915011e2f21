"""
Error taxonomy for the retrieval core.

RetrievalError
├── ProviderError            remote embedding call failed or returned garbage
│   └── DimensionMismatchError
└── InputError               caller passed something that is not a query/document list

ProviderError is the failure boundary of the embedding strategy: the
KnowledgeRetriever catches it (and only it, plus unexpected bugs inside the
embedding path) and falls back to lexical ranking. InputError is a caller
contract violation and is allowed to propagate.
"""

from __future__ import annotations


class RetrievalError(Exception):
    """Base class for all retrieval errors."""


class ProviderError(RetrievalError):
    """The embedding provider failed, timed out, or returned a malformed response."""

    def __init__(self, message: str, *, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class DimensionMismatchError(ProviderError):
    """A vector's length does not match the query vector's length."""

    def __init__(self, expected: int, actual: int, document_id: str | None = None):
        where = f" for document {document_id!r}" if document_id else ""
        super().__init__(
            f"Embedding dimension mismatch{where}: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual
        self.document_id = document_id


class InputError(RetrievalError, TypeError):
    """The caller passed a value that cannot be interpreted as retrieval input."""
