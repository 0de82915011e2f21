"""
Core module - shared protocols and errors for the entire system.

USAGE:
------
from support_rag.core import EmbeddingProvider, ProviderError

class MyEmbeddings:
    '''Implements EmbeddingProvider protocol.'''
    ...
"""

from support_rag.core.errors import (
    RetrievalError,
    ProviderError,
    DimensionMismatchError,
    InputError,
)
from support_rag.core.protocols import (
    EmbeddingProvider,
    Scorer,
    Retriever,
)

__all__ = [
    # Protocols
    "EmbeddingProvider",
    "Scorer",
    "Retriever",
    # Errors
    "RetrievalError",
    "ProviderError",
    "DimensionMismatchError",
    "InputError",
]
