"""
Input normalization at the retriever's API boundary.

COERCION RULES:
---------------
query:
  - str          -> used as-is
  - anything else (None, numbers, dicts, ...) -> ""  (ranks to nothing)

documents:
  - None                     -> []
  - Document                 -> passed through
  - Mapping                  -> validated via KnowledgeItem, converted to Document
  - str/bytes or non-iterable, or any other item type -> InputError

A bad query degrades to "no context" because the chat still has to answer.
A bad documents argument is a programming error on the caller's side and is
raised rather than masked.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from support_rag.core.errors import InputError
from support_rag.retrieval.document import Document

logger = logging.getLogger(__name__)


def normalize_query(value: Any) -> str:
    """Return value if it is a string, otherwise ""."""
    if isinstance(value, str):
        return value
    if value is not None:
        logger.debug("Coercing non-string query of type %s to ''", type(value).__name__)
    return ""


def normalize_documents(value: Any) -> list[Document]:
    """Return a fresh list of Documents or raise InputError."""
    from support_rag.schemas.knowledge import KnowledgeItem

    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise InputError(
            f"documents must be a list of Documents, got {type(value).__name__}"
        )

    documents: list[Document] = []
    for index, item in enumerate(value):
        if isinstance(item, Document):
            documents.append(item)
        elif isinstance(item, Mapping):
            try:
                documents.append(KnowledgeItem.model_validate(item).to_document())
            except ValidationError as e:
                raise InputError(f"documents[{index}] is not a valid knowledge item: {e}") from e
        else:
            raise InputError(
                f"documents[{index}] must be a Document or mapping, got {type(item).__name__}"
            )
    return documents
