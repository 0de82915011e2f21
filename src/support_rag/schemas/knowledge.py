"""
Knowledge item schema - the boundary contract for knowledge-base input.

Knowledge items arrive as JSON from the surrounding dashboard (a project's
knowledge list) or from a file passed to the CLI. They are validated here
once and converted to the internal Document dataclass; the ranking code never
sees raw dicts.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from support_rag.retrieval.document import Document


class KnowledgeItem(BaseModel):
    """A single knowledge-base entry as stored by the dashboard."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(description="Stable unique identifier")
    title: str = Field(default="", description="Short title shown to merchants")
    content: str = Field(default="", description="Body text matched against queries")
    tags: list[str] = Field(default_factory=list)
    type: str = Field(
        default="text",
        description="Knowledge type (text, pdf, link, video), informational only",
    )
    embedding: list[float] | None = Field(
        default=None,
        description="Precomputed vector, if the caller cached one",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # Dashboard ids are sometimes numeric timestamps
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        if value is None:
            return []
        return value

    def to_document(self) -> Document:
        return Document(
            id=self.id,
            title=self.title,
            content=self.content,
            tags=list(self.tags),
            embedding=(
                np.asarray(self.embedding, dtype=np.float32)
                if self.embedding is not None
                else None
            ),
            created_at=self.created_at,
            kind=self.type,
        )


class KnowledgeBase(BaseModel):
    """A list of knowledge items, as loaded from a JSON file."""

    items: list[KnowledgeItem]

    def to_documents(self) -> list[Document]:
        return [item.to_document() for item in self.items]

    @classmethod
    def from_json_file(cls, path: str | Path) -> KnowledgeBase:
        """
        Load a knowledge base from JSON.

        Accepts either a bare list of items or {"items": [...]}, which
        covers both a project's knowledge export and a hand-written file.

        Raises:
            pydantic.ValidationError: if any item is malformed
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, list):
            data = {"items": data}
        return cls.model_validate(data)
