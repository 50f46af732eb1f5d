"""Generated document model."""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedDocument(BaseModel):
    """Final formatter output."""

    summary: str
    content: str
    filename: str
    media_type: str
