"""Progress reporting model."""

from __future__ import annotations

from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict

ProgressStep = Literal["chapters", "topics", "sections", "document", "complete"]


class ProgressUpdate(BaseModel):
    """One phase/message pair emitted while a book is generated."""

    model_config = ConfigDict(frozen=True)

    step: ProgressStep
    message: str


ProgressCallback = Callable[[ProgressUpdate], None]
