"""Section tree models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Section(BaseModel):
    """A heading and the text attributed to it, with nested subsections."""

    level: int = Field(..., ge=1, le=6)
    title: str
    content: str = ""
    children: list["Section"] = Field(default_factory=list)
