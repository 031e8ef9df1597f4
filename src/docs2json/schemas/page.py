"""Persisted page record models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from docs2json.schemas.sections import Section


class NavItem(BaseModel):
    """A link in the navigation region of a page."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class PageContent(BaseModel):
    """Structured content extracted from one rendered page."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    main_content: list[Section] = Field(default_factory=list, alias="mainContent")
    navigation: list[NavItem] = Field(default_factory=list)


class PageRecord(BaseModel):
    """One crawled page as written to disk."""

    url: str
    content: PageContent

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class RawPageRecord(BaseModel):
    """Raw-capture record: the page title and the text of its content root."""

    title: str
    url: str
    html: str

    def to_json_dict(self) -> dict:
        return self.model_dump()
