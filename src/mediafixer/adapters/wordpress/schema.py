"""Pydantic models describing the WordPress REST API payloads."""

from __future__ import annotations

import html
from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WordPressBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RenderedField(WordPressBaseModel):
    """``{"raw": ..., "rendered": ...}``; ``raw`` is only present in the edit context."""

    raw: str | None = None
    rendered: str = ""

    @property
    def text(self) -> str:
        if self.raw is not None:
            return self.raw
        return html.unescape(self.rendered)


class MediaDetails(WordPressBaseModel):
    file: str | None = None


class MediaPayload(WordPressBaseModel):
    id: int
    slug: str = ""
    title: RenderedField = Field(default_factory=RenderedField)
    alt_text: str = ""
    post: int | None = None
    mime_type: str = ""
    date_gmt: datetime | None = None
    source_url: str | None = None
    media_details: MediaDetails | None = None

    @field_validator("media_details", mode="before")
    @classmethod
    def _empty_details(cls, value: object) -> object:
        # WordPress sends [] instead of {} when nothing is known about the file.
        if isinstance(value, list):
            return None
        return value


class MediaIdPayload(WordPressBaseModel):
    id: int


class PostPayload(WordPressBaseModel):
    id: int
    title: RenderedField = Field(default_factory=RenderedField)
    date_gmt: datetime | None = None
    categories: list[int] = Field(default_factory=list[int])


class CategoryPayload(WordPressBaseModel):
    id: int
    slug: str


class ErrorResponse(WordPressBaseModel):
    code: str
    message: str = ""


class PostTypePayload(WordPressBaseModel):
    rest_base: str | None = None
    rest_namespace: str = "wp/v2"
