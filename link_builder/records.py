"""Records flowing between the import and preview pipelines."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class URLRecord(BaseModel):
    """A link extracted from the chat export, numbered in input order."""

    model_config = ConfigDict(frozen=True)

    id: int
    date: str
    url: str

    def with_url(self, url: str) -> "URLRecord":
        """Return a copy pointing at ``url``; this record stays untouched."""

        if url == self.url:
            return self
        return self.model_copy(update={"url": url})


class PreviewRecord(BaseModel):
    """Preview metadata produced by a fetcher for one URL."""

    title: str = ""
    description: str = ""
    og_meta: dict[str, str] = Field(default_factory=dict)
    twitter_meta: dict[str, str] = Field(default_factory=dict)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("og_meta", "twitter_meta", mode="before")
    @classmethod
    def _compact_meta(cls, value: Any) -> dict[str, str]:
        if not value:
            return {}
        if not isinstance(value, dict):
            raise ValueError("meta fields expect a mapping")
        return {
            str(key): str(item).strip()
            for key, item in value.items()
            if item is not None and str(item).strip()
        }

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.description or self.og_meta or self.twitter_meta)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class PreviewEntry(BaseModel):
    """One element of the preview output array."""

    id: int
    date: str
    url: str
    preview: Any

    @classmethod
    def from_record(cls, record: URLRecord, preview: Any) -> "PreviewEntry":
        return cls(id=record.id, date=record.date, url=record.url, preview=preview)


__all__ = ["PreviewEntry", "PreviewRecord", "URLRecord"]
