"""Generated document models and their wire encoding."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M"


class SeoMeta(BaseModel):
  """Optional SEO metadata attached to a generated document."""

  title: str | None = None
  description: str | None = None
  tags: list[str] | None = None
  model_config = ConfigDict(frozen=True, extra="ignore")

  @field_validator("title", "description", mode="before")
  @classmethod
  def blank_to_none(cls, value: Any) -> Any:
    # Treat blank strings as absent so display falls back to the topic.
    if isinstance(value, str) and not value.strip():
      return None
    return value

  @field_validator("tags", mode="after")
  @classmethod
  def unique_tags(cls, value: list[str] | None) -> list[str] | None:
    if value is None:
      return None
    # Tags behave as a set; keep first-seen order for stable display.
    return list(dict.fromkeys(tag.strip() for tag in value if tag.strip()))


class Document(BaseModel):
  """A finished generated article as delivered by the generation service.

  Wire payloads use snake_case names that differ from the attribute names:
  ``final_post`` decodes into ``raw_content`` and ``seo`` into ``seo_meta``.
  """

  id: str = Field(min_length=1)
  topic: str
  created_at: datetime
  seo_meta: SeoMeta | None = Field(default=None, alias="seo")
  raw_content: str = Field(alias="final_post")
  model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

  @classmethod
  def from_wire(cls, payload: Any) -> Document:
    """Validate a decoded JSON payload into a document."""
    return cls.model_validate(payload)

  def to_wire(self) -> dict[str, Any]:
    """Encode the document with wire field names."""
    return self.model_dump(mode="json", by_alias=True)

  @property
  def display_title(self) -> str:
    """Return the SEO title, falling back to the topic."""
    if self.seo_meta and self.seo_meta.title:
      return self.seo_meta.title
    return self.topic

  @property
  def description(self) -> str | None:
    return self.seo_meta.description if self.seo_meta else None

  @property
  def tags(self) -> list[str]:
    if self.seo_meta and self.seo_meta.tags:
      return list(self.seo_meta.tags)
    return []

  def display_date(self, fmt: str = DISPLAY_DATE_FORMAT) -> str:
    """Format the creation timestamp in local time."""
    return self.created_at.astimezone().strftime(fmt)
