"""Content models for SEO article automation."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ContentItem(BaseModel):
    """An article held by the content repository."""

    id: Union[int, str] = Field(..., description="Repository identifier")
    title: str = Field(..., description="Article title")
    body: str = Field("", description="Rendered article body")
    status: str = Field("draft", description="Publication status")
    category_id: Optional[int] = Field(None, description="Category")
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Metadata key/value pairs"
    )
    created_at: datetime = Field(
        default_factory=datetime.now, description="Creation time"
    )


class GeneratedArticle(BaseModel):
    """A freshly generated article that has not been persisted yet."""

    topic: str = Field(..., description="Topic the article was requested for")
    raw_text: str = Field(..., description="Model output, unmodified")
    extracted_title: str = Field(..., description="Title taken from the text")
    body_html: str = Field("", description="Body rendered for storage")
    derived_meta_description: str = Field(
        "", max_length=155, description="Search snippet"
    )
    keywords: List[str] = Field(default_factory=list, description="Suggested keywords")


class FeedResult(BaseModel):
    """Outcome of fetching one competitor feed."""

    url: str = Field(..., description="Feed URL")
    ok: bool = Field(..., description="Whether the feed was fetched and parsed")
    titles: List[str] = Field(default_factory=list, description="Item titles")
    error: Optional[str] = Field(None, description="Failure reason")


class RunResult(BaseModel):
    """Summary of one pipeline run."""

    published_count: int = Field(0, ge=0, description="Items created this run")
    message: str = Field("", description="Human-readable summary")
    published_ids: List[Union[int, str]] = Field(default_factory=list)
    skipped: List[str] = Field(
        default_factory=list, description="Skip reasons, one per skipped topic"
    )
