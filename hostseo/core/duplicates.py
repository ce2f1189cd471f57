"""Near-duplicate detection against already stored articles."""

import logging
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field

from hostseo.core.similarity import similarity_percent
from hostseo.core.utils import strip_markup
from hostseo.models.content import ContentItem

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 500
BODY_THRESHOLD_OFFSET = 10


class DuplicateVerdict(BaseModel):
    """Outcome of scoring one candidate against the repository."""

    is_duplicate: bool = Field(False, description="Candidate should be skipped")
    matched_item_id: Optional[Union[int, str]] = Field(
        None, description="First stored item that triggered the verdict"
    )
    matched_title: Optional[str] = Field(None, description="Its title")
    reason: Optional[str] = Field(None, description="'title' or 'body'")
    score: float = Field(0.0, description="Similarity percent that triggered it")
    items_scanned: int = Field(0, description="Stored items compared")


class DuplicateDetector:
    """Scores candidate articles against existing content.

    A candidate is a duplicate of a stored item when either

    * its title is at least ``threshold`` percent similar to the stored
      title (both lower-cased), or
    * the first 500 characters of its body are at least ``threshold - 10``
      percent similar to the first 500 characters of the stored item's
      plain-text body.

    Drafts count as much as published items.
    """

    def __init__(self, threshold: int = 80):
        self.threshold = threshold

    @property
    def body_threshold(self) -> int:
        return self.threshold - BODY_THRESHOLD_OFFSET

    def check(
        self, title: str, body: str, existing_items: Iterable[ContentItem]
    ) -> DuplicateVerdict:
        """Scan stored items until one marks the candidate as a duplicate."""
        candidate_title = (title or "").lower()
        candidate_snippet = (body or "")[:SNIPPET_LENGTH].lower()

        scanned = 0
        for item in existing_items:
            scanned += 1

            title_score = similarity_percent(
                (item.title or "").lower(), candidate_title
            )
            if title_score >= self.threshold:
                return self._verdict(item, "title", title_score, scanned)

            existing_snippet = strip_markup(item.body)[:SNIPPET_LENGTH].lower()
            body_score = similarity_percent(existing_snippet, candidate_snippet)
            if body_score >= self.body_threshold:
                return self._verdict(item, "body", body_score, scanned)

        return DuplicateVerdict(is_duplicate=False, items_scanned=scanned)

    def is_duplicate(
        self, title: str, body: str, existing_items: Iterable[ContentItem]
    ) -> bool:
        return self.check(title, body, existing_items).is_duplicate

    def _verdict(
        self, item: ContentItem, reason: str, score: float, scanned: int
    ) -> DuplicateVerdict:
        logger.debug(
            f"Candidate matches item {item.id} ({item.title!r}) "
            f"on {reason}: {score:.1f}%"
        )
        return DuplicateVerdict(
            is_duplicate=True,
            matched_item_id=item.id,
            matched_title=item.title,
            reason=reason,
            score=score,
            items_scanned=scanned,
        )


def is_duplicate(
    candidate_title: str,
    candidate_body: str,
    existing_items: Iterable[ContentItem],
    threshold_percent: int,
) -> bool:
    """Return True when the candidate is too close to any stored item."""
    detector = DuplicateDetector(threshold_percent)
    return detector.is_duplicate(candidate_title, candidate_body, existing_items)
