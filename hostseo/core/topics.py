"""Topic planning for generated articles."""

import logging
from typing import Iterable, List

from hostseo.core.utils import competitor_name_from_url
from hostseo.models.settings import Settings

logger = logging.getLogger(__name__)

COMPARISON_TEMPLATE = (
    "{brand} vs {competitor}: Which Hosting Provider Should You Choose in 2025?"
)

SEED_TOPICS = [
    "Best Web Hosting for Small Businesses in 2025",
    "VPS vs Shared Hosting: Which Is Right for Your Site?",
    "How to Choose the Best Managed WordPress Hosting",
    "How SSD and NVMe Storage Improve Hosting Performance",
    "Hardening WordPress on cPanel: Security Checklist",
]


def dedupe_topics(topics: Iterable[str]) -> List[str]:
    """Drop repeats by case-insensitive, trimmed equality; first one wins."""
    seen = set()
    unique = []
    for topic in topics:
        key = topic.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(topic)
    return unique


def plan_topics(settings: Settings, limit: int) -> List[str]:
    """Build up to ``limit`` candidate topics.

    Competitor comparisons come first and generic hosting guides after, so
    comparisons survive when ``limit`` cuts the list short.
    """
    if limit <= 0:
        return []

    candidates = []
    for url in settings.competitor_feed_urls:
        competitor = competitor_name_from_url(url)
        if not competitor:
            continue
        candidates.append(
            COMPARISON_TEMPLATE.format(brand=settings.brand, competitor=competitor)
        )
    candidates.extend(SEED_TOPICS)

    topics = dedupe_topics(candidates)[:limit]
    logger.debug(f"Planned {len(topics)} topics from {len(candidates)} candidates")
    return topics
