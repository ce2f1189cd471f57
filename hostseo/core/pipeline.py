"""End-to-end article publication pipeline."""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import markdown as md_lib

from hostseo.clients.openai import OpenAIClient
from hostseo.clients.rss import RSSClient
from hostseo.core.duplicates import DuplicateDetector
from hostseo.core.errors import GenerationError, RepositoryError
from hostseo.core.prompts import SYSTEM_INSTRUCTION, build_prompt
from hostseo.core.repository import ContentRepository
from hostseo.core.seo_meta import SeoMetaWriter
from hostseo.core.topics import plan_topics
from hostseo.core.utils import collapse_whitespace, strip_markup
from hostseo.models.content import GeneratedArticle, RunResult
from hostseo.models.settings import Settings

logger = logging.getLogger(__name__)

META_DESCRIPTION_LENGTH = 155
FALLBACK_TITLE_WORDS = 12

_MARKDOWN_H1 = re.compile(r"^#(?!#)[ \t]*(.+)$", re.MULTILINE)
_HTML_H1 = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_SEO_BLOCK = re.compile(
    r"(?:```(?:json)?\s*)?(\{[^{}]*\"meta\"\s*:[^{}]*\})(?:\s*```)?", re.DOTALL
)


def extract_title(text: str, topic: str = "") -> str:
    """Pick the article title.

    A leading ``# Heading`` line or ``<h1>`` wins; without one the topic is
    used, and only when that is blank the first twelve words of the text.
    """
    match = _MARKDOWN_H1.search(text or "")
    if match:
        title = _clean_heading(match.group(1))
        if title:
            return title

    match = _HTML_H1.search(text or "")
    if match:
        title = _clean_heading(match.group(1))
        if title:
            return title

    if topic and topic.strip():
        return topic.strip()

    words = strip_markup(text).split()
    return " ".join(words[:FALLBACK_TITLE_WORDS])


def _clean_heading(heading: str) -> str:
    heading = strip_markup(heading)
    return heading.strip().strip("#*_ ").strip()


def split_seo_block(text: str) -> Tuple[str, Dict[str, Any]]:
    """Separate the trailing ``{"meta": ..., "keywords": [...]}`` block.

    Returns the text without the block and the parsed block (empty when it
    is missing or not valid JSON).
    """
    matches = list(_SEO_BLOCK.finditer(text or ""))
    if not matches:
        return text, {}

    last = matches[-1]
    try:
        data = json.loads(last.group(1))
    except ValueError:
        logger.debug("Ignoring malformed SEO block in generated text")
        return text, {}
    if not isinstance(data, dict):
        return text, {}

    stripped = (text[: last.start()] + text[last.end() :]).rstrip()
    return stripped, data


def make_meta_description(text: str) -> str:
    """Plain text with collapsed whitespace, cut to 155 characters."""
    return collapse_whitespace(strip_markup(text))[:META_DESCRIPTION_LENGTH]


def render_body(text: str) -> str:
    """Render generated markdown to HTML for storage."""
    return md_lib.markdown(text, extensions=["tables", "fenced_code"])


def build_article(topic: str, raw_text: str) -> GeneratedArticle:
    """Derive title, stored body and SEO fields from generated text."""
    body_text, seo_block = split_seo_block(raw_text)
    title = extract_title(body_text, topic)
    body_html = render_body(body_text)

    keywords = seo_block.get("keywords")
    if not isinstance(keywords, list):
        keywords = []

    return GeneratedArticle(
        topic=topic,
        raw_text=raw_text,
        extracted_title=title,
        body_html=body_html,
        derived_meta_description=make_meta_description(body_html),
        keywords=[str(k).strip() for k in keywords if str(k).strip()],
    )


class PublicationPipeline:
    """Plans topics, generates articles, filters duplicates and publishes.

    One generation attempt per planned topic, one call at a time. Every
    failure along the way skips the topic; ``run`` itself never raises.
    """

    def __init__(
        self,
        settings: Settings,
        repository: ContentRepository,
        generator: Optional[OpenAIClient] = None,
        rss_client: Optional[RSSClient] = None,
    ):
        self.settings = settings
        self.repository = repository
        self.generator = generator or OpenAIClient(
            settings.openai_api_key, settings=settings
        )
        self.rss_client = rss_client or RSSClient(settings)
        self.detector = DuplicateDetector(settings.duplicate_threshold)
        self.meta_writer = SeoMetaWriter(settings.seo_meta_keys)

    async def run(self, max_items: int = 3) -> RunResult:
        """Publish at most ``max_items`` new articles."""
        result = RunResult()
        if max_items <= 0:
            result.message = "Published 0 item(s)."
            return result

        topics, headlines = await asyncio.gather(
            self._plan(max_items), self._headlines()
        )
        logger.info(
            f"Run started: {len(topics)} topics, {len(headlines)} competitor headlines"
        )

        for topic in topics:
            if result.published_count >= max_items:
                break
            try:
                item_id = await self._process_topic(topic, headlines, result)
            except Exception as e:
                logger.exception(f"Unexpected error processing topic {topic!r}")
                self._skip(result, topic, f"unexpected error: {e}")
                continue
            if item_id is not None:
                result.published_count += 1
                result.published_ids.append(item_id)

        result.message = f"Published {result.published_count} item(s)."
        if result.skipped:
            result.message += f" Skipped {len(result.skipped)}."
        logger.info(result.message)
        return result

    async def _plan(self, max_items: int) -> List[str]:
        return plan_topics(self.settings, max_items)

    async def _headlines(self) -> List[str]:
        try:
            return await self.rss_client.fetch_headlines(
                self.settings.competitor_feed_urls
            )
        except Exception:
            logger.exception("Competitor headline collection failed")
            return []

    async def _process_topic(
        self, topic: str, headlines: List[str], result: RunResult
    ) -> Optional[Any]:
        """Generate, check and store one article; returns the new id or None."""
        prompt = build_prompt(
            topic, self.settings.brand, self.settings.min_words, headlines
        )
        try:
            raw_text = await self.generator.complete(SYSTEM_INSTRUCTION, prompt)
        except GenerationError as e:
            self._skip(result, topic, f"generation failed ({type(e).__name__}): {e}")
            return None

        article = build_article(topic, raw_text)

        try:
            existing = await self.repository.list_items(
                self.settings.duplicate_scan_limit
            )
        except RepositoryError as e:
            self._skip(result, topic, f"could not list existing content: {e}")
            return None

        verdict = self.detector.check(article.extracted_title, raw_text, existing)
        if verdict.is_duplicate:
            self._skip(
                result,
                topic,
                f"duplicate of {verdict.matched_title!r} "
                f"({verdict.reason} {verdict.score:.0f}%): {article.extracted_title}",
            )
            return None

        try:
            item_id = await self.repository.insert_item(
                article.extracted_title,
                article.body_html,
                self.settings.post_status,
                self.settings.category_id,
            )
        except RepositoryError as e:
            self._skip(result, topic, f"insert failed: {e}")
            return None

        try:
            await self.meta_writer.write(
                self.repository,
                item_id,
                article.extracted_title,
                article.derived_meta_description,
                article.keywords,
            )
        except RepositoryError as e:
            # The item exists either way and counts towards the run cap
            logger.warning(f"SEO meta not written on item {item_id}: {e}")

        logger.info(f"Published item {item_id}: {article.extracted_title}")
        return item_id

    def _skip(self, result: RunResult, topic: str, reason: str) -> None:
        logger.warning(f"Skipping topic {topic!r}: {reason}")
        result.skipped.append(f"{topic}: {reason}")


async def run(
    settings: Settings, max_items: int = 3, repository: ContentRepository = None
) -> RunResult:
    """Run the pipeline once against ``repository`` (WordPress by default)."""
    if repository is None:
        if not settings.wordpress_configured:
            logger.error("WordPress credentials missing - nothing can be published")
            return RunResult(message="Published 0 item(s). WordPress not configured.")

        from hostseo.clients.wordpress import WordPressRepository

        repository = WordPressRepository.from_settings(settings)
    try:
        return await PublicationPipeline(settings, repository).run(max_items)
    finally:
        await repository.close()
