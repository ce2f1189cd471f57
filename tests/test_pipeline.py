"""Tests for the publication pipeline."""

from unittest.mock import AsyncMock

import pytest

from hostseo.clients.openai import OpenAIClient
from hostseo.core.errors import RepositoryError, ServiceError, TransportError
from hostseo.core.pipeline import (
    PublicationPipeline,
    build_article,
    extract_title,
    make_meta_description,
    run,
    split_seo_block,
)
from hostseo.core.repository import InMemoryRepository
from hostseo.core.topics import SEED_TOPICS
from hostseo.models.content import ContentItem
from hostseo.models.settings import Settings

ARTICLES = [
    "# Picking a Plan for a Bakery Website\n\nOrders, menus and opening hours.",
    "# Virtual Servers Compared With Shared Plans\n\nRoot access vs simplicity.",
    "# Managed WP: What You Really Get\n\nUpdates, backups, staging.",
    "# Why Disk Type Matters\n\nQueue depth and IOPS numbers.",
    "# Locking Down cPanel Installs\n\n2FA, file permissions, WAF rules.",
]


class FakeGenerator:
    """Stands in for OpenAIClient; replies are returned or raised in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.prompts = []

    async def complete(self, system, prompt, max_tokens=None):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeRSS:
    def __init__(self, headlines=None):
        self.fetch_headlines = AsyncMock(return_value=headlines or [])


class FailingInsertRepository(InMemoryRepository):
    async def insert_item(self, title, body, status, category_id=None):
        raise RepositoryError("HTTP 500 from blog", status_code=500)


def _pipeline(settings, replies, repository=None, headlines=None):
    repository = repository if repository is not None else InMemoryRepository()
    generator = FakeGenerator(replies)
    pipeline = PublicationPipeline(
        settings, repository, generator=generator, rss_client=FakeRSS(headlines)
    )
    return pipeline, repository, generator


class TestExtractTitle:
    def test_markdown_heading(self):
        assert extract_title("Intro\n# The Real Title\n\nBody", "topic") == "The Real Title"

    def test_second_level_heading_is_not_a_title(self):
        assert extract_title("## TL;DR\n\nShort version.", "Topic Title") == "Topic Title"

    def test_html_heading(self):
        text = "<h1 class='x'>VPS <em>Explained</em></h1><p>Body</p>"
        assert extract_title(text, "topic") == "VPS Explained"

    def test_empty_heading_does_not_read_next_line(self):
        assert extract_title("#\n\nBody text", "My Topic") == "My Topic"

    def test_bold_markers_removed(self):
        assert extract_title("# **Bold Title**\n\ntext", "topic") == "Bold Title"

    def test_falls_back_to_topic(self):
        assert extract_title("No heading here at all.", "My Topic") == "My Topic"

    def test_falls_back_to_first_twelve_words(self):
        text = "<p>" + " ".join(f"w{i}" for i in range(20)) + "</p>"
        assert extract_title(text, "  ") == " ".join(f"w{i}" for i in range(12))


class TestArticleDerivation:
    def test_meta_description_collapses_whitespace_and_truncates(self):
        text = "<p>Fast   hosting\n\nfor   everyone.</p>" + " more" * 60
        description = make_meta_description(text)

        assert description.startswith("Fast hosting for everyone. more")
        assert len(description) == 155

    def test_split_seo_block(self):
        text = 'Body text.\n\n```json\n{"meta": "Short summary", "keywords": ["vps", "ssd"]}\n```'
        body, block = split_seo_block(text)

        assert body == "Body text."
        assert block == {"meta": "Short summary", "keywords": ["vps", "ssd"]}

    def test_malformed_seo_block_left_in_place(self):
        text = 'Body {"meta": broken}'
        assert split_seo_block(text) == (text, {})

    def test_build_article_derives_meta_from_body(self):
        raw = '# Title\n\nParagraph one.\n\n{"meta":"Compare VPS and shared plans.","keywords":["vps","shared"]}'
        article = build_article("topic", raw)

        assert article.extracted_title == "Title"
        assert article.derived_meta_description == "Title Paragraph one."
        assert article.keywords == ["vps", "shared"]
        assert "<h1>Title</h1>" in article.body_html
        assert "<p>Paragraph one.</p>" in article.body_html
        assert "keywords" not in article.body_html

    def test_build_article_without_block_uses_body(self):
        article = build_article("topic", "# Title\n\nParagraph one.")
        assert article.derived_meta_description == "Title Paragraph one."
        assert article.keywords == []

    def test_tables_rendered(self):
        raw = "# T\n\n| Plan | Price |\n|---|---|\n| VPS | $10 |\n"
        assert "<table>" in build_article("t", raw).body_html


class TestPublicationPipeline:
    @pytest.mark.asyncio
    async def test_publishes_up_to_max(self, mock_settings):
        pipeline, repo, generator = _pipeline(mock_settings, ARTICLES)
        result = await pipeline.run(max_items=3)

        assert result.published_count == 3
        assert len(repo.items) == 3
        assert len(generator.prompts) == 3
        assert result.message == "Published 3 item(s)."
        assert [item.title for item in repo.items] == [
            "Picking a Plan for a Bakery Website",
            "Virtual Servers Compared With Shared Plans",
            "Managed WP: What You Really Get",
        ]

    @pytest.mark.asyncio
    async def test_new_items_get_status_category_and_meta(self, mock_settings):
        settings = mock_settings.model_copy(update={"post_status": "publish", "category_id": 4})
        pipeline, repo, _ = _pipeline(settings, ARTICLES)
        await pipeline.run(max_items=1)

        item = repo.items[0]
        assert item.status == "publish"
        assert item.category_id == 4
        assert item.metadata["_yoast_wpseo_title"] == item.title
        assert item.metadata["rank_math_title"] == item.title
        assert item.metadata["_aisa_meta_description"].startswith(
            "Picking a Plan for a Bakery Website"
        )

    @pytest.mark.asyncio
    async def test_generation_failure_skips_topic(self, mock_settings):
        replies = [ServiceError(500, "boom"), TransportError("reset")] + ARTICLES
        pipeline, repo, generator = _pipeline(mock_settings, replies)
        result = await pipeline.run(max_items=3)

        # one attempt per planned topic, no retries
        assert len(generator.prompts) == 3
        assert result.published_count == 1
        assert len(result.skipped) == 2
        assert "ServiceError" in result.skipped[0]

    @pytest.mark.asyncio
    async def test_missing_api_key_publishes_nothing(self, mock_settings):
        settings = mock_settings.model_copy(update={"openai_api_key": ""})
        repo = InMemoryRepository()
        pipeline = PublicationPipeline(settings, repo, rss_client=FakeRSS())
        assert isinstance(pipeline.generator, OpenAIClient)

        result = await pipeline.run(max_items=3)

        assert result.published_count == 0
        assert repo.items == []
        assert len(result.skipped) == 3
        assert all("ConfigError" in reason for reason in result.skipped)

    @pytest.mark.asyncio
    async def test_duplicate_is_skipped(self):
        settings = Settings(competitor_feeds="", openai_api_key="k", duplicate_threshold=80)
        existing = ContentItem(
            id=1, title="VPS vs Shared Hosting: Which Is Right for Your Site?"
        )
        repo = InMemoryRepository([existing])
        reply = "# VPS vs Shared Hosting: Which Is Right For You?\n\nQuite different words."
        pipeline, repo, _ = _pipeline(settings, [reply], repository=repo)

        result = await pipeline.run(max_items=1)

        assert result.published_count == 0
        assert len(repo.items) == 1
        assert "duplicate" in result.skipped[0]

    @pytest.mark.asyncio
    async def test_duplicates_within_one_run_are_caught(self, mock_settings):
        same = ARTICLES[0]
        pipeline, repo, _ = _pipeline(mock_settings, [same, same, same])
        result = await pipeline.run(max_items=3)

        assert result.published_count == 1
        assert len(repo.items) == 1

    @pytest.mark.asyncio
    async def test_insert_failure_skips_topic(self, mock_settings):
        pipeline, repo, _ = _pipeline(
            mock_settings, ARTICLES, repository=FailingInsertRepository()
        )
        result = await pipeline.run(max_items=2)

        assert result.published_count == 0
        assert all("insert failed" in reason for reason in result.skipped)

    @pytest.mark.asyncio
    async def test_headlines_reach_the_prompt(self, mock_settings):
        pipeline, _, generator = _pipeline(
            mock_settings, ARTICLES, headlines=["Competitor launches NVMe plans"]
        )
        await pipeline.run(max_items=1)

        assert "Competitor launches NVMe plans" in generator.prompts[0]
        assert SEED_TOPICS[0] in generator.prompts[0]

    @pytest.mark.asyncio
    async def test_never_more_than_max_items(self, mock_settings):
        for max_items in range(0, 6):
            pipeline, repo, _ = _pipeline(mock_settings, list(ARTICLES))
            result = await pipeline.run(max_items=max_items)
            assert result.published_count <= max_items
            assert len(repo.items) <= max_items

    @pytest.mark.asyncio
    async def test_run_without_wordpress_config(self):
        settings = Settings(competitor_feeds="", openai_api_key="k")
        result = await run(settings, max_items=3)

        assert result.published_count == 0
        assert "WordPress not configured" in result.message

    @pytest.mark.asyncio
    async def test_run_with_explicit_repository(self, mock_settings):
        settings = mock_settings.model_copy(update={"openai_api_key": ""})
        result = await run(settings, max_items=2, repository=InMemoryRepository())
        assert result.published_count == 0
        assert result.message.startswith("Published 0 item(s).")
