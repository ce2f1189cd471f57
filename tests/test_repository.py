"""Tests for the in-memory repository and SEO meta writer."""

import pytest

from hostseo.core.errors import NotFoundError
from hostseo.core.repository import InMemoryRepository
from hostseo.core.seo_meta import KEYWORDS_META_KEY, SeoMetaWriter
from hostseo.models.content import ContentItem
from hostseo.models.settings import Settings


@pytest.mark.asyncio
async def test_insert_and_list():
    repo = InMemoryRepository([ContentItem(id=5, title="Existing")])
    new_id = await repo.insert_item("New", "<p>Body</p>", "draft", 2)

    assert new_id == 6
    items = await repo.list_items()
    assert {item.title for item in items} == {"Existing", "New"}
    assert repo.get(new_id).category_id == 2


@pytest.mark.asyncio
async def test_list_limit():
    repo = InMemoryRepository([ContentItem(id=i, title=str(i)) for i in range(10)])
    assert len(await repo.list_items(limit=3)) == 3


@pytest.mark.asyncio
async def test_set_metadata_unknown_item():
    with pytest.raises(NotFoundError):
        await InMemoryRepository().set_metadata(99, "key", "value")


def test_meta_writer_builds_every_convention():
    writer = SeoMetaWriter(Settings().seo_meta_keys)
    values = writer.build("Title", "Description", ["vps", "hosting"])

    assert values["_yoast_wpseo_title"] == "Title"
    assert values["rank_math_title"] == "Title"
    assert values["_aioseo_title"] == "Title"
    assert values["_yoast_wpseo_metadesc"] == "Description"
    assert values["_aioseo_description"] == "Description"
    assert values["_aisa_meta_description"] == "Description"
    assert values[KEYWORDS_META_KEY] == "vps, hosting"


def test_meta_writer_custom_mapping():
    writer = SeoMetaWriter({"title": ["seo_title"], "description": []})
    assert writer.build("T", "D") == {"seo_title": "T"}


@pytest.mark.asyncio
async def test_meta_writer_writes_to_repository():
    repo = InMemoryRepository()
    item_id = await repo.insert_item("T", "B", "draft")
    await SeoMetaWriter({"title": ["a", "b"]}).write(repo, item_id, "T", "D")

    assert repo.get(item_id).metadata == {"a": "T", "b": "T"}
