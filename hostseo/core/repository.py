"""Content repository interface and an in-memory implementation."""

import logging
from abc import ABC, abstractmethod
from itertools import count
from typing import Any, Dict, List, Optional, Union

from hostseo.core.errors import NotFoundError
from hostseo.models.content import ContentItem

logger = logging.getLogger(__name__)

ItemId = Union[int, str]


class ContentRepository(ABC):
    """Interface for the store that holds published and draft articles."""

    @property
    @abstractmethod
    def name(self) -> str:
        """A short name for logs, e.g. 'wordpress'."""
        pass

    @abstractmethod
    async def list_items(self, limit: int = 500) -> List[ContentItem]:
        """
        List up to ``limit`` stored items of any status, newest first.

        Args:
            limit: Maximum number of items to return

        Returns:
            Stored items
        """
        pass

    @abstractmethod
    async def insert_item(
        self, title: str, body: str, status: str, category_id: Optional[int] = None
    ) -> ItemId:
        """
        Store a new item.

        Returns:
            The new item's identifier

        Raises:
            RepositoryError: The item could not be stored
        """
        pass

    @abstractmethod
    async def set_metadata(self, item_id: ItemId, key: str, value: Any) -> None:
        """Create or overwrite one metadata entry on an item."""
        pass

    async def set_metadata_many(self, item_id: ItemId, values: Dict[str, Any]) -> None:
        """Write several metadata entries; stores may batch this."""
        for key, value in values.items():
            await self.set_metadata(item_id, key, value)

    async def test_connection(self) -> bool:
        return True

    async def close(self) -> None:
        pass


class InMemoryRepository(ContentRepository):
    """Repository kept in process memory, used for dry runs."""

    def __init__(self, items: Optional[List[ContentItem]] = None):
        self.items: List[ContentItem] = list(items or [])
        numeric_ids = [item.id for item in self.items if isinstance(item.id, int)]
        self._ids = count(max(numeric_ids, default=0) + 1)

    @property
    def name(self) -> str:
        return "memory"

    async def list_items(self, limit: int = 500) -> List[ContentItem]:
        newest_first = sorted(self.items, key=lambda item: item.created_at, reverse=True)
        return newest_first[:limit]

    async def insert_item(
        self, title: str, body: str, status: str, category_id: Optional[int] = None
    ) -> ItemId:
        item = ContentItem(
            id=next(self._ids),
            title=title,
            body=body,
            status=status,
            category_id=category_id,
        )
        self.items.append(item)
        logger.debug(f"Stored item {item.id}: {title}")
        return item.id

    async def set_metadata(self, item_id: ItemId, key: str, value: Any) -> None:
        self.get(item_id).metadata[key] = value

    def get(self, item_id: ItemId) -> ContentItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"No item with id {item_id}", status_code=404)
