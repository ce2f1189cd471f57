"""SEO metadata written onto newly created articles."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from hostseo.core.repository import ContentRepository, ItemId

logger = logging.getLogger(__name__)

KEYWORDS_META_KEY = "_aisa_keywords"


class SeoMetaWriter:
    """Writes logical SEO fields under every configured metadata key.

    Different SEO plugins read the same title/description from different
    meta keys, so each logical field maps to a list of key names.
    """

    def __init__(self, key_map: Mapping[str, Sequence[str]]):
        self.key_map = {field: list(keys) for field, keys in key_map.items()}

    def keys_for(self, field: str) -> List[str]:
        return self.key_map.get(field, [])

    def build(
        self, title: str, description: str, keywords: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """Flatten the logical fields into metadata key/value pairs."""
        values: Dict[str, Any] = {}
        for field, value in (("title", title), ("description", description)):
            for key in self.keys_for(field):
                values[key] = value
        if keywords:
            values[KEYWORDS_META_KEY] = ", ".join(keywords)
        return values

    async def write(
        self,
        repository: ContentRepository,
        item_id: ItemId,
        title: str,
        description: str,
        keywords: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        values = self.build(title, description, keywords)
        await repository.set_metadata_many(item_id, values)
        logger.debug(f"Wrote {len(values)} SEO meta keys on item {item_id}")
        return values
