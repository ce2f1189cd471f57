"""RSS client for collecting competitor headlines."""

import asyncio
import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, List, Optional, Sequence, Tuple

import aiohttp

from hostseo.core.utils import strip_markup
from hostseo.models.content import FeedResult

logger = logging.getLogger(__name__)

ATOM_NS = "{http://www.w3.org/2005/Atom}"
ITEMS_PER_FEED = 10
MAX_HEADLINES = 50


class RSSClient:
    """Client for fetching recent item titles from RSS and Atom feeds."""

    def __init__(self, settings=None):
        """Initialize RSS client.

        Args:
            settings: Settings instance for configuration values
        """
        self.feed_timeout = settings.rss_feed_timeout if settings else 30.0
        self.user_agent = (
            settings.default_user_agent if settings else "HostSEO-Bot/1.0"
        )

    async def fetch_headlines(self, feed_urls: Sequence[str]) -> List[str]:
        """Collect recent competitor headlines.

        Feeds that fail are left out; a bad feed never aborts the call.

        Args:
            feed_urls: Feed URLs in priority order

        Returns:
            Up to 50 distinct titles in first-seen order
        """
        if not feed_urls:
            return []

        results = await self.fetch_feeds(feed_urls)

        headlines: List[str] = []
        seen = set()
        for result in results:
            if not result.ok:
                continue
            for title in result.titles:
                if title in seen:
                    continue
                seen.add(title)
                headlines.append(title)

        headlines = headlines[:MAX_HEADLINES]
        logger.info(
            f"Collected {len(headlines)} headlines from "
            f"{sum(1 for r in results if r.ok)}/{len(results)} feeds"
        )
        return headlines

    async def fetch_feeds(self, feed_urls: Sequence[str]) -> List[FeedResult]:
        """Fetch every feed concurrently; results keep the input order."""
        async with aiohttp.ClientSession() as session:
            tasks = [self._fetch_feed(session, url.strip()) for url in feed_urls]
            return list(await asyncio.gather(*tasks))

    async def _fetch_feed(
        self, session: aiohttp.ClientSession, feed_url: str
    ) -> FeedResult:
        """Fetch and parse a single feed.

        Args:
            session: HTTP session
            feed_url: Feed URL

        Returns:
            FeedResult describing the titles or the failure
        """
        try:
            headers = {"User-Agent": f"{self.user_agent} (RSS Reader)"}
            timeout = aiohttp.ClientTimeout(total=self.feed_timeout)
            async with session.get(
                feed_url, headers=headers, timeout=timeout
            ) as response:
                if response.status != 200:
                    return self._failed(feed_url, f"HTTP {response.status}")
                content = await response.text()

        except asyncio.TimeoutError:
            return self._failed(feed_url, "timeout")
        except aiohttp.ClientError as e:
            return self._failed(feed_url, f"network error: {e}")
        except ValueError as e:
            # Raised by aiohttp for malformed URLs
            return self._failed(feed_url, f"invalid URL: {e}")

        try:
            titles = self.parse_titles(content)
        except ET.ParseError as e:
            return self._failed(feed_url, f"XML parsing error: {e}")

        if titles is None:
            return self._failed(feed_url, "unrecognized feed format")
        return FeedResult(url=feed_url, ok=True, titles=titles)

    def _failed(self, feed_url: str, reason: str) -> FeedResult:
        logger.warning(f"Skipping competitor feed {feed_url}: {reason}")
        return FeedResult(url=feed_url, ok=False, error=reason)

    def parse_titles(
        self, xml_content: str, limit: int = ITEMS_PER_FEED
    ) -> Optional[List[str]]:
        """Return the ``limit`` most recent item titles with markup removed.

        Returns None when the document is neither RSS nor Atom. Raises
        ``ET.ParseError`` on malformed XML.
        """
        root = ET.fromstring(xml_content)

        if root.tag == "rss":
            entries = [
                (
                    self._get_text(item.find("title")),
                    self._parse_date(self._get_text(item.find("pubDate"))),
                )
                for item in root.findall(".//item")
            ]
        elif root.tag == f"{ATOM_NS}feed":
            entries = []
            for entry in root.findall(f"{ATOM_NS}entry"):
                date_text = self._get_text(entry.find(f"{ATOM_NS}published")) or (
                    self._get_text(entry.find(f"{ATOM_NS}updated"))
                )
                entries.append(
                    (
                        self._get_text(entry.find(f"{ATOM_NS}title")),
                        self._parse_date(date_text),
                    )
                )
        else:
            return None

        entries = self._newest_first(entries)
        titles = []
        for raw_title, _ in entries[:limit]:
            title = strip_markup(raw_title)
            if title:
                titles.append(title)
        return titles

    @staticmethod
    def _newest_first(
        entries: List[Tuple[str, Optional[datetime]]]
    ) -> List[Tuple[str, Optional[datetime]]]:
        """Sort by date when every entry has one, else keep feed order."""
        if entries and all(date is not None for _, date in entries):
            return sorted(entries, key=lambda entry: entry[1], reverse=True)
        return entries

    def _get_text(self, element: Optional[ET.Element], default: str = "") -> str:
        """Get the text of an XML element, or ``default``."""
        if element is not None and element.text:
            return element.text.strip()
        return default

    def _parse_date(self, date_str: str) -> Optional[datetime]:
        """Parse RFC 822 (RSS) or ISO 8601 (Atom) dates as aware datetimes."""
        if not date_str:
            return None
        try:
            parsed = parsedate_to_datetime(date_str)
        except (TypeError, ValueError, IndexError):
            try:
                parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
            except ValueError:
                return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    async def test_feeds(self, feed_urls: Sequence[str]) -> Dict[str, bool]:
        """Report which feeds currently fetch and parse."""
        results = await self.fetch_feeds(feed_urls)
        return {result.url: result.ok for result in results}
