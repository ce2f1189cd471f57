"""WordPress REST API content repository."""

import asyncio
import base64
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from hostseo.core.errors import AuthenticationError, NotFoundError, RepositoryError
from hostseo.core.repository import ContentRepository, ItemId
from hostseo.models.content import ContentItem

logger = logging.getLogger(__name__)

WP_MAX_PER_PAGE = 100


class WordPressRepository(ContentRepository):
    """Stores articles as WordPress posts through the REST API.

    Authenticates with an application password. Requests are not retried:
    a failed insert only skips the topic it belongs to.
    """

    def __init__(self, site_url: str, user: str, app_password: str, settings=None):
        self.site_url = site_url.rstrip("/")
        self.user = user
        self.app_password = app_password
        self.timeout = settings.wordpress_timeout if settings else 30.0
        self.user_agent = (
            settings.default_user_agent if settings else "HostSEO-Bot/1.0"
        )
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings) -> "WordPressRepository":
        return cls(
            settings.wordpress_url,
            settings.wordpress_user,
            settings.wordpress_app_password,
            settings=settings,
        )

    @property
    def name(self) -> str:
        return "wordpress"

    @property
    def api_url(self) -> str:
        """WP REST API v2 base URL."""
        return f"{self.site_url}/wp-json/wp/v2"

    @property
    def auth_header(self) -> str:
        """Base64-encoded Basic auth header value."""
        credentials = f"{self.user}:{self.app_password}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("utf-8")
        return f"Basic {encoded}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
                "Authorization": self.auth_header,
            }
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[int, Any]:
        """Make one API request.

        Returns:
            Tuple of (status_code, parsed JSON or text body)

        Raises:
            AuthenticationError: On 401 or 403
            NotFoundError: On 404
            RepositoryError: On other non-2xx responses and network errors
        """
        url = f"{self.api_url}/{endpoint}"
        session = await self._get_session()

        kwargs: Dict[str, Any] = {}
        if json_data is not None:
            kwargs["json"] = json_data
        if params is not None:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}

        try:
            async with session.request(method, url, **kwargs) as resp:
                status = resp.status
                try:
                    body = await resp.json(content_type=None)
                except (json.JSONDecodeError, ValueError):
                    body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RepositoryError(f"Network error on {method} {url}: {e}") from e

        if status in (401, 403):
            raise AuthenticationError(
                f"Authentication failed for {self.site_url}: HTTP {status}",
                status_code=status,
                response_body=str(body),
            )
        if status == 404:
            raise NotFoundError(
                f"Resource not found: {url}", status_code=404, response_body=str(body)
            )
        if status >= 400:
            message = body.get("message", str(body)) if isinstance(body, dict) else body
            raise RepositoryError(
                f"HTTP {status} from {self.site_url}: {message}",
                status_code=status,
                response_body=str(body),
            )
        return status, body

    async def list_items(self, limit: int = 500) -> List[ContentItem]:
        """List up to ``limit`` posts of any status, newest first."""
        items: List[ContentItem] = []
        page = 1
        while len(items) < limit:
            per_page = min(WP_MAX_PER_PAGE, limit - len(items))
            params = {
                "per_page": per_page,
                "page": page,
                "status": "any",
                "context": "edit",
                "orderby": "date",
                "order": "desc",
            }
            try:
                _, posts = await self._request("GET", "posts", params=params)
            except RepositoryError as e:
                # WordPress answers 400 for a page past the last one
                if page > 1 and e.status_code == 400:
                    break
                raise

            if not isinstance(posts, list) or not posts:
                break
            items.extend(self._to_item(post) for post in posts)
            if len(posts) < per_page:
                break
            page += 1

        logger.debug(f"Listed {len(items)} posts from {self.site_url}")
        return items[:limit]

    @staticmethod
    def _to_item(post: Dict[str, Any]) -> ContentItem:
        def field(name: str) -> str:
            value = post.get(name) or {}
            if isinstance(value, dict):
                return value.get("raw") or value.get("rendered") or ""
            return str(value)

        categories = post.get("categories") or []
        return ContentItem(
            id=post["id"],
            title=field("title"),
            body=field("content"),
            status=post.get("status", "draft"),
            category_id=categories[0] if categories else None,
            metadata=post.get("meta") or {},
        )

    async def insert_item(
        self, title: str, body: str, status: str, category_id: Optional[int] = None
    ) -> ItemId:
        payload: Dict[str, Any] = {"title": title, "content": body, "status": status}
        if category_id:
            payload["categories"] = [category_id]

        _, post = await self._request("POST", "posts", json_data=payload)
        if not isinstance(post, dict) or not post.get("id"):
            raise RepositoryError(f"WordPress returned no post id for {title!r}")

        logger.info(f"Created post {post['id']} ({status}): {title}")
        return post["id"]

    async def set_metadata(self, item_id: ItemId, key: str, value: Any) -> None:
        await self.set_metadata_many(item_id, {key: value})

    async def set_metadata_many(self, item_id: ItemId, values: Dict[str, Any]) -> None:
        """Write all entries in one post update."""
        await self._request("POST", f"posts/{item_id}", json_data={"meta": values})
        logger.debug(f"Updated meta on post {item_id}: {list(values)}")

    async def test_connection(self) -> bool:
        try:
            await self._request("GET", "posts", params={"per_page": 1})
        except RepositoryError as e:
            logger.error(f"WordPress connection failed: {e}")
            return False
        logger.info("WordPress API connection successful")
        return True
