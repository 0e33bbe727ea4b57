"""
Notion API client.

Thin wrapper over the Notion REST API (pages, database queries and block
children) with retry, client-side rate limiting and error mapping.
https://developers.notion.com/reference
"""

import time
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config.logging import logger
from config.settings import settings
from processing.entity_resolution.normalizer import normalize

TITLE_PROPERTY = "Name"


class NotionAPIError(Exception):
    """A Notion request failed after retries."""

    def __init__(self, status: Optional[int], code: str, message: str):
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"Notion API error {status} ({code}): {message}")


def page_title(page: dict) -> str:
    """Plain text of a page's title property ("" when absent)."""
    rich_text = page.get("properties", {}).get(TITLE_PROPERTY, {}).get("title") or []
    parts = []
    for item in rich_text:
        text = item.get("plain_text")
        if text is None:
            text = item.get("text", {}).get("content", "")
        parts.append(text)
    return "".join(parts)


class NotionClient:
    """
    Client for the pieces of the Notion API the importer uses.

    Every call is rate limited and retried on 429/5xx (POST and PATCH
    included). Responses that still fail raise NotionAPIError.
    """

    BASE_URL = "https://api.notion.com/v1"
    PAGE_SIZE = 100

    def __init__(
        self,
        api_key: str,
        notion_version: Optional[str] = None,
        retry_attempts: Optional[int] = None,
        backoff_factor: Optional[float] = None,
        min_request_interval: Optional[float] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Notion integration token
            notion_version: Notion-Version header
            retry_attempts: Bounded retry count for transient failures
            backoff_factor: Exponential backoff factor in seconds
            min_request_interval: Minimum seconds between two requests
            timeout: Per-request timeout in seconds
            session: Pre-built session (tests)
        """
        self.min_request_interval = (
            settings.NOTION_MIN_REQUEST_INTERVAL if min_request_interval is None else min_request_interval
        )
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.last_request_time = 0
        self.request_count = 0

        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=settings.HTTP_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts,
                backoff_factor=settings.HTTP_BACKOFF_FACTOR if backoff_factor is None else backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET", "POST", "PATCH"],
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("https://", adapter)

        self.session = session
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": notion_version or settings.NOTION_VERSION,
            "Content-Type": "application/json",
        })

    def _rate_limit(self):
        """Enforce rate limiting."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)
        self.last_request_time = time.time()

    def _request(self, method: str, path: str, payload: Optional[dict] = None, params: Optional[dict] = None) -> dict:
        """
        Make an API request with rate limiting and error mapping.

        Raises:
            NotionAPIError: on transport failure or a non-2xx response
        """
        self._rate_limit()
        self.request_count += 1

        url = f"{self.BASE_URL}{path}"
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NotionAPIError(None, "request_failed", str(e)) from e

        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise NotionAPIError(
                response.status_code,
                body.get("code", "http_error"),
                body.get("message", response.text[:200]),
            )

        return response.json()

    # Pages and databases

    def query_database(
        self,
        database_id: str,
        filter: Optional[dict] = None,
        start_cursor: Optional[str] = None,
    ) -> dict:
        """One page of query results (raw response with has_more / next_cursor)."""
        payload = {"page_size": self.PAGE_SIZE}
        if filter:
            payload["filter"] = filter
        if start_cursor:
            payload["start_cursor"] = start_cursor
        return self._request("POST", f"/databases/{database_id}/query", payload)

    def find_page_by_title(self, database_id: str, title: str) -> Optional[dict]:
        """First live page whose title equals ``title`` exactly."""
        response = self.query_database(
            database_id,
            filter={"property": TITLE_PROPERTY, "title": {"equals": title}},
        )
        for page in response.get("results", []):
            if not page.get("archived") and page_title(page) == title:
                return page
        return None

    def list_all_pages(self, database_id: str) -> list[dict]:
        """Every page in the database, following pagination to the end."""
        pages = []
        cursor = None
        while True:
            response = self.query_database(database_id, start_cursor=cursor)
            pages.extend(response.get("results", []))
            if not response.get("has_more"):
                break
            cursor = response.get("next_cursor")
            if not cursor:
                break
        logger.debug(f"Listed {len(pages)} pages from database {database_id}")
        return pages

    def create_page(self, database_id: str, properties: dict) -> dict:
        payload = {
            "parent": {"type": "database_id", "database_id": database_id},
            "properties": _drop_empty(properties),
        }
        return self._request("POST", "/pages", payload)

    def update_page_properties(self, page_id: str, properties: dict) -> dict:
        return self._request("PATCH", f"/pages/{page_id}", {"properties": _drop_empty(properties)})

    def archive_page(self, page_id: str) -> dict:
        return self._request("PATCH", f"/pages/{page_id}", {"archived": True})

    # Blocks

    def append_blocks(self, parent_id: str, children: list[dict]) -> list[dict]:
        """Append children to a block or page; returns the created blocks."""
        children = [child for child in children or [] if child]
        created = []
        # Notion accepts at most 100 children per append
        for start in range(0, len(children), self.PAGE_SIZE):
            batch = children[start:start + self.PAGE_SIZE]
            response = self._request("PATCH", f"/blocks/{parent_id}/children", {"children": batch})
            created.extend(response.get("results", [])[-len(batch):])
        return created

    def list_blocks(self, parent_id: str) -> list[dict]:
        """All children of a block, following pagination."""
        blocks = []
        cursor = None
        while True:
            params = {"page_size": self.PAGE_SIZE}
            if cursor:
                params["start_cursor"] = cursor
            response = self._request("GET", f"/blocks/{parent_id}/children", params=params)
            blocks.extend(response.get("results", []))
            if not response.get("has_more"):
                break
            cursor = response.get("next_cursor")
            if not cursor:
                break
        return blocks

    def update_block(self, block_id: str, payload: dict) -> dict:
        return self._request("PATCH", f"/blocks/{block_id}", payload)

    def archive_block(self, block_id: str) -> dict:
        return self._request("PATCH", f"/blocks/{block_id}", {"archived": True})


def _drop_empty(properties: dict) -> dict:
    """Properties without a value are left out of the request."""
    return {name: value for name, value in properties.items() if value is not None}


class PageDirectory:
    """
    Snapshot of the database pages, looked up by title.

    Exact titles win; otherwise the normalized title is tried so
    "Acme Corp." and "ACME corp" find the same page.
    """

    def __init__(self, pages: Optional[list[dict]] = None):
        self._by_title: dict[str, dict] = {}
        self._by_key: dict[str, dict] = {}
        for page in pages or []:
            self.remember(page)

    @classmethod
    def load(cls, client: NotionClient, database_id: str) -> "PageDirectory":
        pages = client.list_all_pages(database_id)
        logger.info(f"Loaded {len(pages)} existing pages")
        return cls(pages)

    def remember(self, page: dict):
        """Register a page; the first page seen for a title is kept."""
        if page.get("archived"):
            return
        title = page_title(page)
        if not title:
            return
        self._by_title.setdefault(title, page)
        key = normalize(title)
        if key:
            self._by_key.setdefault(key, page)

    def forget(self, page_id: str):
        self._by_title = {t: p for t, p in self._by_title.items() if p.get("id") != page_id}
        self._by_key = {k: p for k, p in self._by_key.items() if p.get("id") != page_id}

    def find(self, title: str) -> Optional[dict]:
        page = self._by_title.get(title)
        if page is not None:
            return page
        key = normalize(title)
        if not key:
            return None
        return self._by_key.get(key)

    def __len__(self) -> int:
        return len(self._by_title)
