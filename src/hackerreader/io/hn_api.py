"""Hacker News Firebase API client.

Blocking calls, meant to run on worker threads, never on the app loop.
Every failure mode (network, timeout, HTTP status, bad JSON, unknown id)
surfaces as FetchError.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import socket
import urllib.error
import urllib.request

from hackerreader.core.node import RawItem

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://hacker-news.firebaseio.com/v0"
DEFAULT_TIMEOUT = 10.0
USER_AGENT = "hackerreader/0.1"

COLLECTIONS = (
    "topstories",
    "newstories",
    "beststories",
    "askstories",
    "showstories",
    "jobstories",
)


class FetchError(Exception):
    """A fetch for an item or collection could not produce a usable result."""

    def __init__(self, message: str, *, item_id: int | None = None) -> None:
        super().__init__(message)
        self.item_id = item_id


def _int(value, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _ids(value) -> tuple[int, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(_int(v) for v in value if isinstance(v, int) and not isinstance(v, bool))


def raw_item_from_json(data: dict) -> RawItem:
    """Map an API item object onto RawItem. Unknown keys are ignored."""
    return RawItem(
        id=_int(data.get("id")),
        type=str(data.get("type") or ""),
        by=str(data.get("by") or ""),
        time=_int(data.get("time")),
        title=str(data.get("title") or ""),
        text=str(data.get("text") or ""),
        url=str(data.get("url") or ""),
        score=_int(data.get("score")),
        descendants=_int(data.get("descendants")),
        kids=_ids(data.get("kids")),
        parts=_ids(data.get("parts")),
        poll=_int(data.get("poll")),
        parent=_int(data.get("parent")),
        dead=bool(data.get("dead", False)),
        deleted=bool(data.get("deleted", False)),
    )


class HackerNewsClient:
    """Thin JSON-over-HTTP client for items and story collections."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        collection: str = "topstories",
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.collection = collection

    def _get_json(self, url: str, *, item_id: int | None = None):
        logger.debug("GET %s", url)
        request = urllib.request.Request(
            url,
            headers={"accept": "application/json", "user-agent": USER_AGENT},
            method="GET",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            raise FetchError(f"HTTP {e.code} for {url}", item_id=item_id) from e
        except urllib.error.URLError as e:
            raise FetchError(f"cannot reach {url}: {e.reason}", item_id=item_id) from e
        except (socket.timeout, TimeoutError) as e:
            raise FetchError(f"timed out after {self.timeout:g}s: {url}", item_id=item_id) from e
        except OSError as e:
            raise FetchError(f"network error for {url}: {e}", item_id=item_id) from e
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise FetchError(f"invalid JSON from {url}", item_id=item_id) from e

    def fetch_item(self, item_id: int) -> RawItem:
        data = self._get_json(f"{self.api_url}/item/{item_id}.json", item_id=item_id)
        if data is None:
            raise FetchError(f"item {item_id} does not exist", item_id=item_id)
        if not isinstance(data, dict):
            raise FetchError(f"item {item_id}: unexpected payload", item_id=item_id)
        item = raw_item_from_json(data)
        if item.id == 0:
            # some deleted items come back without an id
            item = dataclasses.replace(item, id=item_id)
        return item

    def fetch_collection(self) -> list[int]:
        data = self._get_json(f"{self.api_url}/{self.collection}.json")
        if not isinstance(data, list):
            raise FetchError(f"{self.collection}: expected a list of ids")
        return list(_ids(data))
