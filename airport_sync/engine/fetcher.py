"""HTTP fetching of a single page of records."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from ..config import SyncConfig
from ..errors import DecodeError, FetchError

Record = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Page:
    """One page of records as returned by the data source."""

    offset: int
    items: tuple[Record, ...] = field(repr=False)
    count: int
    total_count: int


def encode_sort(sort: list[dict[str, str]]) -> str:
    """Base64 encode the sort order the way the API expects it."""

    payload = json.dumps(sort, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


class PageFetcher:
    """Issue bounded page requests against the configured resource."""

    def __init__(
        self,
        config: SyncConfig,
        api_key: str,
        logger: structlog.BoundLogger | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self.api_key = api_key
        self.logger = logger or structlog.get_logger("airport_sync.fetcher")
        self.url = f"{config.api_url}/{config.resource.strip('/')}"
        self._sort_param = encode_sort(config.sort)
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=config.timeout,
            headers={"Accept": "application/json"},
        )

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def build_params(self, offset: int) -> dict[str, str]:
        return {
            "limit": str(self.config.page_size),
            "offset": str(offset),
            "sort": self._sort_param,
            "apiKey": self.api_key,
        }

    def fetch(self, offset: int) -> Page:
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        try:
            response = self._client.request(
                "GET",
                self.url,
                params=self.build_params(offset),
                timeout=self.config.timeout,
            )
        except httpx.HTTPError as exc:
            raise FetchError(
                f"Failed to fetch {self.config.resource} (offset {offset}): {exc}",
                offset=offset,
            ) from exc

        if not response.is_success:
            raise FetchError(
                f"Failed to fetch {self.config.resource} (offset {offset}): "
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                offset=offset,
            )
        return self._decode(response, offset)

    @staticmethod
    def _decode(response: httpx.Response, offset: int) -> Page:
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"Response at offset {offset} is not valid JSON: {exc}", offset=offset) from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"Response at offset {offset} is not a JSON object", offset=offset)

        items = payload.get("items")
        count = payload.get("count")
        total = payload.get("totalCount")
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise DecodeError(f"Response at offset {offset} has no list of items", offset=offset)
        for name, value in (("count", count), ("totalCount", total)):
            # bool is an int subclass; reject it explicitly.
            if not isinstance(value, int) or isinstance(value, bool):
                raise DecodeError(f"Response at offset {offset} has invalid {name}: {value!r}", offset=offset)
        return Page(offset=offset, items=tuple(items), count=count, total_count=total)


__all__ = ["Page", "PageFetcher", "Record", "encode_sort"]
