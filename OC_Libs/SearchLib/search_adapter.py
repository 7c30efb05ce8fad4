"""
Pixabay search adapter.

Turns a text query into a list of SearchResults with one GET request to the
Pixabay API. The adapter keeps no state between calls: no caching and no
retries. Retry policy, if any, belongs to the caller.

Classes:
    PixabaySearchAdapter: Stock-photo search over requests

Functions:
    normalize_query: Validate and trim a search query
    parse_hit: Convert one Pixabay hit record into a SearchResult
"""

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from OC_Libs.config import EditorConfig
from OC_Libs.constants import (
    DEFAULT_CONTENT_FILTER,
    DEFAULT_PER_PAGE,
    DEFAULT_REQUEST_TIMEOUT,
    FIELD_FULL_URL,
    FIELD_HIT_ID,
    FIELD_HITS,
    FIELD_IMAGE_HEIGHT,
    FIELD_IMAGE_WIDTH,
    FIELD_PAGE_URL,
    FIELD_PREVIEW_URL,
    FIELD_TAGS,
    FIELD_TOTAL,
    FIELD_TOTAL_HITS,
    FIELD_USER,
    PIXABAY_ENDPOINT,
)
from OC_Libs.errors import InvalidQuery, SearchUnavailable
from OC_Libs.SearchLib.search_models import SearchResult, SearchResultList

logger = logging.getLogger(__name__)

REQUIRED_HIT_FIELDS = (FIELD_HIT_ID, FIELD_PREVIEW_URL, FIELD_FULL_URL)


def normalize_query(query: Optional[str]) -> str:
    """
    Trim a query and reject empty input.

    Raises:
        InvalidQuery: If the query is None, empty or only whitespace
    """
    if query is None:
        raise InvalidQuery()

    trimmed = str(query).strip()
    if not trimmed:
        raise InvalidQuery()
    return trimmed


def parse_hit(hit: Mapping[str, Any]) -> SearchResult:
    """
    Convert one hit record into a SearchResult.

    Raises:
        KeyError: If a required field is missing or empty
    """
    for name in REQUIRED_HIT_FIELDS:
        if hit.get(name) in (None, ""):
            raise KeyError(name)

    return SearchResult(
        id=str(hit[FIELD_HIT_ID]),
        preview_url=str(hit[FIELD_PREVIEW_URL]),
        full_url=str(hit[FIELD_FULL_URL]),
        tags=str(hit.get(FIELD_TAGS, "")),
        page_url=hit.get(FIELD_PAGE_URL),
        width=hit.get(FIELD_IMAGE_WIDTH),
        height=hit.get(FIELD_IMAGE_HEIGHT),
        user=hit.get(FIELD_USER),
    )


class PixabaySearchAdapter:
    """
    Search adapter for the Pixabay image API.

    Args:
        api_key: Pixabay API key
        endpoint: API URL
        content_filter: ``image_type`` parameter (photos only by default)
        per_page: Hits requested per search
        timeout: Request timeout in seconds
        session: Optional requests.Session for every request (requests.get per call if omitted)
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = PIXABAY_ENDPOINT,
        content_filter: str = DEFAULT_CONTENT_FILTER,
        per_page: int = DEFAULT_PER_PAGE,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.content_filter = content_filter
        self.per_page = per_page
        self.timeout = timeout
        self._session = session

    @classmethod
    def from_config(cls, config: EditorConfig, session: Optional[Any] = None) -> "PixabaySearchAdapter":
        return cls(
            api_key=config.api_key,
            endpoint=config.search_endpoint,
            content_filter=config.content_filter,
            per_page=config.per_page,
            timeout=config.request_timeout,
            session=session,
        )

    def _get(self, url: str, **kwargs: Any) -> Any:
        # Sessions are not thread-safe; only an injected one is reused
        if self._session is not None:
            return self._session.get(url, **kwargs)
        return requests.get(url, **kwargs)

    def build_params(self, query: str) -> Dict[str, Any]:
        """Query-string parameters for a search. requests URL-encodes them."""
        return {
            "key": self.api_key,
            "q": query,
            "image_type": self.content_filter,
            "per_page": self.per_page,
        }

    def search(self, query: Optional[str]) -> SearchResultList:
        """
        Search for images matching ``query``.

        Args:
            query: Free-text search; trimmed before use

        Returns:
            SearchResultList. When nothing matched it is empty and its
            ``condition`` is a NoResults instance.

        Raises:
            InvalidQuery: If the query is empty or whitespace (no request is sent)
            SearchUnavailable: On transport errors, non-success status or a
                malformed response body
        """
        trimmed = normalize_query(query)
        logger.info("Searching images for %r", trimmed)

        try:
            response = self._get(
                self.endpoint,
                params=self.build_params(trimmed),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Image search request failed: %s", e)
            raise SearchUnavailable() from e

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Image search returned HTTP %s: %s",
                response.status_code,
                response.text[:200],
            )
            raise SearchUnavailable(
                f"Image search failed (HTTP {response.status_code}). Please try again later.",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Image search returned invalid JSON: %s", e)
            raise SearchUnavailable(
                "Image search returned an unreadable response.",
                status_code=response.status_code,
            ) from e

        return self._parse_response(trimmed, data, response.status_code)

    def _parse_response(self, query: str, data: Any, status_code: int) -> SearchResultList:
        if not isinstance(data, dict) or not isinstance(data.get(FIELD_HITS), list):
            raise SearchUnavailable(
                "Image search returned an unexpected response.",
                status_code=status_code,
            )

        results = []
        for hit in data[FIELD_HITS]:
            if not isinstance(hit, dict):
                logger.warning("Skipping malformed search hit: %r", hit)
                continue
            try:
                results.append(parse_hit(hit))
            except KeyError as e:
                logger.warning("Skipping search hit %s missing field %s", hit.get(FIELD_HIT_ID), e)

        try:
            total = int(data.get(FIELD_TOTAL) or len(results))
            total_hits = int(data.get(FIELD_TOTAL_HITS) or len(results))
        except (TypeError, ValueError) as e:
            raise SearchUnavailable(
                "Image search returned an unexpected response.",
                status_code=status_code,
            ) from e

        result_list = SearchResultList(query, results, total=total, total_hits=total_hits)

        if result_list.no_results:
            logger.info("No images found for %r", query)
        else:
            logger.info("Found %d images for %r", len(result_list), query)

        return result_list

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
