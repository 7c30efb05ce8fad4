"""
Search data models for Open Canvas.

Classes:
    SearchResult: One candidate image returned by the search provider
    SearchResultList: List of SearchResults plus response metadata
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from OC_Libs.errors import NoResults


@dataclass(frozen=True)
class SearchResult:
    """A candidate image. Not part of the scene until the user adds it.

    Attributes:
        id: Provider identifier
        preview_url: Small thumbnail URL
        full_url: Full-resolution URL (what gets added to the canvas)
        tags: Comma-separated description
        page_url: Provider page for attribution
        width: Original image width in pixels
        height: Original image height in pixels
        user: Uploader name
    """
    id: str
    preview_url: str
    full_url: str
    tags: str = ""
    page_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    user: Optional[str] = None


class SearchResultList(list):
    """
    Results of one search.

    Behaves as a plain list of SearchResult. An empty list carries a
    NoResults instance in ``condition`` so callers can tell "nothing found"
    apart from a failed request (which raises SearchUnavailable instead).
    """

    def __init__(
        self,
        query: str,
        results: Iterable[SearchResult] = (),
        total: int = 0,
        total_hits: int = 0,
    ) -> None:
        super().__init__(results)
        self.query = query
        self.total = total
        self.total_hits = total_hits

    @property
    def condition(self) -> Optional[NoResults]:
        if len(self) == 0:
            return NoResults(self.query)
        return None

    @property
    def no_results(self) -> bool:
        return len(self) == 0
