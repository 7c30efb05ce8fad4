"""
SearchLib - Stock-photo search

This module provides the Pixabay search adapter, the search result models
and the search panel state used by the editor window.
"""

from OC_Libs.SearchLib.search_models import SearchResult, SearchResultList
from OC_Libs.SearchLib.search_adapter import (
    PixabaySearchAdapter,
    normalize_query,
    parse_hit,
)
from OC_Libs.SearchLib.search_session import SearchSession

__all__ = [
    "SearchResult",
    "SearchResultList",
    "PixabaySearchAdapter",
    "normalize_query",
    "parse_hit",
    "SearchSession",
]
