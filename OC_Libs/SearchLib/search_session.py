"""
Search panel state.

SearchSession is the plain state object behind a search panel: the query
text, a loading flag, a user-facing message and the current result list.
It never touches the scene.

Searches are not cancelled and carry no request generation: if an older
search resolves after a newer one, its results replace the newer ones.
"""

import asyncio
import logging
from typing import Any, List, Optional

from OC_Libs.errors import InvalidQuery, OpenCanvasError, SearchUnavailable
from OC_Libs.SearchLib.search_adapter import PixabaySearchAdapter, normalize_query
from OC_Libs.SearchLib.search_models import SearchResult

logger = logging.getLogger(__name__)


class SearchSession:
    """Per-session search state driven by ``run``."""

    def __init__(self, adapter: PixabaySearchAdapter, executor: Optional[Any] = None) -> None:
        self.adapter = adapter
        self._executor = executor
        self._in_flight = 0

        self.query = ""
        self.message: Optional[str] = None
        self.condition: Optional[OpenCanvasError] = None
        self.results: List[SearchResult] = []

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    async def run(self, query: Optional[str]) -> List[SearchResult]:
        """
        Search and update the panel state.

        Failures are recorded in ``message``/``condition`` and leave the
        previous results in place. An empty result replaces the list and
        records the NoResults message.

        Returns:
            The current result list after this search
        """
        self.query = "" if query is None else str(query)

        try:
            trimmed = normalize_query(query)
        except InvalidQuery as e:
            self._record_condition(e)
            return self.results

        self._in_flight += 1
        self.message = None
        loop = asyncio.get_running_loop()

        try:
            found = await loop.run_in_executor(self._executor, self.adapter.search, trimmed)
        except SearchUnavailable as e:
            self._record_condition(e)
            return self.results
        finally:
            self._in_flight -= 1

        self.results = list(found)
        if found.condition is not None:
            self._record_condition(found.condition)
        else:
            self.condition = None
            self.message = None

        return self.results

    def _record_condition(self, condition: OpenCanvasError) -> None:
        logger.debug("Search condition %s: %s", type(condition).__name__, condition.message)
        self.condition = condition
        self.message = condition.message
