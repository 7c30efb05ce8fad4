"""
Tests for SearchSession panel state.

Tests cover:
- Results replace the list on success
- Failures keep the previous results and record a message
- Loading flag while a search is in flight
- Late results overwrite newer ones (no request generation)
"""

import asyncio
import threading

from OC_Libs.errors import InvalidQuery, NoResults, SearchUnavailable
from OC_Libs.SearchLib.search_models import SearchResult, SearchResultList
from OC_Libs.SearchLib.search_session import SearchSession


def result(result_id):
    return SearchResult(
        id=str(result_id),
        preview_url=f"https://cdn.example.com/{result_id}_150.jpg",
        full_url=f"https://cdn.example.com/{result_id}_1280.jpg",
    )


class ScriptedAdapter:
    """Returns canned results per query; raises exceptions given as values."""

    def __init__(self, answers, gates=None):
        self.answers = answers
        self.gates = gates or {}
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            gate.wait(5)
        answer = self.answers[query]
        if isinstance(answer, Exception):
            raise answer
        return SearchResultList(query, answer)


class TestSearchSession:
    def test_success_replaces_results(self):
        session = SearchSession(ScriptedAdapter({"sea": [result(1), result(2)]}))

        found = asyncio.run(session.run(" sea "))

        assert [r.id for r in found] == ["1", "2"]
        assert session.results == found
        assert session.query == " sea "
        assert session.message is None
        assert session.condition is None
        assert not session.loading

    def test_invalid_query_keeps_results(self):
        adapter = ScriptedAdapter({"sea": [result(1)]})
        session = SearchSession(adapter)
        asyncio.run(session.run("sea"))

        asyncio.run(session.run("   "))

        assert adapter.queries == ["sea"]
        assert [r.id for r in session.results] == ["1"]
        assert isinstance(session.condition, InvalidQuery)
        assert session.message == InvalidQuery.default_message

    def test_no_results_clears_list(self):
        session = SearchSession(ScriptedAdapter({"sea": [result(1)], "zzz": []}))
        asyncio.run(session.run("sea"))

        asyncio.run(session.run("zzz"))

        assert session.results == []
        assert isinstance(session.condition, NoResults)
        assert "zzz" in session.message

    def test_failure_keeps_previous_results(self):
        failure = SearchUnavailable(status_code=503)
        session = SearchSession(ScriptedAdapter({"sea": [result(1)], "sky": failure}))
        asyncio.run(session.run("sea"))

        found = asyncio.run(session.run("sky"))

        assert [r.id for r in found] == ["1"]
        assert session.condition is failure
        assert session.message == SearchUnavailable.default_message
        assert not session.loading

    def test_success_clears_previous_message(self):
        session = SearchSession(ScriptedAdapter({"zzz": [], "sea": [result(1)]}))
        asyncio.run(session.run("zzz"))

        asyncio.run(session.run("sea"))

        assert session.message is None
        assert session.condition is None

    def test_loading_while_in_flight(self):
        gate = threading.Event()
        session = SearchSession(ScriptedAdapter({"sea": [result(1)]}, gates={"sea": gate}))

        async def scenario():
            pending = asyncio.ensure_future(session.run("sea"))
            await asyncio.sleep(0)
            during = session.loading
            gate.set()
            await pending
            return during

        assert asyncio.run(scenario()) is True
        assert not session.loading

    def test_late_results_win(self):
        slow_gate = threading.Event()
        adapter = ScriptedAdapter(
            {"old": [result("old")], "new": [result("new")]},
            gates={"old": slow_gate},
        )
        session = SearchSession(adapter)

        async def scenario():
            old = asyncio.ensure_future(session.run("old"))
            await asyncio.sleep(0)
            await session.run("new")
            assert [r.id for r in session.results] == ["new"]
            slow_gate.set()
            await old

        asyncio.run(scenario())

        assert [r.id for r in session.results] == ["old"]
