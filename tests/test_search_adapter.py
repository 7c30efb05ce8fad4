"""
Tests for the Pixabay search adapter.

Tests cover:
- Query validation (no request for empty input)
- Request parameters
- Result parsing and the NoResults condition
- SearchUnavailable for transport, status and body failures
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import FakeResponse, pixabay_hit
from OC_Libs.config import EditorConfig
from OC_Libs.errors import InvalidQuery, NoResults, SearchUnavailable
from OC_Libs.SearchLib.search_adapter import (
    PixabaySearchAdapter,
    normalize_query,
    parse_hit,
)
from OC_Libs.SearchLib.search_models import SearchResult


def make_adapter(response=None, error=None, **kwargs):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return PixabaySearchAdapter("test-key", session=session, **kwargs), session


def ok_response(hits, total=None):
    body = {"total": len(hits) if total is None else total, "totalHits": len(hits), "hits": hits}
    return FakeResponse(json_data=body)


class TestNormalizeQuery:
    def test_trims(self):
        assert normalize_query("  sunset  ") == "sunset"

    @pytest.mark.parametrize("query", ["", "   ", "\t\n", None])
    def test_rejects_empty(self, query):
        with pytest.raises(InvalidQuery):
            normalize_query(query)


class TestParseHit:
    def test_maps_fields(self):
        result = parse_hit(pixabay_hit(7, tags="cat"))

        assert result == SearchResult(
            id="7",
            preview_url="https://cdn.example.com/7_150.jpg",
            full_url="https://cdn.example.com/7_1280.jpg",
            tags="cat",
            page_url="https://pixabay.com/photos/7/",
            width=1920,
            height=1080,
            user="photographer",
        )

    def test_missing_full_url(self):
        hit = pixabay_hit()
        del hit["largeImageURL"]

        with pytest.raises(KeyError):
            parse_hit(hit)


class TestSearch:
    def test_one_request_with_params(self):
        adapter, session = make_adapter(ok_response([pixabay_hit(1)]))

        adapter.search("  red car ")

        session.get.assert_called_once_with(
            "https://pixabay.com/api/",
            params={"key": "test-key", "q": "red car", "image_type": "photo", "per_page": 20},
            timeout=10.0,
        )

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query_sends_nothing(self, query):
        adapter, session = make_adapter(ok_response([]))

        with pytest.raises(InvalidQuery):
            adapter.search(query)

        session.get.assert_not_called()

    def test_returns_results_in_order(self):
        adapter, _ = make_adapter(ok_response([pixabay_hit(3), pixabay_hit(1), pixabay_hit(2)]))

        results = adapter.search("sea")

        assert [r.id for r in results] == ["3", "1", "2"]
        assert results.query == "sea"
        assert results.condition is None
        assert not results.no_results
        assert all(r.full_url.startswith("https://") for r in results)

    def test_no_results_condition(self):
        adapter, _ = make_adapter(ok_response([]))

        results = adapter.search("qwxzzy")

        assert results == []
        assert results.no_results
        assert isinstance(results.condition, NoResults)
        assert results.condition.query == "qwxzzy"

    def test_skips_malformed_hits(self):
        broken = pixabay_hit(2)
        del broken["previewURL"]
        adapter, _ = make_adapter(ok_response([pixabay_hit(1), broken, "junk", pixabay_hit(3)]))

        results = adapter.search("sea")

        assert [r.id for r in results] == ["1", "3"]

    def test_totals(self):
        adapter, _ = make_adapter(ok_response([pixabay_hit(1)], total=5000))

        results = adapter.search("sea")

        assert results.total == 5000
        assert results.total_hits == 1

    def test_config_values_are_used(self):
        config = EditorConfig(
            api_key="from-config",
            search_endpoint="https://search.example.com/api/",
            per_page=50,
            request_timeout=2.5,
        )
        session = MagicMock()
        session.get.return_value = ok_response([])
        adapter = PixabaySearchAdapter.from_config(config, session=session)

        adapter.search("dog")

        args, kwargs = session.get.call_args
        assert args == ("https://search.example.com/api/",)
        assert kwargs["params"]["key"] == "from-config"
        assert kwargs["params"]["per_page"] == 50
        assert kwargs["timeout"] == 2.5


class TestSearchFailures:
    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    def test_error_status(self, status):
        adapter, _ = make_adapter(FakeResponse(status_code=status, text="[ERROR 400] invalid key"))

        with pytest.raises(SearchUnavailable) as info:
            adapter.search("sea")

        assert info.value.status_code == status
        assert str(status) in info.value.message

    def test_transport_error(self):
        adapter, _ = make_adapter(error=requests.Timeout("slow"))

        with pytest.raises(SearchUnavailable) as info:
            adapter.search("sea")

        assert info.value.status_code is None
        assert isinstance(info.value.__cause__, requests.Timeout)

    def test_invalid_json(self):
        adapter, _ = make_adapter(FakeResponse(json_error=ValueError("bad json")))

        with pytest.raises(SearchUnavailable):
            adapter.search("sea")

    @pytest.mark.parametrize("body", [[], {"total": 1}, {"hits": "nope"}, None])
    def test_unexpected_body(self, body):
        adapter, _ = make_adapter(FakeResponse(json_data=body))

        with pytest.raises(SearchUnavailable):
            adapter.search("sea")

    def test_non_numeric_totals(self):
        body = {"total": "many", "totalHits": 1, "hits": [pixabay_hit(1)]}
        adapter, _ = make_adapter(FakeResponse(json_data=body))

        with pytest.raises(SearchUnavailable):
            adapter.search("sea")


class TestAdapterSession:
    def test_without_session_uses_requests_get(self):
        adapter = PixabaySearchAdapter("test-key", timeout=4.0)

        with patch("OC_Libs.SearchLib.search_adapter.requests.get") as get:
            get.return_value = ok_response([pixabay_hit(1)])
            results = adapter.search("sea")

        assert [r.id for r in results] == ["1"]
        get.assert_called_once_with(
            "https://pixabay.com/api/",
            params={"key": "test-key", "q": "sea", "image_type": "photo", "per_page": 20},
            timeout=4.0,
        )

    def test_close(self):
        adapter, session = make_adapter(ok_response([]))

        adapter.close()
        adapter.close()

        session.close.assert_called_once_with()
