"""Tests for the search engine: pattern building, paging and failures."""

import math
import re
import threading

import pytest

from paguro.errors import ContentRepositoryError, MalformedResponseError
from paguro.i18n.locale import Locale
from paguro.search.engine import (
    DEFAULT_LIMIT,
    SEARCH_COUNT_QUERY,
    SEARCH_ITEMS_QUERY,
    SearchEngine,
    SearchMode,
    SearchRequest,
    build_match_pattern,
    clamp_limit,
    clamp_page,
    page_count,
    result_window,
)


def make_documents(count: int, drafts: int = 0) -> list[dict]:
    docs = [
        {
            "_id": f"post-{i}",
            "_type": "post",
            "status": "published",
            "titleIt": f"Viaggio in Mongolia {i}",
            "titleEn": f"Mongolia trip {i}",
        }
        for i in range(count)
    ]
    docs += [
        {
            "_id": f"draft-{i}",
            "_type": "post",
            "status": "draft",
            "titleIt": f"Bozza Mongolia {i}",
            "titleEn": None,
        }
        for i in range(drafts)
    ]
    return docs


class SearchBackend:
    """Evaluates the search queries against in-memory documents."""

    def __init__(self, documents: list[dict]) -> None:
        self.documents = documents

    def _matches(self, doc: dict, pattern: str) -> bool:
        regex = ".*".join(re.escape(tok) for tok in pattern.strip("*").split("*"))
        haystack = " ".join(v for k, v in doc.items() if k.startswith("title") and v)
        return re.search(regex, haystack, re.IGNORECASE) is not None

    def _visible(self, params: dict, preview: bool) -> list[dict]:
        return [
            d for d in self.documents
            if d["_type"] in params["types"]
            and (preview or d.get("status", "published") == "published")
            and self._matches(d, params["pattern"])
        ]

    def __call__(self, groq: str, params: dict, preview: bool):
        hits = self._visible(params, preview)
        if groq == SEARCH_COUNT_QUERY:
            return len(hits)
        if groq == SEARCH_ITEMS_QUERY:
            return hits[params["start"]:params["end"]]
        raise AssertionError(f"unexpected query: {groq[:40]}")


@pytest.fixture
def engine(content_client) -> SearchEngine:
    return SearchEngine(content_client)


class TestHelpers:
    @pytest.mark.parametrize(
        "q, expected",
        [
            ("gobi", "*gobi*"),
            ("foo  bar", "*foo*bar*"),
            ("  deserto del gobi ", "*deserto*del*gobi*"),
            ("", ""),
            ("   \t", ""),
        ],
    )
    def test_build_match_pattern(self, q, expected):
        assert build_match_pattern(q) == expected

    @pytest.mark.parametrize(
        "limit, expected",
        [(None, DEFAULT_LIMIT), (1, 6), (6, 6), (10, 10), (24, 24), (100, 24), (-5, 6)],
    )
    def test_clamp_limit(self, limit, expected):
        assert clamp_limit(limit) == expected

    @pytest.mark.parametrize("page, expected", [(None, 1), (0, 1), (-3, 1), (1, 1), (7, 7)])
    def test_clamp_page(self, page, expected):
        assert clamp_page(page) == expected

    def test_result_window(self):
        assert result_window(1, 12) == (0, 12)
        assert result_window(3, 6) == (12, 18)

    def test_page_count(self):
        assert page_count(0, 12) == 0
        assert page_count(1, 12) == 1
        assert page_count(12, 12) == 1
        assert page_count(13, 12) == 2

    def test_request_clamps_garbage(self):
        request = SearchRequest(q="  x ", page="abc", limit="lots")
        assert request.q == "x"
        assert request.page == 1
        assert request.limit == DEFAULT_LIMIT

    @pytest.mark.parametrize(
        "value, expected_page, expected_limit",
        [
            (float("inf"), 1, 24),
            (float("-inf"), 1, 6),
            (float("nan"), 1, DEFAULT_LIMIT),
        ],
    )
    def test_non_finite_values_are_clamped(self, value, expected_page, expected_limit):
        assert clamp_page(value) == expected_page
        assert clamp_limit(value) == expected_limit
        request = SearchRequest(q="x", page=value, limit=value)
        assert request.page == expected_page
        assert request.limit == expected_limit

    def test_huge_page_does_not_raise(self, engine, repository):
        result = engine.search("", page=float("inf"))
        assert result.page == 1
        assert repository.calls == []

    def test_cover_media_countries_are_searched(self):
        for query in (SEARCH_COUNT_QUERY, SEARCH_ITEMS_QUERY):
            assert "coverImage->countries[]->title match $pattern" in query
            assert "coverImage->countries[]->nameI18n.en match $pattern" in query
            assert "coverImage->countries[]->nameI18n.it match $pattern" in query


class TestEmptyQuery:
    @pytest.mark.parametrize("q", ["", "   ", "\n\t"])
    def test_no_repository_calls(self, engine, repository, q):
        result = engine.search(q, page=4)
        assert result.items == []
        assert result.total == 0
        assert result.pages == 0
        assert result.page == 4
        assert repository.calls == []


class TestPagination:
    def test_total_and_pages(self, engine, repository):
        repository.responder = SearchBackend(make_documents(30))
        result = engine.search("mongolia", page=1, limit=12)
        assert result.total == 30
        assert result.pages == 3
        assert len(result.items) == 12

    def test_last_page_is_partial(self, engine, repository):
        repository.responder = SearchBackend(make_documents(30))
        result = engine.search("mongolia", page=3, limit=12)
        assert [item.id for item in result.items] == [f"post-{i}" for i in range(24, 30)]

    def test_page_beyond_end_is_empty(self, engine, repository):
        repository.responder = SearchBackend(make_documents(5))
        result = engine.search("mongolia", page=9, limit=6)
        assert result.items == []
        assert result.total == 5
        assert result.page == 9

    @pytest.mark.parametrize("page", [1, 2, 3, 5])
    @pytest.mark.parametrize("limit", [6, 7, 12, 24])
    @pytest.mark.parametrize("total", [0, 1, 6, 25])
    def test_pages_law(self, engine, repository, limit, total, page):
        repository.responder = SearchBackend(make_documents(total))
        result = engine.search("mongolia", page=page, limit=limit)
        assert result.total == total
        assert result.pages == math.ceil(total / limit)
        assert len(result.items) == min(limit, max(0, total - (page - 1) * limit))

    def test_limit_is_clamped_before_querying(self, engine, repository):
        repository.responder = SearchBackend(make_documents(40))
        result = engine.search("mongolia", page=2, limit=100)
        assert len(result.items) == 24
        items_call = next(c for c in repository.calls if c[0] == SEARCH_ITEMS_QUERY)
        assert (items_call[1]["start"], items_call[1]["end"]) == (24, 48)

    def test_sends_pattern_locale_and_mode(self, engine, repository):
        repository.responder = SearchBackend([])
        engine.search("deserto  gobi", locale=Locale.EN, mode=SearchMode.FULL)
        for _, params, preview in repository.calls:
            assert params["pattern"] == "*deserto*gobi*"
            assert params["lang"] == "en"
            assert params["mode"] == "full"
            assert params["types"] == ["post", "destination"]
            assert preview is False

    def test_over_long_item_list_is_truncated(self, engine, repository):
        def responder(groq, params, preview):
            if groq == SEARCH_COUNT_QUERY:
                return 50
            return make_documents(30)

        repository.responder = responder
        result = engine.search("mongolia", limit=6)
        assert len(result.items) == 6


class TestPreviewVisibility:
    def test_live_excludes_drafts(self, engine, repository):
        repository.responder = SearchBackend(make_documents(2, drafts=3))
        result = engine.search("mongolia")
        assert result.total == 2
        assert all(item.id.startswith("post-") for item in result.items)

    def test_preview_includes_drafts(self, engine, repository):
        repository.responder = SearchBackend(make_documents(2, drafts=3))
        result = engine.search("mongolia", preview=True)
        assert result.total == 5

    def test_results_are_never_cached(self, engine, repository):
        repository.responder = SearchBackend(make_documents(3))
        engine.search("mongolia")
        engine.search("mongolia")
        assert len(repository.calls) == 4


class TestFailures:
    def test_count_failure_fails_search(self, engine, repository):
        def responder(groq, params, preview):
            if groq == SEARCH_COUNT_QUERY:
                raise ContentRepositoryError("count failed")
            return []

        repository.responder = responder
        with pytest.raises(ContentRepositoryError):
            engine.search("mongolia")

    def test_items_failure_fails_search(self, engine, repository):
        def responder(groq, params, preview):
            if groq == SEARCH_ITEMS_QUERY:
                raise ContentRepositoryError("items failed", status=500)
            return 3

        repository.responder = responder
        with pytest.raises(ContentRepositoryError):
            engine.search("mongolia")

    @pytest.mark.parametrize("bad_total", [None, "3", -1, True, 2.5])
    def test_malformed_count(self, engine, repository, bad_total):
        repository.responder = lambda groq, params, preview: (
            bad_total if groq == SEARCH_COUNT_QUERY else []
        )
        with pytest.raises(MalformedResponseError):
            engine.search("mongolia")

    def test_malformed_items(self, engine, repository):
        repository.responder = lambda groq, params, preview: (
            1 if groq == SEARCH_COUNT_QUERY else [{"title": "missing id"}]
        )
        with pytest.raises(MalformedResponseError):
            engine.search("mongolia")

    def test_search_safely_with_unusable_page(self, engine, repository):
        def responder(groq, params, preview):
            raise ContentRepositoryError("boom")

        repository.responder = responder
        result = engine.search_safely("mongolia", page="abc")
        assert result.failed
        assert result.page == 1

    def test_search_safely_returns_failed_empty_page(self, engine, repository, caplog):
        def responder(groq, params, preview):
            raise ContentRepositoryError("boom")

        repository.responder = responder
        result = engine.search_safely("mongolia", page=2)
        assert result.failed
        assert result.items == []
        assert result.page == 2
        assert "failed" in caplog.text


class TestConcurrency:
    def test_count_and_items_run_concurrently(self, engine, repository):
        barrier = threading.Barrier(2, timeout=5)

        def responder(groq, params, preview):
            barrier.wait()
            return 0 if groq == SEARCH_COUNT_QUERY else []

        repository.responder = responder
        result = engine.search("mongolia")
        assert result.total == 0
        assert len(repository.calls) == 2
