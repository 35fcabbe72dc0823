"""Tests for the FastAPI news proxy."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from news_reader.proxy.app import create_app
from news_reader.proxy.routes import CACHE_CONTROL
from news_reader.proxy.settings import ProxySettings
from news_reader.proxy.upstream import (
    build_upstream_params,
    map_upstream_error,
    parse_page,
    published_after,
    upstream_error_code,
)

UPSTREAM = "https://upstream.test/v1/news/all"


def _settings(**overrides) -> ProxySettings:
    values = {
        "THENEWSAPI_TOKEN": "secret-token",
        "SEARCH_RECENCY_DAYS": 30,
        "UPSTREAM_BASE_URL": UPSTREAM,
    }
    values.update(overrides)
    return ProxySettings(**values)


class Upstream:
    """Records upstream requests and answers with a canned response."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self.response = response or httpx.Response(
            200, json={"meta": {"returned": 1}, "data": [{"uuid": "1", "url": "https://a"}]}
        )
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def params(self) -> dict[str, str]:
        return dict(self.requests[-1].url.params)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def client(upstream):
    app = create_app(_settings(), transport=httpx.MockTransport(upstream))
    with TestClient(app) as test_client:
        yield test_client


class TestUpstreamHelpers:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, 1), ("3", 3), (" 7 ", 7), ("0", 1), ("-2", 1), ("abc", 1), ("", 1)],
    )
    def test_parse_page(self, raw, expected):
        assert parse_page(raw) == expected

    def test_published_after(self):
        now = datetime(2024, 3, 10, 1, 0, tzinfo=timezone.utc)
        assert published_after(30, now) == "2024-02-09"

    def test_category_params(self):
        assert build_upstream_params(
            page=2, search=None, categories=" science ", recency_days=30
        ) == {"language": "en", "limit": "3", "page": "2", "categories": "science"}

    def test_default_category(self):
        params = build_upstream_params(page=1, search="  ", categories="", recency_days=30)
        assert params["categories"] == "tech"
        assert "search" not in params

    def test_search_params_with_recency(self):
        now = datetime(2024, 3, 10, tzinfo=timezone.utc)
        params = build_upstream_params(
            page=1, search=" ai ", categories="tech", recency_days=7, now=now
        )
        assert params == {
            "language": "en",
            "limit": "3",
            "page": "1",
            "search": "ai",
            "sort": "published_on",
            "published_after": "2024-03-03",
        }

    def test_search_without_recency(self):
        params = build_upstream_params(page=1, search="ai", categories=None, recency_days=0)
        assert "published_after" not in params
        assert params["sort"] == "published_on"

    def test_upstream_error_code(self):
        assert upstream_error_code({"error": {"code": "usage_limit_reached"}}) == (
            "usage_limit_reached"
        )
        assert upstream_error_code({"code": "x"}) == "x"
        assert upstream_error_code("text") == ""

    @pytest.mark.parametrize(
        ("status", "body", "expected_status"),
        [
            (429, None, 429),
            (402, {"error": {"code": "usage_limit_reached"}}, 429),
            (400, {"code": "USAGE_LIMIT"}, 429),
            (401, {}, 401),
            (403, {}, 403),
            (500, {"error": {"code": "server"}}, 502),
        ],
    )
    def test_map_upstream_error(self, status, body, expected_status):
        mapped, payload = map_upstream_error(status, body)
        assert mapped == expected_status
        assert isinstance(payload["message"], str)

    def test_generic_upstream_error_carries_details(self):
        _, payload = map_upstream_error(500, {"error": "bad"})
        assert payload == {"message": "Upstream error from TheNewsApi.", "details": {"error": "bad"}}


class TestSettings:
    @pytest.mark.parametrize(
        ("raw", "expected"), [("abc", 0), ("-4", 0), ("12", 12), ("", 30)]
    )
    def test_recency_days_clamp(self, raw, expected):
        assert ProxySettings(SEARCH_RECENCY_DAYS=raw).SEARCH_RECENCY_DAYS == expected

    def test_blank_token_is_missing(self):
        assert ProxySettings(THENEWSAPI_TOKEN="  ").THENEWSAPI_TOKEN is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("SEARCH_RECENCY_DAYS", "5")
        settings = ProxySettings()
        assert settings.PORT == 8080
        assert settings.SEARCH_RECENCY_DAYS == 5


class TestRoutes:
    def test_health(self, client):
        response = client.get("/api/health")
        body = response.json()
        assert response.status_code == 200
        assert body["ok"] is True
        assert body["service"] == "news-reader-proxy"
        assert datetime.fromisoformat(body["time"])

    def test_news_success_passes_body_through(self, client, upstream):
        response = client.get("/api/news/all", params={"page": "2", "categories": "science"})

        assert response.status_code == 200
        assert response.json()["data"][0]["uuid"] == "1"
        assert response.headers["cache-control"] == CACHE_CONTROL
        assert upstream.params == {
            "language": "en",
            "limit": "3",
            "page": "2",
            "categories": "science",
            "api_token": "secret-token",
        }
        assert str(upstream.requests[-1].url).startswith(UPSTREAM)

    def test_search_wins_over_categories(self, client, upstream):
        client.get("/api/news/all", params={"search": "ai", "categories": "science"})
        assert upstream.params["search"] == "ai"
        assert "categories" not in upstream.params
        assert "published_after" in upstream.params

    def test_invalid_page_defaults_to_one(self, client, upstream):
        response = client.get("/api/news/all", params={"page": "zero"})
        assert response.status_code == 200
        assert upstream.params["page"] == "1"

    def test_token_is_never_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="news_reader.proxy.routes"):
            client.get("/api/news/all")
        messages = [
            record.getMessage()
            for record in caplog.records
            if record.name == "news_reader.proxy.routes"
        ]
        assert any("categories=tech" in message for message in messages)
        assert not any("secret-token" in message for message in messages)

    def test_missing_token(self, upstream):
        app = create_app(
            _settings(THENEWSAPI_TOKEN=None), transport=httpx.MockTransport(upstream)
        )
        with TestClient(app) as test_client:
            response = test_client.get("/api/news/all")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Server configuration error: missing THENEWSAPI_TOKEN"
        }
        assert upstream.requests == []

    @pytest.mark.parametrize(
        ("upstream_status", "body", "status", "message"),
        [
            (429, {}, 429, "Daily request limit reached. Please try again later."),
            (
                402,
                {"error": {"code": "usage_limit_reached"}},
                429,
                "Daily request limit reached. Please try again later.",
            ),
            (401, {}, 401, "TheNewsApi authentication failed. Check your API token."),
            (403, {}, 403, "TheNewsApi authentication failed. Check your API token."),
            (500, {"error": "x"}, 502, "Upstream error from TheNewsApi."),
        ],
    )
    def test_upstream_errors_are_remapped(self, upstream_status, body, status, message):
        upstream = Upstream(httpx.Response(upstream_status, json=body))
        app = create_app(_settings(), transport=httpx.MockTransport(upstream))
        with TestClient(app) as test_client:
            response = test_client.get("/api/news/all")

        assert response.status_code == status
        assert response.json()["message"] == message

    def test_non_json_error_body_is_returned_as_details(self):
        upstream = Upstream(httpx.Response(500, text="gateway exploded"))
        app = create_app(_settings(), transport=httpx.MockTransport(upstream))
        with TestClient(app) as test_client:
            response = test_client.get("/api/news/all")

        assert response.status_code == 502
        assert response.json()["details"] == "gateway exploded"

    def test_non_json_success_body_becomes_empty_data(self):
        upstream = Upstream(httpx.Response(200, text="plain"))
        app = create_app(_settings(), transport=httpx.MockTransport(upstream))
        with TestClient(app) as test_client:
            response = test_client.get("/api/news/all")

        assert response.status_code == 200
        assert response.json() == {"data": []}

    def test_transport_failure_is_server_error(self, caplog):
        upstream = Upstream(error=httpx.ConnectError("refused"))
        app = create_app(_settings(), transport=httpx.MockTransport(upstream))
        with (
            TestClient(app) as test_client,
            caplog.at_level(logging.ERROR, logger="news_reader.proxy.routes"),
        ):
            response = test_client.get("/api/news/all")

        assert response.status_code == 500
        assert response.json() == {"message": "Server error while fetching news."}
        assert "Unexpected error while fetching news" in caplog.text
