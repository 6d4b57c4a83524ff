"""Tests for the request-shaping middleware stages."""

from __future__ import annotations

from pathlib import Path

from asset_server.services.override_registry import register

REDIRECT_BASE = "https://static.example.org"


def test_noscript_request_is_redirected(make_client) -> None:
    client = make_client(noscript_redirect_base=REDIRECT_BASE)

    response = client.get("/foo?nojs=1", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == f"{REDIRECT_BASE}/foo"


def test_noscript_marker_without_value_is_redirected(make_client) -> None:
    client = make_client(noscript_redirect_base=REDIRECT_BASE)

    response = client.get("/threads/7?nojs", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == f"{REDIRECT_BASE}/threads/7"


def test_noscript_redirect_happens_before_resolution(make_client) -> None:
    client = make_client(noscript_redirect_base=REDIRECT_BASE)

    response = client.get("/style.css?nojs=1", follow_redirects=False)

    assert response.status_code == 303


def test_requests_without_marker_pass_through(make_client) -> None:
    client = make_client(noscript_redirect_base=REDIRECT_BASE)

    response = client.get("/foo?page=2", follow_redirects=False)

    assert response.status_code == 200
    assert "SPA shell" in response.text


def test_marker_ignored_when_redirect_not_configured(make_client) -> None:
    response = make_client().get("/foo?nojs=1", follow_redirects=False)

    assert response.status_code == 200


def test_cors_header_on_every_response(make_client, tmp_path: Path) -> None:
    logo = tmp_path / "logo.svg"
    logo.write_text("<svg/>")
    client = make_client(
        cors_origin="https://app.example.org",
        noscript_redirect_base=REDIRECT_BASE,
        override_rules=tuple(register([str(logo)])),
        rate_limit_requests=1,
    )

    responses = [
        client.get("/"),
        client.get("/style.css"),
        client.get("/robots.txt"),
        client.get("/logo.svg"),
        client.get("/logo.svg"),
        client.get("/x?nojs", follow_redirects=False),
    ]

    assert [r.status_code for r in responses] == [200, 200, 200, 200, 429, 303]
    for response in responses:
        assert response.headers["Access-Control-Allow-Origin"] == "https://app.example.org"


def test_no_cors_header_when_not_configured(make_client) -> None:
    response = make_client().get("/")

    assert "Access-Control-Allow-Origin" not in response.headers


def test_preserves_incoming_request_id_header(make_client) -> None:
    incoming_id = "test-request-id-123"
    response = make_client().get("/", headers={"X-Request-ID": incoming_id})

    assert response.status_code == 200
    assert response.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(make_client) -> None:
    response = make_client().get("/robots.txt")

    assert response.headers.get("X-Request-ID")
    assert response.headers.get("X-Request-Duration-ms") is not None
