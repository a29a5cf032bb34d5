from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from support.settings_factory import make_settings

from desk_api_client.adapters.desk.auth import ApiTokenAuth, OAuth1Auth, auth_from_settings


def _captured_request(auth: httpx.Auth, request: httpx.Request) -> httpx.Request:
    flow = auth.sync_auth_flow(request)
    return next(flow)


def _oauth() -> OAuth1Auth:
    return OAuth1Auth(
        consumer_key="consumer-key",
        consumer_secret="consumer-secret",
        access_token="access-token",
        access_token_secret="access-token-secret",
    )


def test_api_token_auth_adds_authorization_header() -> None:
    request = httpx.Request("GET", "https://acme.desk.example/api/v2/users")
    signed = _captured_request(ApiTokenAuth("api-token"), request)
    assert signed.headers["Authorization"] == "Bearer api-token"


def test_api_token_auth_rejects_empty_token() -> None:
    with pytest.raises(ValueError):
        ApiTokenAuth("")


def test_oauth_auth_adds_signed_authorization_header() -> None:
    request = httpx.Request("GET", "https://acme.desk.example/api/v2/cases?page=2")
    signed = _captured_request(_oauth(), request)

    header = signed.headers["Authorization"]
    assert header.startswith("OAuth ")
    assert 'oauth_consumer_key="consumer-key"' in header
    assert 'oauth_token="access-token"' in header
    assert 'oauth_signature_method="HMAC-SHA1"' in header
    assert "oauth_signature=" in header


def test_oauth_auth_signs_json_bodies_without_including_them() -> None:
    request = httpx.Request(
        "POST", "https://acme.desk.example/api/v2/labels", json={"name": "vip"}
    )
    signed = _captured_request(_oauth(), request)

    assert signed.headers["Authorization"].startswith("OAuth ")
    assert b'"vip"' in signed.content


def test_oauth_sign_url_appends_query_signature() -> None:
    signed_url = _oauth().sign_url("https://acme.desk.example/api/v2/attachments/1")

    query = parse_qs(urlsplit(signed_url).query)
    assert query["oauth_consumer_key"] == ["consumer-key"]
    assert query["oauth_token"] == ["access-token"]
    assert "oauth_signature" in query


def test_auth_from_settings_selects_scheme() -> None:
    assert isinstance(auth_from_settings(make_settings()), ApiTokenAuth)
    assert isinstance(auth_from_settings(make_settings(oauth=True)), OAuth1Auth)


def test_auth_from_settings_rejects_missing_token_without_validation() -> None:
    settings = make_settings()
    broken = settings.model_copy(
        update={"desk": settings.desk.model_copy(update={"api_token": None})}
    )

    with pytest.raises(ValueError, match="api_token"):
        auth_from_settings(broken)


def test_auth_from_settings_rejects_incomplete_oauth_without_validation() -> None:
    settings = make_settings(oauth=True)
    broken = settings.model_copy(
        update={"desk": settings.desk.model_copy(update={"access_token_secret": None})}
    )

    with pytest.raises(ValueError, match="OAuth credentials"):
        auth_from_settings(broken)
