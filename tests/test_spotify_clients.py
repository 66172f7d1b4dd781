try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest

from music_swiper.clients import (
    OAuthTokenExchangeError,
    SpotifyApiError,
    SpotifyOAuthClient,
    SpotifyWebClient,
)
from music_swiper.core.config import OAuthSettings, SpotifySettings


def _spotify_settings() -> SpotifySettings:
    return SpotifySettings(
        SPOTIFY_CLIENT_ID="client-id",
        SPOTIFY_CLIENT_SECRET="client-secret",
        SPOTIFY_REDIRECT_URI="http://localhost:8888/api/auth/callback",
        SPOTIFY_ACCOUNTS_URL="https://accounts.test",
        SPOTIFY_API_URL="https://api.test/v1/",
    )


def _oauth_client(handler) -> SpotifyOAuthClient:
    return SpotifyOAuthClient(
        _spotify_settings(), OAuthSettings(), transport=httpx.MockTransport(handler)
    )


def _web_client(handler) -> SpotifyWebClient:
    return SpotifyWebClient(_spotify_settings(), transport=httpx.MockTransport(handler))


def test_authorization_url_contains_scopes_and_state():
    client = SpotifyOAuthClient(_spotify_settings(), OAuthSettings())

    url = httpx.URL(client.build_authorization_url(state="nonce"))

    assert str(url).startswith("https://accounts.test/authorize?")
    assert url.params["state"] == "nonce"
    assert url.params["scope"].split(" ")[0] == "user-read-private"
    assert len(url.params["scope"].split(" ")) == 10


def test_scopes_can_be_configured_as_comma_separated_string(monkeypatch):
    monkeypatch.setenv("OAUTH_SCOPES", "streaming, user-read-email,")

    assert OAuthSettings().scopes == ("streaming", "user-read-email")


@pytest.mark.anyio
async def test_code_exchange_posts_form_with_basic_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(
            200,
            json={
                "access_token": "at",
                "refresh_token": "rt",
                "expires_in": 3600,
                "token_type": "Bearer",
            },
        )

    result = await _oauth_client(handler).exchange_authorization_code("the-code")

    assert result == ("at", "rt", 3600)
    assert seen["url"] == "https://accounts.test/api/token"
    expected = base64.b64encode(b"client-id:client-secret").decode()
    assert seen["auth"] == f"Basic {expected}"
    assert seen["form"] == {
        "grant_type": ["authorization_code"],
        "code": ["the-code"],
        "redirect_uri": ["http://localhost:8888/api/auth/callback"],
    }


@pytest.mark.anyio
async def test_refresh_ignores_rotated_refresh_token():
    def handler(request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["old-rt"]
        return httpx.Response(
            200, json={"access_token": "new-at", "expires_in": 3600, "refresh_token": "rotated"}
        )

    assert await _oauth_client(handler).refresh_token("old-rt") == ("new-at", 3600)


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(400, json={"error": "invalid_grant"}),
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json={"access_token": "only-access"}),
    ],
)
async def test_code_exchange_failures_raise(response):
    client = _oauth_client(lambda request: response)

    with pytest.raises(OAuthTokenExchangeError):
        await client.exchange_authorization_code("code")


@pytest.mark.anyio
async def test_unreachable_token_endpoint_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(OAuthTokenExchangeError):
        await _oauth_client(handler).refresh_token("rt")


@pytest.mark.anyio
async def test_session_sends_its_own_bearer_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.headers["authorization"], str(request.url)))
        return httpx.Response(200, json={"id": "user"})

    client = _web_client(handler)
    await client.session("token-a").get_current_user()
    await client.session("token-b").get_current_user()

    assert seen == [
        ("Bearer token-a", "https://api.test/v1/me"),
        ("Bearer token-b", "https://api.test/v1/me"),
    ]


@pytest.mark.anyio
async def test_recommendations_join_seeds_and_skip_empty_groups():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(200, json={"tracks": []})

    await _web_client(handler).session("t").get_recommendations(
        limit=5, seed_genres=["pop", "indie"], seed_artists=[], seed_tracks=["x"]
    )

    assert seen == {"limit": "5", "seed_genres": "pop,indie", "seed_tracks": "x"}


@pytest.mark.anyio
async def test_add_tracks_posts_uris():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"snapshot_id": "s"})

    await _web_client(handler).session("t").add_tracks_to_playlist(
        "pl1", ["spotify:track:abc"]
    )

    assert seen == {
        "method": "POST",
        "path": "/v1/playlists/pl1/tracks",
        "body": {"uris": ["spotify:track:abc"]},
    }


@pytest.mark.anyio
async def test_create_playlist_posts_to_current_user():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "new"})

    created = await _web_client(handler).session("t").create_playlist("Mix")

    assert created == {"id": "new"}
    assert seen == {
        "path": "/v1/me/playlists",
        "body": {"name": "Mix", "description": "", "public": False},
    }


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response, status_code",
    [
        (httpx.Response(401, json={"error": {"status": 401}}), 401),
        (httpx.Response(429, text="slow down"), 429),
        (httpx.Response(200, text="not json"), 200),
        (httpx.Response(200, json=["a", "list"]), 200),
    ],
)
async def test_web_api_failures_raise_spotify_api_error(response, status_code):
    client = _web_client(lambda request: response)

    with pytest.raises(SpotifyApiError) as excinfo:
        await client.session("t").get_user_playlists()

    assert excinfo.value.status_code == status_code


@pytest.mark.anyio
async def test_empty_success_body_is_empty_mapping():
    client = _web_client(lambda request: httpx.Response(204))

    assert await client.session("t").get_playlist("p") == {}
