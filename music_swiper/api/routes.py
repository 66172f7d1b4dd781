"""
FastAPI routes for the Music Swiper gateway.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, Dict
from urllib.parse import urlencode

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import RedirectResponse

from music_swiper.clients import OAuthTokenExchangeError, SpotifyApiError, generate_state_nonce
from music_swiper.core.errors import ApiError
from music_swiper.dependencies import (
    get_app_settings,
    get_playlist_service,
    get_preference_service,
    get_spotify_oauth_client,
    get_spotify_session,
    get_track_service,
)
from music_swiper.schemas import (
    ActionResult,
    CreatedPlaylist,
    PlaylistCreateRequest,
    PlaylistDetail,
    PlaylistList,
    RefreshTokenResponse,
    TrackActionRequest,
    TrackList,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _split_seeds(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [seed.strip() for seed in raw.split(",") if seed.strip()]


def _missing_parameter(name: str) -> ApiError:
    return ApiError(
        HTTPStatus.BAD_REQUEST,
        "Bad Request",
        f"Missing required parameter: {name}",
    )


def _upstream_failure(action: str) -> ApiError:
    return ApiError(HTTPStatus.INTERNAL_SERVER_ERROR, f"Failed to {action}")


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/auth/login")
async def login(
    oauth_client: Annotated[Any, Depends(get_spotify_oauth_client)],
    settings: Annotated[Any, Depends(get_app_settings)],
) -> RedirectResponse:
    """Start the OAuth flow: remember a fresh state nonce and send the user to Spotify."""
    state = generate_state_nonce(settings.oauth.state_length)
    authorization_url = oauth_client.build_authorization_url(state=state)

    response = RedirectResponse(url=authorization_url, status_code=HTTPStatus.FOUND)
    response.set_cookie(settings.oauth.state_cookie_name, state, samesite="lax")
    logger.info("Redirecting to Spotify authorization")
    return response


@router.get("/auth/callback")
async def oauth_callback(
    request: Request,
    oauth_client: Annotated[Any, Depends(get_spotify_oauth_client)],
    settings: Annotated[Any, Depends(get_app_settings)],
    code: str | None = Query(default=None, description="Authorization code from Spotify."),
    state: str | None = Query(default=None, description="State nonce echoed by Spotify."),
) -> RedirectResponse:
    """
    Complete the OAuth exchange and hand the tokens to the front-end.

    The tokens travel as query parameters of the front-end redirect, so they
    can end up in browser history and access logs.
    """
    frontend = settings.frontend_uri
    cookie_name = settings.oauth.state_cookie_name
    stored_state = request.cookies.get(cookie_name)

    if state is None or stored_state is None or state != stored_state:
        # A mismatched callback leaves the state cookie untouched; every other outcome clears it.
        logger.warning("OAuth callback rejected: state mismatch")
        return RedirectResponse(
            url=f"{frontend}/error?{urlencode({'message': 'state_mismatch'})}",
            status_code=HTTPStatus.FOUND,
        )

    try:
        if not code:
            raise OAuthTokenExchangeError("Callback did not include an authorization code.")
        (
            access_token,
            refresh_token,
            expires_in,
        ) = await oauth_client.exchange_authorization_code(code)
    except OAuthTokenExchangeError:
        logger.exception("Authorization code exchange failed")
        response = RedirectResponse(
            url=f"{frontend}/error?{urlencode({'message': 'invalid_token'})}",
            status_code=HTTPStatus.FOUND,
        )
    else:
        query = urlencode(
            {
                "access_token": access_token,
                "refresh_token": refresh_token,
                "expires_in": expires_in,
            }
        )
        response = RedirectResponse(
            url=f"{frontend}/callback?{query}", status_code=HTTPStatus.FOUND
        )

    response.delete_cookie(cookie_name, samesite="lax")
    return response


@router.get("/auth/refresh_token", response_model=RefreshTokenResponse)
async def refresh_access_token(
    oauth_client: Annotated[Any, Depends(get_spotify_oauth_client)],
    refresh_token: str | None = Query(default=None),
) -> RefreshTokenResponse:
    """Trade a refresh token for a new access token."""
    if not refresh_token:
        raise ApiError(HTTPStatus.BAD_REQUEST, "Refresh token is required")

    try:
        access_token, expires_in = await oauth_client.refresh_token(refresh_token)
    except OAuthTokenExchangeError as exc:
        logger.exception("Error refreshing token")
        raise _upstream_failure("refresh token") from exc

    return RefreshTokenResponse(access_token=access_token, expires_in=expires_in)


@router.get("/tracks/recommendations", response_model=TrackList)
async def get_recommendations(
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_track_service)],
    limit: int = Query(default=10, ge=1, le=100),
    seed_genres: str | None = Query(default=None, description="Comma-separated genres."),
    seed_artists: str | None = Query(default=None, description="Comma-separated artist ids."),
    seed_tracks: str | None = Query(default=None, description="Comma-separated track ids."),
) -> TrackList:
    try:
        return await service.recommendations(
            session,
            limit=limit,
            seed_genres=_split_seeds(seed_genres),
            seed_artists=_split_seeds(seed_artists),
            seed_tracks=_split_seeds(seed_tracks),
        )
    except SpotifyApiError as exc:
        logger.exception("Error getting recommendations")
        raise _upstream_failure("get recommendations") from exc


@router.post("/tracks/like", response_model=ActionResult)
async def like_track(
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_track_service)],
    payload: TrackActionRequest | None = None,
) -> ActionResult:
    """Add the swiped track to the liked-tracks playlist."""
    track_id = payload.track_id if payload else None
    if not track_id:
        raise _missing_parameter("track_id")

    try:
        await service.like(session, track_id)
    except SpotifyApiError as exc:
        logger.exception("Error liking track")
        raise _upstream_failure("like track") from exc

    return ActionResult(success=True, message="Track added to playlist")


@router.post("/tracks/dislike", response_model=ActionResult)
async def dislike_track(payload: TrackActionRequest | None = None) -> ActionResult:
    """Acknowledge a left swipe. Nothing is recorded or sent upstream."""
    if not payload or not payload.track_id:
        raise _missing_parameter("track_id")
    return ActionResult(success=True, message="Track marked as disliked")


@router.get("/playlists", response_model=PlaylistList)
async def list_playlists(
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_playlist_service)],
) -> PlaylistList:
    try:
        return await service.list_playlists(session)
    except SpotifyApiError as exc:
        logger.exception("Error getting playlists")
        raise _upstream_failure("get playlists") from exc


@router.get("/playlists/{playlist_id}", response_model=PlaylistDetail)
async def get_playlist(
    playlist_id: str,
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_playlist_service)],
) -> PlaylistDetail:
    try:
        return await service.get_playlist(session, playlist_id)
    except SpotifyApiError as exc:
        logger.exception("Error getting playlist %s", playlist_id)
        raise _upstream_failure("get playlist") from exc


@router.post("/playlists", response_model=CreatedPlaylist)
async def create_playlist(
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_playlist_service)],
    payload: PlaylistCreateRequest | None = None,
) -> CreatedPlaylist:
    if not payload or not payload.name:
        raise _missing_parameter("name")

    try:
        return await service.create_playlist(
            session,
            name=payload.name,
            description=payload.description,
            public=payload.public,
        )
    except SpotifyApiError as exc:
        logger.exception("Error creating playlist")
        raise _upstream_failure("create playlist") from exc


@router.get("/preferences")
async def get_preferences(
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_preference_service)],
) -> Dict[str, Any]:
    """Return the caller's preferences, or the defaults when none were saved."""
    try:
        return await service.get_preferences(session)
    except SpotifyApiError as exc:
        logger.exception("Error getting preferences")
        raise _upstream_failure("get preferences") from exc


@router.post("/preferences", response_model=ActionResult)
async def update_preferences(
    session: Annotated[Any, Depends(get_spotify_session)],
    service: Annotated[Any, Depends(get_preference_service)],
    changes: Dict[str, Any] | None = Body(default=None),
) -> ActionResult:
    try:
        await service.update_preferences(session, changes or {})
    except SpotifyApiError as exc:
        logger.exception("Error updating preferences")
        raise _upstream_failure("update preferences") from exc

    return ActionResult(success=True, message="Preferences updated successfully")


__all__ = ["router"]
