#!/usr/bin/env python
"""Terminal swipe session against a running Music Swiper gateway."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Dict

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from music_swiper.client import (  # noqa: E402
    AuthGatewayClient,
    NotAuthenticatedError,
    SQLiteStorage,
    SwiperApiClient,
    SwiperApiError,
    TokenCipher,
    TokenStore,
    tokens_from_callback_url,
)
from music_swiper.client.cipher import STORAGE_SECRET_ENV  # noqa: E402
from music_swiper.core.logging import configure_logging  # noqa: E402

SECRET_ENV = STORAGE_SECRET_ENV
DEFAULT_TOKEN_DB = Path.home() / ".music_swiper" / "tokens.db"


def _build_clients(
    api_url: str, token_db: Path
) -> tuple[AuthGatewayClient, TokenStore, SwiperApiClient]:
    storage = SQLiteStorage(str(token_db), cipher=TokenCipher.from_env())
    gateway = AuthGatewayClient(api_url)
    store = TokenStore(storage, gateway)
    return gateway, store, SwiperApiClient(api_url, store)


def _render_card(track: Dict[str, Any]) -> None:
    print(f"\n  {track['name']}")
    print(f"  {track['artist']}  ·  {track.get('album') or 'Unknown album'}")
    if track.get("preview_url"):
        print(f"  preview: {track['preview_url']}")


async def run_swipe(api: SwiperApiClient, limit: int, genres: list[str]) -> int:
    if not genres:
        preferences = await api.get_preferences()
        genres = list(preferences.get("genres") or [])[:5]

    batch = await api.get_recommendations(limit=limit, seed_genres=genres)
    tracks = batch.get("tracks") or []
    if not tracks:
        print("No recommendations returned.")
        return 0

    print("Swipe: [l]ike, [d]islike, [s]kip, [q]uit")
    for track in tracks:
        _render_card(track)
        while True:
            try:
                choice = input("> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye!")
                return 0
            if choice in {"l", "d", "s", "q"}:
                break
        if choice == "q":
            break
        if choice == "l":
            result = await api.like_track(track["id"])
            print(f"  {result['message']}")
        elif choice == "d":
            result = await api.dislike_track(track["id"])
            print(f"  {result['message']}")
    return 0


async def run_playlists(api: SwiperApiClient) -> int:
    data = await api.get_playlists()
    for playlist in data.get("playlists") or []:
        print(f"{playlist['id']}  {playlist['name']} ({playlist['tracks_count']} tracks)")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Swipe through Spotify recommendations.")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("SWIPER_API_URL", "http://localhost:8888"),
    )
    parser.add_argument("--token-db", type=Path, default=DEFAULT_TOKEN_DB)
    parser.add_argument("--log-level", default="WARNING")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("login", help="Print the URL that starts the Spotify login.")
    callback = subparsers.add_parser("callback", help="Store tokens from the callback URL.")
    callback.add_argument("url")
    subparsers.add_parser("logout", help="Forget stored tokens.")
    subparsers.add_parser("playlists", help="List your playlists.")
    swipe = subparsers.add_parser("swipe", help="Swipe through recommendations.")
    swipe.add_argument("--limit", type=int, default=10)
    swipe.add_argument("--genres", default="", help="Comma-separated seed genres.")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    gateway, store, api = _build_clients(args.api_url, args.token_db)

    if args.command == "login":
        print("Open this URL, then pass the final callback URL to 'callback':")
        print(gateway.login_url)
        return 0
    if args.command == "callback":
        tokens = tokens_from_callback_url(args.url)
        if tokens is None:
            print("Callback URL does not carry tokens.", file=sys.stderr)
            return 1
        store.store_tokens(tokens.access_token, tokens.refresh_token, tokens.expires_in)
        print("Logged in.")
        return 0
    if args.command == "logout":
        store.clear_tokens()
        print("Logged out.")
        return 0

    try:
        if args.command == "playlists":
            return asyncio.run(run_playlists(api))
        genres = [genre.strip() for genre in args.genres.split(",") if genre.strip()]
        return asyncio.run(run_swipe(api, args.limit, genres))
    except NotAuthenticatedError:
        print("Not logged in. Run the 'login' command first.", file=sys.stderr)
        return 1
    except SwiperApiError as exc:
        print(f"Gateway error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
