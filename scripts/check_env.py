"""Verify that the gateway's environment configuration is complete and unchanged.

Commands:

``check``
    Load ``AppSettings`` from the given ``.env`` file and report missing or
    malformed Spotify credentials before the gateway starts redirecting users
    to a broken consent screen.
``record`` / ``verify``
    Additionally store, or compare against, a SHA256 checksum of the file so
    unexpected edits are noticed.
``show``
    Print the effective non-secret settings (redirect URI, front-end origin,
    base path, scopes).

Example usages::

    python -m scripts.check_env record --env-file /srv/music-swiper/.env \
        --hash-file /srv/music-swiper/.env.sha256

    python -m scripts.check_env verify --env-file /srv/music-swiper/.env \
        --hash-file /srv/music-swiper/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from music_swiper.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5


def _compute_hash(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Nested Spotify/OAuth settings read ``os.environ``, so the file is loaded into it first."""
    _load_env_file(str(env_file))
    return AppSettings(_env_file=env_file)  # type: ignore[call-arg]


def _describe_errors(exc: ValidationError) -> list[str]:
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "settings"
        lines.append(f"  - {location}: {error.get('msg')}")
    return lines


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(
            f"Expected checksum file {hash_file} is missing. "
            "Run the 'record' command first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected == actual:
        print("Environment checksum OK.")
        return EXIT_OK

    print(
        "Environment checksum mismatch!\n"
        f"  expected: {expected}\n"
        f"  actual:   {actual}",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _show_settings(settings: AppSettings) -> int:
    print(f"environment:   {settings.environment}")
    print(f"listen:        {settings.host}:{settings.port}")
    print(f"base path:     {settings.api_base_path or '/'}")
    print(f"frontend:      {settings.frontend_uri}")
    print(f"redirect uri:  {settings.spotify.redirect_uri}")
    print(f"client id:     {settings.spotify.client_id}")
    print(f"scopes:        {' '.join(settings.oauth.scopes)}")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate gateway settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_env_file(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env).",
        )

    for name, help_text in (
        ("record", "Validate settings and store the checksum baseline."),
        ("verify", "Validate settings and compare with the checksum baseline."),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        add_env_file(subparser)
        subparser.add_argument("--hash-file", required=True, type=Path)

    add_env_file(subparsers.add_parser("check", help="Validate settings only."))
    add_env_file(subparsers.add_parser("show", help="Print effective settings."))
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(f"Environment file {env_file} does not exist.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        settings = _load_settings(env_file)
    except ValidationError as exc:
        print("Settings validation failed:", file=sys.stderr)
        print("\n".join(_describe_errors(exc)), file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    handlers: dict[str, Callable[[], int]] = {
        "record": lambda: _record_checksum(env_file, args.hash_file),
        "verify": lambda: _verify_checksum(env_file, args.hash_file),
        "check": lambda: EXIT_OK,
        "show": lambda: _show_settings(settings),
    }
    return handlers[args.command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
