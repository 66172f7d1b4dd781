"""Run the gateway with uvicorn: ``python -m music_swiper``."""

import uvicorn

from music_swiper.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "music_swiper.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    main()
