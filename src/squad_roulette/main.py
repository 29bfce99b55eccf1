"""
Main entry point for Squad EU Roulette.

Loads settings, wires the fetcher, controller, audio and window
together, and runs the window loop.
"""

import asyncio
import logging
import sys


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_app() -> None:
    """Build the components and run the window."""
    from squad_roulette.app.controller import RouletteController
    from squad_roulette.audio.engine import AudioEngine
    from squad_roulette.config import get_settings
    from squad_roulette.listing.fetcher import ListingFetcher
    from squad_roulette.listing.worker import FetchWorker
    from squad_roulette.ui.window import RouletteWindow, WindowConfig, copy_to_clipboard

    settings = get_settings()

    fetcher = ListingFetcher(base_url=settings.api_url, timeout=settings.request_timeout)
    controller = RouletteController(
        worker=FetchWorker(fetcher),
        min_players=settings.min_players,
        max_players=settings.max_players,
        clipboard=copy_to_clipboard,
    )

    audio = None
    if settings.audio_enabled:
        audio = AudioEngine(
            sample_rate=settings.sample_rate,
            click_duration_ms=settings.click_duration_ms,
        )

    config = WindowConfig(
        width=settings.window_width,
        height=settings.window_height,
        fps=settings.fps,
    )
    window = RouletteWindow(controller, audio=audio, config=config)
    await window.run()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    from squad_roulette.config import get_settings

    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("Squad EU Roulette starting...")

    try:
        asyncio.run(run_app())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Squad EU Roulette stopped")


if __name__ == "__main__":
    main()
