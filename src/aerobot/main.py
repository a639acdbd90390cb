"""
Main entry point for Aerobot Descent.

Builds the game from settings, loads the high score in the background
and runs the pygame window until the player quits.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from aerobot.config.game import GAME_CONFIG
from aerobot.config.settings import Settings, get_settings
from aerobot.core.events import Event, EventBus, EventType
from aerobot.core.state import StateMachine
from aerobot.game.controller import GameController
from aerobot.game.engine import SimulationEngine
from aerobot.graphics.renderer import Renderer
from aerobot.persistence.highscore import HighScoreStore

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure console and optional file logging."""
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        # Truncate on each run for fresh logs
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")

    # Reduce noise from the HTTP client
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


class AerobotApp:
    """Wires the controller, renderer and window together."""

    def __init__(self, settings: Settings):
        from aerobot.simulator.window import GameWindow, WindowConfig

        self.settings = settings
        self.state_machine = StateMachine()
        self.event_bus = EventBus()
        self.store = HighScoreStore(
            local_path=settings.persistence.highscore_path,
            remote_url=settings.persistence.remote_url,
            timeout=settings.persistence.remote_timeout,
        )
        self.controller = GameController(
            engine=SimulationEngine(GAME_CONFIG),
            state_machine=self.state_machine,
            event_bus=self.event_bus,
            store=self.store,
            config=GAME_CONFIG,
        )
        self.renderer = Renderer(GAME_CONFIG)
        self.window = GameWindow(
            controller=self.controller,
            config=WindowConfig(
                width=settings.window.width,
                height=settings.window.height,
                title=settings.window.title,
                fps=settings.window.fps,
                resizable=settings.window.resizable,
            ),
        )

        self.event_bus.subscribe(EventType.TICK, self._on_tick)
        self.event_bus.subscribe(EventType.GAME_OVER, self._on_game_over)

        logger.info("AerobotApp initialized")

    def _on_tick(self, event: Event) -> None:
        """Handle frame tick - update and render."""
        delta_ms = event.data.get("delta", 1 / GAME_CONFIG.fps) * 1000
        width, height = self.window.size

        self.controller.tick(delta_ms, width, height)
        self.renderer.render(self.controller.engine.snapshot(), self.controller.state, self.window.buffer)

    def _on_game_over(self, event: Event) -> None:
        logger.info(
            f"Game over ({event.data.get('cause')}): "
            f"score {event.data.get('score')}, best {event.data.get('high_score')}"
        )

    async def run(self) -> None:
        """Run the game until the window closes."""
        loader = asyncio.create_task(self.controller.load_high_score())
        try:
            await self.window.run()
        finally:
            if not loader.done():
                loader.cancel()
            await asyncio.gather(loader, return_exceptions=True)
            self.controller.close()
            await self.store.close()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    load_dotenv()
    get_settings.cache_clear()
    settings = get_settings()

    setup_logging(settings.debug, settings.log_file)

    logger.info("Aerobot Descent starting...")
    if settings.remote_enabled:
        logger.info(f"Remote high score sync: {settings.persistence.remote_url}")
    else:
        logger.info("Remote high score sync disabled")

    try:
        asyncio.run(AerobotApp(settings).run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Aerobot Descent stopped")


if __name__ == "__main__":
    main()
