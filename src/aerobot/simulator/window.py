"""
Desktop game window using pygame.

Pumps input into the event bus, emits a TICK event every frame, and
presents the frame buffer with a text overlay for the score and the
start/game-over screens.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pygame
from numpy.typing import NDArray

from ..core.events import Event, EventBus, EventType, resize_event, tap_event
from ..core.state import GameState, StateMachine
from ..game.controller import GameController
from ..graphics.renderer import Renderer

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Game window configuration."""
    width: int = 480
    height: int = 800
    title: str = "Aerobot Descent"
    fps: int = 60
    resizable: bool = True

    # Overlay colors
    text_color: tuple[int, int, int] = (255, 255, 255)
    shade_color: tuple[int, int, int, int] = (0, 0, 0, 150)
    record_color: tuple[int, int, int] = (253, 224, 71)


class GameWindow:
    """
    Main game window.

    Controls:
        SPACE/ENTER, mouse click, touch: start, change direction, try again
        ESC/Q: Quit
    """

    def __init__(
        self,
        controller: GameController,
        config: WindowConfig | None = None,
        event_bus: EventBus | None = None,
        state_machine: StateMachine | None = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.controller = controller
        self.event_bus = event_bus or controller.event_bus
        self.state_machine = state_machine or controller.state_machine

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0

        self._width = self.config.width
        self._height = self.config.height
        self.buffer: NDArray[np.uint8] = Renderer.new_buffer(self._width, self._height)

        self._font: pygame.font.Font | None = None
        self._big_font: pygame.font.Font | None = None

        logger.info("GameWindow created")

    @property
    def size(self) -> tuple[int, int]:
        """Current play-area size in pixels."""
        return self._width, self._height

    @property
    def running(self) -> bool:
        return self._running

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.resizable:
            flags |= pygame.RESIZABLE

        self._screen = pygame.display.set_mode((self.config.width, self.config.height), flags)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 28)
        self._big_font = pygame.font.SysFont(None, 56)

        self._sync_size()
        logger.info(f"Pygame initialized: {self._width}x{self._height}")

    def _sync_size(self) -> None:
        """Match the frame buffer to the window surface."""
        if not self._screen:
            return
        width, height = self._screen.get_size()
        if (width, height) == (self._width, self._height) and self.buffer.shape[:2] == (height, width):
            return
        self._width, self._height = width, height
        self.buffer = Renderer.new_buffer(width, height)
        self.event_bus.emit(resize_event(width, height))

    # ----------------------------
    # Input
    # ----------------------------

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self._running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    self._press("keyboard")

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._press("mouse")

            elif event.type == pygame.FINGERDOWN:
                self._press("touch")

            elif event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
                self._sync_size()

    def _press(self, source: str) -> None:
        """Route a discrete press to the command valid for the current state."""
        state = self.state_machine.state
        size = {"width": self._width, "height": self._height}
        if state is GameState.START:
            self.event_bus.emit(Event(EventType.START, data=size, source=source))
        elif state is GameState.GAME_OVER:
            self.event_bus.emit(Event(EventType.RESTART, data=size, source=source))
        else:
            self.event_bus.emit(tap_event(source))

    # ----------------------------
    # Drawing
    # ----------------------------

    def _render(self) -> None:
        """Blit the frame buffer and draw the overlay."""
        if not self._screen or self.buffer.size == 0:
            return

        pygame.surfarray.blit_array(self._screen, self.buffer.swapaxes(0, 1))

        state = self.state_machine.state
        if state is GameState.PLAYING:
            self._draw_hud()
        elif state is GameState.START:
            self._draw_panel([
                (self._big_font, "AEROBOT", self.config.text_color),
                (self._font, "Descend into the infinite abyss.", self.config.text_color),
                (self._font, "Tap to change direction", self.config.text_color),
                (self._font, self._best_line(), self.config.text_color),
            ])
        elif state is GameState.GAME_OVER:
            lines = [
                (self._big_font, "GAME OVER", self.config.text_color),
                (self._font, f"DEPTH {self.controller.score}m", self.config.text_color),
                (self._font, f"BEST {self.controller.high_score}m", self.config.text_color),
                (self._font, "Tap to try again", self.config.text_color),
            ]
            if self.controller.run_set_record:
                lines.insert(1, (self._font, "NEW RECORD!", self.config.record_color))
            self._draw_panel(lines)

        pygame.display.flip()

    def _best_line(self) -> str:
        if self.controller.loading_high_score:
            return "SYNCING GLOBAL HIGHSCORE..."
        return f"BEST: {self.controller.high_score}m"

    def _draw_hud(self) -> None:
        if not self._font or not self._big_font:
            return
        record = self.controller.is_new_record
        color = self.config.record_color if record else self.config.text_color
        score = self._big_font.render(f"{self.controller.score}m", True, color)
        sub = self._font.render(
            "NEW RECORD!" if record else f"BEST: {self.controller.high_score}m", True, color
        )
        self._screen.blit(score, (20, 16))
        self._screen.blit(sub, (22, 16 + score.get_height()))

    def _draw_panel(self, lines: list) -> None:
        if not self._screen:
            return
        shade = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        shade.fill(self.config.shade_color)
        self._screen.blit(shade, (0, 0))

        rendered = [font.render(text, True, color) for font, text, color in lines if font]
        total = sum(s.get_height() + 12 for s in rendered)
        y = (self._height - total) // 2
        for surface in rendered:
            self._screen.blit(surface, ((self._width - surface.get_width()) // 2, y))
            y += surface.get_height() + 12

    # ----------------------------
    # Main loop
    # ----------------------------

    async def run(self) -> None:
        """Main game loop. Cancelling the task stops the loop cleanly."""
        self._init_pygame()
        self._running = True

        logger.info("Game window started")

        try:
            while self._running:
                self._handle_events()

                if self._clock:
                    delta = self._clock.get_time() / 1000.0
                    self.event_bus.emit(Event(
                        EventType.TICK,
                        data={"delta": delta, "frame": self._frame_count}
                    ))

                self._render()

                if self._clock:
                    self._clock.tick(self.config.fps)

                self._frame_count += 1

                # Yield to other tasks (high score sync)
                await asyncio.sleep(0)
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        self._running = False
        pygame.quit()
        logger.info("Game window stopped")

    def stop(self) -> None:
        """Stop the game loop after the current frame."""
        self._running = False
