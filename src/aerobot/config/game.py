"""Gameplay tuning constants.

Sizes and speeds ending in ``_pct`` are fractions of the play-area width
or height so the game scales with the window.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

Color = Tuple[int, int, int]


def _default_palette() -> Dict[str, Color]:
    return {
        "bg_sand": (230, 194, 136),
        "bg_sand_dark": (220, 177, 112),
        "wall": (93, 64, 55),
        "wall_pattern": (78, 52, 46),
        "player": (96, 125, 139),
        "player_accent": (0, 188, 212),
        "player_visor": (34, 34, 34),
        "antenna": (85, 85, 85),
        "antenna_tip": (255, 0, 0),
        "obstacle": (121, 85, 72),
        "obstacle_highlight": (141, 110, 99),
        "coin": (255, 193, 7),
        "powerup": (0, 188, 212),
    }


@dataclass(frozen=True)
class GameConfig:
    """Static gameplay configuration."""

    fps: int = 60
    max_delta_ms: float = 50.0

    # Score
    score_rate: float = 10.0  # points per second
    coin_bonus: int = 100
    powerup_bonus: int = 300

    # Scrolling
    scroll_speed_pct: float = 0.4  # of height, px/s
    scroll_acceleration: float = 5.0  # px/s^2

    # Player
    player_speed_pct: float = 0.6  # of width, px/s
    player_radius_pct: float = 0.03  # of width
    player_y_pct: float = 0.3  # of height
    tilt_degrees: float = 15.0
    tilt_response: float = 10.0  # 1/s

    # Walls
    wall_width_pct: float = 0.05  # of width, per wall
    wall_texture_period: float = 100.0
    spike_height: int = 40

    # Spawning (milliseconds)
    obstacle_spawn_ms: float = 1500.0
    obstacle_spawn_min_ms: float = 500.0
    obstacle_spawn_speed_factor: float = 0.5
    item_spawn_ms: float = 2000.0

    # Entities
    obstacle_size_pct: float = 0.08  # of width
    item_size_pct: float = 0.05  # of width
    spawn_offset: float = 50.0  # px below the bottom edge
    despawn_margin: float = 50.0  # px above the top edge
    entity_spin: float = 2.0  # rad/s

    # Particles
    wall_burst: int = 20
    obstacle_burst: int = 15
    pickup_burst: int = 10
    particle_speed: float = 100.0

    palette: Dict[str, Color] = field(default_factory=_default_palette)

    def wall_width(self, width: float) -> float:
        """Width of a single side wall for the given play-area width."""
        return width * self.wall_width_pct


GAME_CONFIG = GameConfig()
