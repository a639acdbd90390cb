"""Particle bursts for collision effects."""

import random
from typing import List, Tuple

from aerobot.game.entities import Particle


def create_burst(
    rng: random.Random,
    x: float,
    y: float,
    color: Tuple[int, int, int],
    count: int,
    speed: float = 100.0,
) -> List[Particle]:
    """Create a burst of particles around a point.

    Args:
        rng: Random source
        x: Burst centre x
        y: Burst centre y
        color: RGB color for every particle in the burst
        count: Number of particles
        speed: Maximum absolute velocity per axis in px/s

    Returns:
        New particles, each starting with one second of life
    """
    particles = []
    for _ in range(count):
        particles.append(Particle(
            x=x,
            y=y,
            vx=rng.uniform(-speed, speed),
            vy=rng.uniform(-speed, speed),
            life=1.0,
            max_life=0.5 + rng.random() * 0.5,
            color=color,
            size=rng.random() * 3 + 1,
        ))
    return particles


def advance_particles(particles: List[Particle], dt: float) -> List[Particle]:
    """Integrate and age particles, returning the survivors."""
    for p in particles:
        p.x += p.vx * dt
        p.y += p.vy * dt
        p.life -= dt
    return [p for p in particles if not p.is_dead]
