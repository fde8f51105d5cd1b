"""
Sample Emitters

Sources of world-space (x, z) samples for the baker. Anything with a
get_samples() method returning an (N, 2) array works; emitters that also
define update(dt) are advanced by the baker once per tick before sampling.

ActivityEmitter models a particle system trailing a moving source: one
particle every emit_interval seconds at the source position, each living for
`lifetime` seconds, optionally drifting in a random direction.
"""

import numpy as np


def _empty():
    return np.zeros((0, 2), dtype=np.float64)


class ActivityEmitter:
    """Particle emitter that follows a moving source position."""

    def __init__(self, position=(0.0, 0.0), emit_interval=0.2, lifetime=5.0,
                 max_particles=1000, drift_speed=0.0, seed=None):
        """Initialize emitter.

        Args:
            position: Starting source position (x, z) in world units
            emit_interval: Seconds between emitted particles
            lifetime: Seconds a particle stays alive
            max_particles: Cap on live particles; emission pauses when full
            drift_speed: World units per second each particle drifts
            seed: RNG seed for drift directions (deterministic runs)
        """
        self.position = (float(position[0]), float(position[1]))
        self.emit_interval = emit_interval
        self.lifetime = lifetime
        self.max_particles = max_particles
        self.drift_speed = drift_speed
        self.rng = np.random.default_rng(seed)
        self.timer = 0.0
        self.positions = _empty()
        self.velocities = _empty()
        self.ages = np.zeros(0, dtype=np.float64)

    def move_to(self, x, z):
        """Move the source; new particles spawn here."""
        self.position = (float(x), float(z))

    def emit(self, count=1):
        """Spawn count particles at the source position, up to max_particles."""
        room = self.max_particles - len(self.ages)
        count = max(0, min(count, room))
        if count == 0:
            return 0
        spawn = np.tile(np.asarray(self.position, dtype=np.float64), (count, 1))
        if self.drift_speed > 0:
            angles = self.rng.uniform(0.0, 2.0 * np.pi, count)
            vel = np.stack([np.cos(angles), np.sin(angles)], axis=1) * self.drift_speed
        else:
            vel = np.zeros((count, 2), dtype=np.float64)
        self.positions = np.concatenate([self.positions, spawn])
        self.velocities = np.concatenate([self.velocities, vel])
        self.ages = np.concatenate([self.ages, np.zeros(count)])
        return count

    def update(self, dt):
        """Age and move live particles, expire old ones, emit on schedule."""
        if len(self.ages):
            self.ages += dt
            self.positions += self.velocities * dt
            alive = self.ages < self.lifetime
            self.positions = self.positions[alive]
            self.velocities = self.velocities[alive]
            self.ages = self.ages[alive]

        self.timer += dt
        if self.timer >= self.emit_interval:
            self.timer = 0.0
            self.emit(1)

    def get_samples(self):
        """Live particle positions, (N, 2)."""
        return self.positions.copy()

    @property
    def count(self):
        return len(self.ages)

    def clear(self):
        """Kill every live particle and restart the emission timer."""
        self.timer = 0.0
        self.positions = _empty()
        self.velocities = _empty()
        self.ages = np.zeros(0, dtype=np.float64)


class StaticEmitter:
    """Serves the same sample set every tick (tests, replays)."""

    def __init__(self, samples=()):
        self.samples = np.asarray(samples, dtype=np.float64).reshape(-1, 2)

    def get_samples(self):
        return self.samples


class CallableEmitter:
    """Adapts a zero-argument function returning positions."""

    def __init__(self, fn):
        self.fn = fn

    def get_samples(self):
        return self.fn()
