"""
Smoothed emitter source position.

The viewer glides the emitter toward the cursor instead of teleporting it,
so the particle trail reads like someone walking across the floor.
"""

import math

import numpy as np


class SmoothedPosition:
    """Frame-rate independent EMA of a world (x, z) position.

    Each update moves the position a fraction 1 - exp(-dt / tau) of the way
    to the target; tau is the time to cover ~63% of the remaining gap.
    """

    def __init__(self, position, time_constant=0.4):
        self.current = np.array(position, dtype=np.float64)
        self.target = self.current.copy()
        self.tau = time_constant

    def set_target(self, x, z):
        self.target[:] = (x, z)

    def update(self, dt):
        if dt <= 0:
            return
        self.current += (1.0 - math.exp(-dt / self.tau)) * (self.target - self.current)

    def get_value(self):
        return float(self.current[0]), float(self.current[1])

    def snap(self, x, z):
        """Jump straight to (x, z)."""
        self.current[:] = (x, z)
        self.target[:] = (x, z)
