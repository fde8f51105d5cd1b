"""
Grid Field

Dense scalar buffer over a rectangle of the horizontal world plane. Owns the
world<->grid mapping and the two mutations the baker needs: a per-tick
multiplicative decay and additive accumulation with silent edge clipping.
"""

import math
import numpy as np


class GridField:
    """Non-negative intensity grid of shape (height, width), indexed [y, x]."""

    def __init__(self, width, height, world_min, world_max, decay=0.99):
        self.width = width
        self.height = height
        self.world_min = np.asarray(world_min, dtype=np.float64)
        self.world_max = np.asarray(world_max, dtype=np.float64)
        self.decay_factor = decay
        self.values = np.zeros((height, width), dtype=np.float64)
        self._cell_span = np.array([width - 1, height - 1], dtype=np.float64)
        self._world_span = self.world_max - self.world_min

    @classmethod
    def from_config(cls, config):
        return cls(config.width, config.height,
                   config.world_min, config.world_max, decay=config.decay)

    @property
    def shape(self):
        return self.values.shape

    def decay(self):
        """Multiply every cell by the decay factor, in place."""
        self.values *= self.decay_factor

    def in_bounds(self, cell_x, cell_y):
        return 0 <= cell_x < self.width and 0 <= cell_y < self.height

    def accumulate(self, cell_x, cell_y, amount):
        """Add amount to one cell. Out-of-bounds cells are ignored."""
        if not (amount >= 0 and math.isfinite(amount)):
            raise ValueError(f"amount must be finite and >= 0, got {amount}")
        if self.in_bounds(cell_x, cell_y):
            self.values[cell_y, cell_x] += amount

    def accumulate_block(self, x0, y0, patch, check=True):
        """Add a 2D patch whose top-left corner sits at cell (x0, y0).

        The patch is clipped against the grid; any part hanging over an edge
        is dropped. Returns True if at least one cell was touched. Like
        accumulate(), negative or non-finite amounts raise ValueError; pass
        check=False when the same patch was already checked for a batch.
        """
        if check and patch.size and not (
                np.isfinite(patch).all() and patch.min() >= 0):
            raise ValueError("patch amounts must be finite and >= 0")
        ph, pw = patch.shape
        x_lo, y_lo = max(x0, 0), max(y0, 0)
        x_hi, y_hi = min(x0 + pw, self.width), min(y0 + ph, self.height)
        if x_lo >= x_hi or y_lo >= y_hi:
            return False
        self.values[y_lo:y_hi, x_lo:x_hi] += patch[
            y_lo - y0:y_hi - y0, x_lo - x0:x_hi - x0]
        return True

    def world_to_cell(self, position):
        """Map world (x, z) to fractional (cell_x, cell_y).

        world_min lands on cell 0 and world_max on the last cell. The result
        is not clamped: positions outside the rectangle give out-of-range
        coordinates. Accepts a single position or an (N, 2) array.
        """
        p = np.asarray(position, dtype=np.float64)
        return (p - self.world_min) / self._world_span * self._cell_span

    def cell_to_world(self, cell):
        """Inverse of world_to_cell."""
        c = np.asarray(cell, dtype=np.float64)
        span = np.where(self._cell_span > 0, self._cell_span, 1.0)
        return self.world_min + c / span * self._world_span

    def clear(self):
        """Zero the whole field."""
        self.values[:] = 0

    @property
    def stats(self):
        """Return current field statistics."""
        return {
            "mass": float(self.values.sum()),
            "mean": float(self.values.mean()),
            "max": float(self.values.max()),
            "hot_pct": float((self.values > 0.01).sum()) / self.values.size * 100,
        }
