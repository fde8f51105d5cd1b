"""
Kernel Splatter

Distributes each sample's contribution over the square neighborhood of its
nearest cell with a truncated Gaussian:

    weight(d) = exp(-d^2 / (2 sigma^2))   for d <= R
    weight(d) = 0                          for d > R

The weight patch is built once per kernel; a splat is a single clipped
patch add into the field, O(R^2) per sample.
"""

import logging
import math
import numbers
from collections import namedtuple

import numpy as np

from .config import ConfigError

logger = logging.getLogger(__name__)


SplatReport = namedtuple("SplatReport", ["accepted", "rejected", "culled", "dropped"])
SplatReport.__doc__ = """Per-batch ingestion counts.

accepted: samples splatted into the field
rejected: samples with NaN/inf components
culled:   finite samples whose neighborhood cannot reach the grid
dropped:  samples beyond max_samples for this batch
"""


def check_dt(dt):
    """Reject a time step that would write negative or NaN intensity."""
    if not (dt >= 0 and math.isfinite(dt)):
        raise ValueError(f"dt must be finite and >= 0, got {dt}")
    return dt


def as_samples(samples):
    """Coerce a sample payload to an (N, 2) float64 array.

    Raises ValueError for ragged input or positions that are not (x, z).
    """
    if samples is None:
        return np.zeros((0, 2), dtype=np.float64)
    points = np.asarray(samples, dtype=np.float64)
    if points.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(
            f"samples must have shape (N, 2), got {points.shape}")
    return points


class Kernel:
    """Truncated Gaussian splat kernel, sized in grid cells."""

    def __init__(self, radius=100, sigma=2.0, intensity=10.0):
        if isinstance(radius, bool) or not isinstance(radius, numbers.Integral) or radius < 0:
            raise ConfigError(f"radius must be an integer >= 0, got {radius!r}")
        if not (sigma > 0 and math.isfinite(sigma)):
            raise ConfigError(f"sigma must be > 0, got {sigma}")
        if not (intensity >= 0 and math.isfinite(intensity)):
            raise ConfigError(f"intensity must be >= 0, got {intensity}")
        self.radius = radius
        self.sigma = sigma
        self.intensity = intensity
        self.weights = self._build_weights()

    @classmethod
    def from_config(cls, config):
        return cls(radius=config.radius, sigma=config.sigma,
                   intensity=config.intensity)

    def weight(self, distance):
        """Kernel weight at a distance in cells; 0 past the radius."""
        if distance > self.radius:
            return 0.0
        return float(np.exp(-(distance * distance) / (2.0 * self.sigma * self.sigma)))

    def _build_weights(self):
        """(2R+1, 2R+1) weight patch centered on index (R, R)."""
        R = self.radius
        Y, X = np.ogrid[-R:R + 1, -R:R + 1]
        dist_sq = (X * X + Y * Y).astype(np.float64)
        weights = np.exp(-dist_sq / (2.0 * self.sigma * self.sigma))
        # Hard cutoff at R regardless of the Gaussian tail
        weights[np.sqrt(dist_sq) > R] = 0.0
        return weights


class Splatter:
    """Applies a Kernel to a GridField, one sample or a whole batch at a time."""

    def __init__(self, kernel, max_samples=None):
        self.kernel = kernel
        self.max_samples = max_samples

    @classmethod
    def from_config(cls, config):
        return cls(Kernel.from_config(config), max_samples=config.max_samples)

    def center_cell(self, sample, field):
        """Nearest integer cell to the sample, possibly outside the grid."""
        cx, cy = np.rint(field.world_to_cell(sample))
        return int(cx), int(cy)

    def reaches_grid(self, cell, field):
        """True if a kernel centered on cell can touch any in-bounds cell."""
        R = self.kernel.radius
        cx, cy = cell
        return (-R <= cx < field.width + R) and (-R <= cy < field.height + R)

    def apply(self, sample, field, dt):
        """Splat one world-space sample into the field.

        Every cell within radius R of the sample's nearest cell receives
        intensity * weight * dt. Cells outside the grid are silently skipped.
        Returns True if any in-bounds cell was touched. Raises ValueError for
        a negative or non-finite dt.
        """
        check_dt(dt)
        cx, cy = self.center_cell(sample, field)
        R = self.kernel.radius
        patch = self.kernel.intensity * self.kernel.weights * dt
        return field.accumulate_block(cx - R, cy - R, patch)

    def apply_many(self, samples, field, dt):
        """Validate and splat a batch of (x, z) samples.

        Non-finite samples are rejected, samples too far outside the world
        rectangle to reach any cell are culled, and anything beyond
        max_samples is dropped. Returns a SplatReport.
        """
        check_dt(dt)
        points = as_samples(samples)
        if len(points) == 0:
            return SplatReport(0, 0, 0, 0)

        finite = np.isfinite(points).all(axis=1)
        rejected = int((~finite).sum())
        if rejected:
            logger.debug("Rejected %d non-finite samples", rejected)
        points = points[finite]

        dropped = 0
        if self.max_samples is not None and len(points) > self.max_samples:
            dropped = len(points) - self.max_samples
            points = points[:self.max_samples]

        R = self.kernel.radius
        patch = self.kernel.intensity * self.kernel.weights * dt
        centers = np.rint(field.world_to_cell(points))
        accepted = culled = 0
        for cx, cy in centers:
            if not self.reaches_grid((cx, cy), field):
                culled += 1
                continue
            field.accumulate_block(int(cx) - R, int(cy) - R, patch, check=False)
            accepted += 1

        return SplatReport(accepted, rejected, culled, dropped)
