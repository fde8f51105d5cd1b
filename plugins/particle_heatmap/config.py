"""
Heatmap Configuration

Static parameters for one baker: grid size, mapped world rectangle, kernel
shape, decay, normalization ceiling and gradient. Validated once at
construction; nothing here changes mid-run.
"""

import math
import numbers

from .colormaps import GRADIENTS, DEFAULT_ALPHA
from .presets import get_preset


class ConfigError(ValueError):
    """Raised when heatmap parameters would produce a degenerate field."""


class HeatmapConfig:
    """Validated heatmap parameters."""

    def __init__(self, width=256, height=256,
                 world_min=(-5.0, -7.0), world_max=(14.0, 9.0),
                 intensity=10.0, radius=100, sigma=2.0,
                 decay=0.99, ceiling=5.0,
                 gradient="thermal", alpha=DEFAULT_ALPHA,
                 max_samples=1000):
        self.width = width
        self.height = height
        self.world_min = (float(world_min[0]), float(world_min[1]))
        self.world_max = (float(world_max[0]), float(world_max[1]))
        self.intensity = float(intensity)
        self.radius = radius
        self.sigma = float(sigma)
        self.decay = float(decay)
        self.ceiling = float(ceiling)
        self.gradient = gradient
        self.alpha = float(alpha)
        self.max_samples = max_samples
        self.validate()

    @classmethod
    def from_preset(cls, name, **overrides):
        """Build a config from a named preset, with keyword overrides."""
        preset = get_preset(name)
        if preset is None:
            raise ConfigError(f"Unknown preset: {name!r}")
        params = {k: v for k, v in preset.items()
                  if k not in ("name", "description")}
        params.update(overrides)
        return cls(**params)

    def validate(self):
        """Reject parameters that would divide by zero or break the kernel."""
        for key in ("width", "height", "radius", "max_samples"):
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigError(f"{key} must be an integer, got {value!r}")
        if self.width < 1 or self.height < 1:
            raise ConfigError(
                f"grid must be at least 1x1, got {self.width}x{self.height}")
        for axis in range(2):
            lo, hi = self.world_min[axis], self.world_max[axis]
            if not (math.isfinite(lo) and math.isfinite(hi)) or hi <= lo:
                raise ConfigError(
                    f"world rectangle is degenerate on axis {axis}: "
                    f"[{lo}, {hi}]")
        if self.radius < 0:
            raise ConfigError(f"radius must be >= 0, got {self.radius}")
        if not self.sigma > 0:
            raise ConfigError(f"sigma must be > 0, got {self.sigma}")
        if not (self.intensity >= 0 and math.isfinite(self.intensity)):
            raise ConfigError(f"intensity must be >= 0, got {self.intensity}")
        if not 0.0 < self.decay < 1.0:
            raise ConfigError(f"decay must be in (0, 1), got {self.decay}")
        if not (self.ceiling > 0 and math.isfinite(self.ceiling)):
            raise ConfigError(f"ceiling must be > 0, got {self.ceiling}")
        if isinstance(self.gradient, str) and self.gradient not in GRADIENTS:
            raise ConfigError(f"Unknown gradient: {self.gradient!r}")
        if not 0.0 <= self.alpha <= 1.0:
            raise ConfigError(f"alpha must be in [0, 1], got {self.alpha}")
        if self.max_samples < 0:
            raise ConfigError(
                f"max_samples must be >= 0, got {self.max_samples}")

    def as_dict(self):
        """Return parameters as a plain dict (preset-compatible)."""
        return {
            "width": self.width, "height": self.height,
            "world_min": self.world_min, "world_max": self.world_max,
            "intensity": self.intensity, "radius": self.radius,
            "sigma": self.sigma, "decay": self.decay,
            "ceiling": self.ceiling, "gradient": self.gradient,
            "alpha": self.alpha, "max_samples": self.max_samples,
        }
