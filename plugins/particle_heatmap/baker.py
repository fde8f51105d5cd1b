"""
HeatmapBaker — per-tick orchestration of field, splatter and resolver

Each tick runs decay -> fetch samples -> splat -> resolve and hands the
resulting RGBA frame to every subscribed display surface. Ticks are
serialized by a lock so a background runner and a foreground caller can
never interleave.

Usage:
    from particle_heatmap.baker import HeatmapBaker
    from particle_heatmap.config import HeatmapConfig
    from particle_heatmap.emitter import ActivityEmitter

    baker = HeatmapBaker(HeatmapConfig.from_preset("default"), ActivityEmitter())
    frame = baker.tick(0.016)  # (H, W, 4) float32 [0, 1]
"""

import logging
import threading

import numpy as np

from .colormaps import get_gradient, resolve
from .field import GridField
from .kernel import Splatter, SplatReport, as_samples, check_dt

logger = logging.getLogger(__name__)


class SurfaceRegistry:
    """Explicit subscriber list for published frames.

    A surface is either an object with present(frame) or a plain callable.
    subscribe() returns a zero-argument function that removes the surface
    again, so an observer can tie the subscription to its own lifetime.
    """

    def __init__(self):
        self._surfaces = []
        self._lock = threading.Lock()

    def subscribe(self, surface):
        with self._lock:
            if surface not in self._surfaces:
                self._surfaces.append(surface)
        return lambda: self.unsubscribe(surface)

    def unsubscribe(self, surface):
        with self._lock:
            if surface in self._surfaces:
                self._surfaces.remove(surface)

    def publish(self, frame):
        with self._lock:
            surfaces = list(self._surfaces)
        for surface in surfaces:
            present = getattr(surface, "present", surface)
            present(frame)

    def __len__(self):
        return len(self._surfaces)


class HeatmapBaker:
    """Owns the grid field and turns a sample stream into RGBA frames."""

    def __init__(self, config, emitter=None):
        self.config = config
        self.emitter = emitter
        self.field = GridField.from_config(config)
        self.splatter = Splatter.from_config(config)
        self.surfaces = SurfaceRegistry()

        if isinstance(config.gradient, str):
            self.gradient = get_gradient(config.gradient)
        else:
            self.gradient = config.gradient

        # Double-buffered output: the frame handed out last tick stays
        # untouched while the next one is written.
        shape = (config.height, config.width, 4)
        self._buffers = [np.zeros(shape, dtype=np.float32),
                         np.zeros(shape, dtype=np.float32)]
        self._back = 0
        self._latest = None

        self._tick_lock = threading.Lock()
        self.tick_count = 0
        self.last_report = SplatReport(0, 0, 0, 0)
        self.emitter_failures = 0

    def subscribe(self, surface):
        """Register a display surface. Returns an unsubscribe function."""
        return self.surfaces.subscribe(surface)

    def unsubscribe(self, surface):
        self.surfaces.unsubscribe(surface)

    def _fetch_samples(self, dt):
        """Advance the emitter and read its samples as an (N, 2) array.

        Any failure in the emitter, including a payload that is not a list
        of (x, z) positions, degrades to an empty sample set.
        """
        if self.emitter is None:
            return as_samples(None)
        try:
            update = getattr(self.emitter, "update", None)
            if update is not None:
                update(dt)
            get_samples = getattr(self.emitter, "get_samples", self.emitter)
            return as_samples(get_samples())
        except Exception as e:
            self.emitter_failures += 1
            logger.warning("Emitter unavailable, using zero samples: %s", e)
            return as_samples(None)

    def step(self, dt, samples=None):
        """Advance the field one tick without resolving colors.

        If samples is None they are pulled from the emitter.
        Returns the SplatReport for this tick.
        """
        with self._tick_lock:
            return self._step(dt, samples)

    def _step(self, dt, samples):
        # Caller errors surface before the field is touched
        check_dt(dt)
        if samples is not None:
            samples = as_samples(samples)

        self.field.decay()
        if samples is None:
            samples = self._fetch_samples(dt)
        report = self.splatter.apply_many(samples, self.field, dt)
        if report.rejected or report.dropped:
            logger.debug("Tick %d: %s", self.tick_count, report)
        self.last_report = report
        self.tick_count += 1
        return report

    def render(self):
        """Resolve the current field into a fresh frame.

        Does not touch the tick buffers, so frames published by tick() keep
        their lifetime. Returns an (H, W, 4) float32 frame.
        """
        with self._tick_lock:
            frame = resolve(self.field, self.config.ceiling, self.gradient,
                            alpha=self.config.alpha)
            self._latest = frame
            return frame

    def _render_tick(self):
        frame = resolve(self.field, self.config.ceiling, self.gradient,
                        alpha=self.config.alpha, out=self._buffers[self._back])
        self._back ^= 1
        self._latest = frame
        return frame

    def tick(self, dt, samples=None):
        """Run one full tick and publish the frame to every surface.

        The published frame is one of two alternating buffers: it stays
        unchanged through the next tick and is reused by the one after.
        Surfaces are called after the tick lock is released, so they may
        call back into the baker.

        Args:
            dt: Elapsed time in seconds since the previous tick (finite, >= 0)
            samples: Optional explicit (N, 2) samples; defaults to the emitter

        Returns:
            (H, W, 4) float32 RGBA frame in [0, 1]
        """
        with self._tick_lock:
            self._step(dt, samples)
            frame = self._render_tick()
        self.surfaces.publish(frame)
        return frame

    @property
    def latest_frame(self):
        """Most recently resolved frame, or None before the first render."""
        return self._latest

    def clear(self):
        """Zero the field and forget emitter particles, if any."""
        with self._tick_lock:
            self.field.clear()
            clear = getattr(self.emitter, "clear", None)
            if clear is not None:
                clear()

    @property
    def stats(self):
        stats = dict(self.field.stats)
        stats["tick"] = self.tick_count
        stats["samples"] = self.last_report.accepted
        stats["rejected"] = self.last_report.rejected
        return stats
