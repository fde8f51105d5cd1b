"""
Background Heatmap Runner

Ticks a HeatmapBaker on its own thread at a target frame rate so consumers
(a preview server, a game loop, a recorder) can grab the latest frame
without waiting on a bake. The baker's tick lock keeps ticks from
overlapping with any foreground caller.
"""

import logging
import threading
import time

logger = logging.getLogger(__name__)


class BackgroundBaker(threading.Thread):
    """Daemon thread that continuously ticks a baker.

    Keeps a private copy of the latest frame, so readers never see a buffer
    the baker is about to overwrite.
    """

    def __init__(self, baker, target_fps=30, max_dt=0.1):
        super().__init__(daemon=True, name="heatmap-baker")
        self.baker = baker
        self.target_fps = target_fps
        self.max_dt = max_dt
        self._frame_lock = threading.Lock()
        self._latest_frame = None   # (H,W,4) float32 [0,1]
        self._stop_event = threading.Event()
        self._last_time = None
        self.errors = 0

    def run(self):
        logger.info("Background heatmap thread started (%d fps)", self.target_fps)
        frame_time = 1.0 / self.target_fps
        while not self._stop_event.is_set():
            now = time.perf_counter()
            if self._last_time is None:
                dt = frame_time
            else:
                dt = now - self._last_time
            dt = max(0.001, min(dt, self.max_dt))
            self._last_time = now

            try:
                frame = self.baker.tick(dt)
                with self._frame_lock:
                    self._latest_frame = frame.copy()
            except Exception:
                self.errors += 1
                logger.exception("Background heatmap tick failed")

            elapsed = time.perf_counter() - now
            sleep_time = frame_time - elapsed
            if sleep_time > 0:
                self._stop_event.wait(sleep_time)
        logger.info("Background heatmap thread stopped")

    def get_latest_frame(self):
        """Return the most recent frame (H,W,4) float32 [0,1] or None."""
        with self._frame_lock:
            return self._latest_frame

    def stop(self, timeout=None):
        """Ask the thread to finish its current tick and exit."""
        self._stop_event.set()
        if self.is_alive():
            self.join(timeout)
