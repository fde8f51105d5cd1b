"""
Interactive Pygame Viewer for the Particle Heatmap

The cursor stands in for a moving occupant: an ActivityEmitter glides toward
it and drops particles that the baker splats into the heatmap.

Controls:
  SPACE       Pause / Resume
  C           Clear field and particles
  1-4         Switch preset
  S           Save screenshot
  H           Toggle HUD overlay
  Q / ESC     Quit
  Mouse L     Hold to burst-emit at the source
"""

import os
import time
import numpy as np
import pygame

from .baker import HeatmapBaker
from .colormaps import to_uint8
from .config import HeatmapConfig
from .emitter import ActivityEmitter
from .presets import PRESET_ORDER
from .smoothing import SmoothedPosition

BACKGROUND = (18, 18, 22)


class Viewer:
    def __init__(self, width=800, height=800, preset="default"):
        self.canvas_w = width
        self.canvas_h = height
        self.running = True
        self.paused = False
        self.show_hud = True
        self.fps_history = []
        self.hud_font = None
        self._pending_screenshot = False
        self._apply_preset(preset)

    def _apply_preset(self, key):
        self.preset_key = key
        self.config = HeatmapConfig.from_preset(key)
        center = ((self.config.world_min[0] + self.config.world_max[0]) / 2.0,
                  (self.config.world_min[1] + self.config.world_max[1]) / 2.0)
        self.emitter = ActivityEmitter(center, max_particles=self.config.max_samples)
        self.source = SmoothedPosition(center)
        self.baker = HeatmapBaker(self.config, self.emitter)
        self.frame = self.baker.render()

    def _screen_to_world(self, mx, my):
        (x0, z0), (x1, z1) = self.config.world_min, self.config.world_max
        x = x0 + (mx / self.canvas_w) * (x1 - x0)
        z = z1 - (my / self.canvas_h) * (z1 - z0)
        return x, z

    def _world_to_screen(self, x, z):
        (x0, z0), (x1, z1) = self.config.world_min, self.config.world_max
        sx = (x - x0) / (x1 - x0) * self.canvas_w
        sy = (z1 - z) / (z1 - z0) * self.canvas_h
        return int(sx), int(sy)

    def _frame_to_surface(self, frame):
        """Alpha-composite the RGBA frame over the background color."""
        rgba = to_uint8(frame[::-1]).astype(np.float32)
        alpha = rgba[:, :, 3:4] / 255.0
        bg = np.array(BACKGROUND, dtype=np.float32)
        rgb = rgba[:, :, :3] * alpha + bg * (1.0 - alpha)
        rgb = rgb.astype(np.uint8)
        return pygame.surfarray.make_surface(rgb.swapaxes(0, 1).copy())

    def _handle_mouse(self, dt):
        mx, my = pygame.mouse.get_pos()
        mx = min(max(mx, 0), self.canvas_w)
        my = min(max(my, 0), self.canvas_h)
        self.source.set_target(*self._screen_to_world(mx, my))
        self.source.update(dt)
        self.emitter.move_to(*self.source.get_value())
        if pygame.mouse.get_pressed()[0]:
            self.emitter.emit(3)

    def _draw_hud(self, screen, fps):
        if not self.show_hud or self.hud_font is None:
            return
        s = self.baker.stats
        lines = [
            f"{self.preset_key}  {fps:.0f} fps  tick {s['tick']}",
            f"particles {self.emitter.count}  mass {s['mass']:.1f}  max {s['max']:.2f}",
        ]
        if self.paused:
            lines.append("PAUSED")
        y = 8
        for line in lines:
            text_surface = self.hud_font.render(line, True, (220, 220, 220))
            screen.blit(text_surface, (10, y))
            y += text_surface.get_height() + 2

        sx, sy = self._world_to_screen(*self.source.get_value())
        pygame.draw.circle(screen, (255, 255, 255), (sx, sy), 5, 1)

    def _save_screenshot(self, surface):
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"heatmap_{self.preset_key}_{timestamp}.png")
        pygame.image.save(surface, path)
        print(f"Screenshot saved: {path}")

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h))
        pygame.display.set_caption("Particle Heatmap")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        last_time = time.time()

        while self.running:
            now = time.time()
            dt = min(now - last_time, 0.1)  # cap dt to avoid jumps
            last_time = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)

            if not self.paused:
                self._handle_mouse(dt)
                self.frame = self.baker.tick(dt)

            heat_surface = self._frame_to_surface(self.frame)
            scaled = pygame.transform.smoothscale(heat_surface, (self.canvas_w, self.canvas_h))
            screen.blit(scaled, (0, 0))

            if self._pending_screenshot:
                self._pending_screenshot = False
                self._save_screenshot(scaled)

            frame_time = time.time() - now
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)
            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_c:
            self.baker.clear()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._pending_screenshot = True

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self._apply_preset(PRESET_ORDER[idx])
