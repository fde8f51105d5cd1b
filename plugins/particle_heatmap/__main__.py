"""
Particle Heatmap Viewer - Entry Point

Usage:
    python -m particle_heatmap [preset] [--window WxH] [--snap N] [--out PATH]

Examples:
    python -m particle_heatmap
    python -m particle_heatmap trail
    python -m particle_heatmap occupancy --window 1000x840
    python -m particle_heatmap default --snap 600 --out heatmap.png

--snap runs headless: a scripted walker circles the floor for N ticks at
60 fps and the final frame is written as a PNG. No pygame needed.

Use --list to see all available presets.
"""

import logging
import math
import os
import sys

from .presets import PRESET_ORDER, list_presets


def walker_path(config, t):
    """Lissajous walk inside the world rectangle, position at time t."""
    (x0, z0), (x1, z1) = config.world_min, config.world_max
    cx, cz = (x0 + x1) / 2.0, (z0 + z1) / 2.0
    rx, rz = (x1 - x0) * 0.35, (z1 - z0) * 0.35
    return cx + rx * math.sin(0.31 * t), cz + rz * math.sin(0.47 * t + 0.6)


def snap(preset, steps, out_path=None, dt=1.0 / 60.0):
    """Headless mode: run N ticks, save PNG, return the path."""
    from .baker import HeatmapBaker
    from .colormaps import to_image
    from .config import HeatmapConfig
    from .emitter import ActivityEmitter

    config = HeatmapConfig.from_preset(preset)
    emitter = ActivityEmitter(walker_path(config, 0.0),
                              max_particles=config.max_samples, seed=0)
    baker = HeatmapBaker(config, emitter)

    print(f"  {preset}: running {steps} ticks...", end="", flush=True)
    frame = baker.render()
    for step_i in range(steps):
        emitter.move_to(*walker_path(config, step_i * dt))
        frame = baker.tick(dt)

    if out_path is None:
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        out_path = os.path.join(screenshots_dir, f"heatmap_{preset}.png")
    to_image(frame).save(out_path)
    print(f" saved: {out_path}")
    return out_path


def main(argv=None):
    preset = "default"
    win_w, win_h = 800, 800
    snap_steps = 0
    out_path = None

    logging.basicConfig(level=logging.INFO, format="[heatmap] %(levelname)s %(message)s")

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_steps = int(args[i + 1])
            i += 2
        elif arg == "--out" and i + 1 < len(args):
            out_path = args[i + 1]
            i += 2
        elif arg == "--list":
            print("\nAvailable presets:")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:14s} {desc}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PRESET_ORDER:
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return 2

    if snap_steps > 0:
        print(f"Headless snap mode: {preset}, {snap_steps} ticks")
        snap(preset, snap_steps, out_path)
        return 0

    from .viewer import Viewer

    print("Starting Particle Heatmap Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(width=win_w, height=win_h, preset=preset)
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
