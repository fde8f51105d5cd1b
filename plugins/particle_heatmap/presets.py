"""
Particle Heatmap Presets

Each preset defines a grid, a world rectangle, kernel parameters and a
gradient known to produce a readable heatmap. The "default" preset matches
the floor-plan overlay the baker was first tuned for.
"""

PRESETS = {
    "default": {
        "name": "Floor Plan",
        "description": "256x256 overlay of the apartment floor, slow fade",
        "width": 256, "height": 256,
        "world_min": (-5.0, -7.0), "world_max": (14.0, 9.0),
        "intensity": 10.0, "radius": 100, "sigma": 2.0,
        "decay": 0.99, "ceiling": 5.0,
        "gradient": "thermal", "alpha": 0.75,
        "max_samples": 1000,
    },
    "compact": {
        "name": "Compact",
        "description": "Small radius, fast preview for big sample counts",
        "width": 128, "height": 128,
        "world_min": (-5.0, -7.0), "world_max": (14.0, 9.0),
        "intensity": 10.0, "radius": 12, "sigma": 2.0,
        "decay": 0.99, "ceiling": 5.0,
        "gradient": "thermal", "alpha": 0.75,
        "max_samples": 1000,
    },
    "trail": {
        "name": "Short Trail",
        "description": "Quick decay, only the recent path stays lit",
        "width": 256, "height": 256,
        "world_min": (-5.0, -7.0), "world_max": (14.0, 9.0),
        "intensity": 25.0, "radius": 10, "sigma": 3.0,
        "decay": 0.93, "ceiling": 5.0,
        "gradient": "fire", "alpha": 0.85,
        "max_samples": 500,
    },
    "occupancy": {
        "name": "Occupancy",
        "description": "Long memory, wide soft kernel for dwell-time maps",
        "width": 192, "height": 160,
        "world_min": (-5.0, -7.0), "world_max": (14.0, 9.0),
        "intensity": 4.0, "radius": 16, "sigma": 6.0,
        "decay": 0.998, "ceiling": 20.0,
        "gradient": "ocean", "alpha": 0.7,
        "max_samples": 2000,
    },
}

PRESET_ORDER = ["default", "compact", "trail", "occupancy"]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
