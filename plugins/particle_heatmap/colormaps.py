"""
Gradients and Resolver for Heatmap Visualization

Maps raw field intensities to RGBA colors. A gradient is three color stops
(cold, mid, hot) at positions 0.0, 0.5 and 1.0; intensities are normalized
against a fixed ceiling through a compressive power curve before lookup.
"""

import numpy as np

RESPONSE_EXPONENT = 0.6
DEFAULT_ALPHA = 0.75


def _three_stop(cold, mid, hot):
    """Build a gradient as (position, (r, g, b)) stops, channels in [0, 1]."""
    return [
        (0.0, cold),
        (0.5, mid),
        (1.0, hot),
    ]


# --- Gradient Definitions ---

def thermal():
    """Blue cold, green mid, red hot. The classic heat overlay."""
    return _three_stop((0.0, 0.0, 1.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0))


def fire():
    """Deep red through orange to pale yellow."""
    return _three_stop((0.24, 0.02, 0.0), (0.94, 0.39, 0.04), (1.0, 1.0, 0.78))


def ocean():
    """Navy through teal to near white."""
    return _three_stop((0.0, 0.01, 0.06), (0.04, 0.31, 0.63), (0.78, 0.98, 1.0))


def mono():
    """Black to grey to white, for debugging raw intensities."""
    return _three_stop((0.0, 0.0, 0.0), (0.5, 0.5, 0.5), (1.0, 1.0, 1.0))


# Registry of all gradients
GRADIENTS = {
    "thermal": thermal,
    "fire": fire,
    "ocean": ocean,
    "mono": mono,
}

GRADIENT_ORDER = list(GRADIENTS.keys())


def get_gradient(name):
    """Get gradient stops by name. Raises KeyError for unknown names."""
    return GRADIENTS[name]()


def normalize(values, ceiling):
    """Compress raw intensities into [0, 1] against a fixed ceiling.

    normalized = clamp01((value / ceiling) ** 0.6). Values at or above the
    ceiling saturate to 1.
    """
    values = np.asarray(values, dtype=np.float64)
    scaled = np.maximum(values, 0.0) / ceiling
    return np.clip(scaled ** RESPONSE_EXPONENT, 0.0, 1.0)


def apply_gradient(normalized, stops):
    """
    Piecewise-linear lookup of normalized values through gradient stops.

    With the three standard stops this is cold->mid for n < 0.5 (rescaled
    by 2) and mid->hot for n >= 0.5 (rescaled as (n - 0.5) * 2).

    Returns:
        (..., 3) float64 RGB in [0, 1]
    """
    positions = [s[0] for s in stops]
    colors = np.array([s[1] for s in stops], dtype=np.float64)
    rgb = np.empty(normalized.shape + (3,), dtype=np.float64)
    for c in range(3):
        rgb[..., c] = np.interp(normalized, positions, colors[:, c])
    return rgb


def resolve(field, ceiling, gradient="thermal", alpha=DEFAULT_ALPHA, out=None):
    """
    Resolve a scalar field into an RGBA color buffer.

    Args:
        field: GridField or 2D array of intensities, shape (H, W)
        ceiling: Fixed normalization ceiling (> 0)
        gradient: Gradient name or list of stops
        alpha: Translucency applied uniformly to every pixel
        out: Optional (H, W, 4) float32 buffer to write into

    Returns:
        (H, W, 4) float32 RGBA in [0, 1]
    """
    values = getattr(field, "values", field)
    stops = get_gradient(gradient) if isinstance(gradient, str) else gradient
    rgb = apply_gradient(normalize(values, ceiling), stops)

    if out is None:
        out = np.empty(rgb.shape[:-1] + (4,), dtype=np.float32)
    out[..., :3] = rgb
    out[..., 3] = alpha
    return out


def to_uint8(rgba):
    """Convert a float [0, 1] color buffer to uint8."""
    return np.round(np.clip(rgba, 0.0, 1.0) * 255.0).astype(np.uint8)


def to_image(rgba):
    """Convert an (H, W, 4) float buffer to a Pillow RGBA image.

    Row 0 of the field is the world_min edge; images store the top row first,
    so the buffer is flipped vertically to keep +z pointing up.
    """
    from PIL import Image
    return Image.fromarray(np.ascontiguousarray(to_uint8(rgba)[::-1]))
