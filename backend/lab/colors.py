# backend/lab/colors.py

import re

import numpy as np

BASE_LIQUID = "#87CEEB"
HOT_TINT    = "#FF6B6B"
HOT_ABOVE   = 50.0

_HEX_COLOR = re.compile(r"#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def is_hex_color(value):
    return isinstance(value, str) and _HEX_COLOR.fullmatch(value) is not None


def hex_to_rgb(value):
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    return np.array([int(value[i:i + 2], 16) for i in (0, 2, 4)], dtype=np.float64)


def rgb_to_hex(rgb):
    r, g, b = np.clip(np.rint(rgb), 0, 255).astype(int)
    return f"#{r:02X}{g:02X}{b:02X}"


def lerp(start, end, t):
    return start + (end - start) * t


def mix_colors(colors, temperature=20.0):
    """Liquid color for a container holding ``colors`` (hex strings, add order).

    Each added color pulls the running mix halfway toward itself; hot liquids
    pick up a red tint.
    """
    colors = [c for c in colors if c]
    if not colors:
        return BASE_LIQUID
    if len(colors) == 1:
        mixed = hex_to_rgb(colors[0])
    else:
        mixed = hex_to_rgb(BASE_LIQUID)
        for color in colors:
            mixed = lerp(mixed, hex_to_rgb(color), 0.5)
    if temperature > HOT_ABOVE:
        mixed = lerp(mixed, hex_to_rgb(HOT_TINT), 0.2)
    return rgb_to_hex(mixed)


def weighted_ph(values, volumes):
    """Volume-weighted mean of the known pH values, 7.0 when none are known."""
    pairs = [(ph, vol) for ph, vol in zip(values, volumes) if ph is not None and vol > 0]
    if not pairs:
        return 7.0
    ph, weights = np.array(pairs, dtype=np.float64).T
    return round(float(np.average(ph, weights=weights)), 2)
