"""Colour helpers — hex conversion and WCAG 2.x luminance / contrast.

No engine imports.
"""

from __future__ import annotations

import re

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

# WCAG 2.x relative luminance coefficients (sRGB primaries, D65).
_LUMA_R = 0.2126
_LUMA_G = 0.7152
_LUMA_B = 0.0722

# sRGB linearization breakpoint as written in WCAG 2.x.
_SRGB_KNEE = 0.03928

# Flare term added to both luminances in the contrast ratio.
_FLARE = 0.05


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    """Parse ``#rrggbb`` (hash optional). Returns None for anything else."""
    match = _HEX_RE.match(color.strip())
    if match is None:
        return None
    return (int(match.group(1), 16), int(match.group(2), 16), int(match.group(3), 16))


def _linearize(channel: int) -> float:
    c = channel / 255
    if c <= _SRGB_KNEE:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    """WCAG relative luminance in [0, 1]; unparseable colours count as black."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return 0.0
    r, g, b = (_linearize(c) for c in rgb)
    return _LUMA_R * r + _LUMA_G * g + _LUMA_B * b


def contrast_ratio(color_a: str, color_b: str) -> float:
    """(L_lighter + 0.05) / (L_darker + 0.05). Symmetric, in [1, 21]."""
    lum_a = relative_luminance(color_a)
    lum_b = relative_luminance(color_b)
    lighter = max(lum_a, lum_b)
    darker = min(lum_a, lum_b)
    return (lighter + _FLARE) / (darker + _FLARE)
