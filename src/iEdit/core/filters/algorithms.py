"""Pure per-channel maths for the photometric adjustments.

Values are normalised channel intensities in ``[0.0, 1.0]``.  The formulas are
the linear component transfers used by CSS filter functions, so a percentage
of ``100`` is always the identity.
"""

from __future__ import annotations

import numpy as np

# Rec. 709 luma weights as rounded by the CSS ``saturate()`` definition.
LUMA_R = 0.213
LUMA_G = 0.715
LUMA_B = 0.072


def _clamp01(value: float) -> float:
    """Return *value* limited to ``[0.0, 1.0]``."""

    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


def _float_to_uint8(value: float) -> int:
    """Convert a normalised intensity into the nearest 8-bit code value."""

    return int(round(_clamp01(value) * 255.0))


def _apply_brightness(value: float, factor: float) -> float:
    """Scale *value* linearly; ``factor`` is the brightness percentage / 100."""

    return _clamp01(value * factor)


def _apply_contrast(value: float, factor: float) -> float:
    """Stretch *value* around mid-grey; ``factor`` is the contrast percentage / 100."""

    return _clamp01((value - 0.5) * factor + 0.5)


def _apply_channel_adjustments(value: float, brightness_factor: float, contrast_factor: float) -> float:
    """Brightness followed by contrast, each clamped like chained CSS filters."""

    return _apply_contrast(_apply_brightness(value, brightness_factor), contrast_factor)


def saturation_matrix(factor: float) -> np.ndarray:
    """Return the 3x3 RGB matrix for a saturation multiplier *factor*.

    ``factor == 0`` produces a luminance-only grey image, ``1`` is the identity
    and values above one push colours away from their grey value.
    """

    s = float(factor)
    return np.array(
        [
            [LUMA_R + (1.0 - LUMA_R) * s, LUMA_G - LUMA_G * s, LUMA_B - LUMA_B * s],
            [LUMA_R - LUMA_R * s, LUMA_G + (1.0 - LUMA_G) * s, LUMA_B - LUMA_B * s],
            [LUMA_R - LUMA_R * s, LUMA_G - LUMA_G * s, LUMA_B + (1.0 - LUMA_B) * s],
        ],
        dtype=np.float64,
    )
