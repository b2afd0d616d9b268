"""
Radial stroke: fakes a uniform outline by stamping a silhouette around a
circle instead of dilating the shape.

The result is only uniform where the outline is gently curved relative to
the radius. Sharp concave corners can show gaps between the angular copies,
and nothing beyond the final centred stamp fills them.
"""
import logging
import math

logger = logging.getLogger(__name__)

DEFAULT_STROKE_STEPS = 36  # every 10 degrees


def ring_offsets(radius, steps=DEFAULT_STROKE_STEPS):
    """
    Offsets (dx, dy) of the angular copies, starting at angle 0 and going clockwise on screen.
    """
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")
    offsets = []
    for i in range(steps):
        angle = i * 2 * math.pi / steps
        offsets.append((radius * math.cos(angle), radius * math.sin(angle)))
    return offsets


def stroke_outline(destination, silhouette, radius, steps=DEFAULT_STROKE_STEPS):
    """
    Composites the silhouette onto destination at each ring offset, then once
    more at the origin so the interior is always filled. Mutates destination.
    """
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")

    if radius == 0:
        # The ring collapses onto the origin, so stamp once
        destination.composite(silhouette)
        return

    for offset in ring_offsets(radius, steps):
        destination.composite(silhouette, offset)

    destination.composite(silhouette)
    logger.debug(f"Stroked outline with radius {radius} in {steps} steps")
