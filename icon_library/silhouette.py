import logging

import numpy as np

from icon_library.canvas import Canvas, solid_color

logger = logging.getLogger(__name__)


def extract_silhouette(source, rect, color, size):
    """
    Draws the source at rect on a transparent buffer, then recolors every
    covered pixel with color while keeping its alpha ("source-in" fill).

    :param source: SourceImage to sample.
    :param rect: FitRect the artwork occupies; same placement as the normal draw.
    :param color: Silhouette color; its own alpha multiplies the sampled alpha.
    :param size: (width, height) of the destination canvas.
    :return: Canvas of the destination size holding the silhouette.
    """
    width, height = size
    silhouette = Canvas(width, height)
    silhouette.draw_image(source, rect)

    fill = solid_color(color)
    coverage = silhouette.pixels[..., 3:4].copy()
    # Premultiplied: rgb = color * alpha, alpha = coverage * color alpha
    silhouette.pixels[...] = fill[np.newaxis, np.newaxis, :] * coverage

    logger.debug(f"Extracted silhouette at {rect} in {width}x{height}")
    return silhouette
