"""
Raster primitives shared by the renderer: the destination canvas, the decoded
source image and source-over compositing.

Pixels are kept premultiplied, float32 in [0, 1], so bilinear resampling
and stacking many translucent layers do not produce dark fringes. They are
converted back to straight-alpha 8-bit RGBA only on export.
"""
import cv2
import numpy as np
from PIL import Image

from icon_library.settings import parse_color


def premultiply(rgba):
    """
    Converts straight-alpha uint8 RGBA to premultiplied float32 in [0, 1].
    """
    pixels = rgba.astype(np.float32) / 255.0
    pixels[..., :3] *= pixels[..., 3:4]
    return pixels


def unpremultiply(pixels):
    """
    Converts premultiplied float32 RGBA back to straight-alpha uint8.
    """
    alpha = np.clip(pixels[..., 3], 0.0, 1.0)
    rgb = np.zeros(pixels.shape[:2] + (3,), dtype=np.float32)
    visible = alpha > 0
    rgb[visible] = pixels[..., :3][visible] / alpha[visible][:, None]

    out = np.empty(pixels.shape[:2] + (4,), dtype=np.uint8)
    out[..., :3] = np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8)
    out[..., 3] = np.clip(np.rint(alpha * 255.0), 0, 255).astype(np.uint8)
    # Pixels that round to zero coverage carry no color
    out[out[..., 3] == 0] = 0
    return out


def solid_color(color):
    """Premultiplied float RGBA for a color accepted by parse_color."""
    r, g, b, a = parse_color(color)
    alpha = a / 255.0
    return np.array([r / 255.0 * alpha, g / 255.0 * alpha, b / 255.0 * alpha, alpha], dtype=np.float32)


def composite_over(destination, layer):
    """
    Source-over of a premultiplied layer onto a premultiplied destination, in place.
    """
    destination *= 1.0 - layer[..., 3:4]
    destination += layer
    np.clip(destination, 0.0, 1.0, out=destination)
    return destination


def translate(layer, dx, dy):
    """
    Shifts a layer by a (possibly fractional) offset, keeping its size.
    Whatever moves past the edges is dropped.
    """
    if dx == 0 and dy == 0:
        return layer
    height, width = layer.shape[:2]
    matrix = np.float32([[1, 0, dx], [0, 1, dy]])
    return cv2.warpAffine(
        layer,
        matrix,
        (width, height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=(0, 0, 0, 0),
    )


def rect_coverage(rect, width, height):
    """
    Fraction of each pixel of a width x height grid covered by rect, as an HxW float32 mask.
    """
    left = np.arange(width, dtype=np.float32)
    top = np.arange(height, dtype=np.float32)
    cover_x = np.clip(np.minimum(left + 1, rect.x + rect.width) - np.maximum(left, rect.x), 0.0, 1.0)
    cover_y = np.clip(np.minimum(top + 1, rect.y + rect.height) - np.maximum(top, rect.y), 0.0, 1.0)
    return (cover_y[:, None] * cover_x[None, :]).astype(np.float32)


def place_image(source, rect, width, height):
    """
    Draws the source image scaled into rect on a transparent width x height layer.

    Downscaling goes through an area resize first so that large rasterizations
    do not alias; the remaining fractional scale and offset are applied with a
    bilinear affine warp. The warp clamps to the source's edge pixels, and the
    rect's own pixel coverage decides where the artwork ends, so upscaled
    artwork stays opaque up to its boundary.
    """
    pixels = source.premultiplied
    src_w, src_h = source.width, source.height

    if rect.width < src_w or rect.height < src_h:
        target_w = max(1, int(np.ceil(rect.width)))
        target_h = max(1, int(np.ceil(rect.height)))
        pixels = cv2.resize(pixels, (target_w, target_h), interpolation=cv2.INTER_AREA)
        src_w, src_h = target_w, target_h

    scale_x = rect.width / src_w
    scale_y = rect.height / src_h
    # Map pixel centres: source edge 0 lands on rect.x
    matrix = np.float32([
        [scale_x, 0, rect.x + 0.5 * scale_x - 0.5],
        [0, scale_y, rect.y + 0.5 * scale_y - 0.5],
    ])
    layer = cv2.warpAffine(
        pixels,
        matrix,
        (width, height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_REPLICATE,
    )
    layer *= rect_coverage(rect, width, height)[..., np.newaxis]
    return layer


class SourceImage:
    """
    Immutable decoded RGBA raster the renderer samples from.
    """

    def __init__(self, rgba):
        rgba = np.asarray(rgba)
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Source image must be an HxWx4 RGBA array, got shape {rgba.shape}")
        height, width = rgba.shape[:2]
        if width <= 0 or height <= 0:
            raise ValueError(f"Source image must have non-zero dimensions, got {width}x{height}")

        self._rgba = np.array(rgba, dtype=np.uint8)
        self._rgba.setflags(write=False)
        self._premultiplied = premultiply(self._rgba)

    @classmethod
    def from_image(cls, image):
        """
        Builds a SourceImage from any Pillow image (converted to RGBA).
        """
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    @property
    def width(self):
        return self._rgba.shape[1]

    @property
    def height(self):
        return self._rgba.shape[0]

    @property
    def aspect_ratio(self):
        return self.width / self.height

    @property
    def pixels(self):
        """Straight-alpha uint8 RGBA, read-only."""
        return self._rgba

    @property
    def premultiplied(self):
        return self._premultiplied

    def __repr__(self):
        return f"SourceImage({self.width}x{self.height})"


class Canvas:
    """
    Mutable RGBA destination buffer.
    """

    def __init__(self, width, height):
        self.resize(width, height)

    def resize(self, width, height):
        """
        Reallocates the buffer at the given size; previous content is discarded.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.pixels = np.zeros((int(height), int(width), 4), dtype=np.float32)

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    @property
    def size(self):
        return (self.width, self.height)

    def clear(self):
        self.pixels.fill(0.0)

    def fill(self, color):
        """
        Paints the whole canvas with a color, blending by the color's own alpha.
        """
        layer = np.broadcast_to(solid_color(color), self.pixels.shape)
        composite_over(self.pixels, layer)

    def composite(self, layer, offset=(0.0, 0.0)):
        """
        Source-over of another canvas (or premultiplied array) translated by offset.
        """
        pixels = layer.pixels if isinstance(layer, Canvas) else layer
        if pixels.shape != self.pixels.shape:
            raise ValueError(f"Layer shape {pixels.shape} does not match canvas shape {self.pixels.shape}")
        dx, dy = offset
        composite_over(self.pixels, translate(pixels, dx, dy))

    def draw_image(self, source, rect):
        """
        Draws the source image scaled into rect, source-over.
        """
        composite_over(self.pixels, place_image(source, rect, self.width, self.height))

    def copy(self):
        other = Canvas(self.width, self.height)
        other.pixels[...] = self.pixels
        return other

    def to_array(self):
        """
        Exports straight-alpha uint8 RGBA (HxWx4), ready for encoding.
        """
        return unpremultiply(self.pixels)

    def to_image(self):
        return Image.fromarray(self.to_array())

    def __repr__(self):
        return f"Canvas({self.width}x{self.height})"
