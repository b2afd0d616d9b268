import io
import logging
import re
from xml.etree import ElementTree as ET

from PIL import Image

from icon_library.canvas import SourceImage

logger = logging.getLogger(__name__)

# Rasterize at this multiple of the target size so downscaling has detail to average
OVERSAMPLE = 2

# CSS units at cairosvg's default 96 dpi
UNIT_TO_PX = {
    "": 1.0,
    "px": 1.0,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
}

LENGTH_PATTERN = re.compile(r"^\s*([0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)\s*([a-z]*)\s*$")


def parse_length(value):
    """
    Converts an SVG length attribute to pixels, or None for missing,
    relative (%, em) or non-positive values.
    """
    if not value:
        return None
    match = LENGTH_PATTERN.match(value)
    if not match:
        return None
    number, unit = match.groups()
    if unit not in UNIT_TO_PX:
        return None
    length = float(number) * UNIT_TO_PX[unit]
    return length if length > 0 else None


def get_svg_dimensions(svg_bytes):
    """
    Extract intrinsic width and height from SVG content.

    Uses the width/height attributes, falling back to the viewBox.
    Returns None when neither gives a usable size.
    """
    try:
        root = ET.fromstring(svg_bytes)
    except ET.ParseError as e:
        logger.warning(f"Could not parse SVG to read its dimensions: {e}")
        return None

    width = parse_length(root.attrib.get("width"))
    height = parse_length(root.attrib.get("height"))

    view_box = root.attrib.get("viewBox")
    if view_box and (width is None or height is None):
        parts = re.split(r"[\s,]+", view_box.strip())
        if len(parts) == 4:
            try:
                vb_width, vb_height = float(parts[2]), float(parts[3])
            except ValueError:
                vb_width = vb_height = 0.0
            if vb_width > 0 and vb_height > 0:
                # One known side keeps the viewBox aspect ratio
                if width is not None:
                    height = width * vb_height / vb_width
                elif height is not None:
                    width = height * vb_width / vb_height
                else:
                    width, height = vb_width, vb_height

    if width is None or height is None:
        return None
    return width, height


def svg_to_source_image(svg_bytes, min_width=None, min_height=None):
    """
    Rasterizes SVG content with cairosvg into a SourceImage.

    :param svg_bytes: The SVG document.
    :param min_width: Width the image will be drawn at; the raster is made at least
        OVERSAMPLE times this large when the intrinsic size is smaller.
    :param min_height: Same for height.
    """
    options = {}
    dimensions = get_svg_dimensions(svg_bytes)
    if dimensions and min_width and min_height:
        width, height = dimensions
        scale = max(min_width * OVERSAMPLE / width, min_height * OVERSAMPLE / height, 1.0)
        options["output_width"] = max(1, int(round(width * scale)))
        options["output_height"] = max(1, int(round(height * scale)))

    # Loaded here so the size helpers above work without the native cairo library
    import cairosvg

    try:
        png_bytes = cairosvg.svg2png(bytestring=svg_bytes, **options)
        image = Image.open(io.BytesIO(png_bytes)).convert("RGBA")
    except Exception as e:
        logger.error(f"Error during SVG rasterization: {e}")
        raise ValueError(f"Could not rasterize SVG: {e}") from e

    logger.info(f"Rasterized SVG to {image.width}x{image.height}")
    return SourceImage.from_image(image)


def load_svg(svg_file_path, min_width=None, min_height=None):
    """
    Reads an SVG file and rasterizes it (see svg_to_source_image).
    """
    with open(svg_file_path, "rb") as svg_file:
        svg_bytes = svg_file.read()
    logger.info(f"Loaded {svg_file_path}")
    return svg_to_source_image(svg_bytes, min_width, min_height)


def canvas_to_png_bytes(canvas):
    """
    Encodes a rendered canvas as PNG.
    """
    buffer = io.BytesIO()
    canvas.to_image().save(buffer, "PNG")
    return buffer.getvalue()


def save_png(canvas, output_png_path):
    try:
        canvas.to_image().save(output_png_path, "PNG")
        logger.info(f"Saved {canvas.width}x{canvas.height} icon to {output_png_path}")
    except Exception as e:
        logger.error(f"Error saving PNG to {output_png_path}: {e}")
        raise
