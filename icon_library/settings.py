from dataclasses import dataclass, replace as dataclass_replace

from PIL import ImageColor

TRANSPARENT = "transparent"

DEFAULT_WIDTH = 128
DEFAULT_HEIGHT = 128
DEFAULT_PADDING = 4
DEFAULT_BACKGROUND_COLOR = "#ffffff00"
DEFAULT_STICKER_COLOR = "#ffffff"
DEFAULT_STICKER_PADDING = 4


def is_transparent(color):
    """
    True when the color means "no fill" (None, empty or the 'transparent' keyword).
    """
    if color is None:
        return True
    if isinstance(color, str):
        return color.strip() == "" or color.strip().lower() == TRANSPARENT
    return False


def parse_color(color):
    """
    Resolves a CSS-style color to an (r, g, b, a) tuple of 0-255 ints.

    Accepts #rgb, #rgba, #rrggbb, #rrggbbaa, rgb()/hsl() notations, named colors,
    the 'transparent' keyword and 3- or 4-tuples.
    """
    if is_transparent(color):
        return (0, 0, 0, 0)

    if isinstance(color, (tuple, list)):
        if len(color) not in (3, 4):
            raise ValueError(f"Color tuple must have 3 or 4 components, got {color!r}")
        components = tuple(int(c) for c in color)
        if any(c < 0 or c > 255 for c in components):
            raise ValueError(f"Color components must be in 0..255, got {color!r}")
        if len(components) == 3:
            components = components + (255,)
        return components

    try:
        return ImageColor.getcolor(color.strip(), "RGBA")
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Unrecognized color: {color!r}") from e


@dataclass(frozen=True)
class RenderSettings:
    """
    Layout and style parameters for one render.

    content_padding is reserved on every side of the canvas. In sticker mode
    sticker_padding is reserved on top of it and is also the outline radius.
    """

    canvas_width: int = DEFAULT_WIDTH
    canvas_height: int = DEFAULT_HEIGHT
    content_padding: int = DEFAULT_PADDING
    background_color: object = DEFAULT_BACKGROUND_COLOR
    sticker_enabled: bool = False
    sticker_color: object = DEFAULT_STICKER_COLOR
    sticker_padding: int = DEFAULT_STICKER_PADDING

    def __post_init__(self):
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Canvas dimensions must be positive, got {self.canvas_width}x{self.canvas_height}"
            )
        if self.content_padding < 0:
            raise ValueError(f"content_padding must be non-negative, got {self.content_padding}")
        if self.sticker_padding < 0:
            raise ValueError(f"sticker_padding must be non-negative, got {self.sticker_padding}")
        # Fail on bad colors at construction rather than halfway through a render
        parse_color(self.background_color)
        parse_color(self.sticker_color)

    @property
    def background_rgba(self):
        """Background as an RGBA tuple, or None when nothing should be filled."""
        if is_transparent(self.background_color):
            return None
        return parse_color(self.background_color)

    @property
    def sticker_rgba(self):
        return parse_color(self.sticker_color)

    def replace(self, **changes):
        """
        Returns a copy with the given fields changed (validated again).
        """
        return dataclass_replace(self, **changes)
