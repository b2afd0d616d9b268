import logging

from icon_library.canvas import Canvas
from icon_library.fitter import fit, fits
from icon_library.settings import RenderSettings
from icon_library.silhouette import extract_silhouette
from icon_library.stroke import DEFAULT_STROKE_STEPS, stroke_outline

logger = logging.getLogger(__name__)


def render(canvas, settings, source=None, steps=DEFAULT_STROKE_STEPS):
    """
    Renders one frame of the icon into canvas, replacing whatever it held.

    Steps:
    1. Resize and clear the canvas to the settings' dimensions.
    2. Fill the background unless it is transparent.
    3. Fit the artwork inside the padded box and draw it, with the sticker
       outline underneath when sticker mode is on.

    Artwork that does not fit (padding eating the whole canvas) leaves the
    background only.

    :param canvas: Canvas to draw into; resized as needed.
    :param settings: RenderSettings for this frame.
    :param source: SourceImage, or None for a background-only frame.
    :param steps: Number of angular copies for the sticker outline.
    :return: The FitRect the artwork was drawn at, or None if nothing was drawn.
    """
    # Step 1: Start from a clean buffer
    canvas.resize(settings.canvas_width, settings.canvas_height)

    # Step 2: Background
    background = settings.background_rgba
    if background is not None:
        canvas.fill(background)

    if source is None:
        logger.debug("No source image; rendered background only")
        return None

    # Step 3: Box left for the artwork
    available_width = settings.canvas_width - settings.content_padding * 2
    available_height = settings.canvas_height - settings.content_padding * 2
    if not fits(available_width, available_height):
        logger.info(
            f"Padding {settings.content_padding} leaves no room on a "
            f"{settings.canvas_width}x{settings.canvas_height} canvas; rendered background only"
        )
        return None

    center = (settings.canvas_width / 2, settings.canvas_height / 2)

    if not settings.sticker_enabled:
        rect = fit(available_width, available_height, source.aspect_ratio, center)
        canvas.draw_image(source, rect)
        logger.debug(f"Drew artwork at {rect}")
        return rect

    # Sticker mode: reserve room for the outline as well
    safe_width = available_width - settings.sticker_padding * 2
    safe_height = available_height - settings.sticker_padding * 2
    if not fits(safe_width, safe_height):
        logger.info(
            f"Sticker padding {settings.sticker_padding} leaves no room for the artwork; "
            f"rendered background only"
        )
        return None

    rect = fit(safe_width, safe_height, source.aspect_ratio, center)

    silhouette = extract_silhouette(source, rect, settings.sticker_rgba, canvas.size)
    stroke_outline(canvas, silhouette, settings.sticker_padding, steps)

    # Artwork goes on top so the outline never covers it
    canvas.draw_image(source, rect)
    logger.debug(f"Drew sticker artwork at {rect} with outline radius {settings.sticker_padding}")
    return rect


class RenderContext:
    """
    Caller-owned holder for the current settings and source image.

    Nothing re-renders on its own: call render() whenever the settings or the
    image changed.
    """

    def __init__(self, settings=None, source=None, steps=DEFAULT_STROKE_STEPS):
        self.settings = settings if settings is not None else RenderSettings()
        self.source = source
        self.steps = steps

    def update(self, **changes):
        """
        Changes one or more settings fields, e.g. update(sticker_enabled=True).
        """
        self.settings = self.settings.replace(**changes)
        return self.settings

    def set_source(self, source):
        """
        Replaces the source image; None clears it.
        """
        self.source = source

    def render(self, canvas=None):
        """
        Renders the current state, into canvas if given or a new one.
        """
        if canvas is None:
            canvas = Canvas(self.settings.canvas_width, self.settings.canvas_height)
        render(canvas, self.settings, self.source, self.steps)
        return canvas
