"""
Renders a decoded image into a fixed-size icon, optionally with a sticker outline.
"""
from icon_library.canvas import Canvas, SourceImage
from icon_library.composer import RenderContext, render
from icon_library.fitter import FitRect, fit
from icon_library.settings import RenderSettings, parse_color
from icon_library.silhouette import extract_silhouette
from icon_library.stroke import DEFAULT_STROKE_STEPS, stroke_outline

__all__ = [
    "Canvas",
    "SourceImage",
    "RenderContext",
    "render",
    "FitRect",
    "fit",
    "RenderSettings",
    "parse_color",
    "extract_silhouette",
    "DEFAULT_STROKE_STEPS",
    "stroke_outline",
]
