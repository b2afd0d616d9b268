import argparse
import logging
import sys

from convert import load_svg, save_png
from icon_library.composer import RenderContext
from icon_library.settings import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_HEIGHT,
    DEFAULT_PADDING,
    DEFAULT_STICKER_COLOR,
    DEFAULT_STICKER_PADDING,
    DEFAULT_WIDTH,
    RenderSettings,
)
from icon_library.stroke import DEFAULT_STROKE_STEPS

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Render an SVG file into a PNG icon, optionally as a sticker.")
    parser.add_argument("input_svg", help="Input SVG path.")
    parser.add_argument("output_png", help="Output PNG path.")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    parser.add_argument("--padding", type=int, default=DEFAULT_PADDING)
    parser.add_argument(
        "--background-color",
        default=DEFAULT_BACKGROUND_COLOR,
        help="CSS color, or 'transparent' for no fill.",
    )
    parser.add_argument("--sticker", action="store_true", help="Draw a sticker outline around the artwork.")
    parser.add_argument("--sticker-color", default=DEFAULT_STICKER_COLOR)
    parser.add_argument("--sticker-padding", type=int, default=DEFAULT_STICKER_PADDING)
    parser.add_argument("--steps", type=int, default=DEFAULT_STROKE_STEPS, help="Angular copies in the outline.")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        settings = RenderSettings(
            canvas_width=args.width,
            canvas_height=args.height,
            content_padding=args.padding,
            background_color=args.background_color,
            sticker_enabled=args.sticker,
            sticker_color=args.sticker_color,
            sticker_padding=args.sticker_padding,
        )
        # Step 1: Rasterize the SVG large enough for the canvas
        source = load_svg(args.input_svg, settings.canvas_width, settings.canvas_height)

        # Step 2: Render the icon
        context = RenderContext(settings, source, steps=args.steps)
        canvas = context.render()

        # Step 3: Save
        save_png(canvas, args.output_png)
    except (ValueError, OSError) as e:
        logger.error(f"Error rendering {args.input_svg}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Icon written: {args.output_png}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(main())
