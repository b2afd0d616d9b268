import logging

from fastapi import FastAPI, UploadFile, File, HTTPException, Form
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware

from convert import svg_to_source_image, canvas_to_png_bytes
from icon_library.canvas import Canvas
from icon_library.composer import render
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

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI()

# Setup CORS middleware
ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ORIGINS,
)

DOWNLOAD_FILENAME = "icon.png"
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
MAX_CANVAS_SIZE = 4096
MAX_STROKE_STEPS = 360
SVG_CONTENT_TYPES = ("image/svg+xml",)


def is_svg_upload(file):
    """
    Accept only SVG uploads, by extension or declared content type.
    """
    filename = (file.filename or "").lower()
    return filename.endswith(".svg") or file.content_type in SVG_CONTENT_TYPES


def render_icon_png(svg_bytes, settings, steps=DEFAULT_STROKE_STEPS):
    """
    Rasterizes the SVG, renders it with the given settings and returns PNG bytes.
    """
    source = svg_to_source_image(svg_bytes, settings.canvas_width, settings.canvas_height)
    canvas = Canvas(settings.canvas_width, settings.canvas_height)
    rect = render(canvas, settings, source, steps)
    mode = "sticker" if settings.sticker_enabled else "normal"
    logger.info(f"Rendered {mode} icon {canvas.width}x{canvas.height} (artwork at {rect})")
    return canvas_to_png_bytes(canvas)


@app.get("/render-icon/")
async def render_icon_info():
    return JSONResponse(content={
        "message": "This endpoint renders an SVG file into a PNG icon, optionally with a sticker outline.",
        "usage": "Send a POST request with 'file' (SVG file) and optional form fields 'width', 'height', "
                 "'padding', 'background_color', 'sticker_effect', 'sticker_color', 'sticker_padding'.",
        "defaults": {
            "width": DEFAULT_WIDTH,
            "height": DEFAULT_HEIGHT,
            "padding": DEFAULT_PADDING,
            "background_color": DEFAULT_BACKGROUND_COLOR,
            "sticker_effect": False,
            "sticker_color": DEFAULT_STICKER_COLOR,
            "sticker_padding": DEFAULT_STICKER_PADDING,
        },
    })


# Plain def: rendering is blocking, so FastAPI runs it in its threadpool
@app.post("/render-icon/")
def render_icon_endpoint(
    file: UploadFile = File(...),
    width: int = Form(DEFAULT_WIDTH),
    height: int = Form(DEFAULT_HEIGHT),
    padding: int = Form(DEFAULT_PADDING),
    background_color: str = Form(DEFAULT_BACKGROUND_COLOR),
    sticker_effect: bool = Form(False),
    sticker_color: str = Form(DEFAULT_STICKER_COLOR),
    sticker_padding: int = Form(DEFAULT_STICKER_PADDING),
    steps: int = Form(DEFAULT_STROKE_STEPS),
):
    if not is_svg_upload(file):
        raise HTTPException(status_code=400, detail="Only SVG files are supported")
    if width > MAX_CANVAS_SIZE or height > MAX_CANVAS_SIZE:
        raise HTTPException(status_code=400, detail=f"Canvas may be at most {MAX_CANVAS_SIZE}px on a side")
    if steps < 1 or steps > MAX_STROKE_STEPS:
        raise HTTPException(status_code=400, detail=f"steps must be between 1 and {MAX_STROKE_STEPS}")

    svg_bytes = file.file.read(MAX_UPLOAD_BYTES + 1)
    if len(svg_bytes) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="SVG file is too large")
    if not svg_bytes:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    logger.info(f"Received {file.filename} ({len(svg_bytes)} bytes)")

    try:
        settings = RenderSettings(
            canvas_width=width,
            canvas_height=height,
            content_padding=padding,
            background_color=background_color,
            sticker_enabled=sticker_effect,
            sticker_color=sticker_color,
            sticker_padding=sticker_padding,
        )
        png_bytes = render_icon_png(svg_bytes, settings, steps)
    except ValueError as e:
        logger.error(f"Invalid render request: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error rendering icon: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=png_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
