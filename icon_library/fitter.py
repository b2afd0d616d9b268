from dataclasses import dataclass


@dataclass(frozen=True)
class FitRect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height


def fits(available_width, available_height):
    """
    Whether anything can be drawn in the available box at all.
    """
    return available_width > 0 and available_height > 0


def fit(available_width, available_height, aspect_ratio, center):
    """
    Largest aspect-preserving rectangle that fits the available box, centred on center.

    :param available_width: Width of the box, must be positive (see fits()).
    :param available_height: Height of the box, must be positive.
    :param aspect_ratio: Source width / height.
    :param center: (x, y) of the canvas centre; the box is assumed centred there.
    """
    if aspect_ratio <= 0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")

    render_width = available_width
    render_height = available_width / aspect_ratio

    # Height-limited: clamp to the box height instead
    if render_height > available_height:
        render_height = available_height
        render_width = available_height * aspect_ratio

    center_x, center_y = center
    return FitRect(
        x=center_x - render_width / 2,
        y=center_y - render_height / 2,
        width=render_width,
        height=render_height,
    )
