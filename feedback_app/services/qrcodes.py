from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO

import qrcode
from PIL import Image, ImageColor
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from feedback_app.errors import ValidationError

DEFAULT_WIDTH = 300
DEFAULT_MARGIN = 2
DEFAULT_DARK = "#000000"
DEFAULT_LIGHT = "#FFFFFF"
MAX_WIDTH = 4000


@dataclass(frozen=True)
class QrOptions:
    width: int = DEFAULT_WIDTH
    margin: int = DEFAULT_MARGIN
    dark: str = DEFAULT_DARK
    light: str = DEFAULT_LIGHT

    @classmethod
    def from_payload(cls, options) -> "QrOptions":
        """
        Build from {"width", "margin", "darkColor", "lightColor"}; missing or
        null keys take the defaults. Raises ValidationError on bad values.
        """
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ValidationError("options must be an object")

        def _int(key, default, lo, hi):
            raw = options.get(key)
            if raw is None or raw == "":
                return default
            try:
                v = int(raw)
            except (TypeError, ValueError):
                raise ValidationError(f"{key} must be an integer")
            if v < lo or v > hi:
                raise ValidationError(f"{key} must be between {lo} and {hi}")
            return v

        def _color(key, default):
            raw = options.get(key) or default
            try:
                ImageColor.getrgb(str(raw))
            except ValueError:
                raise ValidationError(f"{key} is not a valid color")
            return str(raw)

        return cls(
            width=_int("width", DEFAULT_WIDTH, 1, MAX_WIDTH),
            margin=_int("margin", DEFAULT_MARGIN, 0, 100),
            dark=_color("darkColor", DEFAULT_DARK),
            light=_color("lightColor", DEFAULT_LIGHT),
        )


def render_png(url: str, opts: QrOptions) -> bytes:
    """PNG of exactly opts.width x opts.width; margin is the quiet zone in modules."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=10, border=opts.margin)
    qr.add_data(url)
    try:
        qr.make(fit=True)
    except DataOverflowError:
        raise ValidationError("URL is too long to encode")
    img = qr.make_image(fill_color=opts.dark, back_color=opts.light).get_image()
    img = img.convert("RGB").resize((opts.width, opts.width), Image.Resampling.NEAREST)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def to_data_uri(url: str, opts: QrOptions | None = None) -> str:
    png = render_png(url, opts or QrOptions())
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
