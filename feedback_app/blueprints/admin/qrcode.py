from flask import current_app, jsonify, request

from feedback_app.errors import InternalError, ValidationError
from feedback_app.services.qrcodes import QrOptions, to_data_uri
from . import bp


def _render(url: str, opts: QrOptions):
    try:
        data_uri = to_data_uri(url, opts)
    except (ValueError, OSError) as exc:
        raise InternalError("Failed to generate QR code") from exc
    return jsonify({"qrCode": data_uri})


@bp.get("/qrcode")
def qrcode_get():
    """QR for ?url= with the fixed default look."""
    url = (request.args.get("url") or "").strip()
    if not url:
        raise ValidationError("URL parameter is required")
    return _render(url, QrOptions())


@bp.post("/qrcode")
def qrcode_post():
    """QR for {"url", "options": {width, margin, darkColor, lightColor}}."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    url = str(data.get("url") or "").strip()
    if not url:
        raise ValidationError("URL is required")
    opts = QrOptions.from_payload(data.get("options"))
    current_app.logger.debug("qrcode width=%s margin=%s", opts.width, opts.margin)
    return _render(url, opts)
