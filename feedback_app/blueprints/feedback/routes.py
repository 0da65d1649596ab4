from flask import current_app, jsonify, request

from feedback_app.errors import ValidationError
from feedback_app.models import FeedbackEntry
from feedback_app.services.storage import with_fallback
from feedback_app.utils.validators import (
    REQUIRED_FIELDS,
    clean_str,
    is_valid_email,
    is_valid_topic,
    missing_fields,
)
from . import bp


@bp.post("", strict_slashes=False)
@bp.post("/", strict_slashes=False)
def submit():
    """Accept one submission from the web form (JSON or form-encoded)."""
    data = (request.get_json(silent=True) or {}) if request.is_json else (request.form or {})
    if not isinstance(data, dict):
        data = {}

    missing = missing_fields(data)
    if missing:
        current_app.logger.info("feedback_rejected missing=%s", ",".join(missing))
        raise ValidationError("Missing required fields: " + ", ".join(REQUIRED_FIELDS))

    email = clean_str(data.get("email")).lower()
    if not is_valid_email(email):
        current_app.logger.info("feedback_rejected invalid_email")
        raise ValidationError("Invalid email format")

    topic = clean_str(data.get("topic"))
    if not is_valid_topic(topic):
        current_app.logger.info("feedback_rejected invalid_topic")
        raise ValidationError("Invalid topic")

    entry = FeedbackEntry(
        name=clean_str(data.get("name")),
        email=email,
        phone=clean_str(data.get("phone")),
        job_title=clean_str(data.get("jobTitle")),
        company_name=clean_str(data.get("companyName")),
        topic=topic,
        reason=clean_str(data.get("reason"), max_len=5000),
        ip_address=request.remote_addr,
    )

    entry_id = with_fallback("save", lambda store: store.add(entry))
    current_app.logger.info("feedback_submitted id=%s store=%s", entry_id, entry_id.origin)
    return jsonify({"message": "Feedback submitted successfully", "id": entry_id.value}), 201
