from datetime import datetime, timezone

from flask import current_app, jsonify, send_file

from feedback_app.services.reports import (
    XLSX_MIMETYPE,
    build_workbook,
    export_filename,
    export_rows,
    feedback_stats,
)
from feedback_app.services.storage import with_fallback
from . import bp


@bp.get("/feedback")
def list_feedback():
    """All entries, newest first."""
    entries = with_fallback("fetch", lambda store: store.list_entries())
    return jsonify([e.to_record() for e in entries])


@bp.get("/feedback/export")
def export_feedback():
    """Download every entry as an .xlsx workbook."""
    entries = with_fallback("fetch", lambda store: store.list_entries())
    rows = export_rows(entries, tz=current_app.config.get("EXPORT_TIMEZONE", "UTC"))
    buf = build_workbook(rows)
    current_app.logger.info("feedback_exported rows=%s", len(rows))
    return send_file(
        buf,
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=export_filename(datetime.now(timezone.utc).date()),
    )


@bp.get("/feedback/stats")
def feedback_stats_json():
    return jsonify(with_fallback("stats", feedback_stats))


@bp.delete("/feedback/<feedback_id>")
def delete_feedback(feedback_id: str):
    removed = with_fallback("delete", lambda store: store.delete(feedback_id))
    current_app.logger.info("feedback_deleted id=%s store=%s", removed, removed.origin)
    return jsonify({"message": "Feedback deleted successfully", "id": feedback_id})
