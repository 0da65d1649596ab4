from feedback_app.extensions import limiter
from feedback_app.services.storage import active_store
from . import bp


@bp.get("/health")
@limiter.exempt
def health():
    return {"status": "OK", "message": "Server is running", "storage": active_store().name}, 200
