from flask import jsonify


class FeedbackError(RuntimeError):
    """Base error; carries the HTTP status and a client-safe message."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(FeedbackError):
    status_code = 400
    message = "Invalid request"


class NotFoundError(FeedbackError):
    status_code = 404
    message = "Feedback not found"


class StorageUnavailable(FeedbackError):
    """Primary store unreachable. Always recovered by the file fallback."""

    status_code = 503
    message = "Storage unavailable"


class InternalError(FeedbackError):
    status_code = 500
    message = "Internal server error"


def register_error_handlers(app):
    @app.errorhandler(FeedbackError)
    def handle_feedback_error(e):
        if e.status_code >= 500:
            app.logger.error("%s: %s", type(e).__name__, e.__cause__ or e)
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"error": "Payload too large"}), 413

    # 429 Too Many Requests with Retry-After when the limiter provides it
    @app.errorhandler(429)
    def too_many_requests(e):
        retry_after = getattr(e, "retry_after", None)
        headers = {}
        payload = {"error": "Too many requests, please try again later."}
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
            payload["retry_after"] = int(retry_after)
        return payload, 429, headers

    @app.errorhandler(500)
    def server_error(e):
        original = getattr(e, "original_exception", None)
        app.logger.error("Unhandled error: %r", original or e)
        return jsonify({"error": "Something went wrong!"}), 500
