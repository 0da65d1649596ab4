import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index

from feedback_app.extensions import db
from feedback_app.utils.validators import TOPICS


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


_TOPIC_SQL = ", ".join("'" + t + "'" for t in TOPICS)


class Feedback(db.Model):
    __tablename__ = "feedback"

    # Database-assigned identifier, exposed to clients as "_id"
    id = db.Column(db.String(32), primary_key=True, default=_new_id)

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(64), nullable=True)
    job_title = db.Column(db.String(255), nullable=False)
    company_name = db.Column(db.String(255), nullable=False)
    topic = db.Column(db.String(64), nullable=False)
    reason = db.Column(db.Text, nullable=True)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    ip_address = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), onupdate=db.func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(f"topic IN ({_TOPIC_SQL})", name="ck_feedback_topic"),
        Index("ix_feedback_submitted_at", "submitted_at"),
        Index("ix_feedback_topic", "topic"),
    )

    def __repr__(self) -> str:
        return f"<Feedback id={self.id} email={self.email!r} topic={self.topic!r}>"
