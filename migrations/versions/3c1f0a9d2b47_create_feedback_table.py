from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3c1f0a9d2b47"
down_revision = None
branch_labels = None
depends_on = None

TOPICS = ("AI in HR", "People intelligence", "Skill Based Organization", "All of the above")


def upgrade():
    op.create_table(
        "feedback",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("job_title", sa.String(length=255), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("topic", sa.String(length=64), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "topic IN (" + ", ".join("'" + t + "'" for t in TOPICS) + ")",
            name="ck_feedback_topic",
        ),
    )
    op.create_index("ix_feedback_submitted_at", "feedback", ["submitted_at"], unique=False)
    op.create_index("ix_feedback_topic", "feedback", ["topic"], unique=False)


def downgrade():
    op.drop_index("ix_feedback_topic", table_name="feedback")
    op.drop_index("ix_feedback_submitted_at", table_name="feedback")
    op.drop_table("feedback")
