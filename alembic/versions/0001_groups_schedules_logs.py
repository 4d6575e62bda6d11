"""groups, schedules, logs

Revision ID: 0001
Revises:
Create Date: 2025-02-09 12:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_number", sa.String(), nullable=False),
    )
    op.create_index("ix_groups_id", "groups", ["id"])
    op.create_index("ix_groups_group_number", "groups", ["group_number"], unique=True)

    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("lesson_type", sa.String(), nullable=False),
        sa.Column("time", sa.String(), nullable=False),
        sa.Column("auditorium", sa.String(), nullable=False),
        sa.Column(
            "group_id",
            sa.Integer(),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_schedules_id", "schedules", ["id"])
    op.create_index("ix_schedules_group_id", "schedules", ["group_id"])

    op.create_table(
        "logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("level", sa.String()),
        sa.Column("message", sa.String()),
    )
    op.create_index("ix_logs_id", "logs", ["id"])


def downgrade():
    op.drop_index("ix_logs_id", table_name="logs")
    op.drop_table("logs")
    op.drop_index("ix_schedules_group_id", table_name="schedules")
    op.drop_index("ix_schedules_id", table_name="schedules")
    op.drop_table("schedules")
    op.drop_index("ix_groups_group_number", table_name="groups")
    op.drop_index("ix_groups_id", table_name="groups")
    op.drop_table("groups")
