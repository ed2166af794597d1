"""initial schema

Revision ID: 3f9a1c2d7b40
Revises:
Create Date: 2026-10-19 10:12:44.512306

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2d7b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Define enum types - create_type=False because we create them explicitly
userrole = postgresql.ENUM("ADMIN", "RUNNER", name="userrole", create_type=False)
runnerstatus = postgresql.ENUM("ACTIVE", "INACTIVE", name="runnerstatus", create_type=False)


def upgrade() -> None:
    # Create enum types first
    userrole.create(op.get_bind(), checkfirst=True)
    runnerstatus.create(op.get_bind(), checkfirst=True)

    # Users table
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(100), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(100), nullable=False),
        sa.Column("role", userrole, nullable=False, server_default="RUNNER"),
        sa.Column("access_token", sa.String(100), unique=True, nullable=True),
        sa.Column("access_token_expiry", sa.DateTime(timezone=True), nullable=True),
    )

    # Runners table
    op.create_table(
        "runners",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("status", runnerstatus, nullable=False, server_default="ACTIVE"),
        sa.Column("personal_best", sa.String(8), nullable=True),
        sa.Column("season_best", sa.String(8), nullable=True),
    )

    # Results table
    op.create_table(
        "results",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "runner_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("runners.id"),
            nullable=False,
        ),
        sa.Column("race_result", sa.String(8), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
    )
    op.create_index("ix_results_runner_id", "results", ["runner_id"])


def downgrade() -> None:
    op.drop_index("ix_results_runner_id", table_name="results")
    op.drop_table("results")
    op.drop_table("runners")
    op.drop_table("users")
    runnerstatus.drop(op.get_bind(), checkfirst=True)
    userrole.drop(op.get_bind(), checkfirst=True)
