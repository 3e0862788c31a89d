"""initial schema: users, sessions, program, activity

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

BigIntId = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()

    if "users" not in tables:
        op.create_table(
            "users",
            sa.Column("id", BigIntId, primary_key=True, autoincrement=True),
            sa.Column("username", sa.String(length=64), nullable=False, unique=True),
            sa.Column("is_active", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )

    if "sessions" not in tables:
        op.create_table(
            "sessions",
            sa.Column("id", BigIntId, primary_key=True, autoincrement=True),
            sa.Column("user_id", BigIntId, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("token_hash", sa.String(length=64), nullable=False, unique=True),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_sessions_user_id", "sessions", ["user_id"], unique=False)

    if "program" not in tables:
        op.create_table(
            "program",
            sa.Column("id", BigIntId, primary_key=True, autoincrement=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("destroyed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("type", sa.String(length=30), nullable=False),
            sa.Column("os", sa.String(length=30), nullable=False),
            sa.Column("arch", sa.String(length=10), nullable=False),
            sa.Column("branch", sa.String(length=255), nullable=False),
            sa.Column("files", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False),
            sqlite_autoincrement=True,
        )
        op.create_index(
            "ix_program_identity_id", "program", ["type", "os", "arch", "branch", "id"], unique=False
        )

    if "activity" not in tables:
        op.create_table(
            "activity",
            sa.Column("id", BigIntId, primary_key=True, autoincrement=True),
            sa.Column("user_id", BigIntId, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("name", sa.String(length=64), nullable=False),
            sa.Column("data", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=True),
            sqlite_autoincrement=True,
        )
        op.create_index("ix_activity_user_id_id", "activity", ["user_id", "id"], unique=False)


def downgrade() -> None:
    bind = op.get_bind()
    tables = sa.inspect(bind).get_table_names()

    for table in ("activity", "program", "sessions", "users"):
        if table in tables:
            op.drop_table(table)
