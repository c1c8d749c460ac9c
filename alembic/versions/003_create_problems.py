"""003: create problems table

Revision ID: 003
Revises: 002
Create Date: 2026-09-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE problems (
            id              VARCHAR(64)     PRIMARY KEY,
            title           VARCHAR(255)    NOT NULL,
            difficulty      VARCHAR(16)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_problems_difficulty CHECK (difficulty IN ('EASY', 'MEDIUM', 'HARD'))
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS problems CASCADE;")
