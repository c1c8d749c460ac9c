"""006: create submissions table

Revision ID: 006
Revises: 005
Create Date: 2026-09-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE submissions (
            id              VARCHAR(64)     PRIMARY KEY,
            match_id        VARCHAR(64)     NOT NULL REFERENCES matches(id),
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            username        VARCHAR(64)     NOT NULL,
            code            TEXT            NOT NULL,
            language        VARCHAR(32)     NOT NULL,
            is_correct      BOOLEAN         NOT NULL,
            submitted_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_submissions_match_user UNIQUE (match_id, user_id)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS submissions CASCADE;")
