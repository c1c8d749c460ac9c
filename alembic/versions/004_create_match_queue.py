"""004: create match_queue table

Revision ID: 004
Revises: 003
Create Date: 2026-09-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE match_queue (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            username        VARCHAR(64)     NOT NULL,
            rating          INTEGER         NOT NULL,
            entry_fee       BIGINT          NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'WAITING',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_queue_entry_fee_pos CHECK (entry_fee > 0),
            CONSTRAINT ck_queue_status CHECK (status IN ('WAITING', 'MATCHED', 'CANCELLED'))
        );
    """)
    # At most one WAITING entry per user, enforced across processes
    op.execute("""
        CREATE UNIQUE INDEX uq_queue_user_waiting
            ON match_queue (user_id) WHERE status = 'WAITING';
    """)
    op.execute("""
        CREATE INDEX idx_queue_waiting_lookup
            ON match_queue (entry_fee, rating, created_at) WHERE status = 'WAITING';
    """)
    op.execute("""
        CREATE TRIGGER trg_match_queue_updated_at
            BEFORE UPDATE ON match_queue
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS match_queue CASCADE;")
