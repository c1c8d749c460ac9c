"""005: create matches table

Revision ID: 005
Revises: 004
Create Date: 2026-09-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE matches (
            id                  VARCHAR(64)     PRIMARY KEY,
            player1_id          VARCHAR(64)     NOT NULL REFERENCES users(id),
            player2_id          VARCHAR(64)     NOT NULL REFERENCES users(id),
            player1_username    VARCHAR(64)     NOT NULL,
            player2_username    VARCHAR(64)     NOT NULL,
            problem_id          VARCHAR(64)     NOT NULL REFERENCES problems(id),
            problem_title       VARCHAR(255)    NOT NULL,
            problem_difficulty  VARCHAR(16)     NOT NULL,
            entry_fee           BIGINT          NOT NULL,
            prize_pool          BIGINT          NOT NULL,
            platform_fee        BIGINT          NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'ACTIVE',
            outcome             VARCHAR(16),
            player1_submitted   BOOLEAN         NOT NULL DEFAULT FALSE,
            player2_submitted   BOOLEAN         NOT NULL DEFAULT FALSE,
            player1_submit_time TIMESTAMPTZ,
            player2_submit_time TIMESTAMPTZ,
            winner_id           VARCHAR(64),
            winner_username     VARCHAR(64),
            started_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            completed_at        TIMESTAMPTZ,
            CONSTRAINT ck_matches_distinct_players CHECK (player1_id <> player2_id),
            CONSTRAINT ck_matches_pot CHECK (prize_pool + platform_fee = entry_fee * 2),
            CONSTRAINT ck_matches_status CHECK (status IN ('ACTIVE', 'COMPLETED')),
            CONSTRAINT ck_matches_outcome CHECK (outcome IS NULL OR outcome IN ('WIN', 'DRAW')),
            CONSTRAINT ck_matches_winner CHECK (
                winner_id IS NULL OR winner_id IN (player1_id, player2_id)
            )
        );
    """)
    op.execute("CREATE INDEX idx_matches_player1_status ON matches (player1_id, status);")
    op.execute("CREATE INDEX idx_matches_player2_status ON matches (player2_id, status);")
    op.execute(
        "CREATE INDEX idx_matches_active_started ON matches (started_at) WHERE status = 'ACTIVE';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS matches CASCADE;")
