"""007: create transactions table and seed initial data

Revision ID: 007
Revises: 006
Create Date: 2026-09-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # match_id is a plain reference: ENTRY_FEE rows are written in the same
    # transaction that creates the match, but DEPOSIT rows have none
    op.execute("""
        CREATE TABLE transactions (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            tx_type         VARCHAR(32)     NOT NULL,
            amount          BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'COMPLETED',
            match_id        VARCHAR(64),
            description     VARCHAR(255),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_tx_type CHECK (tx_type IN (
                'DEPOSIT', 'ENTRY_FEE', 'PRIZE_WIN', 'PLATFORM_FEE', 'ENTRY_FEE_REFUND'
            )),
            CONSTRAINT ck_tx_amount_nonzero CHECK (amount <> 0)
        );
    """)
    op.execute("CREATE INDEX idx_tx_user_id ON transactions (user_id, (CAST(id AS BIGINT)) DESC);")
    op.execute("CREATE INDEX idx_tx_match_id ON transactions (match_id);")
    op.execute("CREATE INDEX idx_tx_type ON transactions (tx_type);")

    # Platform fee collector
    op.execute("""
        INSERT INTO users (id, external_id, email, username, wallet_balance, rating)
        VALUES ('PLATFORM_FEE', 'PLATFORM_FEE', 'platform@code-duel.internal',
                'platform_fee', 0, 0);
    """)

    # Sample problems
    op.execute("""
        INSERT INTO problems (id, title, difficulty) VALUES
            ('PRB-TWO-SUM', 'Two Sum', 'EASY'),
            ('PRB-VALID-PARENS', 'Valid Parentheses', 'EASY'),
            ('PRB-LRU-CACHE', 'LRU Cache', 'MEDIUM'),
            ('PRB-MERGE-INTERVALS', 'Merge Intervals', 'MEDIUM'),
            ('PRB-MEDIAN-SORTED', 'Median of Two Sorted Arrays', 'HARD');
    """)


def downgrade() -> None:
    op.execute("DELETE FROM problems;")
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
    op.execute("DELETE FROM users WHERE id = 'PLATFORM_FEE';")
