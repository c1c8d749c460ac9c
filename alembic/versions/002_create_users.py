"""002: create users table

Revision ID: 002
Revises: 001
Create Date: 2026-09-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              VARCHAR(64)     PRIMARY KEY,
            external_id     VARCHAR(128)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            username        VARCHAR(64)     NOT NULL,
            wallet_balance  BIGINT          NOT NULL DEFAULT 0,
            rating          INTEGER         NOT NULL DEFAULT 1000,
            wins            INTEGER         NOT NULL DEFAULT 0,
            losses          INTEGER         NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_external_id     UNIQUE (external_id),
            CONSTRAINT ck_users_wallet_non_neg  CHECK (wallet_balance >= 0),
            CONSTRAINT ck_users_rating_non_neg  CHECK (rating >= 0),
            CONSTRAINT ck_users_username_len    CHECK (LENGTH(username) >= 3)
        );
    """)
    op.execute("CREATE INDEX idx_users_email ON users (email);")
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE users IS 'Players and their wallets; identity lives in the IdP';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
