"""Initial store schema

Revision ID: 5e1d7c2a9b40
Revises:
Create Date: 2026-03-01 10:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from petfeed_recommender.config import get_settings

# revision identifiers, used by Alembic.
revision: str = '5e1d7c2a9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Same schema the adapters query and env.py creates
SCHEMA = get_settings().store_schema


def _item_table(name: str, *columns: sa.Column) -> None:
    # Embeddings are JSON arrays; rows without one are skipped by the loader
    op.create_table(name,
    sa.Column('id', sa.String(length=255), nullable=False),
    *columns,
    sa.Column('embedding', sa.JSON(), nullable=True),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    schema=SCHEMA
    )


def upgrade() -> None:
    _item_table('adoptions',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('species', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
    )
    _item_table('articles',
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('topic', sa.String(length=100), nullable=True),
        sa.Column('body', sa.Text(), nullable=True),
    )

    op.create_table('user_profiles',
    sa.Column('external_user_id', sa.String(length=255), nullable=False),
    sa.Column('preferences', sa.JSON(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('external_user_id'),
    schema=SCHEMA
    )

    op.create_table('api_tokens',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('token_hash', sa.String(length=64), nullable=False),
    sa.Column('external_user_id', sa.String(length=255), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
    sa.PrimaryKeyConstraint('id'),
    schema=SCHEMA
    )
    op.create_index('ix_api_tokens_token_hash', 'api_tokens', ['token_hash'], unique=True, schema=SCHEMA)
    op.create_index('ix_api_tokens_external_user_id', 'api_tokens', ['external_user_id'], unique=False, schema=SCHEMA)


def downgrade() -> None:
    op.drop_index('ix_api_tokens_external_user_id', table_name='api_tokens', schema=SCHEMA)
    op.drop_index('ix_api_tokens_token_hash', table_name='api_tokens', schema=SCHEMA)
    op.drop_table('api_tokens', schema=SCHEMA)
    op.drop_table('user_profiles', schema=SCHEMA)
    op.drop_table('articles', schema=SCHEMA)
    op.drop_table('adoptions', schema=SCHEMA)
