"""Initial schema: assets with pgvector embeddings, vault, staging lifecycle, profiles, memory.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# text-embedding-004 produces 768 dimensions
EMBEDDING_DIMENSIONS = 768

MATCH_ASSETS_FUNCTION = f"""
CREATE OR REPLACE FUNCTION match_assets(
    query_embedding vector({EMBEDDING_DIMENSIONS}),
    match_threshold float,
    match_count int,
    user_id_filter text
)
RETURNS TABLE (
    id uuid,
    filename varchar,
    type varchar,
    url text,
    metadata jsonb,
    created_at timestamptz,
    similarity float
)
LANGUAGE sql STABLE
AS $$
    SELECT
        assets.id,
        assets.filename,
        assets.type,
        assets.url,
        assets.metadata,
        assets.created_at,
        1 - (assets.embedding <=> query_embedding) AS similarity
    FROM assets
    WHERE assets.user_id = user_id_filter
      AND assets.embedding IS NOT NULL
      AND 1 - (assets.embedding <=> query_embedding) > match_threshold
    ORDER BY assets.embedding <=> query_embedding
    LIMIT match_count;
$$;
"""


def _id_column() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False)


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "assets",
        _id_column(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("filename", sa.String(1024), nullable=True),
        sa.Column("type", sa.String(32), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("publication_status", sa.String(20), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.execute(f"ALTER TABLE assets ADD COLUMN embedding vector({EMBEDDING_DIMENSIONS})")
    op.create_index("ix_assets_user_id", "assets", ["user_id"])

    op.create_table(
        "user_assets",
        _id_column(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("filename", sa.String(1024), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_assets_user_id", "user_assets", ["user_id"])

    op.create_table(
        "user_profiles",
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(255), nullable=True),
        sa.Column("industry", sa.String(255), nullable=True),
        sa.Column("goals", sa.Text(), nullable=True),
        sa.Column("writing_style", sa.String(255), nullable=True),
        sa.Column("languages", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "staging_items",
        _id_column(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(32), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("asset_id", sa.String(64), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("is_categorized", sa.Boolean(), nullable=True),
        sa.Column("lifecycle_state", sa.String(20), nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_staging_items_user_id", "staging_items", ["user_id"])

    op.create_table(
        "archived_items",
        _id_column(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("original_staging_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(32), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("asset_id", sa.String(64), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_archived_items_user_id", "archived_items", ["user_id"])

    op.create_table(
        "vault_items",
        _id_column(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(512), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("category", sa.String(128), nullable=True),
        sa.Column("asset_type", sa.String(32), nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_vault_items_user_id", "vault_items", ["user_id"])

    op.create_table(
        "haven_conversations",
        _id_column(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("session_summary", sa.Text(), nullable=False),
        sa.Column("key_topics", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_haven_conversations_user_id", "haven_conversations", ["user_id"])

    op.execute(MATCH_ASSETS_FUNCTION)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS match_assets")
    op.drop_index("ix_haven_conversations_user_id", table_name="haven_conversations")
    op.drop_table("haven_conversations")
    op.drop_index("ix_vault_items_user_id", table_name="vault_items")
    op.drop_table("vault_items")
    op.drop_index("ix_archived_items_user_id", table_name="archived_items")
    op.drop_table("archived_items")
    op.drop_index("ix_staging_items_user_id", table_name="staging_items")
    op.drop_table("staging_items")
    op.drop_table("user_profiles")
    op.drop_index("ix_user_assets_user_id", table_name="user_assets")
    op.drop_table("user_assets")
    op.drop_index("ix_assets_user_id", table_name="assets")
    op.drop_table("assets")
