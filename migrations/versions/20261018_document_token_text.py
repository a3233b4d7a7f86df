"""Store document tokens as unbounded text

Revision ID: 20261018_document_token_text
Revises: 20261012_document_store
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261018_document_token_text"
down_revision = "20261012_document_store"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # The full normalized dish name is itself a token.
    op.alter_column(
        "document_tokens",
        "token",
        existing_type=sa.String(length=255),
        type_=sa.Text(),
        existing_nullable=False,
    )


def downgrade() -> None:
    op.alter_column(
        "document_tokens",
        "token",
        existing_type=sa.Text(),
        type_=sa.String(length=255),
        existing_nullable=False,
    )
