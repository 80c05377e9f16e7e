"""create_product_images

Revision ID: 3c9d2f8a41b7
Revises:
Create Date: 2026-10-18 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9d2f8a41b7'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('caption', sa.String(length=150), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('width', sa.Integer(), nullable=False, server_default='1200'),
        sa.Column('height', sa.Integer(), nullable=False, server_default='800'),
        sa.Column('rotation', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('date_created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_modified', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('rotation IN (0, 90, 180, 270)', name='ck_product_images_rotation'),
        sa.CheckConstraint('display_order >= 0', name='ck_product_images_display_order'),
    )
    op.create_index(op.f('ix_product_images_id'), 'product_images', ['id'], unique=False)
    op.create_index(op.f('ix_product_images_product_id'), 'product_images', ['product_id'], unique=False)

    # Gallery listing reads one product's images by display_order, ties by id
    op.create_index(
        'ix_product_images_product_order',
        'product_images',
        ['product_id', 'display_order', 'id'],
        unique=False
    )


def downgrade() -> None:
    op.drop_index('ix_product_images_product_order', table_name='product_images')
    op.drop_index(op.f('ix_product_images_product_id'), table_name='product_images')
    op.drop_index(op.f('ix_product_images_id'), table_name='product_images')
    op.drop_table('product_images')
