"""Create users, menus, categories, items and item_images

Revision ID: 20261019_menu_tables
Revises:
Create Date: 2026-10-19 10:00:00.000000

Categories and items carry an integer `position` spaced by 10000 inside
their parent; the (parent, position) indexes back the neighbour lookups.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_menu_tables'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=True),
        sa.Column('subdomain', sa.String(length=63), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('subdomain', name='uq_users_subdomain'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'menus',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('logo', sa.String(length=255), nullable=True),
        sa.Column('background_image', sa.String(length=255), nullable=True),
        sa.Column('color', sa.JSON(), nullable=True),
        sa.Column('pos', sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_menus_user_id', 'menus', ['user_id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('menu_id', sa.Integer(), sa.ForeignKey('menus.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='10000'),
        *_timestamps(),
        sa.CheckConstraint('position >= 0', name='ck_categories_position_non_negative'),
    )
    op.create_index('idx_categories_menu_position', 'categories', ['menu_id', 'position'])

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=160), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='10000'),
        *_timestamps(),
        sa.CheckConstraint('position >= 0', name='ck_items_position_non_negative'),
    )
    op.create_index('idx_items_category_position', 'items', ['category_id', 'position'])

    op.create_table(
        'item_images',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('url', sa.String(length=1024), nullable=False),
        sa.Column('alt', sa.String(length=255), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_item_images_item_id', 'item_images', ['item_id'])


def downgrade():
    op.drop_index('ix_item_images_item_id', table_name='item_images')
    op.drop_table('item_images')
    op.drop_index('idx_items_category_position', table_name='items')
    op.drop_table('items')
    op.drop_index('idx_categories_menu_position', table_name='categories')
    op.drop_table('categories')
    op.drop_index('ix_menus_user_id', table_name='menus')
    op.drop_table('menus')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
