"""Initial stock ledger schema

Revision ID: 3f1a9c2b7d10
Revises:
Create Date: 2025-11-20 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1a9c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

location_type = sa.Enum('INTERNAL', 'VENDOR', 'CUSTOMER', 'INVENTORY_LOSS', name='locationtype')
contact_type = sa.Enum('VENDOR', 'CUSTOMER', name='contacttype')
operation_type = sa.Enum('RECEIPT', 'DELIVERY', 'INTERNAL', 'ADJUSTMENT', name='operationtype')
operation_status = sa.Enum('DRAFT', 'WAITING', 'READY', 'DONE', 'CANCELLED', name='operationstatus')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('action', sa.String(length=50)),
        sa.Column('resource', sa.String(length=50)),
        sa.Column('status', sa.String(length=20)),
        sa.Column('reference', sa.String(length=64), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    for col in ('id', 'ts', 'action', 'resource', 'status', 'reference'):
        op.create_index(op.f(f'ix_logs_{col}'), 'logs', [col], unique=False)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('cost_price', sa.Float(), sa.CheckConstraint('cost_price >= 0'), nullable=False),
        sa.Column('selling_price', sa.Float(), sa.CheckConstraint('selling_price >= 0'), nullable=False),
        sa.Column('on_hand', sa.Float(), sa.CheckConstraint('on_hand >= 0'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
    )
    op.create_index(op.f('ix_products_id'), 'products', ['id'], unique=False)
    op.create_index(op.f('ix_products_sku'), 'products', ['sku'], unique=True)
    op.create_index(op.f('ix_products_name'), 'products', ['name'], unique=False)
    op.create_index(op.f('ix_products_category'), 'products', ['category'], unique=False)

    op.create_table(
        'warehouses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('short_code', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
    )
    op.create_index(op.f('ix_warehouses_id'), 'warehouses', ['id'], unique=False)
    op.create_index(op.f('ix_warehouses_short_code'), 'warehouses', ['short_code'], unique=True)

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', location_type, nullable=False),
        sa.Column('warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        sa.CheckConstraint("type != 'INTERNAL' OR warehouse_id IS NOT NULL", name='ck_location_internal_has_warehouse'),
    )
    op.create_index(op.f('ix_locations_id'), 'locations', ['id'], unique=False)
    op.create_index(op.f('ix_locations_warehouse_id'), 'locations', ['warehouse_id'], unique=False)

    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', contact_type, nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
    )
    op.create_index(op.f('ix_contacts_id'), 'contacts', ['id'], unique=False)
    op.create_index(op.f('ix_contacts_name'), 'contacts', ['name'], unique=False)

    op.create_table(
        'stock_items',
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), primary_key=True),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), primary_key=True),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
    )
    op.create_index(op.f('ix_stock_items_location_id'), 'stock_items', ['location_id'], unique=False)

    op.create_table(
        'operations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reference', sa.String(length=64), nullable=False),
        sa.Column('type', operation_type, nullable=False),
        sa.Column('status', operation_status, nullable=False),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('source_location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=True),
        sa.Column('destination_location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=True),
        sa.Column('contact_id', sa.Integer(), sa.ForeignKey('contacts.id'), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('done_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f('ix_operations_id'), 'operations', ['id'], unique=False)
    op.create_index(op.f('ix_operations_reference'), 'operations', ['reference'], unique=True)
    op.create_index(op.f('ix_operations_type'), 'operations', ['type'], unique=False)
    op.create_index(op.f('ix_operations_status'), 'operations', ['status'], unique=False)
    op.create_index(op.f('ix_operations_created_at'), 'operations', ['created_at'], unique=False)

    op.create_table(
        'operation_lines',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('operation_id', sa.Integer(), sa.ForeignKey('operations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('demand_qty', sa.Float(), sa.CheckConstraint('demand_qty > 0'), nullable=False),
        sa.Column('done_qty', sa.Float(), sa.CheckConstraint('done_qty >= 0'), nullable=False),
    )
    op.create_index(op.f('ix_operation_lines_id'), 'operation_lines', ['id'], unique=False)
    op.create_index(op.f('ix_operation_lines_operation_id'), 'operation_lines', ['operation_id'], unique=False)
    op.create_index(op.f('ix_operation_lines_product_id'), 'operation_lines', ['product_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('operation_lines')
    op.drop_table('operations')
    op.drop_table('stock_items')
    op.drop_table('contacts')
    op.drop_table('locations')
    op.drop_table('warehouses')
    op.drop_table('products')
    op.drop_table('logs')
    op.drop_table('users')
    bind = op.get_bind()
    for enum_type in (operation_status, operation_type, contact_type, location_type):
        enum_type.drop(bind, checkfirst=True)
