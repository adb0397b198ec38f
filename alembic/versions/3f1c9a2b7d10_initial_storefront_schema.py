"""initial storefront schema

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 09:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLModel stores enum members by name
order_status = sa.Enum('pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled', name='orderstatus')
shipment_status = sa.Enum('pending', 'processing', 'shipped', 'in_transit', 'delivered', 'returned', name='shipmentstatus')
payment_status = sa.Enum('pending', 'completed', 'failed', 'refunded', name='paymentstatus')
invoice_status = sa.Enum('issued', 'paid', 'void', name='invoicestatus')
reservation_status = sa.Enum('reserved', 'released', 'committed', name='reservationstatus')
recipient_role = sa.Enum('admin', 'client', name='recipientrole')


def _money(name):
    return sa.Column(name, sa.Numeric(12, 2), nullable=False)


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('can_login', sa.Boolean(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)

    op.create_table(
        'category',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_category_name', 'category', ['name'], unique=True)
    op.create_index('ix_category_slug', 'category', ['slug'])

    op.create_table(
        'product',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        _money('price'),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('category.id'), nullable=True),
        sa.CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
    )
    op.create_index('ix_product_slug', 'product', ['slug'])

    op.create_table(
        'cartitem',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('product.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_cartitem_user_product'),
    )
    op.create_index('ix_cartitem_user_id', 'cartitem', ['user_id'])

    op.create_table(
        'order',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_number', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('status', order_status, nullable=False),
        _money('subtotal'),
        _money('tax_amount'),
        _money('shipping_cost'),
        _money('total_amount'),
        sa.Column('shipping_address', sa.String(), nullable=False),
        sa.Column('shipping_city', sa.String(), nullable=False),
        sa.Column('shipping_postal_code', sa.String(), nullable=True),
        sa.Column('shipping_country', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_order_order_number', 'order', ['order_number'], unique=True)
    op.create_index('ix_order_user_id', 'order', ['user_id'])

    op.create_table(
        'orderitem',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('product.id'), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('product_image', sa.String(), nullable=True),
        _money('unit_price'),
        sa.Column('quantity', sa.Integer(), nullable=False),
        _money('line_total'),
    )
    op.create_index('ix_orderitem_order_id', 'orderitem', ['order_id'])

    op.create_table(
        'stock_reservation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('checkout_id', sa.String(), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('product.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', reservation_status, nullable=False),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('checkout_id', 'product_id', name='uq_reservation_checkout_product'),
    )
    op.create_index('ix_stock_reservation_checkout_id', 'stock_reservation', ['checkout_id'])
    op.create_index('ix_stock_reservation_product_id', 'stock_reservation', ['product_id'])

    op.create_table(
        'payment',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.String(), nullable=True),
        _money('amount'),
        sa.Column('status', payment_status, nullable=False),
        sa.Column('method', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_payment_order_id', 'payment', ['order_id'], unique=True)
    op.create_index('ix_payment_user_id', 'payment', ['user_id'])
    op.create_index('ix_payment_transaction_id', 'payment', ['transaction_id'])

    op.create_table(
        'shipment',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('status', shipment_status, nullable=False),
        sa.Column('tracking_number', sa.String(), nullable=True),
        sa.Column('carrier', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_shipment_order_id', 'shipment', ['order_id'], unique=True)
    op.create_index('ix_shipment_user_id', 'shipment', ['user_id'])
    op.create_index('ix_shipment_tracking_number', 'shipment', ['tracking_number'])

    op.create_table(
        'invoice',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('invoice_number', sa.String(), nullable=False),
        _money('subtotal'),
        _money('tax_amount'),
        _money('shipping_cost'),
        _money('total_amount'),
        sa.Column('status', invoice_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_invoice_order_id', 'invoice', ['order_id'], unique=True)
    op.create_index('ix_invoice_user_id', 'invoice', ['user_id'])
    op.create_index('ix_invoice_invoice_number', 'invoice', ['invoice_number'], unique=True)

    op.create_table(
        'order_event',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('event_type', sa.String(), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.String(), nullable=False),
    )
    op.create_index('ix_order_event_order_id', 'order_event', ['order_id'])
    op.create_index('ix_order_event_event_type', 'order_event', ['event_type'])

    op.create_table(
        'notification',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipient_role', recipient_role, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('trigger_source', sa.String(), nullable=False),
        sa.Column('related_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )


def downgrade():
    for table in (
        'notification',
        'order_event',
        'invoice',
        'shipment',
        'payment',
        'stock_reservation',
        'orderitem',
        'order',
        'cartitem',
        'product',
        'category',
        'user',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (
        recipient_role,
        reservation_status,
        invoice_status,
        payment_status,
        shipment_status,
        order_status,
    ):
        enum.drop(bind, checkfirst=True)
