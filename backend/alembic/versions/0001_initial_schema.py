"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


revision = '0001'
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
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('slug', sa.Text(), nullable=False, unique=True),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default=sa.text('1')),
        *_timestamps(),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.Text(), nullable=False, unique=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL')),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default=sa.text('1')),
        *_timestamps(),
    )
    op.create_index('ix_users_company_role', 'users', ['company_id', 'role'])

    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('category', sa.Text()),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('notes', sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        'company_services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('custom_price', sa.Float()),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('notes', sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'service_id', name='uq_company_service'),
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('booking_time', sa.Text(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column('payment_status', sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column('assigned_company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL')),
        sa.Column('assigned_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('assigned_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('customer_notes', sa.Text()),
        sa.Column('admin_notes', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_bookings_customer_created', 'bookings', ['customer_id', 'created_at'])
    op.create_index('ix_bookings_company_status', 'bookings', ['assigned_company_id', 'status'])
    op.create_index('ix_bookings_user_status', 'bookings', ['assigned_user_id', 'status'])
    op.create_index('ix_bookings_date_time', 'bookings', ['booking_date', 'booking_time'])

    op.create_table(
        'booking_services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('company_service_id', sa.Integer(), sa.ForeignKey('company_services.id', ondelete='SET NULL')),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('custom_price', sa.Float()),
    )


def downgrade():
    op.drop_table('booking_services')
    op.drop_index('ix_bookings_date_time', table_name='bookings')
    op.drop_index('ix_bookings_user_status', table_name='bookings')
    op.drop_index('ix_bookings_company_status', table_name='bookings')
    op.drop_index('ix_bookings_customer_created', table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('company_services')
    op.drop_table('services')
    op.drop_index('ix_users_company_role', table_name='users')
    op.drop_table('users')
    op.drop_table('companies')
