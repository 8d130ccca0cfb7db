"""service categories

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'service_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('slug', sa.Text(), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_service_categories_type', 'service_categories', ['type'])

    with op.batch_alter_table('services') as batch:
        batch.add_column(sa.Column('category_id', sa.Integer()))
        batch.create_foreign_key(
            'fk_services_category_id',
            'service_categories',
            ['category_id'],
            ['id'],
            ondelete='SET NULL',
        )
        batch.drop_column('category')


def downgrade():
    with op.batch_alter_table('services') as batch:
        batch.add_column(sa.Column('category', sa.Text()))
        batch.drop_constraint('fk_services_category_id', type_='foreignkey')
        batch.drop_column('category_id')

    op.drop_index('ix_service_categories_type', table_name='service_categories')
    op.drop_table('service_categories')
