"""create shipping reference tables

Revision ID: 3b7e2d91c0a4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e2d91c0a4'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True):
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()))
    return cols


def upgrade() -> None:
    op.create_table(
        'pin_codes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('pincode', sa.String(length=6), nullable=False),
        sa.Column('city', sa.String(length=128), nullable=True),
        sa.Column('district', sa.String(length=128), nullable=True),
        sa.Column('state', sa.String(length=128), nullable=True),
        sa.Column('region', sa.String(length=128), nullable=True),
        sa.Column('office_name', sa.String(length=255), nullable=True),
        sa.Column('is_serviceable', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('is_cod_available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_pin_codes'),
    )
    op.create_index('ix_pin_codes_pincode', 'pin_codes', ['pincode'], unique=True)

    op.create_table(
        'shipping_weight_slabs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('courier_name', sa.String(length=128), nullable=False, server_default='Standard'),
        sa.Column('base_weight', sa.Numeric(10, 3), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id', name='pk_shipping_weight_slabs'),
        sa.CheckConstraint('base_weight > 0', name='ck_shipping_weight_slabs_base_weight_positive'),
    )

    op.create_table(
        'shipping_zones',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('zone', sa.String(length=1), nullable=False),
        sa.Column('shipping_weight_slab_id', sa.Integer(), nullable=False),
        sa.Column('fwd_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('rto_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('aw_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('cod_charges', sa.Numeric(10, 2), nullable=False),
        sa.Column('cod_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('free_shipping_enabled', sa.Boolean(), nullable=True),
        sa.Column('free_shipping_threshold', sa.Numeric(10, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_shipping_zones'),
        sa.ForeignKeyConstraint(
            ['shipping_weight_slab_id'], ['shipping_weight_slabs.id'],
            name='fk_shipping_zones_shipping_weight_slab_id_shipping_weight_slabs',
            ondelete='CASCADE',
        ),
        sa.UniqueConstraint('zone', 'shipping_weight_slab_id', name='ux_shipping_zones_zone_slab'),
    )
    op.create_index('ix_shipping_zones_zone', 'shipping_zones', ['zone'])

    op.create_table(
        'shipping_insurance',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('min_order_value', sa.Numeric(12, 2), nullable=False),
        sa.Column('max_order_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('coverage_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('premium_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('minimum_premium', sa.Numeric(10, 2), nullable=False),
        sa.Column('maximum_premium', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_mandatory', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('conditions', sa.JSON(), nullable=False),
        sa.Column('claim_processing_days', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_shipping_insurance'),
        sa.CheckConstraint(
            'coverage_percentage > 0 AND coverage_percentage <= 100',
            name='ck_shipping_insurance_coverage_percentage_range',
        ),
    )

    op.create_table(
        'admin_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('value', sa.String(length=1024), nullable=True),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id', name='pk_admin_settings'),
    )
    op.create_index('ix_admin_settings_key', 'admin_settings', ['key'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_admin_settings_key', table_name='admin_settings')
    op.drop_table('admin_settings')
    op.drop_table('shipping_insurance')
    op.drop_index('ix_shipping_zones_zone', table_name='shipping_zones')
    op.drop_table('shipping_zones')
    op.drop_table('shipping_weight_slabs')
    op.drop_index('ix_pin_codes_pincode', table_name='pin_codes')
    op.drop_table('pin_codes')
