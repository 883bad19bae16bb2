"""Initial schema: customers, vehicles, association history, invoices.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2024-02-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create registry and billing tables."""
    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('is_subscriber', sa.Boolean(), nullable=False),
        sa.Column('monthly_fee', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_is_subscriber', 'customers', ['is_subscriber'])
    op.create_index('idx_customer_name_phone', 'customers', ['name', 'phone'])

    # Create vehicles table
    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('plate', sa.String(10), nullable=False),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vehicles_plate', 'vehicles', ['plate'], unique=True)
    op.create_index('ix_vehicles_customer_id', 'vehicles', ['customer_id'])
    op.create_index('ix_vehicles_is_active', 'vehicles', ['is_active'])

    # Create vehicle_associations table (append/close-only history)
    op.create_table(
        'vehicle_associations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id'], ),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vehicle_associations_vehicle_id', 'vehicle_associations', ['vehicle_id'])
    op.create_index('ix_vehicle_associations_customer_id', 'vehicle_associations', ['customer_id'])
    op.create_index('idx_association_vehicle_start', 'vehicle_associations', ['vehicle_id', 'start_date'])
    op.create_index('idx_association_customer', 'vehicle_associations', ['customer_id'])

    # Create invoices table
    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('competence', sa.String(7), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('note', sa.String(500), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', 'competence', name='uq_invoice_customer_competence'),
    )
    op.create_index('ix_invoices_competence', 'invoices', ['competence'])
    op.create_index('ix_invoices_customer_id', 'invoices', ['customer_id'])
    op.create_index('idx_invoice_competence_customer', 'invoices', ['competence', 'customer_id'])

    # Create invoice_vehicles link table
    op.create_table(
        'invoice_vehicles',
        sa.Column('invoice_id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id'], ),
        sa.PrimaryKeyConstraint('invoice_id', 'vehicle_id'),
    )


def downgrade() -> None:
    """Drop registry and billing tables."""
    op.drop_table('invoice_vehicles')
    op.drop_index('idx_invoice_competence_customer', table_name='invoices')
    op.drop_index('ix_invoices_customer_id', table_name='invoices')
    op.drop_index('ix_invoices_competence', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('idx_association_customer', table_name='vehicle_associations')
    op.drop_index('idx_association_vehicle_start', table_name='vehicle_associations')
    op.drop_index('ix_vehicle_associations_customer_id', table_name='vehicle_associations')
    op.drop_index('ix_vehicle_associations_vehicle_id', table_name='vehicle_associations')
    op.drop_table('vehicle_associations')
    op.drop_index('ix_vehicles_is_active', table_name='vehicles')
    op.drop_index('ix_vehicles_customer_id', table_name='vehicles')
    op.drop_index('ix_vehicles_plate', table_name='vehicles')
    op.drop_table('vehicles')
    op.drop_index('idx_customer_name_phone', table_name='customers')
    op.drop_index('ix_customers_is_subscriber', table_name='customers')
    op.drop_table('customers')
