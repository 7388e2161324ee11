"""init schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.Numeric(precision=12, scale=2)


def upgrade():
    op.create_table('admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)

    op.create_table('information',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=30), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('rent_bill_generation_day', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('terms_conditions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('effective_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('businesses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=True),
        sa.Column('contact_person', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('floor_number', sa.Integer(), nullable=True),
        sa.Column('shop_number', sa.String(length=50), nullable=True),
        sa.Column('area_sqft', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('rent_amount', MONEY, nullable=False),
        sa.Column('security_deposit', MONEY, nullable=True),
        sa.Column('lease_start_date', sa.Date(), nullable=True),
        sa.Column('lease_end_date', sa.Date(), nullable=True),
        sa.Column('rent_management', sa.Boolean(), nullable=False),
        sa.Column('electricity_consumer_number', sa.String(length=100), nullable=True),
        sa.Column('gas_consumer_number', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('username', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    op.create_index('ix_businesses_status', 'businesses', ['status'])

    op.create_table('bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('bill_number', sa.String(length=40), nullable=False),
        sa.Column('bill_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('rent_amount', MONEY, nullable=True),
        sa.Column('maintenance_charges', MONEY, nullable=True),
        sa.Column('electricity_charges', MONEY, nullable=True),
        sa.Column('gas_charges', MONEY, nullable=True),
        sa.Column('water_charges', MONEY, nullable=True),
        sa.Column('other_charges', MONEY, nullable=True),
        sa.Column('total_amount', MONEY, nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('terms_conditions_ids', sa.JSON(), nullable=True),
        sa.Column('terms_conditions_text', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('bill_number'),
    )
    op.create_index('ix_bills_business_id', 'bills', ['business_id'])
    op.create_index('ix_bills_status', 'bills', ['status'])

    op.create_table('meter_readings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('meter_type', sa.String(length=20), nullable=False),
        sa.Column('reading_date', sa.Date(), nullable=False),
        sa.Column('previous_reading', MONEY, nullable=False),
        sa.Column('current_reading', MONEY, nullable=False),
        sa.Column('units_consumed', MONEY, nullable=False),
        sa.Column('rate_per_unit', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=True),
        sa.Column('bill_number', sa.String(length=40), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('bill_number'),
    )
    op.create_index('ix_meter_readings_business_id', 'meter_readings', ['business_id'])
    op.create_index('ix_meter_readings_meter_type', 'meter_readings', ['meter_type'])
    op.create_index('ix_meter_readings_payment_status', 'meter_readings', ['payment_status'])

    op.create_table('payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('bill_id', sa.Integer(), sa.ForeignKey('bills.id'), nullable=True),
        sa.Column('meter_reading_id', sa.Integer(), sa.ForeignKey('meter_readings.id'), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('reference_number', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('recorded_by', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_business_id', 'payments', ['business_id'])
    op.create_index('ix_payments_bill_id', 'payments', ['bill_id'])
    op.create_index('ix_payments_meter_reading_id', 'payments', ['meter_reading_id'])

    op.create_table('advances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('advance_date', sa.Date(), nullable=False),
        sa.Column('purpose', sa.String(length=255), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_advances_business_id', 'advances', ['business_id'])
    op.create_index('ix_advances_status', 'advances', ['status'])

    op.create_table('maintenance_bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('bill_number', sa.String(length=40), nullable=False),
        sa.Column('bill_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('bill_number'),
    )
    op.create_index('ix_maintenance_bills_business_id', 'maintenance_bills', ['business_id'])
    op.create_index('ix_maintenance_bills_status', 'maintenance_bills', ['status'])

    op.create_table('maintenance_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('maintenance_bill_id', sa.Integer(), sa.ForeignKey('maintenance_bills.id'), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('reference_number', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_payments_business_id', 'maintenance_payments', ['business_id'])
    op.create_index('ix_maintenance_payments_maintenance_bill_id', 'maintenance_payments', ['maintenance_bill_id'])

    op.create_table('maintenance_advances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('used_amount', MONEY, nullable=False),
        sa.Column('remaining_amount', MONEY, nullable=False),
        sa.Column('advance_date', sa.Date(), nullable=False),
        sa.Column('purpose', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_advances_business_id', 'maintenance_advances', ['business_id'])

    op.create_table('maintenance_instalments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('total_amount', MONEY, nullable=False),
        sa.Column('instalment_amount', MONEY, nullable=False),
        sa.Column('instalments_count', sa.Integer(), nullable=False),
        sa.Column('instalments_paid', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_instalments_business_id', 'maintenance_instalments', ['business_id'])

    op.create_table('pending_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('bill_id', sa.Integer(), nullable=False),
        sa.Column('bill_type', sa.String(length=20), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('submitted_by', sa.String(length=200), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('reviewed_by', sa.String(length=100), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('payment_id', sa.Integer(), sa.ForeignKey('payments.id'), nullable=True),
        sa.Column('maintenance_payment_id', sa.Integer(), sa.ForeignKey('maintenance_payments.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pending_payments_business_id', 'pending_payments', ['business_id'])
    op.create_index('ix_pending_payments_status', 'pending_payments', ['status'])

    op.create_table('staff',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.Column('category', sa.String(length=30), nullable=False),
        sa.Column('salary_amount', MONEY, nullable=False),
        sa.Column('joining_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_staff_status', 'staff', ['status'])

    op.create_table('staff_salary_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff.id'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('payment_method', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('staff_id', 'month', 'year', name='uq_salary_staff_month_year'),
    )
    op.create_index('ix_staff_salary_records_staff_id', 'staff_salary_records', ['staff_id'])

    op.create_table('variable_expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=30), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('vendor', sa.String(length=200), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('fixed_expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('utility_type', sa.String(length=20), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('frequency', sa.String(length=20), nullable=False),
        sa.Column('next_due_date', sa.Date(), nullable=False),
        sa.Column('auto_generate', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('plaza_utility_bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('fixed_expense_id', sa.Integer(), sa.ForeignKey('fixed_expenses.id'), nullable=True),
        sa.Column('utility_type', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('bill_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plaza_utility_bills_fixed_expense_id', 'plaza_utility_bills', ['fixed_expense_id'])


def downgrade():
    op.drop_table('plaza_utility_bills')
    op.drop_table('fixed_expenses')
    op.drop_table('variable_expenses')
    op.drop_table('staff_salary_records')
    op.drop_table('staff')
    op.drop_table('pending_payments')
    op.drop_table('maintenance_instalments')
    op.drop_table('maintenance_advances')
    op.drop_table('maintenance_payments')
    op.drop_table('maintenance_bills')
    op.drop_table('advances')
    op.drop_table('payments')
    op.drop_table('meter_readings')
    op.drop_table('bills')
    op.drop_table('businesses')
    op.drop_table('terms_conditions')
    op.drop_table('information')
    op.drop_table('admins')
