"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the sales pipeline tables for the Premier Insulation workflow
service: team, customers, opportunities, assessments, recommendations,
versioned quotes, jobs, certificates, tasks and number sequences.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column('id', sa.String(36), nullable=False)


def upgrade() -> None:
    # Team members table
    op.create_table('team_members',
        _id(),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100)),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50)),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), default='active'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_team_members_role', 'team_members', ['role'])

    # Companies and clients
    op.create_table('companies',
        _id(),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('primary_email', sa.String(255)),
        sa.Column('phone', sa.String(50)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('clients',
        _id(),
        sa.Column('company_id', sa.String(36)),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100)),
        sa.Column('email', sa.String(255)),
        sa.Column('phone', sa.String(50)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clients_email', 'clients', ['email'])

    # Opportunities
    op.create_table('opportunities',
        _id(),
        sa.Column('opp_number', sa.String(50)),
        sa.Column('client_id', sa.String(36)),
        sa.Column('company_id', sa.String(36)),
        sa.Column('sales_rep_id', sa.String(36)),
        sa.Column('site_address', sa.Text()),
        sa.Column('city', sa.String(100)),
        sa.Column('postcode', sa.String(20)),
        sa.Column('stage', sa.String(50), default='NEW'),
        sa.Column('recommendation_status', sa.String(50)),
        sa.Column('job_id', sa.String(36)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
        sa.ForeignKeyConstraint(['sales_rep_id'], ['team_members.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_opportunities_stage', 'opportunities', ['stage'])

    # Assessments
    op.create_table('assessments',
        _id(),
        sa.Column('reference_number', sa.String(50)),
        sa.Column('opportunity_id', sa.String(36)),
        sa.Column('client_id', sa.String(36)),
        sa.Column('site_address', sa.Text()),
        sa.Column('scheduled_date', sa.DateTime()),
        sa.Column('status', sa.String(50), default='Scheduled'),
        sa.Column('completed_date', sa.DateTime()),
        sa.Column('va_notified_at', sa.DateTime()),
        sa.Column('va_notification_email', sa.String(255)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id']),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Products
    op.create_table('products',
        _id(),
        sa.Column('sku', sa.String(100)),
        sa.Column('product_description', sa.String(255), nullable=False),
        sa.Column('unit', sa.String(50), default='pack'),
        sa.PrimaryKeyConstraint('id')
    )

    # Product recommendations
    op.create_table('product_recommendations',
        _id(),
        sa.Column('opportunity_id', sa.String(36)),
        sa.Column('assessment_id', sa.String(36)),
        sa.Column('created_by', sa.String(255)),
        sa.Column('approval_status', sa.String(50), default='Draft'),
        sa.Column('recommendation_status', sa.String(50), default='Draft'),
        sa.Column('submitted_for_approval_at', sa.DateTime()),
        sa.Column('approved_by', sa.String(255)),
        sa.Column('approved_at', sa.DateTime()),
        sa.Column('rejection_reason', sa.Text()),
        sa.Column('finalized_at', sa.DateTime()),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id']),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('recommendation_sections',
        _id(),
        sa.Column('recommendation_id', sa.String(36), nullable=False),
        sa.Column('app_type_id', sa.String(36)),
        sa.Column('section_name', sa.String(255)),
        sa.Column('custom_name', sa.String(255)),
        sa.Column('section_color', sa.String(20)),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.ForeignKeyConstraint(['recommendation_id'], ['product_recommendations.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('recommendation_items',
        _id(),
        sa.Column('section_id', sa.String(36), nullable=False),
        sa.Column('product_id', sa.String(36)),
        sa.Column('product_description', sa.String(255)),
        sa.Column('quantity', sa.Float(), default=0),
        sa.Column('area_sqm', sa.Float(), default=0),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.ForeignKeyConstraint(['section_id'], ['recommendation_sections.id']),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Quotes (versioned by quote_number)
    op.create_table('quotes',
        _id(),
        sa.Column('quote_number', sa.String(50), nullable=False),
        sa.Column('version_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_draft', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('superseded_at', sa.DateTime()),
        sa.Column('finalised_at', sa.DateTime()),
        sa.Column('status', sa.String(50), nullable=False, server_default='Draft'),
        sa.Column('client_id', sa.String(36)),
        sa.Column('company_id', sa.String(36)),
        sa.Column('opportunity_id', sa.String(36)),
        sa.Column('assessment_id', sa.String(36)),
        sa.Column('recommendation_id', sa.String(36)),
        sa.Column('sales_rep_id', sa.String(36)),
        sa.Column('job_id', sa.String(36)),
        sa.Column('customer_first_name', sa.String(100)),
        sa.Column('customer_last_name', sa.String(100)),
        sa.Column('customer_email', sa.String(255)),
        sa.Column('customer_phone', sa.String(50)),
        sa.Column('customer_company', sa.String(255)),
        sa.Column('site_address', sa.Text()),
        sa.Column('city', sa.String(100)),
        sa.Column('postcode', sa.String(20)),
        sa.Column('quote_date', sa.DateTime(), default=sa.func.now()),
        sa.Column('validity_days', sa.Integer(), default=30),
        sa.Column('subject', sa.String(255)),
        sa.Column('description_of_work', sa.Text()),
        sa.Column('pricing_tier', sa.String(50)),
        sa.Column('markup_percent', sa.Float(), default=0),
        sa.Column('labour_rate_per_sqm', sa.Float(), default=0),
        sa.Column('waste_percent', sa.Float(), default=0),
        sa.Column('total_cost_ex_gst', sa.Float(), default=0),
        sa.Column('total_sell_ex_gst', sa.Float(), default=0),
        sa.Column('gst_amount', sa.Float(), default=0),
        sa.Column('total_inc_gst', sa.Float(), default=0),
        sa.Column('accepted_date', sa.DateTime()),
        sa.Column('accepted_by_user_id', sa.String(36)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
        sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id']),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
        sa.ForeignKeyConstraint(['recommendation_id'], ['product_recommendations.id']),
        sa.ForeignKeyConstraint(['sales_rep_id'], ['team_members.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quotes_quote_number', 'quotes', ['quote_number'])
    op.create_index('ix_quotes_status', 'quotes', ['status'])
    op.create_index('ix_quotes_recommendation', 'quotes', ['recommendation_id'])

    op.create_table('quote_sections',
        _id(),
        sa.Column('quote_id', sa.String(36), nullable=False),
        sa.Column('app_type_id', sa.String(36)),
        sa.Column('section_name', sa.String(255)),
        sa.Column('custom_name', sa.String(255)),
        sa.Column('section_color', sa.String(20), default='#ffffff'),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('quote_line_items',
        _id(),
        sa.Column('quote_id', sa.String(36), nullable=False),
        sa.Column('section_id', sa.String(36)),
        sa.Column('product_id', sa.String(36)),
        sa.Column('description', sa.String(255)),
        sa.Column('quantity', sa.Float(), default=0),
        sa.Column('area_sqm', sa.Float(), default=0),
        sa.Column('packs_required', sa.Float(), default=0),
        sa.Column('is_labour', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('unit_price', sa.Float(), default=0),
        sa.Column('cost_price', sa.Float(), default=0),
        sa.Column('sell_price', sa.Float(), default=0),
        sa.Column('line_cost', sa.Float(), default=0),
        sa.Column('line_sell', sa.Float(), default=0),
        sa.Column('line_total', sa.Float(), default=0),
        sa.Column('margin_percent', sa.Float(), default=0),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id']),
        sa.ForeignKeyConstraint(['section_id'], ['quote_sections.id']),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('quote_terms_master',
        _id(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('effective_from', sa.DateTime(), default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('quote_terms_snapshot',
        _id(),
        sa.Column('quote_id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(255)),
        sa.Column('body', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('quote_id')
    )

    # Jobs and certificates
    op.create_table('jobs',
        _id(),
        sa.Column('job_number', sa.String(50), nullable=False),
        sa.Column('quote_id', sa.String(36)),
        sa.Column('assessment_id', sa.String(36)),
        sa.Column('opportunity_id', sa.String(36)),
        sa.Column('customer_first_name', sa.String(100)),
        sa.Column('customer_last_name', sa.String(100)),
        sa.Column('customer_email', sa.String(255)),
        sa.Column('customer_phone', sa.String(50)),
        sa.Column('customer_company', sa.String(255)),
        sa.Column('site_address', sa.Text()),
        sa.Column('city', sa.String(100)),
        sa.Column('postcode', sa.String(20)),
        sa.Column('status', sa.String(50), nullable=False, server_default='Draft'),
        sa.Column('quoted_amount', sa.Float(), default=0),
        sa.Column('actual_amount', sa.Float(), default=0),
        sa.Column('warranty_period_months', sa.Integer(), default=12),
        sa.Column('created_by_user_id', sa.String(36)),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('completion_notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id']),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
        sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_number'),
        sa.UniqueConstraint('quote_id')
    )
    op.create_index('ix_jobs_status', 'jobs', ['status'])

    op.create_table('job_line_items',
        _id(),
        sa.Column('job_id', sa.String(36), nullable=False),
        sa.Column('product_code', sa.String(100)),
        sa.Column('description', sa.String(255)),
        sa.Column('quantity_quoted', sa.Float(), default=0),
        sa.Column('quantity_actual', sa.Float(), default=0),
        sa.Column('unit', sa.String(50), default='pack'),
        sa.Column('unit_cost', sa.Float(), default=0),
        sa.Column('line_cost', sa.Float(), default=0),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('certificates',
        _id(),
        sa.Column('certificate_number', sa.String(50), nullable=False),
        sa.Column('job_id', sa.String(36), nullable=False),
        sa.Column('customer_first_name', sa.String(100)),
        sa.Column('customer_last_name', sa.String(100)),
        sa.Column('customer_email', sa.String(255)),
        sa.Column('site_address', sa.Text()),
        sa.Column('city', sa.String(100)),
        sa.Column('postcode', sa.String(20)),
        sa.Column('completion_date', sa.DateTime()),
        sa.Column('warranty_expiry_date', sa.Date()),
        sa.Column('certificate_status', sa.String(50), default='Issued'),
        sa.Column('issued_date', sa.DateTime(), default=sa.func.now()),
        sa.Column('sent_at', sa.DateTime()),
        sa.Column('sent_to_email', sa.String(255)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('certificate_number')
    )

    # Tasks
    op.create_table('tasks',
        _id(),
        sa.Column('task_description', sa.Text(), nullable=False),
        sa.Column('task_type', sa.String(100)),
        sa.Column('assigned_to_user_id', sa.String(36)),
        sa.Column('opportunity_id', sa.String(36)),
        sa.Column('related_entity_type', sa.String(50)),
        sa.Column('related_entity_id', sa.String(36)),
        sa.Column('due_date', sa.DateTime()),
        sa.Column('priority', sa.String(20), default='Normal'),
        sa.Column('status', sa.String(50), default='Pending'),
        sa.Column('completion_percent', sa.Integer(), default=0),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
        sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tasks_assigned_to', 'tasks', ['assigned_to_user_id'])
    op.create_index('ix_tasks_related_entity', 'tasks', ['related_entity_type', 'related_entity_id'])

    # Number sequences backing J-/Q-/CERT- numbers
    op.create_table('number_sequences',
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('last_value', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
        sa.PrimaryKeyConstraint('name')
    )


def downgrade() -> None:
    # Drop tables in reverse order of creation (respecting foreign keys)
    op.drop_table('number_sequences')
    op.drop_table('tasks')
    op.drop_table('certificates')
    op.drop_table('job_line_items')
    op.drop_table('jobs')
    op.drop_table('quote_terms_snapshot')
    op.drop_table('quote_terms_master')
    op.drop_table('quote_line_items')
    op.drop_table('quote_sections')
    op.drop_table('quotes')
    op.drop_table('recommendation_items')
    op.drop_table('recommendation_sections')
    op.drop_table('product_recommendations')
    op.drop_table('products')
    op.drop_table('assessments')
    op.drop_table('opportunities')
    op.drop_table('clients')
    op.drop_table('companies')
    op.drop_table('team_members')
