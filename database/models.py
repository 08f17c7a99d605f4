"""
SQLAlchemy models for the Premier Insulation workflow service.
Defines the sales pipeline tables: opportunities, assessments, product
recommendations, versioned quotes, jobs, certificates and tasks.
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime, Date,
    ForeignKey, Index
)
from sqlalchemy.orm import relationship
from database.connection import Base


def generate_uuid():
    """Generate a new UUID."""
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


def _full_name(first_name, last_name):
    return f"{first_name or ''} {last_name or ''}".strip()


# =============================================================================
# TEAM MEMBERS (VA, Sales Reps, Premier/Admin, Installers)
# =============================================================================

class TeamMember(Base):
    """Staff members that tasks and approvals are routed to."""
    __tablename__ = 'team_members'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100))
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(50))
    role = Column(String(50), nullable=False)  # VA, Sales Rep, Admin, Installer
    status = Column(String(20), default='active')
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('ix_team_members_role', 'role'),
    )

    @property
    def full_name(self):
        return _full_name(self.first_name, self.last_name)

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'role': self.role,
            'status': self.status,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# CUSTOMERS - COMPANIES & CLIENTS
# =============================================================================

class Company(Base):
    """Business customers."""
    __tablename__ = 'companies'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_name = Column(String(255), nullable=False)
    primary_email = Column(String(255))
    phone = Column(String(50))
    created_at = Column(DateTime, default=datetime.utcnow)

    clients = relationship("Client", back_populates="company")

    def to_dict(self):
        return {
            'id': self.id,
            'company_name': self.company_name,
            'primary_email': self.primary_email,
            'phone': self.phone,
            'created_at': _iso(self.created_at)
        }


class Client(Base):
    """Individual customer contacts, optionally belonging to a company."""
    __tablename__ = 'clients'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(String(36), ForeignKey('companies.id'))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100))
    email = Column(String(255))
    phone = Column(String(50))
    created_at = Column(DateTime, default=datetime.utcnow)

    company = relationship("Company", back_populates="clients")

    __table_args__ = (
        Index('ix_clients_email', 'email'),
    )

    @property
    def full_name(self):
        return _full_name(self.first_name, self.last_name)

    def to_dict(self):
        return {
            'id': self.id,
            'company_id': self.company_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# SALES PIPELINE - OPPORTUNITIES & ASSESSMENTS
# =============================================================================

class Opportunity(Base):
    """Sales pipeline record spanning assessment -> recommendation -> quote -> job."""
    __tablename__ = 'opportunities'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    opp_number = Column(String(50))
    client_id = Column(String(36), ForeignKey('clients.id'))
    company_id = Column(String(36), ForeignKey('companies.id'))
    sales_rep_id = Column(String(36), ForeignKey('team_members.id'))
    site_address = Column(Text)
    city = Column(String(100))
    postcode = Column(String(20))
    stage = Column(String(50), default='NEW')
    recommendation_status = Column(String(50))
    job_id = Column(String(36))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client")
    company = relationship("Company")
    sales_rep = relationship("TeamMember")

    __table_args__ = (
        Index('ix_opportunities_stage', 'stage'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'opp_number': self.opp_number,
            'client_id': self.client_id,
            'company_id': self.company_id,
            'sales_rep_id': self.sales_rep_id,
            'site_address': self.site_address,
            'city': self.city,
            'postcode': self.postcode,
            'stage': self.stage,
            'recommendation_status': self.recommendation_status,
            'job_id': self.job_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Assessment(Base):
    """Free on-site assessment carried out before a recommendation is drafted."""
    __tablename__ = 'assessments'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    reference_number = Column(String(50))
    opportunity_id = Column(String(36), ForeignKey('opportunities.id'))
    client_id = Column(String(36), ForeignKey('clients.id'))
    site_address = Column(Text)
    scheduled_date = Column(DateTime)
    status = Column(String(50), default='Scheduled')
    completed_date = Column(DateTime)
    va_notified_at = Column(DateTime)
    va_notification_email = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)

    opportunity = relationship("Opportunity")
    client = relationship("Client")

    def to_dict(self):
        return {
            'id': self.id,
            'reference_number': self.reference_number,
            'opportunity_id': self.opportunity_id,
            'client_id': self.client_id,
            'site_address': self.site_address,
            'scheduled_date': _iso(self.scheduled_date),
            'status': self.status,
            'completed_date': _iso(self.completed_date),
            'va_notified_at': _iso(self.va_notified_at),
            'va_notification_email': self.va_notification_email,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# PRODUCTS
# =============================================================================

class Product(Base):
    """Insulation product catalogue."""
    __tablename__ = 'products'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    sku = Column(String(100))
    product_description = Column(String(255), nullable=False)
    unit = Column(String(50), default='pack')

    def to_dict(self):
        return {
            'id': self.id,
            'sku': self.sku,
            'product_description': self.product_description,
            'unit': self.unit
        }


# =============================================================================
# PRODUCT RECOMMENDATIONS
# =============================================================================

class ProductRecommendation(Base):
    """Pricing-free product specification drafted by a VA."""
    __tablename__ = 'product_recommendations'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    opportunity_id = Column(String(36), ForeignKey('opportunities.id'))
    assessment_id = Column(String(36), ForeignKey('assessments.id'))
    created_by = Column(String(255))  # VA email
    approval_status = Column(String(50), default='Draft')
    recommendation_status = Column(String(50), default='Draft')
    submitted_for_approval_at = Column(DateTime)
    approved_by = Column(String(255))
    approved_at = Column(DateTime)
    rejection_reason = Column(Text)
    finalized_at = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    opportunity = relationship("Opportunity")
    assessment = relationship("Assessment")
    sections = relationship(
        "RecommendationSection",
        back_populates="recommendation",
        cascade="all, delete-orphan",
        order_by="RecommendationSection.sort_order"
    )

    def to_dict(self):
        return {
            'id': self.id,
            'opportunity_id': self.opportunity_id,
            'assessment_id': self.assessment_id,
            'created_by': self.created_by,
            'approval_status': self.approval_status,
            'recommendation_status': self.recommendation_status,
            'submitted_for_approval_at': _iso(self.submitted_for_approval_at),
            'approved_by': self.approved_by,
            'approved_at': _iso(self.approved_at),
            'rejection_reason': self.rejection_reason,
            'finalized_at': _iso(self.finalized_at),
            'notes': self.notes,
            'created_at': _iso(self.created_at)
        }


class RecommendationSection(Base):
    """Application area (ceiling, underfloor, walls...) within a recommendation."""
    __tablename__ = 'recommendation_sections'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    recommendation_id = Column(String(36), ForeignKey('product_recommendations.id'), nullable=False)
    app_type_id = Column(String(36))
    section_name = Column(String(255))
    custom_name = Column(String(255))
    section_color = Column(String(20))
    sort_order = Column(Integer, default=0)

    recommendation = relationship("ProductRecommendation", back_populates="sections")
    items = relationship(
        "RecommendationItem",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="RecommendationItem.sort_order"
    )


class RecommendationItem(Base):
    """Recommended product and quantity within a section."""
    __tablename__ = 'recommendation_items'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    section_id = Column(String(36), ForeignKey('recommendation_sections.id'), nullable=False)
    product_id = Column(String(36), ForeignKey('products.id'))
    product_description = Column(String(255))
    quantity = Column(Float, default=0)
    area_sqm = Column(Float, default=0)
    sort_order = Column(Integer, default=0)

    section = relationship("RecommendationSection", back_populates="items")


# =============================================================================
# QUOTES (versioned by quote_number)
# =============================================================================

class Quote(Base):
    """
    Quote header. Rows sharing a quote_number are versions of the same quote:
    version 0 is the working draft, 1+ are finalized versions of which exactly
    one carries is_current.
    """
    __tablename__ = 'quotes'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_number = Column(String(50), nullable=False)
    version_number = Column(Integer, default=0, nullable=False)
    is_draft = Column(Boolean, default=True, nullable=False)
    is_current = Column(Boolean, default=True, nullable=False)
    superseded_at = Column(DateTime)
    finalised_at = Column(DateTime)
    status = Column(String(50), default='Draft', nullable=False)

    client_id = Column(String(36), ForeignKey('clients.id'))
    company_id = Column(String(36), ForeignKey('companies.id'))
    opportunity_id = Column(String(36), ForeignKey('opportunities.id'))
    assessment_id = Column(String(36), ForeignKey('assessments.id'))
    recommendation_id = Column(String(36), ForeignKey('product_recommendations.id'))
    sales_rep_id = Column(String(36), ForeignKey('team_members.id'))
    job_id = Column(String(36))

    customer_first_name = Column(String(100))
    customer_last_name = Column(String(100))
    customer_email = Column(String(255))
    customer_phone = Column(String(50))
    customer_company = Column(String(255))
    site_address = Column(Text)
    city = Column(String(100))
    postcode = Column(String(20))

    quote_date = Column(DateTime, default=datetime.utcnow)
    validity_days = Column(Integer, default=30)
    subject = Column(String(255))
    description_of_work = Column(Text)

    pricing_tier = Column(String(50))
    markup_percent = Column(Float, default=0)
    labour_rate_per_sqm = Column(Float, default=0)
    waste_percent = Column(Float, default=0)
    total_cost_ex_gst = Column(Float, default=0)
    total_sell_ex_gst = Column(Float, default=0)
    gst_amount = Column(Float, default=0)
    total_inc_gst = Column(Float, default=0)

    accepted_date = Column(DateTime)
    accepted_by_user_id = Column(String(36))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client")
    opportunity = relationship("Opportunity")
    sales_rep = relationship("TeamMember")
    sections = relationship(
        "QuoteSection",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteSection.sort_order"
    )
    line_items = relationship(
        "QuoteLineItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteLineItem.sort_order"
    )
    terms_snapshot = relationship("QuoteTermsSnapshot", uselist=False, back_populates="quote")

    __table_args__ = (
        Index('ix_quotes_quote_number', 'quote_number'),
        Index('ix_quotes_status', 'status'),
        Index('ix_quotes_recommendation', 'recommendation_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'quote_number': self.quote_number,
            'version_number': self.version_number,
            'is_draft': self.is_draft,
            'is_current': self.is_current,
            'superseded_at': _iso(self.superseded_at),
            'finalised_at': _iso(self.finalised_at),
            'status': self.status,
            'client_id': self.client_id,
            'company_id': self.company_id,
            'opportunity_id': self.opportunity_id,
            'assessment_id': self.assessment_id,
            'recommendation_id': self.recommendation_id,
            'sales_rep_id': self.sales_rep_id,
            'job_id': self.job_id,
            'customer_first_name': self.customer_first_name,
            'customer_last_name': self.customer_last_name,
            'customer_email': self.customer_email,
            'customer_phone': self.customer_phone,
            'customer_company': self.customer_company,
            'site_address': self.site_address,
            'city': self.city,
            'postcode': self.postcode,
            'quote_date': _iso(self.quote_date),
            'validity_days': self.validity_days,
            'subject': self.subject,
            'description_of_work': self.description_of_work,
            'pricing_tier': self.pricing_tier,
            'markup_percent': self.markup_percent,
            'labour_rate_per_sqm': self.labour_rate_per_sqm,
            'waste_percent': self.waste_percent,
            'total_cost_ex_gst': self.total_cost_ex_gst,
            'total_sell_ex_gst': self.total_sell_ex_gst,
            'gst_amount': self.gst_amount,
            'total_inc_gst': self.total_inc_gst,
            'accepted_date': _iso(self.accepted_date),
            'accepted_by_user_id': self.accepted_by_user_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class QuoteSection(Base):
    """Grouping of quote line items by application area."""
    __tablename__ = 'quote_sections'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_id = Column(String(36), ForeignKey('quotes.id'), nullable=False)
    app_type_id = Column(String(36))
    section_name = Column(String(255))
    custom_name = Column(String(255))
    section_color = Column(String(20), default='#ffffff')
    sort_order = Column(Integer, default=0)

    quote = relationship("Quote", back_populates="sections")
    line_items = relationship("QuoteLineItem", back_populates="section", order_by="QuoteLineItem.sort_order")

    @property
    def display_name(self):
        return self.custom_name or self.section_name or 'Section'

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'app_type_id': self.app_type_id,
            'section_name': self.section_name,
            'custom_name': self.custom_name,
            'section_color': self.section_color,
            'sort_order': self.sort_order
        }


class QuoteLineItem(Base):
    """Priced product or labour line on a quote."""
    __tablename__ = 'quote_line_items'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_id = Column(String(36), ForeignKey('quotes.id'), nullable=False)
    section_id = Column(String(36), ForeignKey('quote_sections.id'))
    product_id = Column(String(36), ForeignKey('products.id'))
    description = Column(String(255))
    quantity = Column(Float, default=0)
    area_sqm = Column(Float, default=0)
    packs_required = Column(Float, default=0)
    is_labour = Column(Boolean, default=False, nullable=False)
    unit_price = Column(Float, default=0)
    cost_price = Column(Float, default=0)
    sell_price = Column(Float, default=0)
    line_cost = Column(Float, default=0)
    line_sell = Column(Float, default=0)
    line_total = Column(Float, default=0)
    margin_percent = Column(Float, default=0)
    sort_order = Column(Integer, default=0)

    quote = relationship("Quote", back_populates="line_items")
    section = relationship("QuoteSection", back_populates="line_items")
    product = relationship("Product")

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'section_id': self.section_id,
            'product_id': self.product_id,
            'description': self.description,
            'quantity': self.quantity,
            'area_sqm': self.area_sqm,
            'packs_required': self.packs_required,
            'is_labour': self.is_labour,
            'unit_price': self.unit_price,
            'cost_price': self.cost_price,
            'sell_price': self.sell_price,
            'line_cost': self.line_cost,
            'line_sell': self.line_sell,
            'line_total': self.line_total,
            'margin_percent': self.margin_percent,
            'sort_order': self.sort_order
        }


class QuoteTermsMaster(Base):
    """Master terms & conditions documents; the newest active one applies."""
    __tablename__ = 'quote_terms_master'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True)
    effective_from = Column(DateTime, default=datetime.utcnow)


class QuoteTermsSnapshot(Base):
    """Frozen copy of the terms a finalized quote was issued under."""
    __tablename__ = 'quote_terms_snapshot'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_id = Column(String(36), ForeignKey('quotes.id'), nullable=False, unique=True)
    title = Column(String(255))
    body = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    quote = relationship("Quote", back_populates="terms_snapshot")

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'title': self.title,
            'body': self.body,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# JOBS & CERTIFICATES
# =============================================================================

class Job(Base):
    """Installation job created from exactly one accepted quote."""
    __tablename__ = 'jobs'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    job_number = Column(String(50), unique=True, nullable=False)
    quote_id = Column(String(36), ForeignKey('quotes.id'), unique=True)
    assessment_id = Column(String(36), ForeignKey('assessments.id'))
    opportunity_id = Column(String(36), ForeignKey('opportunities.id'))
    customer_first_name = Column(String(100))
    customer_last_name = Column(String(100))
    customer_email = Column(String(255))
    customer_phone = Column(String(50))
    customer_company = Column(String(255))
    site_address = Column(Text)
    city = Column(String(100))
    postcode = Column(String(20))
    status = Column(String(50), default='Draft', nullable=False)
    quoted_amount = Column(Float, default=0)
    actual_amount = Column(Float, default=0)
    warranty_period_months = Column(Integer, default=12)
    created_by_user_id = Column(String(36))
    scheduled_date = Column(DateTime)
    started_at = Column(DateTime)
    completed_at = Column(DateTime)
    completion_notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    quote = relationship("Quote", foreign_keys=[quote_id])
    opportunity = relationship("Opportunity")
    line_items = relationship("JobLineItem", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_jobs_status', 'status'),
    )

    @property
    def customer_name(self):
        return _full_name(self.customer_first_name, self.customer_last_name)

    def to_dict(self):
        return {
            'id': self.id,
            'job_number': self.job_number,
            'quote_id': self.quote_id,
            'assessment_id': self.assessment_id,
            'opportunity_id': self.opportunity_id,
            'customer_first_name': self.customer_first_name,
            'customer_last_name': self.customer_last_name,
            'customer_email': self.customer_email,
            'customer_phone': self.customer_phone,
            'customer_company': self.customer_company,
            'site_address': self.site_address,
            'city': self.city,
            'postcode': self.postcode,
            'status': self.status,
            'quoted_amount': self.quoted_amount,
            'actual_amount': self.actual_amount,
            'warranty_period_months': self.warranty_period_months,
            'created_by_user_id': self.created_by_user_id,
            'scheduled_date': _iso(self.scheduled_date),
            'started_at': _iso(self.started_at),
            'completed_at': _iso(self.completed_at),
            'completion_notes': self.completion_notes,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class JobLineItem(Base):
    """Material quantity tracked against a job."""
    __tablename__ = 'job_line_items'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    job_id = Column(String(36), ForeignKey('jobs.id'), nullable=False)
    product_code = Column(String(100))
    description = Column(String(255))
    quantity_quoted = Column(Float, default=0)
    quantity_actual = Column(Float, default=0)
    unit = Column(String(50), default='pack')
    unit_cost = Column(Float, default=0)
    line_cost = Column(Float, default=0)

    job = relationship("Job", back_populates="line_items")

    def to_dict(self):
        return {
            'id': self.id,
            'job_id': self.job_id,
            'product_code': self.product_code,
            'description': self.description,
            'quantity_quoted': self.quantity_quoted,
            'quantity_actual': self.quantity_actual,
            'unit': self.unit,
            'unit_cost': self.unit_cost,
            'line_cost': self.line_cost
        }


class Certificate(Base):
    """Completion certificate issued when a job is completed."""
    __tablename__ = 'certificates'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    certificate_number = Column(String(50), unique=True, nullable=False)
    job_id = Column(String(36), ForeignKey('jobs.id'), nullable=False)
    customer_first_name = Column(String(100))
    customer_last_name = Column(String(100))
    customer_email = Column(String(255))
    site_address = Column(Text)
    city = Column(String(100))
    postcode = Column(String(20))
    completion_date = Column(DateTime)
    warranty_expiry_date = Column(Date)
    certificate_status = Column(String(50), default='Issued')
    issued_date = Column(DateTime, default=datetime.utcnow)
    sent_at = Column(DateTime)
    sent_to_email = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)

    job = relationship("Job")

    def to_dict(self):
        return {
            'id': self.id,
            'certificate_number': self.certificate_number,
            'job_id': self.job_id,
            'customer_first_name': self.customer_first_name,
            'customer_last_name': self.customer_last_name,
            'customer_email': self.customer_email,
            'site_address': self.site_address,
            'city': self.city,
            'postcode': self.postcode,
            'completion_date': _iso(self.completion_date),
            'warranty_expiry_date': _iso(self.warranty_expiry_date),
            'certificate_status': self.certificate_status,
            'issued_date': _iso(self.issued_date),
            'sent_at': _iso(self.sent_at),
            'sent_to_email': self.sent_to_email,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# TASKS
# =============================================================================

class Task(Base):
    """To-do row created as a side effect of workflow transitions."""
    __tablename__ = 'tasks'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    task_description = Column(Text, nullable=False)
    task_type = Column(String(100))
    assigned_to_user_id = Column(String(36))
    opportunity_id = Column(String(36), ForeignKey('opportunities.id'))
    related_entity_type = Column(String(50))
    related_entity_id = Column(String(36))
    due_date = Column(DateTime)
    priority = Column(String(20), default='Normal')
    status = Column(String(50), default='Pending')
    completion_percent = Column(Integer, default=0)
    completed_at = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_tasks_assigned_to', 'assigned_to_user_id'),
        Index('ix_tasks_related_entity', 'related_entity_type', 'related_entity_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'task_description': self.task_description,
            'task_type': self.task_type,
            'assigned_to_user_id': self.assigned_to_user_id,
            'opportunity_id': self.opportunity_id,
            'related_entity_type': self.related_entity_type,
            'related_entity_id': self.related_entity_id,
            'due_date': _iso(self.due_date),
            'priority': self.priority,
            'status': self.status,
            'completion_percent': self.completion_percent,
            'completed_at': _iso(self.completed_at),
            'notes': self.notes,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# NUMBER SEQUENCES
# =============================================================================

class NumberSequence(Base):
    """Counter row backing human-readable numbers (J-2026-0001 etc.)."""
    __tablename__ = 'number_sequences'

    name = Column(String(50), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
