"""
Database package for the Premier Insulation workflow service.
Provides SQLAlchemy models, connection management, and session handling.
"""

from database.connection import (
    Base,
    configure_database,
    get_engine,
    get_db_session,
    init_db,
    check_db_connection
)

from database.models import (
    TeamMember,
    Company,
    Client,
    Opportunity,
    Assessment,
    Product,
    ProductRecommendation,
    RecommendationSection,
    RecommendationItem,
    Quote,
    QuoteSection,
    QuoteLineItem,
    QuoteTermsMaster,
    QuoteTermsSnapshot,
    Job,
    JobLineItem,
    Certificate,
    Task,
    NumberSequence
)

__all__ = [
    # Connection
    'Base',
    'configure_database',
    'get_engine',
    'get_db_session',
    'init_db',
    'check_db_connection',
    # Models
    'TeamMember',
    'Company',
    'Client',
    'Opportunity',
    'Assessment',
    'Product',
    'ProductRecommendation',
    'RecommendationSection',
    'RecommendationItem',
    'Quote',
    'QuoteSection',
    'QuoteLineItem',
    'QuoteTermsMaster',
    'QuoteTermsSnapshot',
    'Job',
    'JobLineItem',
    'Certificate',
    'Task',
    'NumberSequence'
]
