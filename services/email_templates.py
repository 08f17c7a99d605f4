"""
Email templates for workflow notifications.

Each template kind has a subject, an HTML body and a plain-text body,
rendered with Jinja2 (HTML autoescaped).
"""

from typing import Dict, Tuple

from jinja2 import Environment, DictLoader, select_autoescape

from services.settings import get_setting


_BASE_HTML = """<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
        .container { max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background: #1f4e79; color: white; padding: 20px; border-radius: 8px 8px 0 0; }
        .content { background: #f9f9f9; padding: 20px; border: 1px solid #ddd; }
        .details td { padding: 4px 12px 4px 0; vertical-align: top; }
        .button { display: inline-block; background: #1f4e79; color: white; padding: 10px 18px;
                  border-radius: 4px; text-decoration: none; }
        .footer { font-size: 12px; color: #666; padding: 10px; text-align: center; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h2 style="margin: 0;">{% block heading %}{% endblock %}</h2>
        </div>
        <div class="content">
            {% block content %}{% endblock %}
        </div>
        <div class="footer">
            <p>{{ company_name }} &middot; This is an automated message.</p>
        </div>
    </div>
</body>
</html>
"""

_TEMPLATES = {
    'base.html': _BASE_HTML,

    'assessment_completed.subject': "New Assessment Completed - {{ reference_number }}",
    'assessment_completed.html': """{% extends "base.html" %}
{% block heading %}New Assessment Completed{% endblock %}
{% block content %}
<p>Hi {{ va_name }},</p>
<p>An assessment has been completed and is ready for a product recommendation.</p>
<table class="details">
    <tr><td><strong>Reference</strong></td><td>{{ reference_number }}</td></tr>
    <tr><td><strong>Client</strong></td><td>{{ customer_name }}</td></tr>
    <tr><td><strong>Company</strong></td><td>{{ customer_company or 'N/A' }}</td></tr>
    <tr><td><strong>Site</strong></td><td>{{ site_address or '' }}</td></tr>
    <tr><td><strong>Completed</strong></td><td>{{ completed_date }}</td></tr>
</table>
<p><a class="button" href="{{ dashboard_url }}">Create Recommendation</a></p>
{% endblock %}
""",
    'assessment_completed.txt': """Hi {{ va_name }},

An assessment has been completed and is ready for a product recommendation.

Reference: {{ reference_number }}
Client: {{ customer_name }}
Company: {{ customer_company or 'N/A' }}
Site: {{ site_address or '' }}
Completed: {{ completed_date }}

Create the recommendation: {{ dashboard_url }}
""",

    'recommendation_approval.subject': "Recommendation Ready for Approval - {{ customer_name }}",
    'recommendation_approval.html': """{% extends "base.html" %}
{% block heading %}Recommendation Ready for Approval{% endblock %}
{% block content %}
<p>Hi {{ approver_name }},</p>
<p>{{ va_name }} has submitted a product recommendation for <strong>{{ customer_name }}</strong>.</p>
{% if site_address %}<p>Site: {{ site_address }}</p>{% endif %}
<p><a class="button" href="{{ dashboard_url }}">Review Recommendation</a></p>
{% endblock %}
""",
    'recommendation_approval.txt': """Hi {{ approver_name }},

{{ va_name }} has submitted a product recommendation for {{ customer_name }}.
{% if site_address %}Site: {{ site_address }}
{% endif %}
Review it here: {{ dashboard_url }}
""",

    'recommendation_approved.subject': "Recommendation Approved - {{ customer_name }}",
    'recommendation_approved.html': """{% extends "base.html" %}
{% block heading %}Recommendation Approved{% endblock %}
{% block content %}
<p>Hi {{ va_name }},</p>
<p>The recommendation for <strong>{{ customer_name }}</strong> was approved by {{ approved_by }}.</p>
<p>Please finalize it so the quote can be prepared.</p>
<p><a class="button" href="{{ dashboard_url }}">Finalize Recommendation</a></p>
{% endblock %}
""",
    'recommendation_approved.txt': """Hi {{ va_name }},

The recommendation for {{ customer_name }} was approved by {{ approved_by }}.
Please finalize it so the quote can be prepared: {{ dashboard_url }}
""",

    'recommendation_rejected.subject': "Recommendation Needs Revision - {{ customer_name }}",
    'recommendation_rejected.html': """{% extends "base.html" %}
{% block heading %}Recommendation Needs Revision{% endblock %}
{% block content %}
<p>Hi {{ va_name }},</p>
<p>The recommendation for <strong>{{ customer_name }}</strong> was sent back by {{ rejected_by }}.</p>
<p><strong>Reason:</strong> {{ rejection_reason }}</p>
<p><a class="button" href="{{ dashboard_url }}">Revise Recommendation</a></p>
{% endblock %}
""",
    'recommendation_rejected.txt': """Hi {{ va_name }},

The recommendation for {{ customer_name }} was sent back by {{ rejected_by }}.

Reason: {{ rejection_reason }}

Revise it here: {{ dashboard_url }}
""",

    'quote.subject': "Your Insulation Quote {{ quote_number }}",
    'quote.html': """{% extends "base.html" %}
{% block heading %}Your Insulation Quote {{ quote_number }}{% endblock %}
{% block content %}
<p>Hi {{ customer_name }},</p>
<p>Thank you for the opportunity to quote. Please find your quote attached.</p>
<table class="details">
    <tr><td><strong>Quote</strong></td><td>{{ quote_number }} (version {{ version_number }})</td></tr>
    <tr><td><strong>Total (incl. GST)</strong></td><td>${{ '%.2f' % total_inc_gst }}</td></tr>
    <tr><td><strong>Valid for</strong></td><td>{{ validity_days }} days</td></tr>
</table>
<p>If you have any questions, simply reply to this email{% if sales_rep_name %} and {{ sales_rep_name }} will get back to you{% endif %}.</p>
{% endblock %}
""",
    'quote.txt': """Hi {{ customer_name }},

Thank you for the opportunity to quote. Please find your quote attached.

Quote: {{ quote_number }} (version {{ version_number }})
Total (incl. GST): ${{ '%.2f' % total_inc_gst }}
Valid for: {{ validity_days }} days

If you have any questions, simply reply to this email.
""",

    'certificate.subject': "Your Job Completion Certificate {{ certificate_number }}",
    'certificate.html': """{% extends "base.html" %}
{% block heading %}Job Completion Certificate{% endblock %}
{% block content %}
<p>Hi {{ customer_name }},</p>
<p>Your insulation installation is complete. Here are your certificate details.</p>
<table class="details">
    <tr><td><strong>Certificate</strong></td><td>{{ certificate_number }}</td></tr>
    <tr><td><strong>Job</strong></td><td>{{ job_number }}</td></tr>
    <tr><td><strong>Site</strong></td><td>{{ site_address or '' }}</td></tr>
    <tr><td><strong>Completed</strong></td><td>{{ completion_date }}</td></tr>
    <tr><td><strong>Warranty until</strong></td><td>{{ warranty_expiry_date }}</td></tr>
</table>
<p>Thank you for choosing {{ company_name }}.</p>
{% endblock %}
""",
    'certificate.txt': """Hi {{ customer_name }},

Your insulation installation is complete.

Certificate: {{ certificate_number }}
Job: {{ job_number }}
Site: {{ site_address or '' }}
Completed: {{ completion_date }}
Warranty until: {{ warranty_expiry_date }}

Thank you for choosing {{ company_name }}.
""",
}

TEMPLATE_KINDS = (
    'assessment_completed',
    'recommendation_approval',
    'recommendation_approved',
    'recommendation_rejected',
    'quote',
    'certificate',
)

_env = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=select_autoescape(enabled_extensions=('html',), default_for_string=False),
    keep_trailing_newline=True,
)


def render_email(kind: str, params: Dict) -> Tuple[str, str, str]:
    """Render (subject, html, text) for a notification kind."""
    if kind not in TEMPLATE_KINDS:
        raise ValueError(f"Unknown email template: {kind}")

    context = {'company_name': get_setting('COMPANY_INFO', {}).get('name', 'Premier Insulation')}
    context.update(params)

    subject = _env.get_template(f"{kind}.subject").render(**context).strip()
    html = _env.get_template(f"{kind}.html").render(**context)
    text = _env.get_template(f"{kind}.txt").render(**context)
    return subject, html, text
