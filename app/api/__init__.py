"""
API Blueprints Package

All HTTP route handlers for the application, organized by domain.
Each module defines a Flask Blueprint registered in app/__init__.py.

BLUEPRINT REFERENCE:
====================

- assessments.py    : Assessment completion, resend to VA
- recommendations.py: Submit for approval, approve/reject, VA finalize -> draft quote
- quotes.py         : Accept (-> job), finalize (-> new version + email), PDF
- jobs.py           : Job status changes, completion (-> certificate + email)
- tasks.py          : Task listing, lookup and status updates

Every workflow endpoint answers {"ok": true, "message": ..., "warnings": [...]}
on success and {"ok": false, "error": ...} with 400/404/500 on failure.
"""

# All blueprints are imported and registered in app/__init__.py
# This file serves as documentation only

__all__ = []
