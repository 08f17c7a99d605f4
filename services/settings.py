"""Access to business settings from inside or outside a Flask request."""

from flask import current_app, has_app_context

from config import Config


def get_setting(name: str, default=None):
    """Read a setting from the running app's config, falling back to Config."""
    if has_app_context():
        return current_app.config.get(name, getattr(Config, name, default))
    return getattr(Config, name, default)
