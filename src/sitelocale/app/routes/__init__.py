"""Blueprint registrations for application routes."""

from flask import Flask

from .localization import blueprint as localization_blueprint
from .site import blueprint as site_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(localization_blueprint)
    app.register_blueprint(site_blueprint)
