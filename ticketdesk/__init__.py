"""Application factory for the ticket administration service."""

from __future__ import annotations

from flask import Flask, jsonify

from ticketdesk.blueprints.api import api_bp
from ticketdesk.blueprints.common.tenant import init_tenant
from ticketdesk.config import Config
from ticketdesk.extensions import db, limiter, migrate


def create_app(config_class=Config):
    """Create Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    init_tenant(app)

    # Ensure models are registered for migrations
    import ticketdesk.models  # noqa: F401

    # Development convenience when migrations have not been run
    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            db.create_all()

    app.register_blueprint(api_bp, url_prefix='/api/v1')

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({'error': 'Too many requests'}), 429

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal server error'}), 500

    @app.route('/healthz')
    def healthz():
        return jsonify({'status': 'ok'})

    # Register CLI commands
    from ticketdesk.commands import register_commands
    register_commands(app)

    return app
