#!/usr/bin/env python3
"""Development server runner for the ticket admin API."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError


def setup_environment():
    """Set up the development environment."""
    project_root = Path(__file__).parent
    env_file = project_root / '.env'
    if env_file.exists():
        load_dotenv(env_file)
        print(f"✓ Loaded environment from {env_file}")
    else:
        print(f"⚠️ No .env file found at {env_file}")

    os.environ.setdefault('FLASK_APP', 'ticketdesk')
    os.environ.setdefault('FLASK_DEBUG', '1')


def initialize_database(app):
    """Create missing tables and check the database connection."""
    from ticketdesk.extensions import db

    with app.app_context():
        try:
            db.create_all()
        except SQLAlchemyError as e:
            print(f"❌ Database initialization failed: {e}")
            return False
    print("✓ Database tables ready")
    return True


def run_development_server(app):
    """Run the Flask development server."""
    print("\n" + "=" * 60)
    print("🚀 Starting ticket admin development server")
    print("=" * 60)
    print(f"Debug mode: {os.environ.get('FLASK_DEBUG', '0') == '1'}")
    print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']}")
    print(f"Persistence backend: {app.config['PERSISTENCE_BACKEND']}")
    print("\n📱 API available at:")
    print("   • http://localhost:5000/api/v1")
    print("\n🛠️ To create demo data, run in another terminal:")
    print("   flask workspace create --key office-2024")
    print("   flask seed demo --key office-2024")
    print("   Then send requests with the header X-Workspace-Key: office-2024")
    print("\n⏹️ Press Ctrl+C to stop the server")
    print("=" * 60)

    app.run(host='0.0.0.0', port=5000, debug=True, use_reloader=True)


def main():
    """Main function to set up and run the development server."""
    print("Ticket Admin - Development Setup")
    print("=" * 60)

    setup_environment()

    from ticketdesk import create_app

    app = create_app()
    if not initialize_database(app):
        sys.exit(1)

    try:
        run_development_server(app)
    except KeyboardInterrupt:
        print("\n\n🛑 Development server stopped by user")


if __name__ == "__main__":
    main()
