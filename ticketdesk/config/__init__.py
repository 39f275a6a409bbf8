import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    # Development fallback so the app boots without a .env file.
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-me'
    DATABASE_URL = os.getenv('DATABASE_URL')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or 'sqlite:///ticketdesk.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Persistence: "sql", "json" or "sql+json" (database with a local JSON copy)
    PERSISTENCE_BACKEND = os.getenv('PERSISTENCE_BACKEND', 'sql').lower()
    LOCAL_STORE_PATH = os.getenv('LOCAL_STORE_PATH', 'instance/ticketdesk-data')
    # Called as hook(store, operation, error) when the database is bypassed
    STORE_FALLBACK_HOOK = None

    # Workspace used when a request carries no X-Workspace-Key header or ?key=
    DEFAULT_WORKSPACE_KEY = os.getenv('DEFAULT_WORKSPACE_KEY')
    # Create missing tables at startup (development without migrations)
    AUTO_CREATE_TABLES = _flag('AUTO_CREATE_TABLES', 'true')

    RATELIMIT_ENABLED = _flag('RATELIMIT_ENABLED', 'true')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    WORKSPACE_CREATE_LIMIT = os.getenv('WORKSPACE_CREATE_LIMIT', '10 per hour')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    PERSISTENCE_BACKEND = 'sql'
    DEFAULT_WORKSPACE_KEY = None
    AUTO_CREATE_TABLES = True
    RATELIMIT_ENABLED = False
