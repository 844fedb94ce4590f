"""
Application configuration loaded from environment variables.

Supports switching between local and cloud PostgreSQL via DATABASE_MODE.
DATABASE_URL, when set, wins over both (tests and scripts use it to point
the record store at SQLite).
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from backend directory
backend_dir = Path(__file__).parent.parent
load_dotenv(backend_dir / ".env")


class Config:
    """Application configuration."""

    # Flask settings
    DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Environment mode: "local" or "cloud"
    DATABASE_MODE = os.getenv("DATABASE_MODE", "local")
    DATABASE_URL = os.getenv("DATABASE_URL", "")

    # PostgreSQL - Local
    POSTGRES_HOST_LOCAL = os.getenv("POSTGRES_HOST_LOCAL", "localhost")
    POSTGRES_PORT_LOCAL = os.getenv("POSTGRES_PORT_LOCAL", "5432")
    POSTGRES_DB_LOCAL = os.getenv("POSTGRES_DB_LOCAL", "roster")
    POSTGRES_USER_LOCAL = os.getenv("POSTGRES_USER_LOCAL", "postgres")
    POSTGRES_PASSWORD_LOCAL = os.getenv("POSTGRES_PASSWORD_LOCAL", "")

    # PostgreSQL - Cloud
    POSTGRES_HOST_CLOUD = os.getenv("POSTGRES_HOST_CLOUD", "")
    POSTGRES_PORT_CLOUD = os.getenv("POSTGRES_PORT_CLOUD", "5432")
    POSTGRES_DB_CLOUD = os.getenv("POSTGRES_DB_CLOUD", "roster")
    POSTGRES_USER_CLOUD = os.getenv("POSTGRES_USER_CLOUD", "postgres")
    POSTGRES_PASSWORD_CLOUD = os.getenv("POSTGRES_PASSWORD_CLOUD", "")

    # Identity tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "roster-secret-key-change-in-production")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Scraper job queue gateway
    JOB_QUEUE_URL = os.getenv("JOB_QUEUE_URL", "http://localhost:7071/api/AddInfoToRequestQueue")
    JOB_QUEUE_CODE = os.getenv("JOB_QUEUE_CODE", "")
    JOB_QUEUE_TIMEOUT = float(os.getenv("JOB_QUEUE_TIMEOUT", "10"))

    # Fan-out pools
    ENRICHMENT_MAX_WORKERS = int(os.getenv("ENRICHMENT_MAX_WORKERS", "8"))
    DISPATCH_MAX_WORKERS = int(os.getenv("DISPATCH_MAX_WORKERS", "4"))
    # Seconds a roster request may spend on follow-up lookups
    ENRICHMENT_DEADLINE = float(os.getenv("ENRICHMENT_DEADLINE", "30"))

    @classmethod
    def get_database_url(cls) -> str:
        """Build the record store URL based on DATABASE_URL / DATABASE_MODE."""
        if cls.DATABASE_URL:
            return cls.DATABASE_URL

        if cls.DATABASE_MODE == "cloud":
            host = cls.POSTGRES_HOST_CLOUD
            port = cls.POSTGRES_PORT_CLOUD
            db = cls.POSTGRES_DB_CLOUD
            user = cls.POSTGRES_USER_CLOUD
            password = cls.POSTGRES_PASSWORD_CLOUD
        else:
            host = cls.POSTGRES_HOST_LOCAL
            port = cls.POSTGRES_PORT_LOCAL
            db = cls.POSTGRES_DB_LOCAL
            user = cls.POSTGRES_USER_LOCAL
            password = cls.POSTGRES_PASSWORD_LOCAL

        if password:
            return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{db}"
        return f"postgresql+psycopg://{user}@{host}:{port}/{db}"


# Singleton instance
config = Config()
