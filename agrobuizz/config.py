import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def database_url():
    """Resolve the SQLAlchemy URL from DATABASE_URL or the DB_* variables."""
    url = os.environ.get("DATABASE_URL")
    if url:
        if url.startswith("mysql://"):
            url = url.replace("mysql://", "mysql+pymysql://", 1)
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+psycopg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+psycopg://", 1)
        return url

    db_user = os.environ.get("DB_USER", "root")
    db_password = os.environ.get("DB_PASSWORD", "")
    db_host = os.environ.get("DB_HOST", "localhost")
    db_port = os.environ.get("DB_PORT", "3306")
    db_name = os.environ.get("DB_NAME", "agrobuizz")
    return f"mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def engine_options(url):
    # sqlite uses its own pool classes which reject these arguments
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 20,
        "max_overflow": 0,
        "pool_timeout": 2,
        "pool_recycle": 30,
        "pool_pre_ping": True,
    }


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "agrobuizz-dev-secret")
    SQLALCHEMY_DATABASE_URI = database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = os.environ.get("FLASK_ENV") == "production"
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ADMIN_QUERY_TIMEOUT_MS = int(os.environ.get("ADMIN_QUERY_TIMEOUT_MS", 5000))
    ADMIN_QUERY_MAX_ROWS = int(os.environ.get("ADMIN_QUERY_MAX_ROWS", 1000))
    ADMIN_CONSOLE_DATABASE_URL = os.environ.get("ADMIN_CONSOLE_DATABASE_URL")

    DEFAULT_REPORT_YEAR = int(os.environ.get("DEFAULT_REPORT_YEAR", 2025))
    TOP_ITEMS_LIMIT = int(os.environ.get("TOP_ITEMS_LIMIT", 8))
