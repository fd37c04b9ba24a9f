import os

from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///" + os.path.join(basedir, "dashboard.db"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # session cookie holds the backend tokens
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "inventory_dashboard_session")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Strict")
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "0") == "1"

    # external inventory backend
    BACKEND_BASE_URL = os.getenv("BACKEND_BASE_URL", "https://mgm-inventory-be.vercel.app/api/v1")
    BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "10"))
    # e.g. "/sanction/{id}/resolve"; empty means the backend has no such endpoint
    SANCTION_RESOLVE_PATH = os.getenv("SANCTION_RESOLVE_PATH", "")

    APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

    TRANSACTION_PAGE_LIMIT = int(os.getenv("TRANSACTION_PAGE_LIMIT", "100"))
    ITEM_PAGE_LIMIT = int(os.getenv("ITEM_PAGE_LIMIT", "10"))
    # engine views walk pages up to this many per list
    BACKEND_MAX_PAGES = int(os.getenv("BACKEND_MAX_PAGES", "50"))

    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "noreply@inventory.local")

    # overdue reminder job
    SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "0") == "1"
    OVERDUE_CHECK_MINUTES = int(os.getenv("OVERDUE_CHECK_MINUTES", "60"))
    DUE_SOON_DAYS = int(os.getenv("DUE_SOON_DAYS", "1"))
    SERVICE_NIM = os.getenv("SERVICE_NIM", "")
    SERVICE_PASSWORD = os.getenv("SERVICE_PASSWORD", "")
