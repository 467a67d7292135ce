import os


class Config:
    # Sessions (Flask-Login keeps the user id in the signed session cookie)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///rental.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Lease documents. None means <instance_path>/uploads, resolved in create_app
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER")
    LEASE_DOCUMENT_MAX_BYTES = int(os.environ.get("LEASE_DOCUMENT_MAX_BYTES", 10 * 1024 * 1024))

    # Reports
    REPORT_TREND_MONTHS = int(os.environ.get("REPORT_TREND_MONTHS", 6))
    LEASE_EXPIRY_DAYS = int(os.environ.get("LEASE_EXPIRY_DAYS", 30))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Create admin@example.com on startup if no such user exists
    SEED_DEFAULT_ADMIN = os.environ.get("SEED_DEFAULT_ADMIN", "true").lower() == "true"
    DEFAULT_ADMIN_EMAIL = os.environ.get("DEFAULT_ADMIN_EMAIL", "admin@example.com")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "adminpassword")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SEED_DEFAULT_ADMIN = False
    LOG_LEVEL = "WARNING"
