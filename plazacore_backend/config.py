import os


class Config:
    # Secret key for sessions / JWT
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me-in-prod")

    # Database connection
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///plazacore.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)

    # Flask Configuration
    FLASK_ENV = os.environ.get("FLASK_ENV", "production")
    FLASK_DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    API_PREFIX = "/api"
    JSON_SORT_KEYS = False

    # Shared secret for the daily rent bill cron call
    CRON_SECRET = os.environ.get("CRON_SECRET")

    # Comma-separated extra origins for the admin and business portals
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")

    # Billing defaults
    RENT_DUE_DAYS = int(os.environ.get("RENT_DUE_DAYS", 15))
    DEFAULT_ELECTRICITY_RATE = os.environ.get("DEFAULT_ELECTRICITY_RATE", "8.5")
    DEFAULT_GAS_RATE = os.environ.get("DEFAULT_GAS_RATE", "150.0")


class DevelopmentConfig(Config):
    FLASK_ENV = "development"
    FLASK_DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    FLASK_ENV = "production"


class TestingConfig(Config):
    TESTING = True
    FLASK_ENV = "testing"
    SECRET_KEY = "testing-secret"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-length"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    CRON_SECRET = "cron-test-secret"
    LOG_LEVEL = "WARNING"
