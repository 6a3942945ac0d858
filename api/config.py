"""
Environment-aware configuration.
Every value is read once here and handed to the app / SessionService by
create_app(); nothing else reads the environment for auth settings.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    # "dev" enables the /admin/reset endpoint
    PLATFORM = os.getenv("PLATFORM", "prod")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///chirpy.db")
    SQL_ECHO = False
    # token settings
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    ACCESS_TOKEN_MAX_SECONDS = int(os.getenv("ACCESS_TOKEN_MAX_SECONDS", "3600"))
    REFRESH_ACCESS_TOKEN_SECONDS = 3600
    REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv("REFRESH_TOKEN_EXPIRES_DAYS", "60")))
    # payment provider webhook
    POLKA_KEY = os.getenv("POLKA_KEY", "")
    API_KEY_HEADER = os.getenv("API_KEY_HEADER", "X-API-Key")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    PLATFORM = "dev"
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "test-secret-key-for-testing-only"
    POLKA_KEY = "test-polka-key"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
