import os
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or "sqlite:///" + os.path.join(basedir, "agent_inbox.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY") or "a-dev-secret-key-that-is-not-so-secret"
    # Signing secret for bearer tokens, falls back to SECRET_KEY
    JWT_SECRET = os.environ.get("JWT_SECRET")

    CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 5000))
    APP_ENV = os.environ.get("APP_ENV", "development")
    APP_VERSION = "1.0.0"

    AUTO_REPLY_MESSAGE = os.environ.get(
        "AUTO_REPLY_MESSAGE",
        "Hello! We received your message and our team will get in touch with you shortly.",
    )


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-jwt-secret"
    CORS_ORIGINS = ["*"]
    APP_ENV = "test"
