# finance_api/config.py
import os
from datetime import timedelta


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    DB_PATH = os.environ.get("DB_PATH", os.path.join(os.getcwd(), "data", "finance.db"))

    # JWT: short-lived access token in the Authorization header,
    # long-lived refresh token in an httpOnly cookie
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-key-change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.environ.get("ACCESS_TOKEN_MINUTES", 15)))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.environ.get("REFRESH_TOKEN_DAYS", 7)))
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_REFRESH_COOKIE_NAME = "refreshToken"
    JWT_REFRESH_COOKIE_PATH = "/api/auth"
    JWT_COOKIE_SECURE = _env_flag("JWT_COOKIE_SECURE", True)
    JWT_COOKIE_SAMESITE = "Strict"
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
    PASSWORD_MIN_LENGTH = int(os.environ.get("PASSWORD_MIN_LENGTH", 8))
    MAX_PAGE_SIZE = 100


class TestingConfig(Config):
    TESTING = True
    JWT_COOKIE_SECURE = False
    JWT_SECRET_KEY = "testing-jwt-key-with-enough-length-for-hs256"
    SECRET_KEY = "testing-secret"
