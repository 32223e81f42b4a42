# config.py
import os
from datetime import timedelta

class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///grasscard.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Two fixed user slots; blank names fall back to "User1" / "User2"
    USER1_NAME = os.environ.get("USER1", "")
    USER2_NAME = os.environ.get("USER2", "")

    # Day keys are computed in this timezone
    TIMEZONE = os.environ.get("GRASSCARD_TIMEZONE", "Asia/Tokyo")
    GRID_WEEKS = int(os.environ.get("GRASSCARD_GRID_WEEKS", "24"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # 🔐 JWT config: the selected slot lives in an http-only cookie
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "uid"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_SECURE = os.environ.get("JWT_COOKIE_SECURE", "0") == "1"
    JWT_COOKIE_CSRF_PROTECT = False      # html forms send no csrf header
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=365)
