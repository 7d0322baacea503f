import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


class Settings:
    """Application settings read from the environment (and a local .env file)."""

    def __init__(self):
        self.APP_NAME: str = os.getenv("APP_NAME", "WeWinBid API")
        self.APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wewinbid.db")
        self.AUTO_CREATE_TABLES: bool = _get_bool("AUTO_CREATE_TABLES", False)

        self.JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "dev-secret-change-me")
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.ACCESS_TOKEN_EXPIRE_MINUTES: int = _get_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)

        self.GOOGLE_API_KEY: str | None = os.getenv("GOOGLE_API_KEY") or None
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

        self.CRON_SECRET: str | None = os.getenv("CRON_SECRET") or None
        self.JOBS_INTERVAL_MINUTES: int = _get_int("JOBS_INTERVAL_MINUTES", 0)

        self.SMTP_HOST: str | None = os.getenv("SMTP_HOST") or None
        self.SMTP_PORT: int = _get_int("SMTP_PORT", 587)
        self.SMTP_USER: str | None = os.getenv("SMTP_USER") or None
        self.SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD") or None
        self.EMAIL_FROM: str = os.getenv("EMAIL_FROM", "WeWinBid <noreply@wewinbid.com>")
        self.APP_URL: str = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")

        self.UPLOAD_BASE_DIR: str = os.getenv("UPLOAD_BASE_DIR", "uploads")
        self.MAX_UPLOAD_SIZE_MB: int = _get_int("MAX_UPLOAD_SIZE_MB", 50)

        self.CORS_ORIGINS: list[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_JSON: bool = _get_bool("LOG_JSON", False)


settings = Settings()
