from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(str, Enum):
    DEV = "dev"
    HML = "hml"
    PROD = "prod"


class Settings(BaseSettings):
    APP_ENV: Env = Env.DEV
    DEBUG: bool = False

    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DATABASE_URL: str = "sqlite:///./gymbook.db"
    DB_ECHO: bool = False

    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    # Wall-clock timezone of the gym; every DD-MM-YYYY / HH:MM value is read in it
    GYM_TIMEZONE: str = "UTC"
    GYM_LOCATION: str = "Hrushevsky Street, 16, Kyiv"

    # Admin-only reports; turn off for internal dashboards behind the gateway
    REPORTS_REQUIRE_ADMIN: bool = True

    SCHEDULER_ENABLED: bool = True
    # crontab fields: minute hour day month day_of_week
    REPORT_CRON: str = "0 8 * * sun"
    ADMIN_EMAIL: str = "admin@gymbook.local"

    MAIL_HOST: str = "localhost"
    MAIL_PORT: int = 1025
    MAIL_TLS: bool = False
    MAIL_USER: str = ""
    MAIL_PASS: str = ""
    MAIL_FROM: str = "reports@gymbook.local"
    MAIL_FROM_NAME: str = "Gym Reports"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# cria instância global
settings = Settings()
