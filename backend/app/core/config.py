from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Passwords that only ever appear in sample compose files
WEAK_DB_PASSWORDS = frozenset({"postgres", "password", "changeme", "payroll"})

LOCAL_ORIGINS = frozenset({
    "http://localhost:3000",
    "http://localhost:8080",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8080",
})


def _url_password(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        return urlsplit(url).password
    except ValueError:
        return None


class Settings(BaseSettings):
    """Runtime settings for the payroll API, read from the environment and `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_parse_delimiter=",", extra="ignore")

    PROJECT_NAME: str = "Employee Payroll API"
    # Mount point of the employee routes, e.g. "/api" -> /api/employees
    API_PREFIX: str = ""
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Unset means: DEBUG/INFO from DEBUG, JSON only in production
    LOG_LEVEL: Optional[str] = None
    JSON_LOGS: Optional[bool] = None

    # `str` is accepted so a plain comma-separated env value is not parsed as JSON
    ALLOWED_ORIGINS: List[str] | str = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:8080"],
    )

    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = Field(
        default="db",
        validation_alias=AliasChoices("POSTGRES_SERVER", "POSTGRES_HOST"),
    )
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "payroll"

    DB_POOL_SIZE: int = Field(default=10, description="Persistent connections kept by the pool")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Extra connections allowed under load")

    # Takes precedence over the POSTGRES_* parts when set
    DATABASE_URL: Optional[str] = None
    SQLALCHEMY_ECHO: bool = False

    # Run create_all at startup; turn off once Alembic manages the schema
    DB_CREATE_TABLES: bool = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def _production_problems(self, url_from_parts: bool) -> List[str]:
        problems = []

        if url_from_parts and self.POSTGRES_PASSWORD in WEAK_DB_PASSWORDS:
            problems.append(
                "POSTGRES_PASSWORD is insecure. Use a strong password or supply DATABASE_URL."
            )
        elif _url_password(self.DATABASE_URL) in WEAK_DB_PASSWORDS:
            problems.append("DATABASE_URL contains an insecure password.")

        if not self.ALLOWED_ORIGINS or set(self.ALLOWED_ORIGINS) <= LOCAL_ORIGINS:
            problems.append("ALLOWED_ORIGINS must list the real client origins, not localhost.")

        if self.DEBUG:
            problems.append("DEBUG must be False in production.")

        return problems

    def model_post_init(self, __context):
        """Fill DATABASE_URL from its parts and refuse unsafe production settings."""
        url_from_parts = not self.DATABASE_URL
        if url_from_parts:
            self.DATABASE_URL = (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        if self.is_production:
            problems = self._production_problems(url_from_parts)
            if problems:
                raise ValueError(
                    "Production configuration errors:\n" + "\n".join(f"  - {p}" for p in problems)
                )


settings = Settings()
