import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _resolve_database_url() -> str:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    environment = os.getenv("ENVIRONMENT", "").strip().lower()
    if environment == "development":
        return "postgresql+psycopg://localhost:5434/signoff"

    raise ValueError(
        "DATABASE_URL is not set. Set DATABASE_URL for non-development "
        "environments or set ENVIRONMENT=development for local defaults."
    )


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


def _env_tokens(name: str) -> dict[str, str]:
    """Parse ``token=email`` pairs separated by commas."""
    tokens: dict[str, str] = {}
    for pair in os.getenv(name, "").split(","):
        token, sep, email = pair.partition("=")
        if sep and token.strip():
            tokens[token.strip()] = email.strip().lower()
    return tokens


@dataclass(frozen=True)
class Settings:
    database_url: str = _resolve_database_url()
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Bearer tokens accepted by the collection API
    api_tokens: dict[str, str] = field(default_factory=lambda: _env_tokens("API_TOKENS"))

    # Team allowlist and role assignment
    team_enforce_allowlist: bool = (
        os.getenv("TEAM_ENFORCE_ALLOWLIST", "").strip().lower() == "true"
    )
    team_allowed_emails: tuple[str, ...] = _env_list("TEAM_ALLOWED_EMAILS")
    team_allowed_domains: tuple[str, ...] = _env_list("TEAM_ALLOWED_DOMAINS")
    team_reviewer_emails: tuple[str, ...] = _env_list("TEAM_REVIEWER_EMAILS")
    team_creator_emails: tuple[str, ...] = _env_list("TEAM_CREATOR_EMAILS")
    team_reviewer_domains: tuple[str, ...] = _env_list("TEAM_REVIEWER_DOMAINS")
    team_creator_domains: tuple[str, ...] = _env_list("TEAM_CREATOR_DOMAINS")

    # R2 / S3 object storage
    r2_endpoint: str = os.getenv("R2_ENDPOINT", "")
    r2_access_key_id: str = os.getenv("R2_ACCESS_KEY_ID", "")
    r2_secret_access_key: str = os.getenv("R2_SECRET_ACCESS_KEY", "")
    r2_bucket: str = os.getenv("R2_BUCKET", "")
    r2_public_base_url: str = os.getenv("R2_PUBLIC_BASE_URL", "")


settings = Settings()
