import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_BILLING_API_BASE_URL = "https://se4458-midterm-project.onrender.com/api/v1"


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    debug: bool
    log_level: str

    ollama_base_url: str
    ollama_model: str
    ollama_timeout_s: float

    billing_api_base_url: str
    billing_timeout_s: float

    cors_origins: tuple[str, ...]


def get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return an environment variable, treating empty strings as unset."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_number(name: str, default: str, cast):
    raw = get_env_var(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise RuntimeError(
            f"❌ Invalid value for environment variable {name}: {raw!r}"
        )


def load_settings() -> Settings:
    # Secrets and endpoints may live in a local `.env` (not committed).
    load_dotenv(override=False)

    origins = get_env_var("CORS_ORIGINS", "*")

    return Settings(
        host=get_env_var("HOST", "0.0.0.0"),
        port=_get_number("PORT", "8000", int),
        debug=get_env_var("DEBUG", "false").lower() == "true",
        log_level=get_env_var("LOG_LEVEL", "INFO").upper(),
        ollama_base_url=get_env_var("OLLAMA_BASE_URL", "http://localhost:11434").rstrip("/"),
        ollama_model=get_env_var("OLLAMA_MODEL", "mistral"),
        ollama_timeout_s=_get_number("OLLAMA_TIMEOUT_S", "120", float),
        billing_api_base_url=get_env_var(
            "BILLING_API_BASE_URL", DEFAULT_BILLING_API_BASE_URL
        ).rstrip("/"),
        billing_timeout_s=_get_number("BILLING_TIMEOUT_S", "30", float),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
