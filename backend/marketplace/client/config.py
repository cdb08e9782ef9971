"""
Client configuration using pydantic-settings.
Environment variables are prefixed with MARKETPLACE_CLIENT_.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    API_BASE_URL: str = "http://localhost:5000/api"
    # Uniform transport deadline for every call, in seconds
    REQUEST_TIMEOUT: float = 10.0
    SESSION_FILE: str = "~/.event-marketplace/session.json"

    model_config = {
        "env_prefix": "MARKETPLACE_CLIENT_",
        "env_file": ".env",
        "extra": "ignore",
        "case_sensitive": True,
    }


@lru_cache()
def get_client_settings() -> ClientSettings:
    return ClientSettings()
