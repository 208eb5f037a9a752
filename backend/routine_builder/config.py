from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_file": "../.env",
        "extra": "ignore",
        "env_prefix": "",
        "case_sensitive": False,
    }

    # Catalog
    catalog_source: str = "products.json"  # http(s) URL or filesystem path
    synthetic_pid_mode: Literal["positional", "content_hash"] = "positional"

    # Chat backend (the pass-through proxy the orchestrator talks to)
    chat_endpoint_url: str = "http://localhost:8000/api/v1/chat"

    # Durable selection storage, one file per device fingerprint
    storage_dir: str = ".selection-storage"

    # Proxy provider
    anthropic_api_key: str = ""
    chat_model: str = "claude-sonnet-4-5-20250929"
    chat_max_tokens: int = 2048

    # App
    environment: str = "development"
    log_level: str = "INFO"


settings = Settings()
