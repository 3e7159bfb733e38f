"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    phonepe_client_id: str = ""
    phonepe_client_secret: str = ""
    phonepe_client_version: str = "1"
    phonepe_env: str = "SANDBOX"  # only "PRODUCTION" selects the live gateway
    phonepe_timeout_seconds: float = 10.0

    webhook_username: str = ""
    webhook_password: str = ""

    port: int = 3000
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///./phonepe_relay.db"
    max_body_bytes: int = 10 * 1024 * 1024  # 10 MB

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
