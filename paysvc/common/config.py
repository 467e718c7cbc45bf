"""Environment-driven settings for the payment service.

Loaded once per process at import time. Every field maps to an upper-case
environment variable of the same name, e.g. `database_url` <- `DATABASE_URL`.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "payment-service"
    log_level: str = "INFO"
    database_url: str
    db_auto_create: bool = False
    tracing_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    enforce_status_transitions: bool = False
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
