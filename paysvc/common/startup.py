"""Startup-time config logging with secrets hidden."""

from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url

from paysvc.common.logging import logger


SECRET_MARKERS = ("key", "secret", "password", "token")


def _display(name: str, value) -> str:
    if name == "database_url":
        # Keep driver, host and database visible; only the password is masked.
        return make_url(value).render_as_string(hide_password=True)
    if any(marker in name for marker in SECRET_MARKERS):
        return "<redacted>"
    return str(value)


def startup_config(config: BaseSettings, fields: list[str]) -> dict[str, str]:
    """Selected settings as display strings."""

    return {name: _display(name, getattr(config, name)) for name in fields}


def log_startup_config(config: BaseSettings, fields: list[str]) -> None:
    """Log selected settings once for quick troubleshooting."""

    logger.info("startup_config=%s", startup_config(config, fields))
