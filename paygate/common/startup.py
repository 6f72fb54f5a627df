"""Startup-time helpers for safe config logging."""

from urllib.parse import urlsplit, urlunsplit

from paygate.common.config import CommonSettings
from paygate.common.logging import logger

SECRET_MARKERS = ("key", "secret", "password", "token")


def _strip_userinfo(url: str) -> str:
    """Drop `user:password@` from a URL, keeping host and path."""

    parts = urlsplit(url)
    if not parts.password and not parts.username:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, f"<redacted>@{host}", parts.path, parts.query, parts.fragment))


def redacted_config(settings: CommonSettings, fields: list[str]) -> dict[str, object]:
    """Selected settings with secret-like fields replaced by `<redacted>`."""

    values = settings.model_dump()
    config: dict[str, object] = {"service": settings.service_name}
    for field in fields:
        value = values.get(field, "<unset>")
        if value and any(marker in field for marker in SECRET_MARKERS):
            value = "<redacted>"
        elif value and field.endswith("_url"):
            value = _strip_userinfo(str(value))
        config[field] = value
    return config


def log_startup_config(settings: CommonSettings, fields: list[str]) -> None:
    """Log selected startup config fields for quick troubleshooting."""

    logger.info("startup_config=%s", redacted_config(settings, fields))
