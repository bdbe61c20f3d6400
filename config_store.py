"""JSON-backed configuration store and cron secret handling."""

from __future__ import annotations

import hmac
import json
import logging
import os
import secrets
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

from models import RunConfig

DEFAULT_CONFIG_PATH = "availability_config.json"

DEFAULT_SOURCE_LOCATION = "https://www.your-shop.com/google-shopping.xml"
DEFAULT_TARGET_LOCATION = "google_availability_supplement.xml"
DEFAULT_DAYS_OFFSET = 5
DEFAULT_SHOP_BASE_URL = "https://www.your-shop.com/"
SECRET_BYTES = 12

LOGGER = logging.getLogger(__name__)


def generate_secret(nbytes: int = SECRET_BYTES) -> str:
    return secrets.token_hex(nbytes)


def default_config() -> RunConfig:
    """Built-in settings used when nothing has been saved yet.

    A fresh cron secret is generated on every call, so it only becomes
    stable once the configuration is saved.
    """
    return RunConfig(
        source_location=DEFAULT_SOURCE_LOCATION,
        target_location=DEFAULT_TARGET_LOCATION,
        days_offset=DEFAULT_DAYS_OFFSET,
        shop_base_url=DEFAULT_SHOP_BASE_URL,
        cron_secret=generate_secret(),
    )


def load_config(path: str | Path | None = None) -> RunConfig:
    """Load the stored configuration, filling gaps from the defaults."""
    config_path = config_path_for(path)
    defaults = default_config()
    if not config_path.exists():
        return defaults

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.warning("Config at %s unreadable, using defaults: %s", config_path, exc)
        return defaults

    if not isinstance(data, dict):
        LOGGER.warning("Config at %s is not a JSON object, using defaults", config_path)
        return defaults

    return update_config(defaults, **_known_fields(data))


def save_config(config: RunConfig, path: str | Path | None = None) -> None:
    """Persist ``config`` as pretty-printed JSON (temp file + rename)."""
    config_path = config_path_for(path)
    payload = json.dumps(asdict(config), indent=4, ensure_ascii=False) + "\n"

    tmp = config_path.with_name(f".{config_path.name}.tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(config_path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    LOGGER.info("Saved configuration to %s", config_path)


def update_config(config: RunConfig, **changes: Any) -> RunConfig:
    """Return a copy of ``config`` with the given fields replaced.

    String values are trimmed and ``days_offset`` is coerced to int; ``None``
    means "leave unchanged".
    """
    cleaned: dict[str, Any] = {}
    for name, value in changes.items():
        if value is None:
            continue
        if name == "days_offset":
            try:
                cleaned[name] = int(value)
            except (TypeError, ValueError):
                LOGGER.warning("Ignoring non-integer days_offset=%r", value)
            continue
        cleaned[name] = str(value).strip()
    return replace(config, **cleaned)


def verify_secret(config: RunConfig, supplied: str | None) -> bool:
    """Constant-time check of a cron secret against the configured one."""
    if not supplied or not config.cron_secret:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), config.cron_secret.encode("utf-8"))


# Key names used by older, camelCase config files.
_LEGACY_KEYS = {
    "sourceFeed": "source_location",
    "targetFeed": "target_location",
    "daysOffset": "days_offset",
    "shopBaseUrl": "shop_base_url",
    "cronSecret": "cron_secret",
}


def _known_fields(data: dict[str, Any]) -> dict[str, Any]:
    names = RunConfig.__dataclass_fields__.keys()
    fields: dict[str, Any] = {}
    for key, value in data.items():
        name = _LEGACY_KEYS.get(key, key)
        if name in names:
            fields[name] = value
    return fields


def config_path_for(path: str | Path | None = None) -> Path:
    """Explicit path, else FEED_CONFIG_PATH from the environment, else the default."""
    return Path(path or os.getenv("FEED_CONFIG_PATH", DEFAULT_CONFIG_PATH))
