"""Settings modules, selected by the ``APP_ENV`` environment variable."""

import os

_ENV_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
    "dev": "development",
    "development": "development",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    # Unknown or unset values fall back to development.
    return f"config.{_ENV_ALIASES.get(env, 'development')}"
