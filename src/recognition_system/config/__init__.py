import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; development is the default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "recognition_system.config.production"

    if env in {"test", "testing"}:
        return "recognition_system.config.testing"

    return "recognition_system.config.development"
