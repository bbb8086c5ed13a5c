"""
Environment selection for Locshare settings
"""
import os

from .settings import Settings


def get_settings() -> Settings:
    """Build the settings for the environment named by LOCSHARE_ENV"""
    env = os.getenv("LOCSHARE_ENV", "development").strip().lower()
    if env == "production":
        from .production import ProductionSettings
        return ProductionSettings()
    if env == "development":
        from .development import DevelopmentSettings
        return DevelopmentSettings()
    return Settings()


settings = get_settings()

__all__ = ["Settings", "get_settings", "settings"]
