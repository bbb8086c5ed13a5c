"""
Development configuration settings
"""
from typing import Optional

from .settings import Settings


class DevelopmentSettings(Settings):
    """Development-specific settings"""
    
    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = True
    
    # Database - local instance unless overridden
    mongodb_uri: Optional[str] = "mongodb://localhost:27017/locshare"
    
    # Logging
    log_level: str = "DEBUG"
    log_file: Optional[str] = "logs/locshare_dev.log"
    
    class Config:
        env_file = ".env.development"
        case_sensitive = False


# Development settings instance
development_settings = DevelopmentSettings()
