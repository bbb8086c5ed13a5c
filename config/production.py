"""
Production configuration settings
"""
from typing import Optional

from .settings import Settings


class ProductionSettings(Settings):
    """Production-specific settings"""
    
    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    
    # Performance
    mongodb_connect_timeout_ms: int = 10000
    lookup_timeout: float = 10.0
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/locshare.log"
    
    class Config:
        env_file = ".env.production"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return True


# Production settings instance
production_settings = ProductionSettings()
