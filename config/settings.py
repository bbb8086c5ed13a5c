"""
Configuration settings for the Locshare backend and client
"""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""
    
    # API Configuration
    api_title: str = "Locshare API"
    api_version: str = "1.0.0"
    api_description: str = "Opt-in location sharing and capture record storage"
    
    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    
    # Database Configuration
    mongodb_uri: Optional[str] = None
    mongodb_database: Optional[str] = None  # falls back to the URI's database, then "locshare"
    mongodb_collection: str = "locations"
    mongodb_connect_timeout_ms: int = 5000
    
    # Client Configuration
    api_url_production: str = "https://locshare.example.com/api/location"
    api_url_development: str = "http://localhost:5000/api/location"
    position_timeout: float = 10.0
    
    # External lookups
    geocoder_domain: str = "nominatim.openstreetmap.org"
    geocoder_user_agent: str = "locshare"
    ip_echo_url: str = "https://api.ipify.org?format=json"
    lookup_timeout: float = 5.0
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    
    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return False

    @property
    def api_url(self) -> str:
        """Submission endpoint for the current environment"""
        if self.is_production:
            return self.api_url_production
        return self.api_url_development


# Global settings instance
settings = Settings()
