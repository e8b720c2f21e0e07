"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""
    
    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    mongo_timeout_ms: int = 5000

    # Redis (login rate limiting)
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_timeout_seconds: float = 2.0
    
    # JWT Configuration
    jwt_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60
    
    # Rate Limiting
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 60
    user_lockout_threshold: int = 10
    user_lockout_duration_minutes: int = 30
    
    # First operator, created at startup when both are set
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = None
    bootstrap_admin_name: str = "Administrateur"
    
    # Logging
    log_level: str = "INFO"
    
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit default
        "http://streamlit_frontend:8501",  # Docker network
    ]
    
    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
