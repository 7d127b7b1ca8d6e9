from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Runtime settings."""
    
    # App
    APP_NAME: str = "DMN Runtime"
    LOG_LEVEL: str = "INFO"
    CONFIGURE_LOGGING: bool = False
    
    # History
    HISTORY_ENABLED: bool = True
    HISTORY_STORE: str = "memory"  # memory | sql
    
    # Database (used when HISTORY_STORE=sql)
    DATABASE_URL: str = "sqlite:///./dmn_history.db"
    DATABASE_ECHO: bool = False
    
    class Config:
        env_file = ".env"
        env_prefix = "DMN_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
