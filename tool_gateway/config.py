from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "AI Gateway Tool API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DEBUG_GATEWAY: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8443
    SSL_KEY_PATH: str = ""
    SSL_CERT_PATH: str = ""
    CORS_ALLOW_ORIGINS: str = "*"

    # Security
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_ALLOWED_ALGORITHMS: str = "HS256"
    JWT_CLOCK_SKEW_SECONDS: int = 0
    JWT_REQUIRE_EXP: bool = True
    JWT_USER_ID_CLAIM: str = "sub"

    # Tools
    TOOLS_CONFIG_PATH: str = "tools.config.json"
    BACKEND_TIMEOUT_SECONDS: float = 30.0
    MAX_BODY_BYTES: int = 2 * 1024 * 1024
    IDENTITY_HEADER: str = "x-user-id"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
