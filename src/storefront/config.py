from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///ecommerce.db"
    api_title: str = "Storefront API"
    environment: str = "development"
    static_dir: str = "dist"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    jwt_secret: str = "change-me-storefront-development-secret"
    jwt_algorithm: str = "HS256"
    session_token_expire_minutes: int = 60 * 24 * 7
    password_hash_rounds: int = 10
    auth_rate_limit: str = "5/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()
