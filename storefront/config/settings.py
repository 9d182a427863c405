from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOREFRONT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "duckdb://./data/storefront.duckdb"

    # JWT
    jwt_secret_key: str = "your-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24 * 7  # 7 days

    # Payment gateway and notification backends
    payment_gateway_url: str = "http://localhost:8082"
    notification_url: Optional[str] = None  # defaults to the gateway backend
    merchant_display_name: str = "OBOMA"
    currency: str = "myr"

    # API
    api_title: str = "Storefront API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"

    debug: bool = False

    @property
    def database_path(self) -> str:
        """Strip the duckdb:// scheme from database_url"""
        if self.database_url.startswith("duckdb://"):
            return self.database_url[len("duckdb://"):]
        return self.database_url


# Default settings instance
settings = Settings()
