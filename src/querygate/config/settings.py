"""Configuration settings for the query gateway."""

import math
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Query execution
    query_timeout: int = Field(default=0, ge=0, description="Statement timeout in seconds, 0 means unbounded")
    connection_timeout: int = Field(default=30000, description="Connection attempt timeout in milliseconds")

    # Ambient pool size. Dynamic per-request connections never draw from a pool.
    max_pool_size: int = Field(default=15, gt=0)

    # JDBC bridge
    jdbc_driver_class: str = "com.ibm.as400.access.AS400JDBCDriver"
    jdbc_driver_jar: Optional[str] = None

    # Bearer token verification
    jwt_secret: str = "your_jwt_secret_key"
    jwt_algorithm: str = "HS256"

    # HTTP surface
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # Application Configuration
    debug: bool = False
    log_level: str = "INFO"

    @property
    def login_timeout_seconds(self) -> int:
        """Connection timeout converted to the whole seconds the driver expects."""
        if self.connection_timeout <= 0:
            return 0
        return math.ceil(self.connection_timeout / 1000)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
