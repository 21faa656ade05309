"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        gyazo_access_token: Gyazo API access token. Required to serve.
        gyazo_api_url: Base URL of the Gyazo REST API.
        gyazo_upload_url: Full URL of the Gyazo upload endpoint.
        request_timeout: HTTP timeout for every upstream call in seconds.
        resource_page_size: Number of recent images exposed as resources.
        transport: MCP transport, either "stdio" or "http".
        host: Server bind address (http transport only).
        port: Server bind port (http transport only).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format for production.

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gyazo
    gyazo_access_token: str = ""
    gyazo_api_url: str = "https://api.gyazo.com"
    gyazo_upload_url: str = "https://upload.gyazo.com/api/upload"
    request_timeout: float = 30.0

    # Resources
    resource_page_size: int = 10

    # Server
    transport: str = "stdio"  # stdio | http
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def has_access_token(self) -> bool:
        """Return whether a Gyazo access token is configured.

        Returns:
            bool: True if the token is set and not blank.

        """
        return bool(self.gyazo_access_token.strip())


# Global settings instance
settings = Settings()
