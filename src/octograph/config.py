"""
Configuration management for the Octograph server
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OCTOGRAPH_",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_reload: bool = False
    cors_origins: list[str] = ["*"]

    # GraphQL
    graphiql: bool = True  # Serve the GraphiQL explorer on GET /
    max_query_depth: int = 12

    # GitHub data source
    github_api_url: str = "https://api.github.com"
    github_token: str | None = None
    github_timeout: float = 10.0  # seconds, per upstream call
    user_agent: str = "octograph/0.1"

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = True
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
