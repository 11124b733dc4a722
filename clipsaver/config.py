from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False
    version: str = "1.0.0"

    # External extraction tool. Any executable honoring the yt-dlp flag contract works.
    ytdlp_path: str = "yt-dlp"
    # Deadline in seconds for a single tool invocation
    tool_timeout: float = 60.0
    # Max concurrent direct-URL resolution calls per request
    resolve_concurrency: int = 4

    cache_ttl: float = 300.0

    # Comma-separated origins for CORS (e.g. "https://app.example.com"). Empty = allow "*" with no credentials.
    cors_origins: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
