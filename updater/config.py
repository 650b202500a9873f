from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Plugin Updater"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Plugin identity
    plugin_slug: str = "codewing-updater"
    plugin_basename: str = "codewing-updater/codewing-updater.php"
    plugin_version: str = "1.0"
    cache_key: str = "codewing_custom_upd"

    # Manifest source
    manifest_url: str = "http://sagar-n3jr.wp1.site/wp-content/uploads/2024/10/updater-info.json"
    manifest_timeout_seconds: float = Field(10.0, gt=0)
    manifest_cache_ttl_seconds: int = Field(86400, gt=0)

    # Compatibility sources, as reported by the host (platform version and its PHP runtime)
    host_version: str = "6.0"
    runtime_version: str = "8.2"

    # Cache settings
    cache_backend: str = "memory"  # "memory" or "redis"
    redis_url: str | None = None

    # Plugin config persistence
    plugins_config_file: str = "data/plugins_config.json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
