from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Resource Hub"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./resource_hub.db"

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    # Grid defaults
    grid_default_layout: str = "grid"
    grid_default_limit: int = 12
    grid_max_limit: int = 100
    grid_default_orderby: str = "date"
    filter_order: list[str] = ["search", "type", "topic", "audience", "duration", "sort", "layout_toggle"]

    # Query caps
    editor_list_limit: int = 100
    related_limit: int = 3
    excerpt_words: int = 20

    # Permalink bases
    resource_base_url: str = "/resources"
    collection_base_url: str = "/collections"

    # Extension plugins, as "package.module:ClassName" paths
    plugins: list[str] = []

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
