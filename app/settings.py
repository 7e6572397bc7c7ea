from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content repository
    CMS_API_URL: str = "https://ignite-blog.cdn.prismic.io/api/v2"
    CMS_ACCESS_TOKEN: str = ""
    HTTP_TIMEOUT_SECONDS: float = 10.0
    MASTER_REF_TTL_SECONDS: float = 5.0

    # Blog
    BLOG_DOCUMENT_TYPE: str = "ignite-blog"
    FEED_PAGE_SIZE: int = 1
    WORDS_PER_MINUTE: int = 200
    REVALIDATE_SECONDS: int = 60 * 60 * 24

    # Dates are shown in the readers' timezone
    DISPLAY_TIMEZONE: str = "America/Sao_Paulo"

    # Preview
    PREVIEW_COOKIE_NAME: str = "io.prismic.preview"

    # Logging
    LOG_LEVEL: str = "INFO"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
