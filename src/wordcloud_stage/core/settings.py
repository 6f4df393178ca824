"""Runtime configuration for the word cloud service.

Every option maps to an environment variable (or a ``.env`` entry) named by
its alias.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_POSTGRES_PREFIXES = ("postgres://", "postgresql://")


class Settings(BaseSettings):
    """Service settings: storage, submission limits and session bounds."""

    app_name: str = Field(default="Word Cloud Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Storage
    database_url: str = Field(default="sqlite:///./wordcloud.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis fan-out for summary notifications; in-process only when unset
    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    # Submission surfaces
    standard_max_word_length: int = Field(default=25, alias="STANDARD_MAX_WORD_LENGTH")
    compact_max_word_length: int = Field(default=10, alias="COMPACT_MAX_WORD_LENGTH")
    profanity_filter_enabled: bool = Field(default=False, alias="PROFANITY_FILTER_ENABLED")

    # Quota gate; disabling it routes submissions through the unguarded insert
    quota_enforcement_enabled: bool = Field(default=True, alias="QUOTA_ENFORCEMENT_ENABLED")

    # Session defaults and bounds
    default_max_entries_per_user: int = Field(default=3, alias="DEFAULT_MAX_ENTRIES_PER_USER")
    default_cooldown_minutes: int = Field(default=24, alias="DEFAULT_COOLDOWN_MINUTES")
    max_entries_per_user_limit: int = Field(default=10, alias="MAX_ENTRIES_PER_USER_LIMIT")
    max_cooldown_minutes: int = Field(default=168, alias="MAX_COOLDOWN_MINUTES")
    top_words_default: int = Field(default=3, alias="TOP_WORDS_DEFAULT")

    upload_max_bytes: int = Field(default=5 * 1024 * 1024, alias="UPLOAD_MAX_BYTES")

    # Presenter and participant frontends are served from other origins
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """The test database when ``USE_TEST_DATABASE`` is set, else ``DATABASE_URL``."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def database_url_sync(self) -> str:
        """Return the active URL with a driver SQLAlchemy can load.

        Bare ``postgres://`` and ``postgresql://`` URLs are pinned to psycopg 3,
        the driver installed by the ``postgres`` extra. Other URLs pass through.
        """
        url = self.effective_database_url
        for prefix in _POSTGRES_PREFIXES:
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url

    @property
    def max_length_by_surface(self) -> dict[str, int]:
        """Word length limit for each submission surface."""
        return {
            "standard": self.standard_max_word_length,
            "compact": self.compact_max_word_length,
        }


settings = Settings()
