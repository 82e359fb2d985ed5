"""Settings and constants shared by the API, the web frontend and the health ping."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings read from the environment or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Storage
    database_path: str = Field(default="data/taskboard.db", description="SQLite database file path")

    # HTTP servers
    host: str = Field(default="0.0.0.0", description="Interface the servers bind to")  # noqa: S104
    port: int = Field(default=3001, description="Port for the REST API")
    web_port: int = Field(default=5173, description="Port for the web frontend")
    frontend_url: str = Field(
        default="http://localhost:5173", description="Frontend origin allowed by the API's CORS policy"
    )
    api_base_url: str = Field(
        default="http://localhost:3001/api", description="Base URL the frontend and health ping use to reach the API"
    )

    # Observability; spans are exported only when a token is present
    logfire_token: str | None = Field(default=None, description="Logfire write token")
    environment: str = Field(default="development", description="Deployment environment name")

    # Health ping
    health_ping_interval_minutes: int | None = Field(
        default=None, description="Run the health ping in-process every N minutes (disabled when unset)"
    )
    health_ping_timeout_seconds: float = Field(default=10.0, description="Timeout for a single health ping request")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


class Constants:
    SERVICE_NAME: str = "taskboard"
    SERVICE_VERSION: str = "0.1.0"

    # The web form enforces this; the API accepts any non-blank title
    TITLE_MIN_LENGTH: int = 3

    DUE_SOON_HOURS: int = 24

    HEALTH_PING_USER_AGENT: str = "CronJob-HealthPing/1.0"

    PACKAGE_ROOT: Path = Path(__file__).parent.parent
    TEMPLATES_DIR: Path = PACKAGE_ROOT / "templates"


settings = Settings()
constants = Constants()
