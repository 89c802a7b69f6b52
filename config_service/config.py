from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pydantic import AliasChoices, Field, field_validator
import logging

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_REPORT_API_URL = "https://dashboard-backend-7vgh.onrender.com/api/dashboard"
DEFAULT_ESCAPE_HATCH_URL = "https://gilfinnas.com/"


class DashboardSettings(BaseSettings):
    """
    Configuration of the dashboard view.

    Every value is read from the process environment (or a local ``.env``
    file). The reporting API credential is optional at load time: its absence
    only surfaces when a fetch is attempted.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # ==========================================
    # GENERAL
    # ==========================================
    PROJECT_NAME: str = "Cashflow Dashboard"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # ==========================================
    # REPORTING API
    # ==========================================
    REPORT_API_URL: str = DEFAULT_REPORT_API_URL
    REPORT_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REPORT_API_KEY", "NEXT_PUBLIC_API_KEY"),
    )
    REPORT_API_KEY_HEADER: str = "x-api-key"
    REPORT_PERIOD_PARAM: str = "year"
    REPORT_API_TIMEOUT: Optional[float] = None

    # ==========================================
    # NAVIGATION
    # ==========================================
    IDENTITY_QUERY_PARAM: str = "userId"
    ESCAPE_HATCH_URL: str = DEFAULT_ESCAPE_HATCH_URL

    # ==========================================
    # HTTP SERVICE
    # ==========================================
    DASHBOARD_VIEW_HOST: str = "0.0.0.0"
    DASHBOARD_VIEW_PORT: int = 3010
    ALLOWED_ORIGINS: str = "http://localhost:5173"

    @field_validator("REPORT_API_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("REPORT_API_KEY")
    @classmethod
    def blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def api_key_configured(self) -> bool:
        return bool(self.REPORT_API_KEY)

    def get_allowed_origins(self) -> List[str]:
        """CORS origins of the renderers, from a comma separated list."""
        return [origin.strip().rstrip("/") for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def get_report_api_config(self) -> dict:
        """Return the reporting API settings without the credential itself."""
        return {
            "url": self.REPORT_API_URL,
            "key_header": self.REPORT_API_KEY_HEADER,
            "period_param": self.REPORT_PERIOD_PARAM,
            "timeout": self.REPORT_API_TIMEOUT,
            "api_key_configured": self.api_key_configured,
        }


settings = DashboardSettings()

if not settings.api_key_configured:
    logger.warning("REPORT_API_KEY is not set: every reporting API request will fail")
