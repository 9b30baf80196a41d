"""Client configuration with environment variable loading.

Pydantic-based configuration for the report backend client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from reportchat.models.schemas import RequestFormat

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_BASE_URL = "https://aakar-backend.onrender.com"


class ClientConfig(BaseModel):
    """Configuration for the report backend client.

    Attributes:
        api_base_url: Base URL of the report-generation backend.
        request_timeout: Seconds to wait for a report before giving up.
        default_format: Format preselected in the UI.
        user_id: Fallback user id when the page is opened without one.
        project_id: Fallback project id when the page is opened without one.
    """

    model_config = ConfigDict(validate_default=True)

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("REPORT_API_BASE_URL", DEFAULT_API_BASE_URL),
        description="Report backend base URL",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REPORT_API_TIMEOUT", "120")),
        gt=0.0,
        le=600.0,
        description="Request timeout in seconds",
    )
    default_format: RequestFormat = Field(
        default_factory=lambda: os.getenv("REPORT_DEFAULT_FORMAT", "PDF").upper(),
        description="Report format selected by default",
    )
    user_id: str = Field(
        default_factory=lambda: os.getenv("REPORT_USER_ID", ""),
        description="Fallback user id",
    )
    project_id: str = Field(
        default_factory=lambda: os.getenv("REPORT_PROJECT_ID", ""),
        description="Fallback project id",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "REPORT_API_BASE_URL must be an http:// or https:// URL"
            )
        return v.rstrip("/")

    @field_validator("default_format", mode="before")
    @classmethod
    def normalize_format(cls, v: object) -> object:
        """Accept lowercase format names."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If an environment value is invalid.
    """
    return ClientConfig()
