from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT = 10.0
REISSUE_PATH = "/auth/reissue"
LOGIN_ROUTE = "SocialLogin"


class ApiSettings(BaseSettings):
    """Settings for the API client core, read from ``NAILAPI_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="NAILAPI_")

    base_url: str = Field(
        "http://localhost:8080",
        description="Base URL that relative endpoints are resolved against.",
    )
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Default per-call timeout in seconds.")

    # Auth settings
    reissue_path: str = REISSUE_PATH
    auth_path_prefix: str = "/auth"
    login_route: str = LOGIN_ROUTE
