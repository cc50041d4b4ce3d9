from pydantic import BaseModel, ConfigDict, Field


class TokenPair(BaseModel):
    """
    Access/refresh token pair held in memory and persisted by a TokenStore.
    """

    access_token: str | None = None
    refresh_token: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token


class TokenReissueRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class TokenReissueData(BaseModel):
    access_token: str = Field(..., alias="accessToken", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class LoginTokens(BaseModel):
    """
    Token pair returned by the social login endpoints.
    """

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)

    def to_token_pair(self) -> TokenPair:
        return TokenPair(access_token=self.access_token, refresh_token=self.refresh_token)


def mask_token(value: str | None) -> str:
    """Mask a credential for logging, keeping a short prefix."""
    if not value:
        return "<empty>"
    if len(value) <= 6:
        return "*" * len(value)
    return value[:6] + "*" * (len(value) - 6)
