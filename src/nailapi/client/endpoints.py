"""
Typed wrappers for the auth and user endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field

from nailapi.client.executor import RequestExecutor
from nailapi.client.request import RequestOptions
from nailapi.config import REISSUE_PATH
from nailapi.shared.auth import LoginTokens, TokenReissueData, TokenReissueRequest
from nailapi.types import ApiResponse


class UserProfile(BaseModel):
    id: int
    nickname: str | None = None
    profile_image: str | None = Field(None, alias="profileImage")

    model_config = ConfigDict(populate_by_name=True)


class OnboardingStatus(BaseModel):
    next_onboarding_step: str | None = Field(None, alias="nextOnboardingStep")

    model_config = ConfigDict(populate_by_name=True)


class AppleUser(BaseModel):
    name: str
    email: str


async def reissue_access_token(
    executor: RequestExecutor, refresh_token: str, endpoint: str = REISSUE_PATH
) -> ApiResponse[TokenReissueData]:
    return await executor.execute(
        RequestOptions(
            endpoint=endpoint,
            method="POST",
            body=TokenReissueRequest(refresh_token=refresh_token),
        ),
        TokenReissueData,
    )


async def login_with_kakao(executor: RequestExecutor, kakao_access_token: str) -> ApiResponse[LoginTokens]:
    return await executor.execute(
        RequestOptions(endpoint="/auth/kakao", method="POST", body={"kakaoAccessToken": kakao_access_token}),
        LoginTokens,
    )


async def login_with_apple(
    executor: RequestExecutor,
    identity_token: str,
    authorization_code: str,
    user: AppleUser,
) -> ApiResponse[LoginTokens]:
    return await executor.execute(
        RequestOptions(
            endpoint="/auth/apple",
            method="POST",
            body={
                "identityToken": identity_token,
                "authorizationCode": authorization_code,
                "user": user.model_dump(),
            },
        ),
        LoginTokens,
    )


async def logout_from_service(executor: RequestExecutor, access_token: str) -> ApiResponse[None]:
    return await executor.execute(
        RequestOptions(endpoint="/auth/logout", method="POST", body={"accessToken": access_token}),
    )


async def fetch_user_profile(executor: RequestExecutor) -> ApiResponse[UserProfile]:
    return await executor.execute(RequestOptions(endpoint="/users/me"), UserProfile)


async def update_nickname(executor: RequestExecutor, nickname: str) -> ApiResponse[None]:
    return await executor.execute(
        RequestOptions(endpoint="/users/me/nickname", method="PATCH", body={"nickname": nickname}),
    )


async def fetch_onboarding_status(executor: RequestExecutor, max_supported_version: int) -> ApiResponse[OnboardingStatus]:
    return await executor.execute(
        RequestOptions(endpoint="/onboarding-status", query={"maxSupportedVersion": max_supported_version}),
        OnboardingStatus,
    )
