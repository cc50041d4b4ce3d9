"""
High-level API client wiring the executor, interceptors and auth coordinator.
"""

import logging
from typing import Any, TypeVar

import httpx

from nailapi.client import endpoints
from nailapi.client.auth import AuthCoordinator
from nailapi.client.executor import RequestExecutor
from nailapi.client.interceptors import InterceptorRegistry, RequestInterceptor, ResponseInterceptor
from nailapi.client.navigation import NavigationRef, Navigator
from nailapi.client.request import RequestOptions
from nailapi.client.token_store import InMemoryTokenStore, TokenStore
from nailapi.config import ApiSettings
from nailapi.shared._httpx_utils import HttpClientFactory, create_http_client
from nailapi.shared.auth import LoginTokens, TokenPair
from nailapi.shared.errors import ApiError, Result
from nailapi.types import ApiResponse

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")


class ApiClient:
    """
    Authenticated client for the backend API.

    Usage::

        async with ApiClient(settings, storage=store, navigator=nav_ref) as client:
            profile = await client.execute(RequestOptions(endpoint="/users/me"))
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        storage: TokenStore | None = None,
        navigator: Navigator | None = None,
        http_client: httpx.AsyncClient | None = None,
        httpx_client_factory: HttpClientFactory = create_http_client,
    ):
        self.settings = settings or ApiSettings()
        self._http_client = http_client
        self._httpx_client_factory = httpx_client_factory
        # Flag to track if we own the client (created it)
        self._own_client = http_client is None

        self.interceptors = InterceptorRegistry()
        self.auth = AuthCoordinator(
            storage=storage if storage is not None else InMemoryTokenStore(),
            navigator=navigator if navigator is not None else NavigationRef(),
            reissue_path=self.settings.reissue_path,
            auth_path_prefix=self.settings.auth_path_prefix,
            login_route=self.settings.login_route,
        )
        self.auth.register(self.interceptors)
        self._executor: RequestExecutor | None = None

    @property
    def executor(self) -> RequestExecutor:
        if self._executor is None:
            raise RuntimeError("ApiClient is not connected; use 'async with ApiClient(...)'")
        return self._executor

    @property
    def tokens(self) -> TokenPair:
        return self.auth.tokens

    async def connect(self) -> None:
        if self._executor is not None:
            return
        if self._http_client is None:
            self._http_client = self._httpx_client_factory()
        self._executor = RequestExecutor(
            self._http_client,
            base_url=self.settings.base_url,
            interceptors=self.interceptors,
            default_timeout=self.settings.timeout,
        )
        self.auth.bind(self._executor)
        await self.auth.initialize()

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._own_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        self._executor = None

    async def __aenter__(self) -> "ApiClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        self.interceptors.add_request_interceptor(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        self.interceptors.add_response_interceptor(interceptor)

    async def execute(self, options: RequestOptions, data_type: type[DataT] | Any = Any) -> ApiResponse[DataT]:
        return await self.executor.execute(options, data_type)

    async def send(self, options: RequestOptions, data_type: type[DataT] | Any = Any) -> Result[ApiResponse[DataT]]:
        return await self.executor.send(options, data_type)

    async def login_with_kakao(self, kakao_access_token: str) -> LoginTokens:
        response = await endpoints.login_with_kakao(self.executor, kakao_access_token)
        if response.data is None:
            raise ApiError(response.code, "Login response carried no tokens")
        await self.auth.login(response.data.access_token, response.data.refresh_token)
        return response.data

    async def logout(self) -> None:
        """Sign out on the server, then drop local tokens regardless of the outcome."""
        access_token = self.auth.tokens.access_token
        try:
            if access_token:
                await endpoints.logout_from_service(self.executor, access_token)
        except ApiError as e:
            logger.warning(f"Server logout failed: {e}")
        finally:
            await self.auth.logout()
