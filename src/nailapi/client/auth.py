"""
Bearer-token authentication for the request executor.

The coordinator attaches the access token to outgoing calls and recovers from
expired tokens: the first 401 starts a single refresh against the reissue
endpoint, later 401s queue behind it, and every queued call is replayed once
with the new token.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

import anyio

from nailapi.client.endpoints import reissue_access_token
from nailapi.client.executor import RequestExecutor
from nailapi.client.interceptors import InterceptorRegistry
from nailapi.client.navigation import Navigator
from nailapi.client.request import AUTHORIZATION, InterceptedResponse, RequestOptions, path_of
from nailapi.client.token_store import TokenStore
from nailapi.config import LOGIN_ROUTE, REISSUE_PATH
from nailapi.shared.auth import TokenPair, mask_token
from nailapi.shared.errors import ApplicationError

logger = logging.getLogger(__name__)


class AuthRefreshFailure(Exception):
    """Raised inside the coordinator when a refresh yields no access token."""

    pass


class AuthState(Enum):
    IDLE = auto()
    REFRESHING = auto()


@dataclass
class RefreshWaiter:
    """A caller suspended until the in-flight refresh concludes."""

    event: anyio.Event = field(default_factory=anyio.Event)
    access_token: str | None = None

    def release(self, access_token: str | None) -> None:
        self.access_token = access_token
        self.event.set()

    async def wait(self) -> str | None:
        await self.event.wait()
        return self.access_token


class AuthCoordinator:
    """
    Owns the in-memory token pair and the refresh single-flight gate.

    Token state is only mutated from ``on_request``/``on_response`` and the
    explicit ``initialize``/``login``/``logout`` entry points. One instance
    belongs to one event loop.
    """

    def __init__(
        self,
        storage: TokenStore,
        navigator: Navigator,
        reissue_path: str = REISSUE_PATH,
        auth_path_prefix: str = "/auth",
        login_route: str = LOGIN_ROUTE,
    ):
        self.storage = storage
        self.navigator = navigator
        self.reissue_path = reissue_path
        self.auth_path_prefix = auth_path_prefix
        self.login_route = login_route

        self._tokens = TokenPair()
        self._state = AuthState.IDLE
        self._waiters: list[RefreshWaiter] = []
        self._executor: RequestExecutor | None = None
        self._initialized = False

    @property
    def tokens(self) -> TokenPair:
        return self._tokens

    @property
    def state(self) -> AuthState:
        return self._state

    def install(self, executor: RequestExecutor) -> None:
        """Register both interceptors on the executor's registry and bind to it."""
        self.register(executor.interceptors)
        self.bind(executor)

    def register(self, registry: InterceptorRegistry) -> None:
        registry.add_request_interceptor(self.on_request)
        registry.add_response_interceptor(self.on_response)

    def bind(self, executor: RequestExecutor) -> None:
        """Use ``executor`` for reissue calls and replays."""
        self._executor = executor

    async def initialize(self) -> None:
        """Load stored tokens once."""
        if self._initialized:
            return
        self._tokens = await self.storage.load() or TokenPair()
        self._initialized = True
        logger.debug(
            f"Loaded tokens: access={mask_token(self._tokens.access_token)} "
            f"refresh={mask_token(self._tokens.refresh_token)}"
        )

    async def login(self, access_token: str, refresh_token: str) -> None:
        await self.storage.save(access_token, refresh_token)
        self._tokens = TokenPair(access_token=access_token, refresh_token=refresh_token)
        self._initialized = True

    async def logout(self) -> None:
        await self._clear_tokens()

    def is_reissue_url(self, url: str) -> bool:
        return path_of(url).endswith(self.reissue_path)

    def _is_auth_endpoint(self, url: str) -> bool:
        path = path_of(url)
        prefix = self.auth_path_prefix.rstrip("/")
        return path == prefix or path.startswith(prefix + "/")

    async def on_request(self, options: RequestOptions) -> RequestOptions:
        if self.is_reissue_url(options.endpoint):
            return options

        access_token = self._tokens.access_token
        refresh_token = self._tokens.refresh_token

        if not access_token and refresh_token and not self._is_auth_endpoint(options.endpoint):
            logger.debug(f"No access token for {options.endpoint}; refreshing before dispatch")
            access_token = await self._refresh_single_flight(refresh_token)
            if access_token is None:
                # the session is already expired and the login redirect issued
                raise ApplicationError(401, "Authentication required")

        if access_token:
            return options.with_headers(**{AUTHORIZATION: f"Bearer {access_token}"})
        return options

    async def on_response(self, intercepted: InterceptedResponse) -> InterceptedResponse:
        if intercepted.status_code != 401 or self.is_reissue_url(intercepted.url):
            return intercepted

        refresh_token = self._tokens.refresh_token
        if not refresh_token:
            logger.debug(f"401 from {intercepted.url} with no refresh token; session expired")
            await self._expire_session()
            return intercepted

        access_token = await self._refresh_single_flight(refresh_token)
        if access_token is None:
            return intercepted

        try:
            return await self._replay(intercepted, access_token)
        except Exception as e:
            logger.error(f"Replay of {intercepted.request_info.method} {intercepted.url} failed: {e}")
            return intercepted

    async def _refresh_single_flight(self, refresh_token: str) -> str | None:
        """
        Obtain a fresh access token, sharing one reissue call among callers.

        Returns the new token, or ``None`` when this refresh episode failed.
        """
        if self._state is AuthState.REFRESHING:
            waiter = RefreshWaiter()
            self._waiters.append(waiter)
            logger.debug(f"Refresh in flight; queued waiter #{len(self._waiters)}")
            return await waiter.wait()

        self._state = AuthState.REFRESHING
        logger.debug("Transitioning from IDLE to REFRESHING")
        access_token: str | None = None
        try:
            try:
                # cancelling the triggering call must not strand queued waiters
                with anyio.CancelScope(shield=True):
                    new_token = await self._reissue(refresh_token)
                    await self.storage.save(new_token, refresh_token)
                self._tokens = TokenPair(access_token=new_token, refresh_token=refresh_token)
                access_token = new_token
                logger.debug(f"Token refresh successful: access={mask_token(access_token)}")
            except Exception as e:
                logger.warning(f"Token refresh failed: {e!r}")
                with anyio.CancelScope(shield=True):
                    await self._expire_session()
        finally:
            self._state = AuthState.IDLE
            waiters, self._waiters = self._waiters, []
            for waiter in waiters:
                waiter.release(access_token)
            logger.debug(f"Transitioning from REFRESHING to IDLE; released {len(waiters)} waiter(s)")

        return access_token

    async def _reissue(self, refresh_token: str) -> str:
        if self._executor is None:
            raise AuthRefreshFailure("Coordinator is not installed on an executor")
        response = await reissue_access_token(self._executor, refresh_token, endpoint=self.reissue_path)
        if response.data is None:
            raise AuthRefreshFailure("Reissue response carried no access token")
        return response.data.access_token

    async def _replay(self, intercepted: InterceptedResponse, access_token: str) -> InterceptedResponse:
        if self._executor is None:
            raise AuthRefreshFailure("Coordinator is not installed on an executor")
        return await self._executor.replay(intercepted.request_info, access_token)

    async def _clear_tokens(self) -> None:
        self._tokens = TokenPair()
        await self.storage.clear()

    async def _expire_session(self) -> None:
        """Drop the session and send the user to login; storage or navigation errors are logged only."""
        self._tokens = TokenPair()
        try:
            await self.storage.clear()
        except Exception as e:
            logger.error(f"Failed to clear stored tokens: {e!r}")
        try:
            self.navigator.navigate(self.login_route)
        except Exception as e:
            logger.error(f"Navigation to {self.login_route!r} failed: {e!r}")
