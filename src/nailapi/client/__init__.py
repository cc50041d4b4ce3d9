from .auth import AuthCoordinator, AuthState, RefreshWaiter
from .executor import RequestExecutor
from .interceptors import InterceptorRegistry, Pipeline, RequestInterceptor, ResponseInterceptor
from .navigation import NavigationRef, Navigator
from .request import InterceptedResponse, RequestOptions, RetryableRequestInfo
from .session import ApiClient
from .token_store import InMemoryTokenStore, TokenStore

__all__ = [
    "ApiClient",
    "AuthCoordinator",
    "AuthState",
    "InMemoryTokenStore",
    "InterceptedResponse",
    "InterceptorRegistry",
    "NavigationRef",
    "Navigator",
    "Pipeline",
    "RefreshWaiter",
    "RequestExecutor",
    "RequestInterceptor",
    "RequestOptions",
    "ResponseInterceptor",
    "RetryableRequestInfo",
    "TokenStore",
]
