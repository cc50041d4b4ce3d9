from .client import (
    ApiClient,
    AuthCoordinator,
    InMemoryTokenStore,
    InterceptorRegistry,
    NavigationRef,
    RequestExecutor,
    RequestOptions,
    RetryableRequestInfo,
)
from .config import ApiSettings
from .shared.auth import TokenPair
from .shared.errors import ApiError, ApplicationError, Err, NetworkError, Ok, Result
from .types import ApiResponse

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiResponse",
    "ApiSettings",
    "ApplicationError",
    "AuthCoordinator",
    "Err",
    "InMemoryTokenStore",
    "InterceptorRegistry",
    "NavigationRef",
    "NetworkError",
    "Ok",
    "RequestExecutor",
    "RequestOptions",
    "Result",
    "RetryableRequestInfo",
    "TokenPair",
]
