"""
Generic request executor.

Builds, dispatches and parses one logical API call, driving the interceptor
pipelines around the raw transport call.
"""

import logging
from typing import Any, TypeVar

import anyio
import httpx
from pydantic import ValidationError

from nailapi.client.interceptors import InterceptorRegistry
from nailapi.client.request import (
    CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    InterceptedResponse,
    RequestOptions,
    RetryableRequestInfo,
    merge_headers,
    resolve_url,
    serialize_body,
)
from nailapi.config import DEFAULT_TIMEOUT
from nailapi.shared.errors import (
    TIMEOUT_ERROR_CODE,
    ApiError,
    ApplicationError,
    Err,
    NetworkError,
    Ok,
    Result,
    stringify_pydantic_error,
)
from nailapi.types import ApiResponse, QueryValue, is_success_code

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")


class RequestExecutor:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        interceptors: InterceptorRegistry | None = None,
        default_timeout: float = DEFAULT_TIMEOUT,
    ):
        self.http_client = http_client
        self.base_url = base_url
        self.interceptors = interceptors if interceptors is not None else InterceptorRegistry()
        self.default_timeout = default_timeout

    def build_url(self, endpoint: str, query: dict[str, QueryValue] | None = None) -> str:
        return resolve_url(self.base_url, endpoint, query)

    async def send(
        self, options: RequestOptions, data_type: type[DataT] | Any = Any
    ) -> Result[ApiResponse[DataT]]:
        """Execute a call and return ``Ok(envelope)`` or ``Err(ApiError)``."""
        try:
            return Ok(await self._execute(options, data_type))
        except ApiError as e:
            return Err(e)

    async def execute(self, options: RequestOptions, data_type: type[DataT] | Any = Any) -> ApiResponse[DataT]:
        """Execute a call, raising ``ApiError`` on failure."""
        result = await self.send(options, data_type)
        return result.unwrap()

    async def replay(self, info: RetryableRequestInfo, access_token: str) -> InterceptedResponse:
        """Re-issue a captured call with a fresh bearer token, bypassing interceptors."""
        replayed = info.with_authorization(access_token)
        if not replayed.is_json:
            logger.warning(f"Replaying non-JSON body for {replayed.method} {replayed.url}; delivery is not guaranteed")
        logger.debug(f"Replaying {replayed.method} {replayed.url}")
        response = await self._dispatch(replayed)
        return InterceptedResponse(response=response, request_info=replayed)

    async def _execute(self, options: RequestOptions, data_type: Any) -> ApiResponse[Any]:
        if "timeout" not in options.model_fields_set:
            options = options.model_copy(update={"timeout": self.default_timeout})

        try:
            options = await self.interceptors.run_request(options)
        except ApiError:
            raise
        except Exception as e:
            raise ApiError(0, f"Request interceptor failed: {e}") from e

        headers = merge_headers({CONTENT_TYPE: JSON_CONTENT_TYPE}, options.headers)
        info = RetryableRequestInfo(
            url=self.build_url(options.endpoint, options.query),
            method=options.method,
            headers=headers,
            body=serialize_body(options.body),
            timeout=options.timeout,
        )

        response = await self._dispatch(info)

        try:
            intercepted = await self.interceptors.run_response(InterceptedResponse(response=response, request_info=info))
        except ApiError:
            raise
        except Exception as e:
            raise ApiError(0, f"Response interceptor failed: {e}") from e

        return self._parse(intercepted.response, data_type)

    async def _dispatch(self, info: RetryableRequestInfo) -> httpx.Response:
        logger.debug(f"Request: {info.method} {info.url}")
        try:
            with anyio.fail_after(info.timeout):
                response = await self.http_client.request(
                    info.method,
                    info.url,
                    headers=dict(info.headers),
                    content=info.body,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise NetworkError(
                f"Request timed out after {info.timeout}s: {info.method} {info.url}",
                code=TIMEOUT_ERROR_CODE,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}") from e

        logger.debug(f"Response: {response.status_code} {info.method} {info.url}")
        return response

    def _parse(self, response: httpx.Response, data_type: Any) -> ApiResponse[Any]:
        try:
            payload = response.json()
        except ValueError:
            if not response.is_success:
                raise ApplicationError(response.status_code, response.reason_phrase or "Request failed")
            raise ApplicationError(response.status_code, "Response body is not valid JSON", payload=response.text)

        try:
            envelope = ApiResponse[data_type].model_validate(payload)
        except ValidationError as e:
            if not response.is_success:
                raise ApplicationError(response.status_code, response.reason_phrase or "Request failed", payload)
            raise ApplicationError(response.status_code, stringify_pydantic_error(e), payload) from e

        if not is_success_code(envelope.code):
            raise ApplicationError(envelope.code, envelope.message, payload)
        if not response.is_success:
            raise ApplicationError(response.status_code, envelope.message or response.reason_phrase, payload)

        return envelope
