"""
Ordered interceptor pipelines run around every transport call.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from nailapi.client.request import InterceptedResponse, RequestOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")

Stage = Callable[[T], Awaitable[T] | T]
RequestInterceptor = Callable[[RequestOptions], Awaitable[RequestOptions] | RequestOptions]
ResponseInterceptor = Callable[[InterceptedResponse], Awaitable[InterceptedResponse] | InterceptedResponse]


class Pipeline(Generic[T]):
    """Append-only sequence of stages folded left to right."""

    def __init__(self, name: str):
        self.name = name
        self._stages: list[Stage[T]] = []

    def add(self, stage: Stage[T]) -> None:
        self._stages.append(stage)

    def __len__(self) -> int:
        return len(self._stages)

    async def run(self, value: T) -> T:
        """
        Feed ``value`` through every stage in registration order.

        Each stage receives its predecessor's output. An exception raised by
        a stage aborts the remaining stages and propagates to the caller.
        """
        for stage in self._stages:
            result = stage(value)
            if inspect.isawaitable(result):
                result = await result
            value = result
        return value


class InterceptorRegistry:
    """Request and response interceptors, invoked in registration order."""

    def __init__(self):
        self.request: Pipeline[RequestOptions] = Pipeline("request")
        self.response: Pipeline[InterceptedResponse] = Pipeline("response")

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        logger.debug(f"Registering request interceptor #{len(self.request) + 1}: {interceptor!r}")
        self.request.add(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        logger.debug(f"Registering response interceptor #{len(self.response) + 1}: {interceptor!r}")
        self.response.add(interceptor)

    async def run_request(self, options: RequestOptions) -> RequestOptions:
        return await self.request.run(options)

    async def run_response(self, response: InterceptedResponse) -> InterceptedResponse:
        return await self.response.run(response)
