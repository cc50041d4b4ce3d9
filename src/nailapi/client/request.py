"""
Request description types shared by the executor and the interceptors.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from nailapi.config import DEFAULT_TIMEOUT
from nailapi.types import HttpMethod, QueryValue

AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"
JSON_CONTENT_TYPE = "application/json"


def merge_headers(base: Mapping[str, str], overrides: Mapping[str, str]) -> dict[str, str]:
    """Apply ``overrides`` on top of ``base``; header names compare case-insensitively."""
    replaced = {name.lower() for name in overrides}
    merged = {name: value for name, value in base.items() if name.lower() not in replaced}
    merged.update(overrides)
    return merged


class RequestOptions(BaseModel):
    """Options for a single logical API call."""

    endpoint: str = Field(..., min_length=1)
    method: HttpMethod = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, QueryValue] | None = None
    body: Any = None
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def with_headers(self, **headers: str) -> "RequestOptions":
        return self.model_copy(update={"headers": merge_headers(self.headers, headers)})


@dataclass(frozen=True)
class RetryableRequestInfo:
    """Everything needed to re-issue a transport call exactly."""

    url: str
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_json(self) -> bool:
        content_type = next((v for k, v in self.headers.items() if k.lower() == "content-type"), "")
        return self.body is None or content_type.startswith(JSON_CONTENT_TYPE)

    def with_authorization(self, access_token: str) -> "RetryableRequestInfo":
        return replace(self, headers=merge_headers(self.headers, {AUTHORIZATION: f"Bearer {access_token}"}))


@dataclass(frozen=True)
class InterceptedResponse:
    """A raw transport response paired with the request that produced it."""

    response: httpx.Response
    request_info: RetryableRequestInfo

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def url(self) -> str:
        return self.request_info.url


def _query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(params: Mapping[str, QueryValue]) -> str:
    """Percent-encode query parameters, skipping ``None`` values."""
    return "&".join(
        f"{quote(str(key), safe='')}={quote(_query_value(value), safe='')}"
        for key, value in params.items()
        if value is not None
    )


def is_absolute_url(endpoint: str) -> bool:
    return endpoint.startswith(("http://", "https://"))


def resolve_url(base_url: str, endpoint: str, query: Mapping[str, QueryValue] | None = None) -> str:
    url = endpoint if is_absolute_url(endpoint) else f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
    if query:
        query_string = build_query_string(query)
        if query_string:
            url += ("&" if "?" in url else "?") + query_string
    return url


def serialize_body(body: Any) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True).encode()
    if isinstance(body, bytes):
        return body
    return json.dumps(body, separators=(",", ":")).encode()


def path_of(url: str) -> str:
    return httpx.URL(url).path
