"""High-level request and response types for fetch handlers."""

import base64
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from eventglue.runtime.raw import RawResponse

TEXT_CONTENT_TYPE = "text/plain;charset=UTF-8"
JSON_CONTENT_TYPE = "application/json"


class Request(BaseModel):
    """
    Incoming HTTP request.

    Attributes:
        method: Upper-case HTTP method
        url: Absolute request URL
        headers: Headers with lower-case names
        body: Body text, or base64 when is_base64_encoded
        is_base64_encoded: Whether body carries base64 data
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="GET", description="HTTP method")
    url: str = Field(..., description="Absolute request URL")
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = Field(default="", description="Request body")
    is_base64_encoded: bool = False

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Request":
        """Convert a host request dict into a Request."""
        headers = raw.get("headers") or {}
        return cls(
            method=str(raw.get("method") or "GET").upper(),
            url=raw["url"],
            headers={str(k).lower(): str(v) for k, v in headers.items()},
            body=raw.get("body") or "",
            is_base64_encoded=bool(raw.get("isBase64Encoded", False)),
        )

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def query(self) -> dict[str, str]:
        """Query parameters; the last value wins for repeated keys."""
        return dict(parse_qsl(urlsplit(self.url).query, keep_blank_values=True))

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def bytes(self) -> bytes:
        if self.is_base64_encoded:
            return base64.b64decode(self.body)
        return self.body.encode("utf-8")

    def text(self) -> str:
        return self.bytes().decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.text())


class Response(BaseModel):
    """
    Outgoing HTTP response.

    Attributes:
        status: HTTP status code
        headers: Response headers
        body: Body text, or base64 when is_base64_encoded
        is_base64_encoded: Whether body carries base64 data
    """

    model_config = ConfigDict(frozen=True)

    status: int = Field(default=200, ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    is_base64_encoded: bool = False

    @classmethod
    def ok(cls, body: str) -> "Response":
        return cls(body=body, headers={"content-type": TEXT_CONTENT_TYPE})

    @classmethod
    def from_json(cls, data: Any, status: int = 200) -> "Response":
        return cls(
            status=status,
            body=json.dumps(data),
            headers={"content-type": JSON_CONTENT_TYPE},
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Response":
        return cls(
            body=base64.b64encode(data).decode("ascii"),
            is_base64_encoded=True,
            headers={"content-type": "application/octet-stream"},
        )

    @classmethod
    def empty(cls) -> "Response":
        return cls()

    @classmethod
    def error(cls, message: str, status: int) -> "Response":
        """
        Build an error response.

        Args:
            message: Response body
            status: Status code, 400-599

        Raises:
            ValueError: If status is outside 400-599
        """
        if not 400 <= status <= 599:
            raise ValueError("error status must be between 400 and 599")
        return cls(status=status, body=message, headers={"content-type": TEXT_CONTENT_TYPE})

    def with_status(self, status: int) -> "Response":
        return self.model_validate({**self.model_dump(), "status": status})

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        merged = {**self.headers, **{k.lower(): v for k, v in headers.items()}}
        return self.model_copy(update={"headers": merged})

    def to_raw(self) -> RawResponse:
        """Convert into the host response dict."""
        return {
            "status": self.status,
            "headers": dict(self.headers),
            "body": self.body,
            "isBase64Encoded": self.is_base64_encoded,
        }
