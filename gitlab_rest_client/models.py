"""Response wrapper and the base class for API data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, model_validator


class Model(BaseModel):
    """Base for data-transfer objects mirroring GitLab JSON payloads.

    Unknown keys in the payload are ignored. Missing keys and JSON nulls both
    leave the field at its default.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class BuildState(str, Enum):
    """State of a pipeline job or commit status."""

    PENDING = "pending"
    CREATED = "created"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELED = "canceled"
    SKIPPED = "skipped"
    MANUAL = "manual"


class Author(Model):
    """A user as embedded in commit comments and statuses."""

    id: int = 0
    username: str = ""
    email: str = ""
    name: str = ""
    state: str = ""
    blocked: bool = False
    created_at: datetime | None = None


class CustomAttribute(Model):
    key: str = ""
    value: str = ""


def _int_header(headers: httpx.Headers, name: str) -> int:
    val = headers.get(name, "").strip()
    try:
        return int(val)
    except ValueError:
        return 0


@dataclass
class Response:
    """An API response with GitLab's pagination headers parsed out.

    Pagination fields are 0 when the header is absent (for example on the
    last page, where X-Next-Page is blank).
    """

    status: int
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict | list | None = None
    total_items: int = 0
    total_pages: int = 0
    items_per_page: int = 0
    current_page: int = 0
    next_page: int = 0
    previous_page: int = 0
    link: str | None = None

    @classmethod
    def from_httpx(cls, resp: httpx.Response, body: dict | list | None = None) -> Response:
        headers = resp.headers
        return cls(
            status=resp.status_code,
            method=resp.request.method,
            url=str(resp.request.url),
            headers=dict(headers),
            body=body,
            total_items=_int_header(headers, "x-total"),
            total_pages=_int_header(headers, "x-total-pages"),
            items_per_page=_int_header(headers, "x-per-page"),
            current_page=_int_header(headers, "x-page"),
            next_page=_int_header(headers, "x-next-page"),
            previous_page=_int_header(headers, "x-prev-page"),
            link=headers.get("link"),
        )
