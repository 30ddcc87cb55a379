"""Option structs, their query/body encoding, and per-request option funcs.

Options are dataclasses whose fields default to None. Unset fields are left
out of the encoded request. A field's wire name is its attribute name unless
the field metadata carries a ``name``; ``omitempty=False`` in the metadata
keeps an unset field in JSON bodies as ``null``.
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

RequestOptionFunc = Callable[[httpx.Request], None]


def wire(name: str | None = None, omitempty: bool = True, default: Any = None):
    """Declare an option field with a custom wire name or null-encoding."""
    metadata = {"omitempty": omitempty}
    if name is not None:
        metadata["name"] = name
    return field(default=default, metadata=metadata)


@dataclass
class ListOptions:
    """Pagination options shared by list endpoints."""

    page: int | None = None
    per_page: int | None = None


def _iter_fields(opt):
    for f in dataclasses.fields(opt):
        yield f.metadata.get("name", f.name), getattr(opt, f.name), f.metadata.get("omitempty", True)


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is not None and value.utcoffset() == timedelta(0):
        return value.replace(tzinfo=None).isoformat() + "Z"
    return value.isoformat()


def _query_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def encode_query(opt) -> list[tuple[str, str]]:
    """Encode an options dataclass as query parameters.

    Lists become repeated ``name[]`` keys. Fields are emitted in declaration
    order, ListOptions fields first.
    """
    if opt is None:
        return []
    params: list[tuple[str, str]] = []
    for name, value, _omitempty in _iter_fields(opt):
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            params.extend((f"{name}[]", _query_scalar(v)) for v in value)
        else:
            params.append((name, _query_scalar(value)))
    return params


def _body_value(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return encode_body(value)
    if isinstance(value, (list, tuple)):
        return [_body_value(v) for v in value]
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def encode_body(opt) -> dict[str, Any]:
    """Encode an options dataclass as a JSON request body."""
    if opt is None:
        return {}
    body: dict[str, Any] = {}
    for name, value, omitempty in _iter_fields(opt):
        if value is None:
            if not omitempty:
                body[name] = None
            continue
        body[name] = _body_value(value)
    return body


def parse_id(pid: int | str) -> str:
    """Turn a numeric ID or a "namespace/name" path into a path segment value."""
    if isinstance(pid, bool):
        raise TypeError(f"invalid ID type {pid!r}, the ID must be an int or a string")
    if isinstance(pid, int):
        return str(pid)
    if isinstance(pid, str):
        return pid
    raise TypeError(f"invalid ID type {pid!r}, the ID must be an int or a string")


def path_escape(segment: str) -> str:
    """Percent-encode a value so it stays a single URL path segment."""
    return quote(segment, safe="")


def with_sudo(uid: int | str) -> RequestOptionFunc:
    """Perform the request as another user (admin tokens only)."""

    def apply(request: httpx.Request) -> None:
        request.headers["Sudo"] = parse_id(uid)

    return apply


def with_header(name: str, value: str) -> RequestOptionFunc:
    def apply(request: httpx.Request) -> None:
        request.headers[name] = value

    return apply


def with_token(token: str) -> RequestOptionFunc:
    """Authenticate this request with a different private token."""
    return with_header("PRIVATE-TOKEN", token)
