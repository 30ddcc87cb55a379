"""GitLab REST API client built on httpx."""

import json
import logging
from collections.abc import Iterable
from functools import lru_cache

import httpx
from pydantic import TypeAdapter, ValidationError

from .commits import CommitsService
from .errors import DecodeError, ErrorResponse
from .models import Response
from .options import RequestOptionFunc, encode_body, encode_query
from .settings import get_settings
from .users import UsersService

logger = logging.getLogger(__name__)

USER_AGENT = "gitlab-rest-client"
API_VERSION_PATH = "api/v4/"

_QUERY_METHODS = ("GET", "HEAD")


def normalize_base_url(url: str) -> str:
    """Make sure the base URL points at the v4 API and ends with a slash."""
    url = url.rstrip("/")
    if "/api/v" not in url:
        url = f"{url}/{API_VERSION_PATH}"
    return url if url.endswith("/") else f"{url}/"


def parse_error(raw) -> str:
    """Flatten the "message"/"error" value of an error body into one string.

    GitLab returns plain strings, lists, or field -> errors maps here.
    """
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        return "[" + ", ".join(parse_error(v) for v in raw) + "]"
    if isinstance(raw, dict):
        return ", ".join(sorted(f"{{{k}: {parse_error(v)}}}" for k, v in raw.items()))
    return f"failed to parse unexpected error type: {type(raw).__name__}"


@lru_cache(maxsize=None)
def _list_adapter(model: type) -> TypeAdapter:
    return TypeAdapter(list[model])


def _error_message(resp: httpx.Response) -> str:
    if not resp.content:
        return ""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict):
        if "message" in data:
            return parse_error(data["message"])
        if "error" in data:
            return parse_error(data["error"])
    return resp.text


class GitLabClient:
    """Shared handle for every service; owns the httpx connection.

    Auth is the GITLAB_TOKEN setting unless a token is passed explicitly.
    No token means anonymous access, which works for public resources only.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        settings = get_settings()
        token = token if token is not None else settings.gitlab_token
        self.base_url = normalize_base_url(base_url or settings.gitlab_url)

        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["PRIVATE-TOKEN"] = token
        self._client = httpx.Client(
            headers=headers,
            timeout=timeout if timeout is not None else settings.gitlab_timeout,
            transport=transport,
        )

        self.users = UsersService(self)
        self.commits = CommitsService(self)

    def new_request(
        self,
        method: str,
        path: str,
        opt=None,
        options: Iterable[RequestOptionFunc] = (),
    ) -> httpx.Request:
        """Build a request for an API path relative to the base URL.

        Args:
            method: HTTP verb
            path: API path, already escaped, e.g. "users/42/keys"
            opt: Options dataclass; sent as query params for GET/HEAD,
                as a JSON body otherwise
            options: Request option funcs applied to the built request
        """
        method = method.upper()
        url = f"{self.base_url}{path.lstrip('/')}"

        if method in _QUERY_METHODS:
            request = self._client.build_request(method, url, params=encode_query(opt) or None)
        elif opt is not None:
            request = self._client.build_request(method, url, json=encode_body(opt))
        else:
            request = self._client.build_request(method, url)

        for apply in options:
            apply(request)
        return request

    def do(self, request: httpx.Request, model=None, many: bool = False):
        """Send a request and decode the response into ``model``.

        Returns a (result, Response) tuple. ``result`` is None when no model
        is given; with ``many`` it is a list of models in response order.

        Raises:
            ErrorResponse: the API answered with a non-2xx status
            DecodeError: a 2xx body is not JSON or does not fit ``model``
            httpx.HTTPError: transport failures, unchanged
        """
        resp = self._client.send(request)
        logger.debug("%s %s -> %s", request.method, request.url, resp.status_code)

        if not 200 <= resp.status_code < 300:
            raise ErrorResponse(Response.from_httpx(resp), _error_message(resp))

        if model is None:
            return None, Response.from_httpx(resp)

        try:
            body = resp.json() if resp.content else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"invalid JSON in response to {request.method} {request.url}") from e

        response = Response.from_httpx(resp, body)
        try:
            if many:
                if body is not None and not isinstance(body, list):
                    raise DecodeError(
                        f"expected a list in response to {request.method} {request.url}, "
                        f"got {type(body).__name__}"
                    )
                return _list_adapter(model).validate_python(body or []), response
            return (model.model_validate(body) if body is not None else None), response
        except ValidationError as e:
            raise DecodeError(
                f"unexpected {model.__name__} payload in response to {request.method} {request.url}: "
                f"{e.error_count()} validation error(s)"
            ) from e

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
