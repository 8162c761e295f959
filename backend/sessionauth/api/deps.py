"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from sessionauth.core.errors import Unauthorized
from sessionauth.services.wiring import get_services

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def extract_bearer() -> str:
    """Return the raw token from ``Authorization: Bearer <token>``.

    :raises Unauthorized: When the header is missing or not a bearer credential.
    """
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        raise Unauthorized()
    token = header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthorized()
    return token


def require_identity(func: F) -> F:
    """Authenticate the bearer token and pass the identity to the view.

    The view receives ``identity`` (an :class:`Identity`) as a keyword
    argument; the presented token is kept on ``g.access_token`` for logout.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_bearer()
        identity = get_services().gate.authenticate(token)
        g.access_token = token
        return func(*args, identity=identity, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_token_owner(func: F) -> F:
    """Like :func:`require_identity` but tolerant of expired or blocklisted tokens.

    Used by logout, which must stay repeatable.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_bearer()
        identity = get_services().gate.identify_for_logout(token)
        g.access_token = token
        return func(*args, identity=identity, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_body() -> Any:
    """Return the parsed JSON body, or ``None`` when absent or malformed."""

    return request.get_json(silent=True)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
