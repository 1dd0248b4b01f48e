"""X-Request-ID handling.

Every response carries an ``X-Request-ID`` header: the caller's value when
one was sent, a fresh UUID4 otherwise. The same id is attached to log
records (see ``weekline.core.logging``) and to error responses.
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI

REQUEST_ID_HEADER = "X-Request-ID"


def _new_request_id() -> str:
    return str(uuid.uuid4())


def setup_correlation_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=_new_request_id,
        validator=None,  # echo client ids verbatim, whatever their shape
        transformer=lambda value: value,
    )


def get_correlation_id() -> str | None:
    """Current request id, or None outside a request."""
    return correlation_id.get(None)


__all__ = ["REQUEST_ID_HEADER", "get_correlation_id", "setup_correlation_middleware"]
