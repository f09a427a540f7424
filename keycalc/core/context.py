from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id_ctx_var.get()


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """
    Bind a request id for the duration of the block.

    A fresh uuid4 is generated when the caller does not supply one, so log
    records and error payloads emitted inside the block share a trace id.
    """
    value = request_id or str(uuid.uuid4())
    token = _request_id_ctx_var.set(value)
    try:
        yield value
    finally:
        _request_id_ctx_var.reset(token)
